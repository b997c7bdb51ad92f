"""Tests for configuration loading."""

import json

import pytest

from editorial_desk.config import DEFAULT_CONFIG, load_config, merge_config


class TestConfig:
    """Tests for layering config files over defaults."""

    def test_defaults_without_file(self):
        """No path returns a copy of the defaults."""
        config = load_config()

        assert config == DEFAULT_CONFIG
        config["store"]["kind"] = "backend"
        assert DEFAULT_CONFIG["store"]["kind"] == "json"

    def test_file_overrides_nested_keys(self, tmp_path):
        """Only keys in the file change; siblings keep their defaults."""
        path = tmp_path / "desk.json"
        path.write_text(json.dumps({"backend": {"base_url": "https://api.example.org"}}))

        config = load_config(path)

        assert config["backend"]["base_url"] == "https://api.example.org"
        assert config["backend"]["retry_attempts"] == 3

    def test_non_object_rejected(self, tmp_path):
        """A config file must hold a JSON object."""
        path = tmp_path / "desk.json"
        path.write_text("[1, 2]")

        with pytest.raises(ValueError):
            load_config(path)

    def test_merge_replaces_non_dicts(self):
        """Scalar and list values are replaced, not merged."""
        merged = merge_config({"a": {"b": [1]}, "c": 1}, {"a": {"b": [2]}})

        assert merged == {"a": {"b": [2]}, "c": 1}
