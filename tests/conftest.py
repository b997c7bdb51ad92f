"""Pytest fixtures for editorial-desk tests."""

import fitz  # PyMuPDF
import pytest

from editorial_desk.attachments import LocalBlobStorage
from editorial_desk.stores import JsonFileStore
from schemas import Actor, Issue, Submission


@pytest.fixture
def store(tmp_path):
    """Empty JSON record store in a temporary directory."""
    return JsonFileStore(tmp_path / "records")


@pytest.fixture
def blob_storage(tmp_path):
    return LocalBlobStorage(tmp_path / "blobs")


@pytest.fixture
def editor():
    return Actor(email="editor@example.org", name="Ed Itor", role="editor")


@pytest.fixture
def contributor():
    return Actor(email="student@example.org", name="Sam Student", role="contributor")


@pytest.fixture
def make_submission(store):
    """Factory that stores a submission with the given overrides."""
    counter = {"n": 0}

    def _make(**overrides) -> Submission:
        counter["n"] += 1
        fields = {
            "id": f"sub-{counter['n']}",
            "title": f"Submission {counter['n']}",
            "content": "A short piece of writing.",
            "type": "poem",
            "author_name": "Sam Student",
            "author_email": "student@example.org",
            "contributor_status": "student",
            "submitted_by": "student@example.org",
        }
        fields.update(overrides)
        return store.create_submission(Submission(**fields))

    return _make


@pytest.fixture
def issue(store):
    """A draft issue, number 7."""
    return store.create_issue(
        Issue(id="issue-1", title="Spring Issue", month=4, year=2026, number=7, volume=2)
    )


@pytest.fixture
def make_pdf():
    """Factory building an in-memory PDF with the given number of pages."""

    def _make(page_count: int) -> bytes:
        doc = fitz.open()
        for i in range(page_count):
            page = doc.new_page(width=595, height=842)
            page.insert_text((50, 100), f"Page {i + 1}")
        data = doc.tobytes()
        doc.close()
        return data

    return _make
