"""Tests for the base Client class."""

from unittest.mock import MagicMock, patch

import httpx
import pytest

from editorial_desk.clients import (
    APIError,
    Client,
    ConflictError,
    ConnectionError,
    NotFoundError,
    RateLimitError,
)

BASE_URL = "https://backend.example.org/api"


def error_response(status_code: int, body=None) -> MagicMock:
    response = MagicMock()
    response.is_success = False
    response.status_code = status_code
    response.url = f"{BASE_URL}/submissions"
    if body is None:
        response.json.side_effect = ValueError("no json")
    else:
        response.json.return_value = body
    return response


class TestClientConfiguration:
    """Tests for Client configuration."""

    def test_requires_base_url(self):
        """Client raises ValueError if base_url is missing."""
        with pytest.raises(ValueError, match="base_url"):
            Client({})

    def test_defaults(self):
        """Client falls back to default timeout, retries and delay."""
        client = Client({"base_url": BASE_URL})

        assert client.base_url == BASE_URL
        assert client.timeout == 30
        assert client.retry_attempts == 3
        assert client.retry_delay == 1
        assert client.headers == {}

    def test_custom_values(self):
        """Client accepts custom timeout, retries and delay."""
        client = Client(
            {"base_url": BASE_URL, "timeout": 5, "retry_attempts": 5, "retry_delay": 0.5}
        )

        assert client.timeout == 5
        assert client.retry_attempts == 5
        assert client.retry_delay == 0.5

    def test_retry_attempts_at_least_one(self):
        """A zero retry count still makes one attempt."""
        client = Client({"base_url": BASE_URL, "retry_attempts": 0})

        assert client.retry_attempts == 1

    def test_auth_token_becomes_bearer_header(self):
        """auth_token is sent as a Bearer Authorization header."""
        client = Client(
            {"base_url": BASE_URL, "auth_token": "abc", "headers": {"X-Trace": "1"}}
        )

        assert client.headers == {"X-Trace": "1", "Authorization": "Bearer abc"}


class TestClientLifecycle:
    """Tests for Client lifecycle management."""

    def test_lazy_client_initialization(self):
        """httpx.Client is not created until accessed."""
        client = Client({"base_url": BASE_URL})

        assert client._client is None

    def test_context_manager_closes_client(self):
        """Context manager closes the httpx client on exit."""
        with Client({"base_url": BASE_URL}) as client:
            assert isinstance(client.client, httpx.Client)

        assert client._client is None

    def test_close_when_not_initialized(self):
        """Calling close when client not initialized is safe."""
        client = Client({"base_url": BASE_URL})
        client.close()

        assert client._client is None


class TestClientErrorHandling:
    """Tests for mapping HTTP errors to exceptions."""

    def test_404_raises_not_found_error(self):
        """404 response raises NotFoundError with the backend's message."""
        client = Client({"base_url": BASE_URL})

        with pytest.raises(NotFoundError) as exc_info:
            client._handle_response(error_response(404, {"error": "Submission not found"}))

        assert exc_info.value.message == "Submission not found"

    def test_409_raises_conflict_error(self):
        """409 response raises ConflictError carrying details."""
        client = Client({"base_url": BASE_URL})

        with pytest.raises(ConflictError) as exc_info:
            client._handle_response(
                error_response(409, {"error": "Stale write", "details": {"version": 3}})
            )

        assert exc_info.value.details == {"version": 3}

    def test_429_raises_rate_limit_error(self):
        """429 response raises RateLimitError."""
        client = Client({"base_url": BASE_URL})

        with pytest.raises(RateLimitError):
            client._handle_response(error_response(429))

    def test_500_raises_api_error_with_details(self):
        """5xx response raises APIError with the backend's error and details."""
        client = Client({"base_url": BASE_URL})

        with pytest.raises(APIError) as exc_info:
            client._handle_response(
                error_response(500, {"error": "Failed to fetch", "details": "kv down"})
            )

        assert exc_info.value.status_code == 500
        assert exc_info.value.message == "Failed to fetch"
        assert exc_info.value.details == "kv down"

    def test_non_json_error_body(self):
        """A non-JSON error body falls back to a generic message."""
        client = Client({"base_url": BASE_URL})

        with pytest.raises(APIError, match="API error 502"):
            client._handle_response(error_response(502))

    def test_success_returns_response(self):
        """Successful response is returned as-is."""
        client = Client({"base_url": BASE_URL})
        response = MagicMock()
        response.is_success = True

        assert client._handle_response(response) is response


class TestClientRetryLogic:
    """Tests for Client retry behavior."""

    @patch("editorial_desk.clients.client.sleep")
    def test_retries_on_connection_error(self, mock_sleep):
        """Client retries connection errors for any method."""
        client = Client({"base_url": BASE_URL, "retry_attempts": 3, "retry_delay": 0.1})
        mock_http_client = MagicMock()
        mock_http_client.request.side_effect = httpx.ConnectError("Connection refused")
        client._client = mock_http_client

        with pytest.raises(ConnectionError) as exc_info:
            client.post("/submissions", json={})

        assert "POST /submissions failed after 3 attempts" in str(exc_info.value)
        assert mock_http_client.request.call_count == 3
        assert mock_sleep.call_count == 2

    @patch("editorial_desk.clients.client.sleep")
    def test_retries_timeout_for_idempotent_methods(self, mock_sleep):
        """GET requests are retried after a timeout."""
        client = Client({"base_url": BASE_URL, "retry_attempts": 2})
        mock_http_client = MagicMock()
        mock_http_client.request.side_effect = httpx.TimeoutException("timed out")
        client._client = mock_http_client

        with pytest.raises(ConnectionError):
            client.get("/issues")

        assert mock_http_client.request.call_count == 2

    @patch("editorial_desk.clients.client.sleep")
    def test_no_timeout_retry_for_post(self, mock_sleep):
        """A timed out POST is not repeated since it may have been applied."""
        client = Client({"base_url": BASE_URL, "retry_attempts": 3})
        mock_http_client = MagicMock()
        mock_http_client.request.side_effect = httpx.TimeoutException("timed out")
        client._client = mock_http_client

        with pytest.raises(ConnectionError, match="after 1 attempts"):
            client.post("/issues/i1/publish")

        assert mock_http_client.request.call_count == 1
        mock_sleep.assert_not_called()

    @patch("editorial_desk.clients.client.sleep")
    def test_succeeds_after_retry(self, mock_sleep):
        """Client succeeds if retry works."""
        client = Client({"base_url": BASE_URL, "retry_attempts": 3})
        success_response = MagicMock()
        success_response.is_success = True
        mock_http_client = MagicMock()
        mock_http_client.request.side_effect = [
            httpx.ConnectError("Connection refused"),
            success_response,
        ]
        client._client = mock_http_client

        assert client.get("/issues") is success_response
        assert mock_http_client.request.call_count == 2

    def test_no_retry_on_api_error(self):
        """Client does not retry on API errors."""
        client = Client({"base_url": BASE_URL, "retry_attempts": 3})
        mock_http_client = MagicMock()
        mock_http_client.request.return_value = error_response(400, {"error": "Title is required"})
        client._client = mock_http_client

        with pytest.raises(APIError, match="Title is required"):
            client.post("/issues", json={})

        assert mock_http_client.request.call_count == 1
