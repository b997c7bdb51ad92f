"""Base client for requests against the hosted backend."""

import logging
from time import sleep
from typing import Any

import httpx

from .exceptions import (
    APIError,
    ConflictError,
    ConnectionError,
    NotFoundError,
    RateLimitError,
)

logger = logging.getLogger(__name__)

IDEMPOTENT_METHODS = frozenset({"GET", "PUT", "DELETE", "HEAD"})


class Client:
    """Base class for backend clients.

    Provides lazy-initialized httpx.Client with context manager support,
    configurable timeout, retries, and headers via dict config.

    Config keys:
        base_url (required): Base URL for all requests
        auth_token: Bearer token sent in the Authorization header
        timeout: Request timeout in seconds (default: 30)
        retry_attempts: Number of attempts for transient failures (default: 3)
        retry_delay: Delay between retries in seconds (default: 1)
        headers: Additional headers to include in requests
    """

    def __init__(self, config: dict):
        if "base_url" not in config:
            raise ValueError("config must include 'base_url'")

        self._config = config
        self._client: httpx.Client | None = None

    @property
    def base_url(self) -> str:
        return str(self._config["base_url"])

    @property
    def timeout(self) -> float:
        return float(self._config.get("timeout", 30))

    @property
    def retry_attempts(self) -> int:
        return max(1, int(self._config.get("retry_attempts", 3)))

    @property
    def retry_delay(self) -> float:
        return float(self._config.get("retry_delay", 1))

    @property
    def headers(self) -> dict[str, str]:
        headers = dict(self._config.get("headers", {}))
        token = self._config.get("auth_token")
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    @property
    def client(self) -> httpx.Client:
        """Lazy-initialized httpx client."""
        if self._client is None:
            self._client = httpx.Client(
                base_url=self.base_url,
                timeout=self.timeout,
                headers=self.headers,
            )
        return self._client

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            self._client.close()
            self._client = None

    def _error_message(self, response: httpx.Response) -> tuple[str | None, Any]:
        """Extract the backend's error text and details from a JSON body."""
        try:
            data = response.json()
        except (ValueError, TypeError):
            return None, None
        if not isinstance(data, dict):
            return None, None
        return data.get("error") or data.get("message"), data.get("details")

    def _handle_response(self, response: httpx.Response) -> httpx.Response:
        """Map HTTP errors to exceptions.

        Args:
            response: The HTTP response to check

        Returns:
            The response if successful

        Raises:
            NotFoundError: For 404 responses
            ConflictError: For 409 responses
            RateLimitError: For 429 responses
            APIError: For other non-2xx responses
        """
        if response.is_success:
            return response

        status_code = response.status_code
        error, details = self._error_message(response)

        if status_code == 404:
            raise NotFoundError(error or f"Resource not found: {response.url}")
        elif status_code == 409:
            raise ConflictError(error or f"Conflict: {response.url}", details=details)
        elif status_code == 429:
            raise RateLimitError(f"Rate limit exceeded: {response.url}")
        else:
            raise APIError(
                error or f"API error {status_code}: {response.url}",
                status_code=status_code,
                details=details,
            )

    def _request(
        self,
        method: str,
        path: str,
        **kwargs,
    ) -> httpx.Response:
        """Make a request with retry logic for transient failures.

        Connection failures are retried for every method since the request
        never reached the backend. Timeouts are retried only for idempotent
        methods.

        Args:
            method: HTTP method (GET, POST, etc.)
            path: URL path (appended to base_url)
            **kwargs: Additional arguments passed to httpx.request

        Returns:
            The HTTP response

        Raises:
            ConnectionError: If all retry attempts fail due to network issues
            APIError: If the backend returns a non-2xx response
        """
        last_exception: Exception | None = None
        method = method.upper()

        for attempt in range(self.retry_attempts):
            try:
                response = self.client.request(method, path, **kwargs)
                return self._handle_response(response)
            except httpx.ConnectError as e:
                last_exception = e
                logger.warning(
                    f"Connection error (attempt {attempt + 1}/{self.retry_attempts}): {e}"
                )
            except httpx.TimeoutException as e:
                last_exception = e
                logger.warning(
                    f"Timeout (attempt {attempt + 1}/{self.retry_attempts}): {e}"
                )
                if method not in IDEMPOTENT_METHODS:
                    break
            if attempt < self.retry_attempts - 1:
                sleep(self.retry_delay)

        msg = f"{method} {path} failed after {attempt + 1} attempts"
        raise ConnectionError(msg) from last_exception

    def get(self, path: str, **kwargs) -> httpx.Response:
        """Convenience method for GET requests."""
        return self._request("GET", path, **kwargs)

    def post(self, path: str, **kwargs) -> httpx.Response:
        """Convenience method for POST requests."""
        return self._request("POST", path, **kwargs)

    def put(self, path: str, **kwargs) -> httpx.Response:
        """Convenience method for PUT requests."""
        return self._request("PUT", path, **kwargs)

    def delete(self, path: str, **kwargs) -> httpx.Response:
        """Convenience method for DELETE requests."""
        return self._request("DELETE", path, **kwargs)
