"""HTTP client abstraction for the deploy-event webhook.

This module provides:
- HttpClient: Protocol for HTTP operations (injectable for tests)
- RealHttpClient: Real implementation using urllib
- MockHttpClient: Mock implementation for testing
"""

from __future__ import annotations

import json
import ssl
import urllib.error
import urllib.request
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from trh import __version__
from trh.core.result import Err, Ok, Result
from trh.core.settings import HTTP_TIMEOUT_SECONDS

__all__ = [
    "HttpClient",
    "HttpError",
    "HttpResponse",
    "MockHttpClient",
    "RealHttpClient",
]


@dataclass(frozen=True, slots=True)
class HttpError:
    """Transport-level failure (no HTTP response was received).

    Attributes:
        url: The URL that failed
        status: HTTP status if known, 0 for network errors
        message: Human-readable error message
    """

    url: str
    status: int
    message: str

    def __str__(self) -> str:
        if self.status:
            return f"HTTP {self.status}: {self.message} ({self.url})"
        return f"{self.message} ({self.url})"


@dataclass(frozen=True, slots=True)
class HttpResponse:
    """A received response. Error statuses (4xx/5xx) are responses too."""

    status: int
    reason: str
    body: str

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


@runtime_checkable
class HttpClient(Protocol):
    """Protocol for HTTP operations.

    This abstraction allows injecting mock clients for testing,
    avoiding real network calls in unit tests.
    """

    def post_json(
        self, url: str, payload: Mapping[str, object]
    ) -> Result[HttpResponse, HttpError]:
        """POST payload as a JSON body.

        Args:
            url: Endpoint URL
            payload: JSON-serializable mapping

        Returns:
            Ok with the response (any status), or Err if nothing was received
        """
        ...


class RealHttpClient:
    """Real HTTP client using urllib."""

    def __init__(
        self,
        timeout: float = HTTP_TIMEOUT_SECONDS,
        user_agent: str = f"trh/{__version__}",
    ) -> None:
        self.timeout = timeout
        self.user_agent = user_agent
        self._ssl_context = ssl.create_default_context()

    def post_json(
        self, url: str, payload: Mapping[str, object]
    ) -> Result[HttpResponse, HttpError]:
        """POST payload as JSON and return the response whatever its status."""
        body = json.dumps(dict(payload)).encode("utf-8")
        try:
            req = urllib.request.Request(
                url,
                data=body,
                method="POST",
                headers={
                    "Content-Type": "application/json",
                    "User-Agent": self.user_agent,
                },
            )
            with urllib.request.urlopen(
                req,
                timeout=self.timeout,
                context=self._ssl_context if url.startswith("https:") else None,
            ) as response:
                return Ok(
                    HttpResponse(
                        status=response.status,
                        reason=response.reason or "",
                        body=response.read().decode("utf-8", errors="replace"),
                    )
                )
        except urllib.error.HTTPError as e:
            try:
                text = e.read().decode("utf-8", errors="replace")
            except OSError:
                text = ""
            return Ok(HttpResponse(status=e.code, reason=str(e.reason or ""), body=text))
        except urllib.error.URLError as e:
            return Err(HttpError(url=url, status=0, message=str(e.reason)))
        except TimeoutError:
            return Err(HttpError(url=url, status=0, message="Request timed out"))
        except ValueError as e:
            return Err(HttpError(url=url, status=0, message=str(e)))
        except OSError as e:
            return Err(HttpError(url=url, status=0, message=str(e)))


class MockHttpClient:
    """Mock HTTP client for testing.

    Usage:
        client = MockHttpClient()
        client.set_response("https://api.example.com", HttpResponse(200, "OK", "OK"))
        client.post_json("https://api.example.com", {"type": "git"})
        assert client.posted == [("https://api.example.com", {"type": "git"})]
    """

    def __init__(self) -> None:
        self._responses: dict[str, HttpResponse | HttpError] = {}
        self.posted: list[tuple[str, dict[str, object]]] = []

    def set_response(self, url: str, response: HttpResponse | HttpError) -> None:
        self._responses[url] = response

    def post_json(
        self, url: str, payload: Mapping[str, object]
    ) -> Result[HttpResponse, HttpError]:
        # Round-trip through JSON so tests see exactly what goes on the wire.
        self.posted.append((url, json.loads(json.dumps(dict(payload)))))

        if url not in self._responses:
            return Err(HttpError(url=url, status=0, message="Connection refused (mock)"))

        response = self._responses[url]
        if isinstance(response, HttpError):
            return Err(response)
        return Ok(response)
