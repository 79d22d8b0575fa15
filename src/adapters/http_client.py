"""httpx wrapper for the Codacy API.

Why a wrapper:
- Standardizes timeouts, auth headers, error mapping and logging.
- Makes testing easy: `build_client` accepts an `httpx.MockTransport`.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

import httpx

from core.config import AppSettings
from core.domain.errors import ConfigurationError, NotFoundError, TransportError

logger = logging.getLogger(__name__)


def build_client(
    settings: AppSettings | None = None,
    *,
    api_token: str | None = None,
    transport: httpx.BaseTransport | None = None,
) -> httpx.Client:
    """Create an authenticated `httpx.Client` with safe defaults."""

    settings = settings or AppSettings()
    token = api_token or settings.api_token
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": "application/json",
    }
    if not token:
        raise ConfigurationError("Codacy API token is not configured (CODACY_API_TOKEN)")
    headers["api-token"] = token
    return httpx.Client(
        base_url=settings.api_base_url.rstrip("/"),
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        headers=headers,
        transport=transport,
    )


def truncate(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return text[:limit] + "…"


class CodacyTransport:
    """`ApiTransport` implementation on top of a synchronous httpx client."""

    def __init__(self, client: httpx.Client, *, snippet_chars: int = 300) -> None:
        self._client = client
        self._snippet_chars = snippet_chars

    @classmethod
    def from_settings(
        cls,
        settings: AppSettings,
        *,
        api_token: str | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> "CodacyTransport":
        client = build_client(settings, api_token=api_token, transport=transport)
        return cls(client, snippet_chars=settings.error_snippet_chars)

    def __enter__(self) -> "CodacyTransport":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def execute(
        self,
        method: str,
        path: str,
        *,
        query: Mapping[str, str] | None = None,
        body: Any = None,
    ) -> Any:
        try:
            response = self._client.request(
                method,
                path,
                params=dict(query) if query else None,
                json=body,
            )
        except httpx.HTTPError as exc:
            raise TransportError(f"executing request: {exc}") from exc

        logger.debug("%s %s -> %d", method, response.request.url, response.status_code)

        if not response.is_success:
            snippet = truncate(response.text, self._snippet_chars)
            error_cls = NotFoundError if response.status_code == 404 else TransportError
            raise error_cls(
                f"API returned {response.status_code}: {snippet}",
                status_code=response.status_code,
                snippet=snippet,
            )

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise TransportError(
                f"decoding response: {exc}",
                status_code=response.status_code,
                snippet=truncate(response.text, self._snippet_chars),
            ) from exc
