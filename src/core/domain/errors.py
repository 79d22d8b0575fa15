"""Error taxonomy of the toggler.

Every error raised by the transport or the API gateway derives from
`TogglerError`, so the CLI can catch a single type at its edge while the
services still tell fatal steps apart from per-tool failures.
"""

from __future__ import annotations


class TogglerError(Exception):
    """Base class for all toggler errors."""


class ConfigurationError(TogglerError):
    """Missing credential or organisation, detected before any request."""


class TransportError(TogglerError):
    """Network failure, non-2xx status or undecodable body.

    `status_code` is None when no HTTP response was received.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        snippet: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.snippet = snippet

    def with_context(self, context: str) -> "TransportError":
        """Return a copy of this error prefixed with the failing operation."""

        wrapped = type(self)(
            f"{context}: {self.message}",
            status_code=self.status_code,
            snippet=self.snippet,
        )
        wrapped.__cause__ = self
        return wrapped


class NotFoundError(TransportError):
    """The requested entity does not exist (404 or empty `data`)."""


class PaginationError(TogglerError):
    """The service kept returning cursors past the page guard."""
