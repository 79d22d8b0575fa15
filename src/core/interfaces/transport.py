"""Transport contract consumed by the Codacy API gateway.

Why a Protocol:
- The httpx transport and the in-memory fakes used in tests are
  interchangeable without inheritance.
"""

from __future__ import annotations

from typing import Any, Mapping, Protocol, runtime_checkable


@runtime_checkable
class ApiTransport(Protocol):
    """Executes one request against the remote API.

    Rules:
    - `body=None` sends no payload.
    - Returns the decoded JSON body, or None when the body is empty.
    - A non-success status raises `TransportError` (`NotFoundError` for 404).
    """

    def execute(
        self,
        method: str,
        path: str,
        *,
        query: Mapping[str, str] | None = None,
        body: Any = None,
    ) -> Any:
        ...
