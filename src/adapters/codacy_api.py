"""Codacy v3 API gateway.

Typed endpoints used by the orchestration services. Every method wraps
transport errors with the operation name and the entity it targets, so a
failure can be localized from the log line alone.

Responses are enveloped as `{"data": ..., "pagination": {...}}`.
"""

from __future__ import annotations

from typing import Any, TypeVar
from urllib.parse import quote

from pydantic import BaseModel, TypeAdapter, ValidationError

from core.domain.errors import NotFoundError, TransportError
from core.domain.models import (
    CodingStandard,
    CodingStandardTool,
    PaginationInfo,
    PromotionResult,
    Repository,
    RepositoryTool,
    RepositoryWithAnalysis,
)
from core.interfaces.transport import ApiTransport

SECURITY_CATEGORY = "Security"

T = TypeVar("T")


def _segment(value: str) -> str:
    return quote(value, safe="")


def _parse(adapter: TypeAdapter[T], payload: Any, *, context: str) -> T:
    try:
        return adapter.validate_python(payload)
    except ValidationError as exc:
        raise TransportError(f"{context}: unexpected response shape: {exc.error_count()} error(s)") from exc


def _data(payload: Any, *, context: str) -> Any:
    if not isinstance(payload, dict) or payload.get("data") is None:
        raise NotFoundError(f"{context}: response carries no data")
    return payload["data"]


def _items(payload: Any, *, context: str) -> list[Any]:
    """Listing payload; a null or absent `data` is an empty listing."""

    if payload is None:
        return []
    if not isinstance(payload, dict):
        raise TransportError(f"{context}: unexpected response shape")
    return payload.get("data") or []


_STANDARD = TypeAdapter(CodingStandard)
_STANDARDS = TypeAdapter(list[CodingStandard])
_STANDARD_TOOLS = TypeAdapter(list[CodingStandardTool])
_REPOSITORIES = TypeAdapter(list[RepositoryWithAnalysis])
_REPOSITORY_TOOLS = TypeAdapter(list[RepositoryTool])
_PAGINATION = TypeAdapter(PaginationInfo)
_PROMOTION = TypeAdapter(PromotionResult)


class _CreateCodingStandardBody(BaseModel):
    name: str
    languages: list[str]


class _UpdatePatternsBody(BaseModel):
    enabled: bool


class CodacyApi:
    """Endpoints of one organisation on one Git provider."""

    def __init__(self, transport: ApiTransport, *, provider: str, organization: str) -> None:
        self._transport = transport
        self.provider = provider
        self.organization = organization

    def _call(
        self,
        method: str,
        path: str,
        *,
        context: str,
        query: dict[str, str] | None = None,
        body: BaseModel | None = None,
    ) -> Any:
        try:
            return self._transport.execute(
                method,
                path,
                query=query,
                body=body.model_dump(mode="json") if body is not None else None,
            )
        except TransportError as exc:
            raise exc.with_context(context) from exc

    @property
    def _org_path(self) -> str:
        return f"/organizations/{_segment(self.provider)}/{_segment(self.organization)}"

    @property
    def _analysis_path(self) -> str:
        return f"/analysis{self._org_path}"

    def _standard_path(self, standard_id: int) -> str:
        return f"{self._org_path}/coding-standards/{standard_id}"

    def _repository_path(self, repository_name: str) -> str:
        return f"{self._analysis_path}/repositories/{_segment(repository_name)}"

    # Coding standards

    def list_coding_standards(self) -> list[CodingStandard]:
        context = "listCodingStandards"
        payload = self._call("GET", f"{self._org_path}/coding-standards", context=context)
        return _parse(_STANDARDS, _items(payload, context=context), context=context)

    def get_coding_standard(self, standard_id: int) -> CodingStandard:
        context = f"getCodingStandard({standard_id})"
        payload = self._call("GET", self._standard_path(standard_id), context=context)
        return _parse(_STANDARD, _data(payload, context=context), context=context)

    def create_draft_from_standard(self, source: CodingStandard) -> CodingStandard:
        """Create a draft copying name and languages from `source`.

        Codacy copies the source's repositories and default flag itself,
        given the `sourceCodingStandard` reference.
        """

        context = f"createDraftFromStandard({source.id})"
        payload = self._call(
            "POST",
            f"{self._org_path}/coding-standards",
            context=context,
            query={"sourceCodingStandard": str(source.id)},
            body=_CreateCodingStandardBody(name=source.name, languages=list(source.languages)),
        )
        return _parse(_STANDARD, _data(payload, context=context), context=context)

    def list_coding_standard_tools(self, standard_id: int) -> list[CodingStandardTool]:
        context = f"listCodingStandardTools({standard_id})"
        payload = self._call("GET", f"{self._standard_path(standard_id)}/tools", context=context)
        return _parse(_STANDARD_TOOLS, _items(payload, context=context), context=context)

    def update_security_patterns(self, standard_id: int, tool_uuid: str, *, enabled: bool) -> None:
        self._call(
            "POST",
            f"{self._standard_path(standard_id)}/tools/{_segment(tool_uuid)}/patterns/update",
            context=f"updateSecurityPatterns(cs={standard_id}, tool={tool_uuid})",
            query={"categories": SECURITY_CATEGORY},
            body=_UpdatePatternsBody(enabled=enabled),
        )

    def promote_draft(self, standard_id: int) -> PromotionResult:
        context = f"promoteDraftCodingStandard({standard_id})"
        payload = self._call("POST", f"{self._standard_path(standard_id)}/promote", context=context)
        if not isinstance(payload, dict) or payload.get("data") is None:
            return PromotionResult()
        return _parse(_PROMOTION, _data(payload, context=context), context=context)

    # Repositories

    def list_repositories_page(
        self,
        *,
        limit: int,
        cursor: str | None = None,
    ) -> tuple[list[Repository], str | None]:
        """One page of repositories plus the cursor of the next page (None on the last)."""

        context = "listRepositoriesWithAnalysis"
        query = {"limit": str(limit)}
        if cursor:
            query["cursor"] = cursor
        payload = self._call("GET", f"{self._analysis_path}/repositories", context=context, query=query)
        if not isinstance(payload, dict):
            raise TransportError(f"{context}: unexpected response shape")

        items = _parse(_REPOSITORIES, payload.get("data") or [], context=context)
        pagination = payload.get("pagination")
        next_cursor = None
        if pagination:
            next_cursor = _parse(_PAGINATION, pagination, context=context).cursor or None
        return [item.repository for item in items], next_cursor

    def list_repository_tools(self, repository_name: str) -> list[RepositoryTool]:
        context = f"listRepositoryTools({repository_name})"
        payload = self._call("GET", f"{self._repository_path(repository_name)}/tools", context=context)
        return _parse(_REPOSITORY_TOOLS, _items(payload, context=context), context=context)

    def update_repository_security_patterns(self, repository_name: str, tool_uuid: str, *, enabled: bool) -> None:
        self._call(
            "PATCH",
            f"{self._repository_path(repository_name)}/tools/{_segment(tool_uuid)}/patterns",
            context=f"updateRepositorySecurityPatterns(repo={repository_name}, tool={tool_uuid})",
            query={"categories": SECURITY_CATEGORY},
            body=_UpdatePatternsBody(enabled=enabled),
        )
