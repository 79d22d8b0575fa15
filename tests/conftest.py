"""Shared fixtures: an in-memory Codacy organisation behind `ApiTransport`."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Mapping

import pytest

from adapters.codacy_api import CodacyApi
from core import config
from core.config import AppSettings
from core.domain.errors import NotFoundError, TransportError
from core.interfaces.events import RunObserver

MUTATING = ("POST", "PATCH", "PUT", "DELETE")


@dataclass
class Call:
    method: str
    path: str
    query: dict[str, str]
    body: Any


@dataclass
class FakeCodacy:
    """Simulates one organisation speaking the v3 wire format.

    `security` records the last `enabled` value sent per (context, tool).
    `fail()` makes a given method+path raise a `TransportError`.
    """

    provider: str = "gh"
    organization: str = "acme"
    standards: dict[int, dict[str, Any]] = field(default_factory=dict)
    standard_tools: dict[int, list[str]] = field(default_factory=dict)
    repositories: list[dict[str, Any]] = field(default_factory=list)
    repository_tools: dict[str, list[dict[str, Any]]] = field(default_factory=dict)
    failures: dict[tuple[str, str], TransportError] = field(default_factory=dict)
    calls: list[Call] = field(default_factory=list)
    security: dict[tuple[str, str], bool] = field(default_factory=dict)
    promoted: list[int] = field(default_factory=list)
    repeat_cursor: bool = False

    @property
    def org_path(self) -> str:
        return f"/organizations/{self.provider}/{self.organization}"

    @property
    def analysis_path(self) -> str:
        return f"/analysis{self.org_path}"

    # Setup helpers

    def add_standard(
        self,
        standard_id: int,
        name: str,
        *,
        draft: bool,
        default: bool = False,
        languages: tuple[str, ...] = ("Python",),
        tools: tuple[str, ...] = (),
        linked: tuple[str, ...] = (),
    ) -> None:
        self.standards[standard_id] = {
            "id": standard_id,
            "name": name,
            "isDraft": draft,
            "isDefault": default,
            "languages": list(languages),
            "meta": {
                "enabledToolsCount": len(tools),
                "enabledPatternsCount": 10 * len(tools),
                "linkedRepositoriesCount": len(linked),
            },
            "_linked": list(linked),
        }
        self.standard_tools[standard_id] = list(tools)

    def add_repository(self, name: str, *, standards: tuple[int, ...] = (), tools: tuple[str, ...] = ()) -> None:
        self.repositories.append(
            {
                "repository": {
                    "name": name,
                    "standards": [{"id": sid, "name": f"standard {sid}"} for sid in standards],
                }
            }
        )
        self.repository_tools[name] = [
            {
                "uuid": uuid,
                "name": f"tool-{uuid}",
                "settings": {"isEnabled": True, "followsStandard": bool(standards), "enabledBy": []},
            }
            for uuid in tools
        ]

    def fail(self, method: str, path: str, *, status: int = 500, body: str = "internal error") -> None:
        self.failures[(method, path)] = TransportError(
            f"API returned {status}: {body}", status_code=status, snippet=body
        )

    # Inspection helpers

    @property
    def mutating_calls(self) -> list[Call]:
        return [c for c in self.calls if c.method in MUTATING]

    def calls_to(self, method: str, pattern: str) -> list[Call]:
        return [c for c in self.calls if c.method == method and re.fullmatch(pattern, c.path)]

    # ApiTransport

    def __enter__(self) -> "FakeCodacy":
        return self

    def __exit__(self, *exc_info: object) -> None:
        return None

    def execute(
        self,
        method: str,
        path: str,
        *,
        query: Mapping[str, str] | None = None,
        body: Any = None,
    ) -> Any:
        query = dict(query or {})
        self.calls.append(Call(method, path, query, body))
        failure = self.failures.get((method, path))
        if failure is not None:
            raise failure
        return self._route(method, path, query, body)

    def _route(self, method: str, path: str, query: dict[str, str], body: Any) -> Any:
        org = re.escape(self.org_path)
        analysis = re.escape(self.analysis_path)

        if method == "GET" and path == f"{self.org_path}/coding-standards":
            return {"data": [self._public(s) for s in self.standards.values()]}

        if method == "POST" and path == f"{self.org_path}/coding-standards":
            return {"data": self._create_draft(int(query["sourceCodingStandard"]), body)}

        m = re.fullmatch(rf"{org}/coding-standards/(\d+)", path)
        if method == "GET" and m:
            standard = self.standards.get(int(m.group(1)))
            if standard is None:
                raise NotFoundError("API returned 404: not found", status_code=404, snippet="not found")
            return {"data": self._public(standard)}

        m = re.fullmatch(rf"{org}/coding-standards/(\d+)/tools", path)
        if method == "GET" and m:
            sid = int(m.group(1))
            return {
                "data": [
                    {"codingStandardId": sid, "uuid": uuid, "isEnabled": True}
                    for uuid in self.standard_tools.get(sid, [])
                ]
            }

        m = re.fullmatch(rf"{org}/coding-standards/(\d+)/tools/([^/]+)/patterns/update", path)
        if method == "POST" and m:
            assert query == {"categories": "Security"}
            self.security[(f"cs:{m.group(1)}", m.group(2))] = body["enabled"]
            return None

        m = re.fullmatch(rf"{org}/coding-standards/(\d+)/promote", path)
        if method == "POST" and m:
            sid = int(m.group(1))
            self.standards[sid]["isDraft"] = False
            self.promoted.append(sid)
            return {"data": {"successful": list(self.standards[sid]["_linked"]), "failed": []}}

        if method == "GET" and path == f"{self.analysis_path}/repositories":
            return self._repositories_page(query)

        m = re.fullmatch(rf"{analysis}/repositories/([^/]+)/tools", path)
        if method == "GET" and m:
            return {"data": self.repository_tools[m.group(1)]}

        m = re.fullmatch(rf"{analysis}/repositories/([^/]+)/tools/([^/]+)/patterns", path)
        if method == "PATCH" and m:
            assert query == {"categories": "Security"}
            self.security[(f"repo:{m.group(1)}", m.group(2))] = body["enabled"]
            return None

        raise NotFoundError(f"API returned 404: no route for {method} {path}", status_code=404)

    def _public(self, standard: dict[str, Any]) -> dict[str, Any]:
        return {k: v for k, v in standard.items() if not k.startswith("_")}

    def _create_draft(self, source_id: int, body: dict[str, Any]) -> dict[str, Any]:
        source = self.standards[source_id]
        new_id = max(self.standards) + 1
        self.add_standard(
            new_id,
            body["name"],
            draft=True,
            default=source["isDefault"],
            languages=tuple(body["languages"]),
            tools=tuple(self.standard_tools[source_id]),
            linked=tuple(source["_linked"]),
        )
        return self._public(self.standards[new_id])

    def _repositories_page(self, query: dict[str, str]) -> dict[str, Any]:
        limit = int(query["limit"])
        start = int(query.get("cursor", "0"))
        end = start + limit
        pagination: dict[str, Any] = {"limit": limit, "total": len(self.repositories)}
        if end < len(self.repositories):
            pagination["cursor"] = str(start if self.repeat_cursor and start else end)
        return {"data": self.repositories[start:end], "pagination": pagination}


class RecordingObserver(RunObserver):
    """Keeps the name of each event in order."""

    def __init__(self) -> None:
        self.events: list[tuple[str, Any]] = []

    def on_standard_start(self, standard):
        self.events.append(("standard_start", standard.id))

    def on_standard_skipped(self, standard):
        self.events.append(("standard_skipped", standard.id))

    def on_draft_created(self, source, draft):
        self.events.append(("draft_created", draft.id if draft else None))

    def on_tool_failed(self, context, tool_id, error):
        self.events.append(("tool_failed", tool_id))

    def on_promotion_result(self, standard_id, result):
        self.events.append(("promotion_result", standard_id))

    def on_standard_failed(self, standard, error):
        self.events.append(("standard_failed", standard.id))

    def on_repository_start(self, repository):
        self.events.append(("repository_start", repository.name))

    def on_detached_failed(self, error):
        self.events.append(("detached_failed", str(error)))

    def names(self) -> list[str]:
        return [name for name, _ in self.events]


@pytest.fixture(autouse=True)
def user_config_dir(monkeypatch, tmp_path):
    """Point the per-user config, and the settings that read it, at `tmp_path`."""

    user_dir = tmp_path / "user-config"
    monkeypatch.setattr(config, "get_user_config_dir", lambda: user_dir)
    monkeypatch.setitem(AppSettings.model_config, "env_file", (".env", str(user_dir / ".env")))
    return user_dir


@pytest.fixture
def codacy() -> FakeCodacy:
    return FakeCodacy()


@pytest.fixture
def api(codacy: FakeCodacy) -> CodacyApi:
    return CodacyApi(codacy, provider=codacy.provider, organization=codacy.organization)


@pytest.fixture
def observer() -> RecordingObserver:
    return RecordingObserver()
