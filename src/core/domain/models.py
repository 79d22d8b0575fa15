"""Domain models (Pydantic v2).

Why Pydantic in the domain:
- Wire snapshots from the Codacy v3 API (coding standards, tools,
  repositories, promotion results) are validated once, at the gateway.
  They are frozen: a state change is a new API call, never a local mutation.
- Run reports produced by the services are plain values too, so the CLI
  renders them and the exporter dumps them without extra glue.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class _WireModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)


class CodingStandardMeta(_WireModel):
    enabled_tools_count: int = Field(default=0, alias="enabledToolsCount")
    enabled_patterns_count: int = Field(default=0, alias="enabledPatternsCount")
    linked_repositories_count: int = Field(default=0, alias="linkedRepositoriesCount")


class CodingStandard(_WireModel):
    """Organisation-level coding standard, either draft or effective (live)."""

    id: int = Field(..., description="Identifier assigned by Codacy.")
    name: str = Field(..., description="Display name of the standard.")
    is_draft: bool = Field(default=False, alias="isDraft")
    is_default: bool = Field(default=False, alias="isDefault")
    languages: list[str] = Field(default_factory=list)
    meta: CodingStandardMeta = Field(default_factory=CodingStandardMeta)


class CodingStandardRef(_WireModel):
    """Lightweight reference used by repositories and tool provenance."""

    id: int
    name: str = ""


class CodingStandardTool(_WireModel):
    """Tool entry inside a coding standard."""

    coding_standard_id: int | None = Field(default=None, alias="codingStandardId")
    uuid: str
    is_enabled: bool = Field(default=False, alias="isEnabled")


class RepositoryToolSettings(_WireModel):
    is_enabled: bool = Field(default=False, alias="isEnabled")
    follows_standard: bool = Field(default=False, alias="followsStandard")
    enabled_by: list[CodingStandardRef] = Field(
        default_factory=list,
        alias="enabledBy",
        description="Coding standards that forced this tool on, if any.",
    )


class RepositoryTool(_WireModel):
    """Tool entry in a repository context."""

    uuid: str
    name: str = ""
    settings: RepositoryToolSettings = Field(default_factory=RepositoryToolSettings)


class Repository(_WireModel):
    name: str = Field(..., min_length=1)
    standards: list[CodingStandardRef] = Field(default_factory=list)

    @property
    def is_detached(self) -> bool:
        """A repository following zero coding standards."""

        return not self.standards


class RepositoryWithAnalysis(_WireModel):
    repository: Repository


class PaginationInfo(_WireModel):
    cursor: str | None = None
    limit: int | None = None
    total: int | None = None


class PromotionResult(_WireModel):
    """Repositories the promoted standard was (or was not) applied to."""

    successful: list[str] = Field(default_factory=list)
    failed: list[str] = Field(default_factory=list)


class ToggleOutcome(BaseModel):
    """Result of toggling Security patterns for one standard or repository.

    `updated` counts tools whose bulk update succeeded (or would have, in a
    dry run); `failed_tools` keeps the identifiers of the ones that did not,
    in listing order.
    """

    model_config = ConfigDict(frozen=True)

    context: str = Field(..., description="Human readable unit, e.g. 'standard 42'.")
    updated: int = Field(default=0, ge=0)
    failed_tools: tuple[str, ...] = Field(default=())
    dry_run: bool = False

    @property
    def total(self) -> int:
        return self.updated + len(self.failed_tools)

    @property
    def has_failures(self) -> bool:
        return bool(self.failed_tools)


class StandardState(str, Enum):
    """Lifecycle of one coding standard inside a run."""

    RESOLVED = "resolved"
    SKIPPED = "skipped"
    DRAFT_READY = "draft_ready"
    TOOLS_TOGGLED = "tools_toggled"
    PROMOTED = "promoted"
    PROMOTION_SKIPPED = "promotion_skipped"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in _TERMINAL_STATES


_TERMINAL_STATES = frozenset(
    {
        StandardState.SKIPPED,
        StandardState.PROMOTED,
        StandardState.PROMOTION_SKIPPED,
        StandardState.FAILED,
    }
)


class StandardReport(BaseModel):
    """Where one coding standard ended up, and what happened on the way."""

    model_config = ConfigDict(frozen=True)

    standard_id: int
    standard_name: str
    state: StandardState
    target_id: int | None = Field(
        default=None,
        description="Draft that was edited (the source itself when it already was a draft).",
    )
    draft_created: bool = False
    toggle: ToggleOutcome | None = None
    promotion: PromotionResult | None = None
    error: str | None = None

    @property
    def failed(self) -> bool:
        return self.state is StandardState.FAILED


class RepositoryReport(BaseModel):
    model_config = ConfigDict(frozen=True)

    repository: str
    toggle: ToggleOutcome | None = None
    error: str | None = None

    @property
    def failed(self) -> bool:
        return self.error is not None


class DetachedPhaseReport(BaseModel):
    """Second phase: repositories attached to no coding standard."""

    model_config = ConfigDict(frozen=True)

    repositories: list[RepositoryReport] = Field(default_factory=list)
    error: str | None = Field(
        default=None,
        description="Set when the repository inventory itself could not be built.",
    )

    @property
    def failed(self) -> bool:
        return self.error is not None or any(r.failed for r in self.repositories)


class RunReport(BaseModel):
    """Aggregate of a full run (standards phase + detached phase)."""

    model_config = ConfigDict(frozen=True)

    organization: str
    provider: str
    enable: bool
    dry_run: bool = False
    standards: list[StandardReport] = Field(default_factory=list)
    detached: DetachedPhaseReport = Field(default_factory=DetachedPhaseReport)

    @property
    def failed(self) -> bool:
        """Only fatal steps fail a run; per-tool update failures never do."""

        return any(s.failed for s in self.standards) or self.detached.failed

    @property
    def failed_tool_count(self) -> int:
        outcomes = [s.toggle for s in self.standards] + [r.toggle for r in self.detached.repositories]
        return sum(len(o.failed_tools) for o in outcomes if o is not None)
