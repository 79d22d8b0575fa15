"""Pattern actions supported by the toggler.

Kept in the domain layer so the CLI, the services and the console renderer
share a single source of truth for the enable/disable direction and its
wording.
"""

from __future__ import annotations

from enum import Enum


class PatternAction(str, Enum):
    """Direction of the bulk update applied to Security patterns."""

    ENABLE = "enable"
    DISABLE = "disable"

    @classmethod
    def from_bool(cls, enable: bool) -> "PatternAction":
        return cls.ENABLE if enable else cls.DISABLE

    @property
    def enabled(self) -> bool:
        """Value sent as `enabled` in the bulk update body."""

        return self is PatternAction.ENABLE

    def progressive(self) -> str:
        """Capitalised verb for progress lines ("Enabling")."""

        return "Enabling" if self.enabled else "Disabling"
