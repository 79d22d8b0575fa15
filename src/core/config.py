"""Core configuration.

Why here:
- Centralizes environment variables (pydantic-settings) outside the CLI.
- Lets the transport and the services read limits consistently.

The API token can come from `CODACY_API_TOKEN`, a project `.env` or the
per-user `.env` written by `doctor setup-token`.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

APP_DIR_NAME = "codacy-security-toggler"


def get_user_config_dir() -> Path:
    """Per-user configuration directory (cross-platform, no dependencies)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / APP_DIR_NAME
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / APP_DIR_NAME

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / APP_DIR_NAME
    return Path.home() / ".config" / APP_DIR_NAME


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    """`KEY=value` pairs of an env file written by `write_user_env_vars`."""

    pairs = (line.split("=", 1) for line in text.splitlines() if "=" in line and not line.lstrip().startswith("#"))
    return {key.strip(): value.strip() for key, value in pairs if key.strip()}


def write_user_env_vars(values: dict[str, str], *, env_path: Path | None = None) -> Path:
    """Write or update variables in the user's global .env."""

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# codacy-security-toggler user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class AppSettings(BaseSettings):
    """Central application settings.

    Typed and validated at the edge (env vars), one contract shared by the
    CLI, the transport and the services.
    """

    model_config = SettingsConfigDict(
        env_prefix="CODACY_",
        extra="ignore",
        case_sensitive=False,
        # Project first (dev), then the user's global config.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    api_token: str | None = Field(
        default=None,
        description="Codacy account API token (CODACY_API_TOKEN).",
    )
    api_base_url: str = Field(
        default="https://app.codacy.com/api/v3",
        min_length=8,
        description="Base URL of the Codacy v3 API.",
    )
    http_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Per-request timeout (seconds).",
    )
    user_agent: str = Field(
        default="codacy-security-toggler/0.1",
        min_length=1,
        description="User-Agent sent with every request.",
    )
    default_provider: str = Field(
        default="gh",
        min_length=2,
        description="Git provider used when --provider is omitted (gh, gl, bb).",
    )

    repositories_page_size: int = Field(
        default=100,
        ge=1,
        le=1000,
        description="Page size when listing organisation repositories.",
    )
    max_repository_pages: int = Field(
        default=1000,
        ge=1,
        description="Upper bound on repository pages requested in one scan.",
    )
    error_snippet_chars: int = Field(
        default=300,
        ge=0,
        description="Characters of a failed response body kept in error messages.",
    )
