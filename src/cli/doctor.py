"""Doctor command for environment diagnostics."""

from __future__ import annotations

from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from adapters.codacy_api import CodacyApi
from adapters.http_client import CodacyTransport
from core.config import AppSettings, write_user_env_vars
from core.domain.errors import TogglerError

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


def _check_api(settings: AppSettings, *, provider: str, organization: str) -> tuple[bool, str]:
    """One read-only request: list the organisation's coding standards."""

    try:
        with CodacyTransport.from_settings(settings) as transport:
            api = CodacyApi(transport, provider=provider, organization=organization)
            standards = api.list_coding_standards()
        return True, f"{len(standards)} coding standard(s) visible"
    except TogglerError as exc:
        return False, str(exc)


@app.command()
def run(
    organization: Optional[str] = typer.Option(
        None, "--organization", "-o", help="Organisation used for the API check."
    ),
) -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = AppSettings()

    table = Table(title="Codacy Security Toggler Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    # Config
    if settings.api_token:
        table.add_row("API token", "OK", "CODACY_API_TOKEN is set")
    else:
        table.add_row("API token", "MISSING", "Use --api-token, set CODACY_API_TOKEN or run `doctor setup-token`")
    table.add_row("API base_url", "OK", settings.api_base_url)
    table.add_row("Default provider", "OK", settings.default_provider)
    table.add_row("Page size", "OK", str(settings.repositories_page_size))

    # Connectivity
    ok_api = True
    if settings.api_token and organization:
        ok_api, detail_api = _check_api(settings, provider=settings.default_provider, organization=organization)
        table.add_row("API access", "OK" if ok_api else "FAIL", detail_api)
    else:
        table.add_row("API access", "SKIPPED", "Needs a token and --organization")

    _console.print(table)

    if not ok_api:
        _console.print(
            "\n[yellow]Note:[/yellow] The token needs access to the organisation's coding standards."
        )
        raise typer.Exit(code=1)


@app.command(name="setup-token")
def setup_token() -> None:
    """Interactive setup: stores the API token in the user config .env."""

    token = typer.prompt("Codacy API token", hide_input=True, confirmation_prompt=False).strip()
    provider = typer.prompt("Default Git provider (gh/gl/bb)", default="gh", show_default=True).strip().lower()

    if not token:
        raise typer.BadParameter("token is required")
    if provider not in ("gh", "gl", "bb"):
        raise typer.BadParameter("provider must be one of gh, gl, bb")

    env_path = write_user_env_vars(
        {
            "CODACY_API_TOKEN": token,
            "CODACY_DEFAULT_PROVIDER": provider,
        }
    )

    _console.print(f"[green]Saved configuration to:[/green] {env_path}")
