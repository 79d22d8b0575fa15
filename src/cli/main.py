"""Command-line entry point (Typer).

`toggle` runs the two-phase Security pattern toggle; `doctor` groups the
environment checks. The CLI only parses flags, wires the adapters and
renders; the workflow itself lives in `core.services.run_controller`.
"""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from adapters.codacy_api import CodacyApi
from adapters.http_client import CodacyTransport
from adapters.json_exporter import export_run_report_json
from cli import doctor
from cli.console_observer import ConsoleObserver
from cli.ui_components import build_outcome_panel, build_summary_table, print_banner
from core.config import AppSettings
from core.domain.errors import TogglerError
from core.services.run_controller import RunRequest, run_security_toggle

app = typer.Typer(
    no_args_is_help=True,
    help="Toggle Security-category patterns across Codacy coding standards and detached repositories.",
)
app.add_typer(doctor.app, name="doctor")

_console = Console()


class Provider(str, Enum):
    GITHUB = "gh"
    GITLAB = "gl"
    BITBUCKET = "bb"


def configure_logging(*, verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )
    # httpx logs every request at INFO; ours are already logged at DEBUG.
    logging.getLogger("httpx").setLevel(logging.WARNING)


def _build_transport(settings: AppSettings, api_token: str) -> CodacyTransport:
    return CodacyTransport.from_settings(settings, api_token=api_token)


@app.command()
def toggle(
    organization: Optional[str] = typer.Option(
        None, "--organization", "-o", help="Organisation name on the Git provider (required)."
    ),
    api_token: Optional[str] = typer.Option(
        None, "--api-token", help="Codacy API token (or set CODACY_API_TOKEN).", show_default=False
    ),
    provider: Optional[Provider] = typer.Option(
        None, "--provider", case_sensitive=False, help="Git provider: gh (GitHub), gl (GitLab), bb (Bitbucket)."
    ),
    coding_standard_id: int = typer.Option(
        0, "--coding-standard-id", min=0, help="Coding standard to process (0 = all standards)."
    ),
    enable: bool = typer.Option(True, "--enable/--disable", help="Enable or disable Security patterns."),
    promote: bool = typer.Option(True, "--promote/--no-promote", help="Promote each draft after updating it."),
    skip_live: bool = typer.Option(
        False, "--skip-live", help="Skip standards that are not drafts instead of copying them into a draft."
    ),
    dry_run: bool = typer.Option(False, "--dry-run", help="Show what would happen without changing anything."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Print per-tool detail and debug logs."),
    report_json: Optional[Path] = typer.Option(None, "--report-json", help="Write the run report as JSON."),
) -> None:
    """Enable or disable Security patterns on every coding standard, then on detached repositories."""

    settings = AppSettings()
    token = api_token or settings.api_token
    if not token:
        raise typer.BadParameter(
            "API token is required: use --api-token or set CODACY_API_TOKEN",
            param_hint="--api-token",
        )
    if not organization:
        raise typer.BadParameter("organisation is required", param_hint="--organization")

    configure_logging(verbose=verbose)
    provider_code = provider.value if provider else settings.default_provider

    request = RunRequest(
        organization=organization,
        provider=provider_code,
        standard_id=coding_standard_id,
        enable=enable,
        promote=promote,
        skip_live=skip_live,
        dry_run=dry_run,
        page_size=settings.repositories_page_size,
        max_pages=settings.max_repository_pages,
    )

    banner = [
        ("Provider", provider_code),
        ("Organisation", organization),
        ("Action", f"{request.action.value} security patterns"),
        ("Promote", "yes" if promote else "no"),
    ]
    if dry_run:
        banner.append(("Mode", "DRY RUN (no changes will be made)"))
    print_banner(_console, lines=banner)

    observer = ConsoleObserver(_console, action=request.action, verbose=verbose)
    with _build_transport(settings, token) as transport:
        api = CodacyApi(transport, provider=provider_code, organization=organization)
        try:
            report = run_security_toggle(api, request, observer=observer)
        except TogglerError as exc:
            _console.print(f"[bold red]error:[/bold red] {escape(str(exc))}")
            raise typer.Exit(code=1) from exc

    _console.print(build_summary_table(report))
    _console.print(build_outcome_panel(report))

    if report_json:
        path = export_run_report_json(report=report, output_path=report_json)
        _console.print(f"[green]Report saved to:[/green] {escape(str(path))}")

    if report.failed:
        raise typer.Exit(code=1)


def run() -> None:
    app()


if __name__ == "__main__":
    run()
