"""``githook run`` — run a repository's job now, on this terminal.

Goes through the same pipeline as a webhook (fresh config, resolution,
execution, sinks, final log line) but waits for the result and prints it.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.text import Text

from githook.cli._logging import configure_logging
from githook.config import settings
from githook.core.coordinator import DispatchCoordinator
from githook.core.errors import GithookError

console = Console()


def run_cmd(
    repository: str = typer.Argument(..., help="Repository name."),
    config: Path = typer.Option(
        settings.config_path, "--config", "-c", help="Job config file (JSON)."
    ),
    log_level: str = typer.Option(
        settings.log_level, "--log-level", help="Logging level."
    ),
) -> None:
    """Run REPOSITORY's job synchronously and report the outcome.

    Exits with status 1 when the job cannot be resolved or fails.
    """
    configure_logging(log_level)

    with DispatchCoordinator(config, max_workers=1) as coordinator:
        try:
            result = coordinator.run_repository(repository)
        except GithookError as exc:
            console.print(f"[red]{type(exc).__name__}:[/red] {escape(str(exc))}")
            raise typer.Exit(code=1) from exc

    style = "green" if result.succeeded else "red"
    label = "passed" if result.succeeded else "FAILED"
    lines = [
        f"[bold {style}]Build {label} for: {escape(repository)}[/bold {style}]",
        "",
        f"[bold]Status:[/bold]   {result.exit_description}",
        f"[bold]Duration:[/bold] {result.duration.total_seconds():.3f}s",
    ]
    if result.error:
        lines.append(f"[bold]Error:[/bold]    {escape(result.error)}")

    console.print()
    console.print(
        Panel("\n".join(lines), title="[bold]githook[/bold]", border_style=style, padding=(1, 2))
    )
    if result.stdout:
        console.print(Panel(Text(result.stdout_text.rstrip()), title="stdout", border_style="dim"))
    if result.stderr:
        console.print(Panel(Text(result.stderr_text.rstrip()), title="stderr", border_style="dim"))

    if not result.succeeded:
        raise typer.Exit(code=1)
