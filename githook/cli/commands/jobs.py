"""``githook jobs`` and ``githook resolve`` — inspect the job configuration.

Both read the configuration exactly as a dispatch would, so they show what
the next webhook will do.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from githook.config import settings
from githook.core.errors import GithookError
from githook.core.resolver import resolve
from githook.models.hook_config import HookConfig

console = Console()


def _load(config: Path) -> HookConfig:
    try:
        return HookConfig.load(config)
    except GithookError as exc:
        console.print(f"[red]{type(exc).__name__}:[/red] {escape(str(exc))}")
        raise typer.Exit(code=1) from exc


def jobs_cmd(
    config: Path = typer.Option(
        settings.config_path, "--config", "-c", help="Job config file (JSON)."
    ),
) -> None:
    """List configured repositories and which sinks are enabled."""
    hook_config = _load(config)

    if not hook_config.repositories:
        console.print("[dim]No repositories configured.[/dim]")
    else:
        table = Table(title=f"Jobs in {config}")
        table.add_column("Repository", style="cyan")
        table.add_column("Dir")
        table.add_column("Script")
        for name, job in sorted(hook_config.repositories.items()):
            script = escape(" ".join(job.script)) if job.script else "[red](empty)[/red]"
            table.add_row(escape(name), escape(job.dir) or "[dim](cwd)[/dim]", script)
        console.print(table)

    s3 = "[green]on[/green]" if hook_config.aws.is_configured else "[yellow]off[/yellow]"
    email = "[green]on[/green]" if hook_config.email.is_configured else "[yellow]off[/yellow]"
    always = " (always)" if hook_config.email.always else " (failures only)"
    console.print(f"Object store sink: {s3}  Email sink: {email}{always}")


def resolve_cmd(
    repository: str = typer.Argument(..., help="Repository name."),
    config: Path = typer.Option(
        settings.config_path, "--config", "-c", help="Job config file (JSON)."
    ),
) -> None:
    """Show the command a webhook for REPOSITORY would run, without running it."""
    hook_config = _load(config)

    try:
        spec = resolve(hook_config.repositories, repository)
    except GithookError as exc:
        console.print(f"[red]{type(exc).__name__}:[/red] {escape(str(exc))}")
        raise typer.Exit(code=1) from exc

    table = Table(show_header=False)
    table.add_column("Field", style="bold")
    table.add_column("Value")
    table.add_row("Executable", escape(spec.executable))
    table.add_row("Arguments", escape(" ".join(spec.arguments)) or "[dim](none)[/dim]")
    table.add_row("Working dir", escape(spec.working_directory))
    console.print(table)
