"""Main Typer application — imports and registers all CLI commands.

Entry point: ``githook`` (configured via pyproject.toml scripts).
"""

from __future__ import annotations

import typer

from githook.cli.commands.jobs import jobs_cmd, resolve_cmd
from githook.cli.commands.run import run_cmd
from githook.cli.commands.serve import serve_cmd

app = typer.Typer(
    name="githook",
    help="githook: run build jobs when repositories receive pushes.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)

# Register subcommands
app.command(name="serve", help="Serve webhooks over HTTP or the relay.")(serve_cmd)
app.command(name="jobs", help="List configured jobs and sinks.")(jobs_cmd)
app.command(name="resolve", help="Show the command a repository would run.")(resolve_cmd)
app.command(name="run", help="Run a repository's job now and report it.")(run_cmd)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
