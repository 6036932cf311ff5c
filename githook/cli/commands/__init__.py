"""Subcommands registered on the ``githook`` Typer app."""
