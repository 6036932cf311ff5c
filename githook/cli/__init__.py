"""Githook CLI — Typer-based command-line interface.

Provides the ``githook`` command with subcommands for serving webhooks,
listing and resolving configured jobs, and running a job by hand.

All output uses Rich for formatted terminal display.
"""
