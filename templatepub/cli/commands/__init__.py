"""CLI command modules."""

import typer

from templatepub.cli.commands.publish import (
    register_commands as register_publish_commands,
)


def register_all_commands(app: typer.Typer) -> None:
    """Register all CLI commands with the main app.

    Args:
        app: The main Typer app
    """
    register_publish_commands(app)
