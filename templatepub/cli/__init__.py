"""Command line interface for templatepub."""

from templatepub.cli.app import AppContext, app, main
from templatepub.cli.commands import register_all_commands


register_all_commands(app)

__all__ = ["app", "main", "AppContext"]
