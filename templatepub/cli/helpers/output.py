"""Helper functions for CLI output formatting with Rich integration."""

from rich.console import Console
from rich.table import Table
from rich.theme import Theme

from templatepub.publish.models import BatchResult, TemplateStatus


class Colors:
    """Standardized color palette for CLI output."""

    SUCCESS = "bold green"
    ERROR = "bold red"
    WARNING = "bold yellow"
    INFO = "bold blue"
    HEADER = "bold cyan"
    MUTED = "dim"


THEME = Theme(
    {
        "success": Colors.SUCCESS,
        "error": Colors.ERROR,
        "warning": Colors.WARNING,
        "info": Colors.INFO,
        "header": Colors.HEADER,
        "muted": Colors.MUTED,
    }
)

CHECKMARK = "✓"
CROSS = "✗"


def get_console() -> Console:
    return Console(theme=THEME, highlight=False)


def print_success_message(message: str, console: Console | None = None) -> None:
    """Print a success message with a checkmark."""
    (console or get_console()).print(f"[success]{CHECKMARK}[/success] {message}")


def print_error_message(message: str, console: Console | None = None) -> None:
    """Print an error message with an X symbol."""
    (console or get_console()).print(f"[error]{CROSS}[/error] {message}")


def print_batch_result(result: BatchResult, console: Console | None = None) -> None:
    """Print one row per published template."""
    console = console or get_console()
    if not result.outcomes:
        console.print("[muted]No templates to publish[/muted]")
        return

    table = Table(title="Template publish results", header_style="header")
    table.add_column("Template")
    table.add_column("Status")
    table.add_column("Id / Error")
    for outcome in result.outcomes:
        if outcome.success:
            table.add_row(
                outcome.artifact_name,
                f"[success]{CHECKMARK} published[/success]",
                outcome.template_id or "",
            )
        else:
            table.add_row(
                outcome.artifact_name,
                f"[error]{CROSS} failed[/error]",
                outcome.error or "",
            )
    console.print(table)


def print_template_status(
    status: TemplateStatus, console: Console | None = None
) -> None:
    console = console or get_console()
    style = {"pending": "warning", "validated": "success", "failed": "error"}[
        status.state
    ]
    console.print(f"Template {status.id}: [{style}]{status.state}[/{style}]")
    for error in getattr(status, "errors", []):
        console.print(f"  {error}", markup=False)
