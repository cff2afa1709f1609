"""CLI helper functions."""

from .output import (
    get_console,
    print_batch_result,
    print_error_message,
    print_success_message,
    print_template_status,
)


__all__ = [
    "get_console",
    "print_batch_result",
    "print_error_message",
    "print_success_message",
    "print_template_status",
]
