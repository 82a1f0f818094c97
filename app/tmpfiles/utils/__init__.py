"""Utility modules for mini-tmpfiles.

This module exports commonly used utility functions.
"""

from tmpfiles.utils.formatting import (
    console,
    err_console,
    print_error,
    print_info,
    print_success,
    print_warning,
    show_bytes,
)

__all__ = [
    "console",
    "err_console",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
    "show_bytes",
]
