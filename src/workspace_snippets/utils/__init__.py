"""Utility modules for update-workspace-snippets."""

from .console import (
    _rich_success,
    _rich_error, 
    _rich_warning,
    _rich_info,
    _rich_echo,
    _create_summary_table,
    _print_table,
    _get_console,
    STATUS_SYMBOLS
)

__all__ = [
    '_rich_success',
    '_rich_error',
    '_rich_warning', 
    '_rich_info',
    '_rich_echo',
    '_create_summary_table',
    '_print_table',
    '_get_console',
    'STATUS_SYMBOLS'
]
