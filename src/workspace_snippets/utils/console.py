"""Console utility functions for formatting and output."""

import click
from typing import Optional

from colorama import Fore, Style, init
from rich.console import Console
from rich.table import Table

init(autoreset=True)


# Status symbols for consistent iconography
STATUS_SYMBOLS = {
    'success': '✨',
    'info': '💡',
    'warning': '⚠️',
    'error': '❌',
    'check': '✅',
    'skip': '⏭️',
}

_COLORAMA_COLORS = {
    'red': Fore.RED,
    'green': Fore.GREEN,
    'yellow': Fore.YELLOW,
    'blue': Fore.BLUE,
    'cyan': Fore.CYAN,
    'white': Fore.WHITE,
}


def _get_console(stderr: bool = False) -> Optional[Console]:
    """Get Rich console instance, or None if it can't be created."""
    try:
        return Console(stderr=stderr, highlight=False)
    except Exception:
        return None


def _rich_echo(message: str, color: str = "white", bold: bool = False, symbol: str = None,
               err: bool = False):
    """Echo message with Rich formatting or colorama fallback."""
    if symbol and symbol in STATUS_SYMBOLS:
        message = f"{STATUS_SYMBOLS[symbol]} {message}"
    
    console = _get_console(stderr=err)
    if console:
        try:
            style = f"bold {color}" if bold else color
            console.print(message, style=style, markup=False, emoji=False, soft_wrap=True)
            return
        except Exception:
            pass
    
    # Colorama fallback
    color_code = _COLORAMA_COLORS.get(color, Fore.WHITE)
    style_code = Style.BRIGHT if bold else ""
    click.echo(f"{color_code}{style_code}{message}{Style.RESET_ALL}", err=err)


def _rich_success(message: str, symbol: str = None):
    """Display success message with green color and bold styling."""
    _rich_echo(message, color="green", symbol=symbol, bold=True)


def _rich_error(message: str, symbol: str = None):
    """Display error message with red color on stderr."""
    _rich_echo(message, color="red", symbol=symbol, err=True)


def _rich_warning(message: str, symbol: str = None):
    """Display warning message with yellow color on stderr."""
    _rich_echo(message, color="yellow", symbol=symbol, err=True)


def _rich_info(message: str, symbol: str = None):
    """Display info message with blue color."""
    _rich_echo(message, color="blue", symbol=symbol)


def _create_summary_table(rows: list, title: str = "Files") -> Optional[Table]:
    """Create a Rich table with one (file, status) row per entry."""
    try:
        table = Table(title=title, show_header=True, header_style="bold cyan")
        table.add_column("File", style="bold white")
        table.add_column("Status", style="white")
        for name, status in rows:
            table.add_row(str(name), str(status))
        return table
    except Exception:
        return None


def _print_table(table: Table):
    """Print a table, falling back to plain lines."""
    console = _get_console()
    if console:
        try:
            console.print(table)
            return
        except Exception:
            pass
    for row in zip(*(column.cells for column in table.columns)):
        click.echo("  ".join(str(cell) for cell in row))
