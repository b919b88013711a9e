from rich.console import Console
from rich.markup import escape
from rich.table import Table
import os
from typing import Iterable

from .colors import Colors
from .report import format_symbol_table
from ..core.diagnostics import Diagnostic
from ..core.symbols import SymbolTable

console = Console()


def _is_minimal() -> bool:
    # Honor Colors.MINIMAL or environment override CPPSCAN_MINIMAL_UI=1
    env = os.environ.get('CPPSCAN_MINIMAL_UI')
    if env is not None:
        return env.strip() in ('1', 'true', 'yes', 'on')
    return bool(getattr(Colors, 'MINIMAL', False))


def print_stage(step: int, total: int, message: str):
    """Print a staged progress-like line (e.g. [1/4] Stripping comments)"""
    if _is_minimal():
        console.print(f"\\[{step}/{total}] {escape(message)}")
    else:
        console.print(f"[cyan]●[/cyan] [bold]{step}/{total}[/bold] {escape(message)}")


def print_error(message: str):
    if _is_minimal():
        console.print(f"\\[ERROR] {escape(message)}")
        return
    console.print(f"[red]Error:[/red] {escape(message)}")


def print_success(message: str):
    if _is_minimal():
        console.print(f"\\[OK] {escape(message)}")
        return
    console.print(f"[green]Success:[/green] {escape(message)}")


def print_lines(lines: Iterable[str]):
    """Report text verbatim, without markup"""
    for line in lines:
        console.print(line, markup=False, highlight=False)


def print_diagnostics(diagnostics: Iterable[Diagnostic]):
    for diag in diagnostics:
        if _is_minimal():
            console.print(diag.format(), markup=False, highlight=False)
        elif diag.is_error:
            console.print(f"[red]{escape(diag.format())}[/red]")
        else:
            console.print(f"[yellow]{escape(diag.format())}[/yellow]")


def print_symbol_table(symbols: SymbolTable):
    if _is_minimal():
        print_lines(format_symbol_table(symbols))
        return

    table = Table(title="Symbol Table")
    table.add_column("Identifier", style="cyan")
    table.add_column("Type")
    table.add_column("Initialized")
    table.add_column("Line", justify="right")
    for name, info in symbols:
        initialized = "[green]Yes[/green]" if info.initialized else "[red]No[/red]"
        table.add_row(escape(name), info.type, initialized, str(info.line))
    console.print(table)
