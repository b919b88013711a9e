"""Plain-text and JSON renderings of an analysis run"""

import json
from typing import Any, Dict, Iterable, List

from ..core.diagnostics import Diagnostic
from ..core.symbols import SymbolTable
from ..core.tokens import Token

SYMBOL_RULE = '-' * 40
SYMBOL_ROW = "%-15s | %-10s | %-10s"
SUCCESS_MESSAGE = "Compilation successful. No syntax errors found."


def format_tokens(tokens: Iterable[Token]) -> List[str]:
    return [token.format() for token in tokens]


def symbol_rows(symbols: SymbolTable) -> List[str]:
    return [SYMBOL_ROW % (name, info.type, 'Yes' if info.initialized else 'No')
            for name, info in symbols]


def format_symbol_table(symbols: SymbolTable) -> List[str]:
    """Fixed-width symbol table, one entry per line"""
    lines = ["SYMBOL TABLE:", SYMBOL_RULE, SYMBOL_ROW % ('IDENTIFIER', 'TYPE', 'INITIALIZED'), SYMBOL_RULE]
    lines.extend(symbol_rows(symbols))
    return lines


def format_diagnostics(diagnostics: Iterable[Diagnostic], with_colors: bool = False) -> List[str]:
    return [diag.format(with_colors) for diag in diagnostics]


def render(lines: List[str]) -> str:
    return ''.join(line + '\n' for line in lines)


def symbols_to_dict(symbols: SymbolTable) -> List[Dict[str, Any]]:
    return [
        {'name': name, 'type': info.type, 'initialized': info.initialized, 'line': info.line}
        for name, info in symbols
    ]


def export_json(data: Dict[str, Any], indent: int = 2) -> str:
    return json.dumps(data, indent=indent)
