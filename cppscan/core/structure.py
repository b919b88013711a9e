#!/usr/bin/env python3

"""
Whole-program structure checks centred on ``main``.

The body of a well-formed ``main`` is re-validated with the main-only rules
switched on. That pass works on a scoped symbol table: globals declared above
the ``main`` header are copied into the outer scope and the body's own
declarations live in an inner scope, so initializing a local never leaks
into the global table.
"""

import re
import logging
from dataclasses import dataclass
from typing import Optional, Set

from .declarations import DeclarationRecognizer, mask_literals
from .diagnostics import DiagnosticEngine, DiagnosticOrigin
from .symbols import SymbolTable
from ..rules import LineValidator

logger = logging.getLogger(__name__)

MAIN_HEADER_RE = re.compile(r"\b(int|void)\s+main\s*\([^)]*\)")
MALFORMED_MAIN_RE = re.compile(r"\bmain\s*\)\s*\(|\bmain\s*[^(\n]*\(|\bmain\s*\([^)\n]*[^)\n]$",
                               re.MULTILINE)
MAIN_WORD_RE = re.compile(r"\bmain\b")


@dataclass
class MainFunction:
    """Location of the single ``main`` definition in the stripped source"""
    return_type: str
    header_line: int
    body_start: int      # index just past the opening brace
    body_end: int        # index of the closing brace
    body_line: int       # line holding the opening brace

    def body(self, source: str) -> str:
        return source[self.body_start:self.body_end]


def mask_source(source: str) -> str:
    """Literal-masked copy of a multi-line source, same length"""
    return '\n'.join(mask_literals(line) for line in source.split('\n'))


def line_of(source: str, index: int) -> int:
    return source.count('\n', 0, index) + 1


class MainFunctionChecker:
    """Duplicate, missing and malformed ``main`` plus the main body re-scan"""

    def __init__(self, diagnostics: DiagnosticEngine, recognizer: DeclarationRecognizer,
                 require_main: bool = False, scoped: bool = True):
        self.diagnostics = diagnostics
        self.recognizer = recognizer
        self.require_main = require_main
        self.scoped = scoped

    def locate(self, source: str) -> Optional[MainFunction]:
        """Report structural problems; return main only when its body is usable"""
        masked = mask_source(source)
        headers = list(MAIN_HEADER_RE.finditer(masked))

        if len(headers) > 1:
            self.diagnostics.error(
                "Multiple main functions detected. A C++ program can have only one main function.")
            return None

        if not headers:
            self._report_missing_main(masked)
            return None

        header = headers[0]
        after = masked[header.end():]
        gap = len(after) - len(after.lstrip())
        if not after[gap:].startswith('{'):
            self.diagnostics.error("Missing opening brace '{' for main function.")
            return None

        open_index = header.end() + gap
        close_index = self._matching_brace(masked, open_index)
        if close_index is None:
            self.diagnostics.error("Missing closing brace '}' for main function.")
            return None

        return MainFunction(
            return_type=header.group(1),
            header_line=line_of(masked, header.start()),
            body_start=open_index + 1,
            body_end=close_index,
            body_line=line_of(masked, open_index),
        )

    def _report_missing_main(self, masked: str):
        if MALFORMED_MAIN_RE.search(masked):
            self.diagnostics.error(
                "Invalid main function syntax. Correct syntax is: "
                "int main() or int main(int argc, char* argv[])")
        elif MAIN_WORD_RE.search(masked):
            self.diagnostics.error(
                "'main' keyword found but not properly declared as a function. "
                "Use: int main() { ... }")
        elif self.require_main:
            self.diagnostics.error("No main() function found.")

    @staticmethod
    def _matching_brace(masked: str, open_index: int) -> Optional[int]:
        depth = 0
        for i in range(open_index, len(masked)):
            if masked[i] == '{':
                depth += 1
            elif masked[i] == '}':
                depth -= 1
                if depth == 0:
                    return i
        return None

    def scan_body(self, source: str, main: MainFunction, globals_table: SymbolTable) -> Set[str]:
        """Re-validate the body of main; return the names declared in its body.

        Initialization of those names is settled by this pass, so the
        program-wide sweep leaves them alone.
        """
        symbols = SymbolTable()
        for name, info in globals_table:
            # unscoped tracking sees the whole program's declarations
            if not self.scoped or info.line < main.header_line:
                symbols.declare(name, info.copy())
        if self.scoped:
            symbols.enter_scope()

        validator = LineValidator(symbols, self.diagnostics, self.recognizer, main_body=True)
        with self.diagnostics.collapsing():
            checked = validator.validate(main.body(source), first_line=main.body_line)

        # unscoped tables also hold globals, which belong to the sweep
        declared = {name: info for name, info in symbols.current_scope_items()
                    if info.line >= main.body_line}
        never_initialized = [name for name in symbols.uninitialized() if name in declared]
        for name in never_initialized:
            self.diagnostics.warning(
                f"Warning - Variable '{name}' is declared in main but never initialized.",
                line=declared[name].line, origin=DiagnosticOrigin.MAIN)
        if self.scoped:
            symbols.exit_scope()

        logger.debug("Main body re-scan checked %d lines, %d of %d locals never initialized",
                     checked, len(never_initialized), len(declared))
        return set(declared)

    def check(self, source: str, globals_table: SymbolTable) -> Set[str]:
        main = self.locate(source)
        if main is None:
            return set()
        return self.scan_body(source, main, globals_table)
