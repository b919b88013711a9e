import re
from typing import List

from .base import LineRule
from ..core.declarations import mask_literals
from ..core.diagnostics import Diagnostic, line_error, line_warning
from ..core.symbols import SymbolTable
from ..core.types import STEPPABLE_TYPES

TRIPLE_STEP_RE = re.compile(r"\+\+\+|---")
MIXED_STEP_RE = re.compile(r"\+\+--|--\+\+")
UNARY_MINUS_CHAIN_RE = re.compile(r"=\s*-\s*-\s*-\s*-")
POINTER_COMBO_RE = re.compile(r"\*&|&\*")
DOUBLED_ARITHMETIC_RE = re.compile(r"\*\*|/\*|/\+|\+/|\+-|-\+")

POST_STEP_RE = re.compile(r"([A-Za-z_]\w*)\s*(\+\+|--)")
PRE_STEP_RE = re.compile(r"(\+\+|--)\s*([A-Za-z_]\w*)")
LEADING_STEP_RE = re.compile(r"^(\+\+|--)")
STEP_BEFORE_SEMICOLON_RE = re.compile(r"(\+\+|--)\s*;")
FOR_HEADER_RE = re.compile(r"\bfor\s*\(")
DANGLING_OPERATOR_RE = re.compile(r"([A-Za-z_]\w*|\d+|\))\s*([+\-*/&|^%])\s*;")


class ProblematicOperatorRule(LineRule):
    """Suspicious operator clusters and increment/decrement misuse"""

    name = "problematic-operators"
    main_only = True

    def check(self, line: str, line_no: int, symbols: SymbolTable) -> List[Diagnostic]:
        text = mask_literals(line, fill=' ')
        diagnostics = []

        if TRIPLE_STEP_RE.search(text):
            diagnostics.append(line_error(
                line_no, "Syntax error - invalid multiple increment/decrement operators."))
        if MIXED_STEP_RE.search(text):
            diagnostics.append(line_warning(
                line_no,
                "Confusing operator sequence detected (++-- or --++). "
                "This may lead to unexpected behavior."))
        if UNARY_MINUS_CHAIN_RE.search(text):
            diagnostics.append(line_warning(
                line_no,
                "Misleading sequence of unary minus operators. This could be parsed incorrectly."))
        if POINTER_COMBO_RE.search(text):
            diagnostics.append(line_warning(
                line_no, "Potentially invalid operator combination (*& or &*)."))
        if DOUBLED_ARITHMETIC_RE.search(text):
            diagnostics.append(line_error(
                line_no, "Invalid or confusing consecutive arithmetic operators detected."))

        targets = [m.group(1) for m in POST_STEP_RE.finditer(text)]
        targets += [m.group(2) for m in PRE_STEP_RE.finditer(text)]
        checked = set()
        for name in targets:
            if name in checked:
                continue
            checked.add(name)
            diagnostics.extend(self._check_step_target(name, line_no, symbols))

        if not targets and ('++' in text or '--' in text) and not FOR_HEADER_RE.search(text):
            if LEADING_STEP_RE.match(text.strip()):
                diagnostics.append(line_error(
                    line_no, "Increment/decrement operator missing a variable."))
            elif STEP_BEFORE_SEMICOLON_RE.search(text):
                diagnostics.append(line_error(
                    line_no, "Potentially invalid increment/decrement operation."))

        dangling = DANGLING_OPERATOR_RE.search(text)
        if dangling:
            diagnostics.append(line_error(
                line_no, f"Incomplete expression with dangling operator '{dangling.group(2)}'."))

        return diagnostics

    def _check_step_target(self, name: str, line_no: int, symbols: SymbolTable) -> List[Diagnostic]:
        info = symbols.lookup(name)
        if info is None:
            return [line_error(
                line_no,
                f"Variable '{name}' used with increment/decrement operator before declaration.")]

        diagnostics = []
        if not info.initialized:
            diagnostics.append(line_error(
                line_no,
                f"Variable '{name}' used with increment/decrement operator before initialization."))
            symbols.mark_initialized(name)
        if info.type not in STEPPABLE_TYPES:
            diagnostics.append(line_error(
                line_no, f"Increment/decrement operator used on non-numeric type '{info.type}'."))
        return diagnostics
