import re
from typing import List, Optional

from .base import LineRule
from ..core.declarations import DeclarationRecognizer, QUALIFIERS, mask_literals
from ..core.diagnostics import Diagnostic, line_error
from ..core.symbols import SymbolTable
from ..core.tokens import RESERVED_KEYWORDS
from ..core.types import is_numeric_literal, is_numeric_type

SIGNATURE_RE = re.compile(
    rf"^\s*{QUALIFIERS}(?:int|void|float|double|char|bool|long|short|unsigned|string)"
    r"(?:\s+(?:int|long|short))*\s+[A-Za-z_]\w*\s*\(")
CONDITIONAL_RE = re.compile(r"^\s*(if|else)\b")
IDENTIFIER_RE = re.compile(r"(?<![\w.])[A-Za-z_]\w*")

OPERAND = r"[A-Za-z_]\w*|\d+(?:\.\d+)?"
ARITHMETIC_PAIR_RE = re.compile(
    rf"(?<![\w.])(?=({OPERAND})\s*([+\-*/])\s*({OPERAND})(?![\w.]))")


class UndeclaredIdentifierRule(LineRule):
    """Every bare identifier must be a keyword or a known variable.

    Names the line itself declares are exempt, and assignment targets are
    left to the declaration rule which reports them as used before
    declaration.
    """

    name = "undeclared-identifier"

    def __init__(self, recognizer: DeclarationRecognizer):
        self.recognizer = recognizer

    def check(self, line: str, line_no: int, symbols: SymbolTable) -> List[Diagnostic]:
        if line.startswith('#') or SIGNATURE_RE.match(line) or CONDITIONAL_RE.match(line):
            return []

        exempt = {'main'}
        exempt |= self.recognizer.names_declared_on(line)
        exempt |= self.recognizer.assignment_targets(line)

        masked = mask_literals(line, fill=' ')
        diagnostics = []
        seen = set()
        for match in IDENTIFIER_RE.finditer(masked):
            name = match.group()
            if masked[max(0, match.start() - 2):match.start()] == '->':
                continue
            if name in RESERVED_KEYWORDS or name in exempt or name in seen:
                continue
            seen.add(name)
            if name not in symbols:
                diagnostics.append(line_error(line_no, f"Identifier '{name}' used without declaration."))
        return diagnostics


class StringArithmeticRule(LineRule):
    """Arithmetic between a string variable and a numeric operand"""

    name = "string-arithmetic"

    def check(self, line: str, line_no: int, symbols: SymbolTable) -> List[Diagnostic]:
        diagnostics = []
        for match in ARITHMETIC_PAIR_RE.finditer(mask_literals(line, fill=' ')):
            left, operator, right = match.group(1), match.group(2), match.group(3)

            if self._is_string(left, symbols) and self._is_numeric(right, symbols):
                diagnostics.append(line_error(
                    line_no,
                    f"Error - Invalid arithmetic operation: string {operator} numeric value is not allowed."))
            if self._is_string(right, symbols) and self._is_numeric(left, symbols):
                diagnostics.append(line_error(
                    line_no,
                    f"Error - Invalid arithmetic operation: numeric value {operator} string is not allowed."))
        return diagnostics

    @staticmethod
    def _type_of(operand: str, symbols: SymbolTable) -> Optional[str]:
        info = symbols.lookup(operand)
        return info.type if info else None

    def _is_string(self, operand: str, symbols: SymbolTable) -> bool:
        return self._type_of(operand, symbols) == 'string'

    def _is_numeric(self, operand: str, symbols: SymbolTable) -> bool:
        return is_numeric_literal(operand) or is_numeric_type(self._type_of(operand, symbols))
