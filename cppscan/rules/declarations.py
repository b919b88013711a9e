import re
from typing import List

from .base import LineRule
from ..core.declarations import DeclarationRecognizer, QUALIFIERS, mask_literals, split_top_level
from ..core.diagnostics import Diagnostic, line_error, line_warning
from ..core.symbols import SymbolTable

TYPE_WORDS = (
    'int', 'float', 'double', 'char', 'bool', 'long', 'short',
    'unsigned', 'signed', 'string', 'void', 'auto', 'size_t',
)
TYPE_WORD_RE = re.compile(r"\b(" + '|'.join(TYPE_WORDS) + r")\b")

# Type keywords that legitimately appear together in one declaration
ALLOWED_TYPE_COMBINATIONS = (
    frozenset({'unsigned', 'int'}),
    frozenset({'unsigned', 'short'}),
    frozenset({'unsigned', 'long'}),
)

SIGNATURE_RE = re.compile(
    rf"^\s*{QUALIFIERS}(?:(?:{'|'.join(TYPE_WORDS)})\s+)+[A-Za-z_]\w*\s*\(")
EMPTY_RHS_RE = re.compile(r"(?<![=!<>])=\s*;")
NESTED_ASSIGNMENT_RE = re.compile(r"<<=|>>=|[+\-*/%&^|]=|(?<![=!<>])=(?!=)")


class MultipleDataTypesRule(LineRule):
    """Flags declarations that mix type keywords, e.g. ``int float x;``"""

    name = "multiple-data-types"
    breaks_circuit = True

    def check(self, line: str, line_no: int, symbols: SymbolTable) -> List[Diagnostic]:
        if line.startswith('#'):
            return []
        if '{' in line and '}' in line:
            return []
        if SIGNATURE_RE.match(line):
            return []

        masked = mask_literals(line, fill=' ')
        for statement in split_top_level(masked, ';'):
            found = self._types_in(statement)
            if len(found) > 1 and frozenset(found) not in ALLOWED_TYPE_COMBINATIONS:
                return [line_error(
                    line_no,
                    f"Error - Multiple data types in single declaration: {', '.join(found)}")]
        return []

    @staticmethod
    def _types_in(text: str) -> List[str]:
        found: List[str] = []
        for match in TYPE_WORD_RE.finditer(text):
            if match.group(1) not in found:
                found.append(match.group(1))
        return found


class EmptyInitializationRule(LineRule):
    name = "empty-initialization"

    def check(self, line: str, line_no: int, symbols: SymbolTable) -> List[Diagnostic]:
        if EMPTY_RHS_RE.search(mask_literals(line)):
            return [line_error(
                line_no,
                "Syntax error - empty initialization or assignment (missing right-hand side).")]
        return []


class DeclarationRule(LineRule):
    """Registers declarations and assignments into the pass's symbol table"""

    name = "declarations"

    def __init__(self, recognizer: DeclarationRecognizer):
        self.recognizer = recognizer

    def check(self, line: str, line_no: int, symbols: SymbolTable) -> List[Diagnostic]:
        return self.recognizer.apply(line, line_no, symbols)


class NestedAssignmentRule(LineRule):
    """Warns about chained assignments such as ``a = b = c;``"""

    name = "nested-assignment"
    main_only = True

    def __init__(self, recognizer: DeclarationRecognizer):
        self.recognizer = recognizer

    def check(self, line: str, line_no: int, symbols: SymbolTable) -> List[Diagnostic]:
        diagnostics = []
        for statement in self.recognizer.statements(line):
            assignment = self.recognizer.parse_assignment(statement)
            if assignment and NESTED_ASSIGNMENT_RE.search(mask_literals(assignment.value)):
                diagnostics.append(line_warning(
                    line_no,
                    "Complex nested assignment detected. This may lead to confusion: "
                    f"{assignment.value}"))
        return diagnostics
