#!/usr/bin/env python3

"""
Declaration recognition shared by every analysis pass.

A single recognizer decides which names a line declares, which names it
assigns, and registers both into a SymbolTable. The line rules, the main
body re-scan and the symbol-table report all consume its output, so a name
is never reported as undeclared on the same line that declares it.

Lines handed to the recognizer are already comment-free and trimmed.
"""

import re
import logging
from dataclasses import dataclass
from typing import List, Optional, Set, Tuple

from .diagnostics import Diagnostic, line_error, line_warning
from .symbols import SymbolTable, VariableInfo
from .tokens import RESERVED_KEYWORDS
from .types import DECLARED_TYPE_PATTERN, is_valid_value, normalize_type

logger = logging.getLogger(__name__)

QUALIFIERS = r"(?:(?:const|static)\s+)*"

DECLARATION_RE = re.compile(rf"^\s*{QUALIFIERS}({DECLARED_TYPE_PATTERN})\s+(.+?)\s*$", re.DOTALL)
MALFORMED_DECLARATION_RE = re.compile(rf"^\s*{QUALIFIERS}({DECLARED_TYPE_PATTERN})\s*$")
FUNCTION_NAME_RE = re.compile(r"^[A-Za-z_]\w*\s*\(")
FOR_INIT_RE = re.compile(r"^\s*for\s*\(\s*([^;]*);")
CONTROL_HEADER_RE = re.compile(r"^(?:else\s+)?(?:if|for|while)\s*\(|^else\b")

ASSIGNMENT_OPERATORS = ('<<=', '>>=', '+=', '-=', '*=', '/=', '%=', '&=', '^=', '|=', '=')
ASSIGNMENT_RE = re.compile(
    r"^\s*([A-Za-z_]\w*)\s*(<<=|>>=|\+=|-=|\*=|/=|%=|&=|\^=|\|=|=(?!=))\s*(.+?)\s*$",
    re.DOTALL,
)

NAME_START_RE = re.compile(r"^[A-Za-z_]")
NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def mask_literals(line: str, fill: str = 's') -> str:
    """Blank out the contents of string and char literals, keeping quotes.

    The result has the same length as the input so match positions still
    line up with the original text.
    """
    out = []
    quote = None
    i = 0
    while i < len(line):
        ch = line[i]
        if quote is None:
            if ch in ('"', "'"):
                quote = ch
            out.append(ch)
        elif ch == '\\' and i + 1 < len(line):
            out.append(fill * 2)
            i += 2
            continue
        elif ch == quote:
            quote = None
            out.append(ch)
        else:
            out.append(fill)
        i += 1
    return ''.join(out)


def split_top_level(text: str, separator: str) -> List[str]:
    """Split on separator outside parentheses, brackets and literals"""
    masked = mask_literals(text)
    parts = []
    depth = 0
    start = 0
    for i, ch in enumerate(masked):
        if ch in '([{':
            depth += 1
        elif ch in ')]}':
            depth = max(0, depth - 1)
        elif ch == separator and depth == 0:
            parts.append(text[start:i])
            start = i + 1
    parts.append(text[start:])
    return parts


def split_statements(line: str) -> List[Tuple[str, bool]]:
    """Split a line into (statement, terminated) pairs.

    Only ';' outside parentheses ends a statement, so a for-header stays in
    one piece. The trailing piece is returned unterminated when non-empty.
    """
    pieces = split_top_level(line, ';')
    result = [(piece.strip(), True) for piece in pieces[:-1]]
    tail = pieces[-1].strip()
    if tail:
        result.append((tail, False))
    return [(stmt, done) for stmt, done in result if stmt]


def control_body(statement: str) -> str:
    """Statement left after leading ``if``/``for``/``while``/``else`` headers.

    ``if (y) z = 2`` gives ``z = 2``. Returns '' when nothing follows the
    headers or a header's parentheses never close.
    """
    while True:
        header = CONTROL_HEADER_RE.match(statement)
        if not header:
            return statement
        if not header.group(0).endswith('('):
            statement = statement[header.end():].strip()
            continue

        masked = mask_literals(statement)
        depth = 0
        close = None
        for i in range(header.end() - 1, len(masked)):
            if masked[i] == '(':
                depth += 1
            elif masked[i] == ')':
                depth -= 1
                if depth == 0:
                    close = i
                    break
        if close is None:
            return ''
        statement = statement[close + 1:].strip()


def validate_name(name: str, line_no: int) -> Optional[Diagnostic]:
    if name in RESERVED_KEYWORDS:
        return line_error(line_no, f"Cannot use reserved keyword '{name}' as variable name.")
    if not NAME_START_RE.match(name):
        return line_error(line_no, f"Variable name '{name}' must begin with a letter or underscore.")
    if not NAME_RE.match(name):
        return line_error(
            line_no,
            f"Variable name '{name}' contains invalid characters. "
            "Only letters, digits, and underscores are allowed.")
    return None


@dataclass
class DeclaredItem:
    name: str
    type: str
    value: Optional[str] = None

    @property
    def initialized(self) -> bool:
        return self.value is not None


@dataclass
class Assignment:
    name: str
    operator: str
    value: str


class DeclarationRecognizer:
    """Recognizes declarations and assignments and updates a SymbolTable"""

    def __init__(self, report_redeclarations: bool = False):
        self.report_redeclarations = report_redeclarations

    def statements(self, line: str, include_unterminated: bool = False) -> List[str]:
        found = []
        for_init = FOR_INIT_RE.match(line)
        if for_init and for_init.group(1).strip():
            found.append(for_init.group(1).strip())
        for stmt, terminated in split_statements(line):
            stmt = control_body(stmt)
            if not stmt:
                continue
            if terminated or include_unterminated:
                found.append(stmt)
        return found

    def parse_declaration(self, statement: str) -> Optional[Tuple[str, List[DeclaredItem]]]:
        """Return (type, items) for a declaration statement, None otherwise"""
        match = DECLARATION_RE.match(statement)
        if not match:
            return None
        type_name = normalize_type(match.group(1))
        rest = match.group(2)
        if FUNCTION_NAME_RE.match(rest) and '=' not in rest.split('(', 1)[0]:
            return None  # function prototype or signature

        items = []
        for part in split_top_level(rest, ','):
            pieces = split_top_level(part, '=')
            name = pieces[0].strip()
            value = '='.join(pieces[1:]).strip() if len(pieces) > 1 else None
            items.append(DeclaredItem(name, type_name, value))
        return type_name, items

    def parse_assignment(self, statement: str) -> Optional[Assignment]:
        match = ASSIGNMENT_RE.match(statement)
        if not match:
            return None
        return Assignment(match.group(1), match.group(2), match.group(3))

    def names_declared_on(self, line: str) -> Set[str]:
        names = set()
        for stmt in self.statements(line, include_unterminated=True):
            parsed = self.parse_declaration(stmt)
            if parsed:
                names.update(item.name for item in parsed[1])
        return names

    def assignment_targets(self, line: str) -> Set[str]:
        targets = set()
        for stmt in self.statements(line, include_unterminated=True):
            assignment = self.parse_assignment(stmt)
            if assignment:
                targets.add(assignment.name)
        return targets

    def apply(self, line: str, line_no: int, symbols: SymbolTable) -> List[Diagnostic]:
        """Register declarations and assignments found on a line"""
        diagnostics: List[Diagnostic] = []
        for stmt in self.statements(line):
            malformed = MALFORMED_DECLARATION_RE.match(stmt)
            if malformed:
                diagnostics.append(line_error(
                    line_no,
                    f"Error - Declaration of '{normalize_type(malformed.group(1))}' without variable name."))
                continue

            parsed = self.parse_declaration(stmt)
            if parsed:
                diagnostics.extend(self._declare(parsed[1], line_no, symbols))
                continue

            assignment = self.parse_assignment(stmt)
            if assignment:
                diagnostics.extend(self._assign(assignment, line_no, symbols))
        return diagnostics

    def _declare(self, items: List[DeclaredItem], line_no: int,
                 symbols: SymbolTable) -> List[Diagnostic]:
        diagnostics = []
        several = len(items) > 1
        for item in items:
            problem = validate_name(item.name, line_no)
            if problem:
                diagnostics.append(problem)
                continue
            if item.value == '':
                # ``int x = ;`` is reported by the empty-initialization rule
                continue

            if symbols.lookup_current_scope(item.name) is not None:
                if self.report_redeclarations:
                    diagnostics.append(line_warning(
                        line_no, f"Variable '{item.name}' is already declared."))
                continue

            if item.initialized and not is_valid_value(item.type, item.value, symbols):
                if several:
                    message = (f"Invalid initialization value for variable "
                               f"'{item.name}' of type {item.type}.")
                else:
                    message = f"Invalid initialization value for type {item.type}."
                diagnostics.append(line_error(line_no, message))

            symbols.declare(item.name, VariableInfo(item.type, item.initialized, line_no))
            logger.debug("Registered variable %s %s (initialized: %s) at line %d",
                         item.type, item.name, item.initialized, line_no)
        return diagnostics

    def _assign(self, assignment: Assignment, line_no: int,
                symbols: SymbolTable) -> List[Diagnostic]:
        info = symbols.lookup(assignment.name)
        if info is None:
            return [line_error(line_no, f"Variable '{assignment.name}' used before declaration.")]

        diagnostics = []
        if assignment.operator != '=' and not info.initialized:
            diagnostics.append(line_error(
                line_no,
                f"Variable '{assignment.name}' used in {assignment.operator} before initialization."))

        info.initialized = True
        if not is_valid_value(info.type, assignment.value, symbols):
            diagnostics.append(line_error(line_no, f"Invalid value for variable of type {info.type}."))
        return diagnostics
