import re
from typing import List, Optional, Tuple

from .base import LineRule
from ..core.declarations import mask_literals
from ..core.diagnostics import Diagnostic, line_error, line_warning
from ..core.symbols import SymbolTable
from ..core.tokens import RESERVED_KEYWORDS

ELSE_RE = re.compile(r"^else\b")
IF_HEADER_RE = re.compile(r"^(?:else\s+)?if\s*\(")
IF_KEYWORD_RE = re.compile(r"^(else\s+)?if\s*")
BARE_ELSE_RE = re.compile(r"^else\s*(\{)?\s*$")
SINGLE_LINE_ELSE_RE = re.compile(r"^else\s+[^;{]+;\s*$")
IF_WITHOUT_PARENS_RE = re.compile(r"^if\s+[^(\s]")
SINGLE_STATEMENT_RE = re.compile(r"^[^;{]+;\s*$")

CONDITION_IDENTIFIER_RE = re.compile(r"(?<![\w.])([A-Za-z_]\w*)\b(?!\s*\()")
MEMBER_ACCESS_RE = re.compile(r"\b([A-Za-z_]\w*)\s*(?:\.|->)\s*[A-Za-z_]\w*")
CONDITION_LITERALS = frozenset({'true', 'false', 'null', 'nullptr'})


def split_condition(line: str) -> Optional[Tuple[str, str]]:
    """Split an ``if``/``else if`` header into (condition, remainder).

    The condition is the text inside the first balanced pair of parentheses.
    Returns None when the line is not a header or the parentheses never
    close.
    """
    keyword = IF_KEYWORD_RE.match(line)
    if not keyword or not line[keyword.end():].startswith('('):
        return None

    masked = mask_literals(line)
    start = keyword.end()
    depth = 0
    for i in range(start, len(masked)):
        if masked[i] == '(':
            depth += 1
        elif masked[i] == ')':
            depth -= 1
            if depth == 0:
                return line[start + 1:i], line[i + 1:].strip()
    return None


class ElseTracker(LineRule):
    """Reports an ``else`` that does not follow a completed ``if`` branch.

    An ``else`` is accepted directly after an ``if``/``else if`` header that
    carries its own single-statement body, after the statement line of a
    brace-less header, or after the ``}`` that closes an ``if`` block.
    Any other line disarms the tracker.
    """

    name = "dangling-else"

    def __init__(self):
        self.reset()

    def reset(self):
        self.depth = 0
        self.if_depths: List[int] = []
        self.expecting_else = False
        self.awaiting_body = False

    def _close_block(self) -> bool:
        closed_if = bool(self.if_depths) and self.if_depths[-1] == self.depth
        if closed_if:
            self.if_depths.pop()
        self.depth = max(0, self.depth - 1)
        return closed_if

    def check(self, line: str, line_no: int, symbols: SymbolTable) -> List[Diagnostic]:
        text = mask_literals(line).strip()
        expecting = self.expecting_else
        awaiting = self.awaiting_body
        self.expecting_else = False
        self.awaiting_body = False

        rest = text
        while rest.startswith('}'):
            expecting = self._close_block()
            rest = rest[1:].lstrip()

        diagnostics = []
        if ELSE_RE.match(rest) and not expecting:
            diagnostics.append(line_error(line_no, "Error - 'else' without matching 'if'."))

        header = IF_HEADER_RE.match(rest) is not None
        opened = closed_own_block = False
        for ch in rest:
            if ch == '{':
                self.depth += 1
                if header and not opened:
                    self.if_depths.append(self.depth)
                    opened = True
            elif ch == '}':
                if self._close_block() and opened:
                    closed_own_block = True

        if header:
            if opened:
                self.expecting_else = closed_own_block
            else:
                parts = split_condition(rest)
                body = parts[1] if parts else ''
                if body:
                    self.expecting_else = True
                else:
                    self.awaiting_body = True
        elif not rest:
            self.expecting_else = expecting
        elif awaiting and not rest.startswith('{'):
            self.expecting_else = True
        return diagnostics


class IfElseStructureRule(LineRule):
    """Shape of ``if``/``else`` headers and the variables their conditions read"""

    name = "if-else-structure"
    main_only = True

    def check(self, line: str, line_no: int, symbols: SymbolTable) -> List[Diagnostic]:
        text = line.strip()
        keyword = IF_KEYWORD_RE.match(text)

        if keyword and IF_HEADER_RE.match(text):
            kind = 'else-if' if keyword.group(1) else 'if'
            parts = split_condition(text)
            if parts is None:
                return [line_error(line_no, f"Syntax error - '{kind}' missing closing parenthesis.")]

            condition, body = parts
            diagnostics = self._check_condition(condition, line_no, symbols)
            if not condition.strip():
                diagnostics.append(line_error(line_no, f"Error - Empty condition in {kind} statement."))
            if '{' not in text and not SINGLE_STATEMENT_RE.match(body):
                diagnostics.append(line_warning(
                    line_no, f"Warning - Missing opening brace in {kind} statement."))
            return diagnostics

        if BARE_ELSE_RE.match(text):
            if '{' not in text:
                return [line_warning(line_no, "Warning - Missing opening brace in else statement.")]
            return []

        if SINGLE_LINE_ELSE_RE.match(text):
            return [line_warning(line_no, "Single-line else statement detected without braces.")]

        if IF_WITHOUT_PARENS_RE.match(text):
            return [line_error(line_no, "Syntax error - 'if' missing parentheses.")]
        return []

    def _check_condition(self, condition: str, line_no: int,
                         symbols: SymbolTable) -> List[Diagnostic]:
        cleaned = mask_literals(condition, fill=' ')
        diagnostics = []
        objects = {m.group(1) for m in MEMBER_ACCESS_RE.finditer(cleaned)}

        checked = set()
        for match in CONDITION_IDENTIFIER_RE.finditer(cleaned):
            name = match.group(1)
            if cleaned[max(0, match.start() - 2):match.start()] == '->':
                continue
            if name in checked or name in RESERVED_KEYWORDS or name in CONDITION_LITERALS:
                continue
            checked.add(name)

            kind = 'object' if name in objects else 'variable'
            info = symbols.lookup(name)
            if info is None:
                diagnostics.append(line_error(
                    line_no, f"Condition uses undeclared {kind} '{name}'."))
            elif not info.initialized:
                diagnostics.append(line_error(
                    line_no, f"Condition uses uninitialized {kind} '{name}'."))
        return diagnostics
