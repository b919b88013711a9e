import re
from typing import List

from .base import LineRule
from ..core.declarations import mask_literals
from ..core.diagnostics import Diagnostic, line_error
from ..core.symbols import SymbolTable
from ..core.tokens import RESERVED_KEYWORDS

WORD_RE = re.compile(r"\b[A-Za-z_]\w*\b")
CALL_RE = re.compile(r".*\b[A-Za-z_]\w*\s*\(.*")
SIGNATURE_WITH_BODY_RE = re.compile(r".*\)\s*\{.*")
HEADER_RE = re.compile(r"^(if|else|for|while|do|switch)\b")
LABEL_RE = re.compile(r"^(case\b.*|default\s*|[A-Za-z_]\w*\s*):$")


class KeywordCaseRule(LineRule):
    """Reserved words must be written in lowercase (``Int`` -> ``int``)"""

    name = "keyword-case"

    def check(self, line: str, line_no: int, symbols: SymbolTable) -> List[Diagnostic]:
        diagnostics = []
        for match in WORD_RE.finditer(mask_literals(line, fill=' ')):
            word = match.group()
            canonical = word.lower()
            if canonical in RESERVED_KEYWORDS and word != canonical:
                diagnostics.append(line_error(
                    line_no, f"Incorrect keyword format -> '{word}' should be '{canonical}'"))
        return diagnostics


class MissingSemicolonRule(LineRule):
    name = "missing-semicolon"

    def check(self, line: str, line_no: int, symbols: SymbolTable) -> List[Diagnostic]:
        stripped = line.strip()
        if not stripped or stripped.startswith('#'):
            return []

        # function definitions such as "int main() {"
        if SIGNATURE_WITH_BODY_RE.match(stripped) and CALL_RE.match(stripped):
            return []

        if stripped.endswith('{') or stripped.endswith('}'):
            return []
        if HEADER_RE.match(stripped) or LABEL_RE.match(stripped):
            return []
        if stripped.endswith(';'):
            return []

        # declaration header with its brace on the next line
        if stripped.endswith(')'):
            return []

        return [line_error(line_no, "Error - Missing semicolon.")]
