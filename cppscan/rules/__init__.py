"""
Per-line heuristics and the validator that runs them.

Rules run in a fixed order on every non-empty line. A rule marked
``breaks_circuit`` that reports anything stops the remaining rules for that
line only.
"""

import logging
from typing import Iterator, List, Optional, Tuple

from .base import LineRule
from .conditionals import ElseTracker, IfElseStructureRule
from .declarations import (
    DeclarationRule, EmptyInitializationRule, MultipleDataTypesRule, NestedAssignmentRule,
)
from .identifiers import StringArithmeticRule, UndeclaredIdentifierRule
from .lexical import KeywordCaseRule, MissingSemicolonRule
from .operators import ProblematicOperatorRule
from .syntax import StrayCharacterRule
from ..core.declarations import DeclarationRecognizer
from ..core.diagnostics import Diagnostic, DiagnosticEngine
from ..core.symbols import SymbolTable

logger = logging.getLogger(__name__)

__all__ = [
    'LineRule', 'LineValidator', 'default_rules', 'prepare_lines',
    'ElseTracker', 'IfElseStructureRule', 'DeclarationRule', 'EmptyInitializationRule',
    'MultipleDataTypesRule', 'NestedAssignmentRule', 'StringArithmeticRule',
    'UndeclaredIdentifierRule', 'KeywordCaseRule', 'MissingSemicolonRule',
    'ProblematicOperatorRule', 'StrayCharacterRule',
]


def default_rules(recognizer: DeclarationRecognizer) -> List[LineRule]:
    """Fresh rule instances in pipeline order"""
    return [
        MultipleDataTypesRule(),
        StringArithmeticRule(),
        ElseTracker(),
        KeywordCaseRule(),
        MissingSemicolonRule(),
        EmptyInitializationRule(),
        UndeclaredIdentifierRule(recognizer),
        DeclarationRule(recognizer),
        # main body only
        NestedAssignmentRule(recognizer),
        ProblematicOperatorRule(),
        StrayCharacterRule(),
        IfElseStructureRule(),
    ]


def prepare_lines(text: str, first_line: int = 1) -> Iterator[Tuple[int, str]]:
    """Yield (line number, trimmed line) for every non-blank line"""
    for offset, raw in enumerate(text.split('\n')):
        trimmed = raw.strip()
        if trimmed:
            yield first_line + offset, trimmed


class LineValidator:
    """Runs the rule pipeline over lines, feeding one symbol table"""

    def __init__(self, symbols: SymbolTable, diagnostics: DiagnosticEngine,
                 recognizer: DeclarationRecognizer, main_body: bool = False,
                 rules: Optional[List[LineRule]] = None):
        self.symbols = symbols
        self.diagnostics = diagnostics
        self.main_body = main_body
        all_rules = rules if rules is not None else default_rules(recognizer)
        self.rules = [rule for rule in all_rules if main_body or not rule.main_only]
        logger.debug("Line validator ready with %d rules (main body: %s)",
                     len(self.rules), main_body)

    def validate_line(self, line: str, line_no: int) -> List[Diagnostic]:
        found: List[Diagnostic] = []
        for rule in self.rules:
            result = rule.check(line, line_no, self.symbols)
            found.extend(result)
            if result and rule.breaks_circuit:
                logger.debug("Line %d: %s stopped the remaining rules", line_no, rule.name)
                break
        self.diagnostics.extend(found)
        return found

    def validate(self, text: str, first_line: int = 1) -> int:
        """Validate every line of text; returns the number of lines checked"""
        for rule in self.rules:
            rule.reset()
        checked = 0
        for line_no, line in prepare_lines(text, first_line):
            self.validate_line(line, line_no)
            checked += 1
        return checked
