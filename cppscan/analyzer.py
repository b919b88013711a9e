#!/usr/bin/env python3

"""
Analysis pipeline for the C++ subset checker.

A run strips comments, tokenizes, validates every line against the rule
pipeline, re-validates the body of ``main`` and finally sweeps the symbol
table for variables that were never initialized. Each run owns an
``AnalysisSession`` so nothing carries over between runs.
"""

import os
import time
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set

from .core.comments import CommentStripper
from .core.declarations import DeclarationRecognizer
from .core.diagnostics import Diagnostic, DiagnosticEngine, DiagnosticLevel, DiagnosticOrigin
from .core.lexer import Lexer
from .core.structure import MainFunctionChecker
from .core.symbols import SymbolTable
from .core.tokens import Token
from .errors import SourceReadError, UnterminatedCommentError
from .rules import LineValidator
from .utils.report import (
    SUCCESS_MESSAGE, format_diagnostics, format_symbol_table, format_tokens, render,
    symbols_to_dict,
)

logger = logging.getLogger(__name__)

TRUE_VALUES = ('1', 'true', 'yes', 'on')


def _env_flag(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in TRUE_VALUES


class AnalyzerConfig:
    def __init__(self):
        self.require_main = False
        self.scoped_main = True
        self.report_redeclarations = False
        self.warnings_as_errors = False

    @classmethod
    def from_env(cls) -> "AnalyzerConfig":
        """Defaults overridden by CPPSCAN_* environment variables"""
        config = cls()
        config.require_main = _env_flag('CPPSCAN_REQUIRE_MAIN', config.require_main)
        config.warnings_as_errors = _env_flag('CPPSCAN_WARNINGS_AS_ERRORS', config.warnings_as_errors)
        return config


@dataclass
class AnalysisResult:
    tokens: List[Token]
    symbols: SymbolTable
    diagnostics: List[Diagnostic]
    aborted: bool = False
    warnings_as_errors: bool = False
    elapsed: float = field(default=0.0, compare=False)

    @property
    def error_count(self) -> int:
        return sum(1 for diag in self.diagnostics if diag.level == DiagnosticLevel.ERROR)

    @property
    def warning_count(self) -> int:
        return len(self.diagnostics) - self.error_count

    @property
    def has_errors(self) -> bool:
        if self.warnings_as_errors:
            return bool(self.diagnostics)
        return self.error_count > 0

    @property
    def succeeded(self) -> bool:
        """True when the run raised no diagnostics at all"""
        return not self.diagnostics

    @property
    def token_report(self) -> str:
        return render(format_tokens(self.tokens))

    @property
    def symbol_report(self) -> str:
        return render(format_symbol_table(self.symbols))

    @property
    def diagnostic_report(self) -> str:
        return render(format_diagnostics(self.diagnostics))

    def to_dict(self) -> Dict[str, Any]:
        """JSON-serializable view of the run"""
        return {
            'aborted': self.aborted,
            'succeeded': self.succeeded,
            'verdict': SUCCESS_MESSAGE if self.succeeded else None,
            'errors': self.error_count,
            'warnings': self.warning_count,
            'tokens': [
                {'lexeme': token.lexeme, 'line': token.line, 'category': token.category.value}
                for token in self.tokens
            ],
            'symbols': symbols_to_dict(self.symbols),
            'diagnostics': [diag.to_dict() for diag in self.diagnostics],
        }


class AnalysisSession:
    """State owned by a single analysis run"""

    def __init__(self, config: AnalyzerConfig, diagnostic_sink=None):
        self.config = config
        self.diagnostics = DiagnosticEngine(diagnostic_sink, config.warnings_as_errors)
        self.symbols = SymbolTable()
        self.tokens: List[Token] = []
        self.recognizer = DeclarationRecognizer(config.report_redeclarations)
        self.aborted = False

    def result(self, elapsed: float = 0.0) -> AnalysisResult:
        return AnalysisResult(
            tokens=list(self.tokens),
            symbols=self.symbols,
            diagnostics=list(self.diagnostics),
            aborted=self.aborted,
            warnings_as_errors=self.config.warnings_as_errors,
            elapsed=elapsed,
        )


class SourceAnalyzer:
    """Runs the full pipeline; holds configuration only, never per-run state"""

    def __init__(self, config: Optional[AnalyzerConfig] = None):
        self.config = config or AnalyzerConfig()

    def analyze(self, source: str, token_sink=None, symbol_sink=None,
                diagnostic_sink=None) -> AnalysisResult:
        start = time.perf_counter()
        session = AnalysisSession(self.config, diagnostic_sink)

        # Comment diagnostics are held back so an aborted run reports only the abort
        comment_diagnostics = DiagnosticEngine()
        try:
            stripped = CommentStripper(comment_diagnostics).strip(source)
        except UnterminatedCommentError as e:
            session.aborted = True
            session.diagnostics.error(e.message)
            logger.info("Analysis aborted: %s", e.message)
            return session.result(time.perf_counter() - start)
        session.diagnostics.extend(list(comment_diagnostics))

        for token in Lexer().iter_tokens(stripped):
            session.tokens.append(token)
            if token_sink is not None:
                token_sink.append(token.format())
        logger.debug("Generated %d tokens", len(session.tokens))

        validator = LineValidator(session.symbols, session.diagnostics, session.recognizer)
        checked = validator.validate(stripped)
        logger.debug("Validated %d lines with %d rules", checked, len(validator.rules))

        if symbol_sink is not None:
            for line in format_symbol_table(session.symbols):
                symbol_sink.append(line)

        checker = MainFunctionChecker(session.diagnostics, session.recognizer,
                                      require_main=self.config.require_main,
                                      scoped=self.config.scoped_main)
        settled_in_main = checker.check(stripped, session.symbols)
        self._sweep_uninitialized(session, settled_in_main)

        elapsed = time.perf_counter() - start
        logger.info("Analysis finished in %.3fs: %d tokens, %d symbols, %d errors, %d warnings",
                    elapsed, len(session.tokens), len(session.symbols),
                    session.diagnostics.error_count, session.diagnostics.warning_count)
        return session.result(elapsed)

    @staticmethod
    def _sweep_uninitialized(session: AnalysisSession, skip: Set[str]):
        for name, info in session.symbols:
            if info.initialized or name in skip:
                continue
            session.diagnostics.warning(
                f"Variable '{name}' is declared but never initialized.",
                origin=DiagnosticOrigin.PROGRAM)


analyzer = SourceAnalyzer()


def analyze(source: str, config: Optional[AnalyzerConfig] = None) -> AnalysisResult:
    if config is None:
        return analyzer.analyze(source)
    return SourceAnalyzer(config).analyze(source)


def analyze_file(path: str, config: Optional[AnalyzerConfig] = None) -> AnalysisResult:
    try:
        with open(path, 'r', encoding='utf-8') as f:
            source = f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise SourceReadError(path, str(e)) from e
    logger.debug("Read %d characters from %s", len(source), path)
    return analyze(source, config)
