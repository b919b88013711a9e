from contextlib import contextmanager
from enum import Enum
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, Set, Tuple
import logging

from ..utils.colors import Colors, colorize

logger = logging.getLogger(__name__)


class DiagnosticLevel(Enum):
    ERROR = "error"
    WARNING = "warning"


class DiagnosticOrigin(Enum):
    """Where a diagnostic was raised; decides its report prefix"""
    LINE = "line"          # per-line rules: "Line 3: ..."
    PROGRAM = "program"    # whole-program checks: "Error: ..." / "Warning: ..."
    MAIN = "main"          # main body tracking: "Main function line 3: ..."


@dataclass(frozen=True)
class Diagnostic:
    level: DiagnosticLevel
    message: str
    line: Optional[int] = None
    origin: DiagnosticOrigin = DiagnosticOrigin.LINE

    @property
    def is_error(self) -> bool:
        return self.level == DiagnosticLevel.ERROR

    def format(self, with_colors: bool = False) -> str:
        if self.origin == DiagnosticOrigin.LINE:
            text = f"Line {self.line}: {self.message}"
        elif self.origin == DiagnosticOrigin.MAIN:
            text = f"Main function line {self.line}: {self.message}"
        else:
            text = f"{self.level.value.title()}: {self.message}"

        if not with_colors:
            return text
        color = Colors.RED if self.is_error else Colors.YELLOW
        return colorize(text, color)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'level': self.level.value,
            'line': self.line,
            'origin': self.origin.value,
            'message': self.message,
            'text': self.format(),
        }

    def __str__(self):
        return self.format()


def line_error(line_no: int, message: str) -> Diagnostic:
    return Diagnostic(DiagnosticLevel.ERROR, message, line_no)


def line_warning(line_no: int, message: str) -> Diagnostic:
    return Diagnostic(DiagnosticLevel.WARNING, message, line_no)


class DiagnosticEngine:
    """Append-only, order-preserving collection of diagnostics for one run.

    An optional ``sink`` (anything with ``append(str)``) receives each
    formatted line as soon as it is accepted.
    """

    def __init__(self, sink=None, warnings_as_errors: bool = False):
        self.diagnostics: List[Diagnostic] = []
        self.error_count = 0
        self.warning_count = 0
        self.warnings_as_errors = warnings_as_errors
        self.sink = sink
        self._seen: Set[Tuple[DiagnosticLevel, Optional[int], DiagnosticOrigin, str]] = set()
        self._collapse = False

    def report(self, diag: Diagnostic) -> bool:
        key = (diag.level, diag.line, diag.origin, diag.message)
        if self._collapse and key in self._seen:
            logger.debug("Collapsed repeated diagnostic: %s", diag.format())
            return False
        self._seen.add(key)
        self.diagnostics.append(diag)
        if diag.level == DiagnosticLevel.ERROR:
            self.error_count += 1
        else:
            self.warning_count += 1
        if self.sink is not None:
            self.sink.append(diag.format())
        return True

    def extend(self, diags: List[Diagnostic]):
        for diag in diags:
            self.report(diag)

    def error(self, message: str, line: Optional[int] = None,
              origin: DiagnosticOrigin = DiagnosticOrigin.PROGRAM):
        self.report(Diagnostic(DiagnosticLevel.ERROR, message, line, origin))

    def warning(self, message: str, line: Optional[int] = None,
                origin: DiagnosticOrigin = DiagnosticOrigin.PROGRAM):
        self.report(Diagnostic(DiagnosticLevel.WARNING, message, line, origin))

    @contextmanager
    def collapsing(self) -> Iterator["DiagnosticEngine"]:
        """Drop diagnostics identical to ones already reported in this run"""
        previous = self._collapse
        self._collapse = True
        try:
            yield self
        finally:
            self._collapse = previous

    def has_errors(self) -> bool:
        if self.warnings_as_errors:
            return bool(self.diagnostics)
        return self.error_count > 0

    def lines(self) -> List[str]:
        return [diag.format() for diag in self.diagnostics]

    def __len__(self):
        return len(self.diagnostics)

    def __iter__(self):
        return iter(self.diagnostics)
