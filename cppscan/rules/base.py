from abc import ABC, abstractmethod
from typing import List

from ..core.diagnostics import Diagnostic
from ..core.symbols import SymbolTable


class LineRule(ABC):
    """One per-line heuristic.

    Rules receive the trimmed, comment-free line and the symbol table of the
    pass that runs them and return the diagnostics they raise. Rules that
    keep state between lines override ``reset``.
    """

    name = "rule"
    # Only run while re-scanning the body of main
    main_only = False
    # When this rule reports anything, later rules skip the line
    breaks_circuit = False

    @abstractmethod
    def check(self, line: str, line_no: int, symbols: SymbolTable) -> List[Diagnostic]:
        pass

    def reset(self):
        """Forget state carried over from previous lines"""

    def __repr__(self):
        return f"<{type(self).__name__} {self.name}>"
