#!/usr/bin/env python3
from typing import Optional


class CppScanError(Exception):
    """Base class for cppscan errors"""

    def __init__(self, message: str, line: int = 0, context: str = ""):
        self.message = message
        self.line = line
        self.context = context
        super().__init__(self._format_error())

    def _format_error(self) -> str:
        """Format error message with context"""
        if self.line > 0:
            if self.context:
                return f"Error at line {self.line}: {self.message}\n  {self.context}"
            return f"Error at line {self.line}: {self.message}"
        return f"Error: {self.message}"


class UnterminatedCommentError(CppScanError):
    """Raised by the comment stripper when a block comment never closes.

    The analyzer catches it and turns it into the single diagnostic of an
    aborted run; it never escapes to callers of ``analyze``.
    """

    def __init__(self, start_line: int):
        self.start_line = start_line
        super().__init__(f"Unterminated multi-line comment starting at line {start_line}")

    def _format_error(self) -> str:
        return f"Error: {self.message}"


class SourceReadError(CppScanError):
    """Source file could not be read"""

    def __init__(self, path: str, reason: Optional[str] = None):
        self.path = path
        message = f"Cannot read source file '{path}'"
        if reason:
            message += f": {reason}"
        super().__init__(message)
