"""Core package re-exports for cppscan"""
from .tokens import Token, TokenCategory
from .diagnostics import (
    Diagnostic, DiagnosticEngine, DiagnosticLevel, DiagnosticOrigin, line_error, line_warning,
)
from .symbols import SymbolTable, VariableInfo
from .comments import CommentStripper
from .lexer import Lexer
from .declarations import DeclarationRecognizer

__all__ = [
    'Token', 'TokenCategory',
    'Diagnostic', 'DiagnosticEngine', 'DiagnosticLevel', 'DiagnosticOrigin',
    'line_error', 'line_warning',
    'SymbolTable', 'VariableInfo',
    'CommentStripper', 'Lexer', 'DeclarationRecognizer',
]
