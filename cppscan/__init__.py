"""cppscan - heuristic lexical and syntax checker for a small C++ subset"""

__version__ = "1.0.0"

from .analyzer import (
    AnalysisResult, AnalysisSession, AnalyzerConfig, SourceAnalyzer, analyze, analyze_file,
)
from .errors import CppScanError, SourceReadError, UnterminatedCommentError

__all__ = [
    'AnalysisResult', 'AnalysisSession', 'AnalyzerConfig', 'SourceAnalyzer',
    'analyze', 'analyze_file',
    'CppScanError', 'SourceReadError', 'UnterminatedCommentError',
    '__version__',
]
