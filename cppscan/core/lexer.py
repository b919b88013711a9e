import re
import logging
from typing import Iterator, List

from .tokens import (
    Token, TokenCategory, KEYWORD_CATEGORIES, OPERATOR_CHARS,
    RELATIONAL_OPERATORS, ARITHMETIC_OPERATORS, ASSIGNMENT_OPERATORS,
    LOGICAL_OPERATORS, SEPARATORS,
)

logger = logging.getLogger(__name__)


_KEYWORD_ALTERNATION = '|'.join(
    sorted((kw for subset, _ in KEYWORD_CATEGORIES for kw in subset), key=len, reverse=True)
)
_OPS = re.escape(OPERATOR_CHARS)

# Alternatives are tried left to right at each position
TOKEN_PATTERN = re.compile(
    rf"\b(?:{_KEYWORD_ALTERNATION})\b"
    rf"|[{_OPS}]{{1,2}}"
    r"|\d+(?:\.\d+)?"
    r"|'[^'\n]'"
    r'|"[^"\n]*"'
    r"|[A-Za-z_][A-Za-z0-9_]*"
    r"|[{}();,]"
    r"|\n"
    rf"|[^\s\w{_OPS}{{}}();,'\"]+"
    r"|\S"
)

NUMBER_RE = re.compile(r"\d+(?:\.\d+)?")
CHAR_LITERAL_RE = re.compile(r"'[^'\n]'")
STRING_LITERAL_RE = re.compile(r'"[^"\n]*"')
IDENTIFIER_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
OPERATOR_CLUSTER_RE = re.compile(rf"[{_OPS}]{{1,2}}")


def categorize(lexeme: str) -> TokenCategory:
    """Classify a lexeme using the fixed decision order"""
    for subset, category in KEYWORD_CATEGORIES:
        if lexeme in subset:
            return category

    if OPERATOR_CLUSTER_RE.fullmatch(lexeme):
        if lexeme in RELATIONAL_OPERATORS:
            return TokenCategory.RELATIONAL_OPERATOR
        if lexeme in ARITHMETIC_OPERATORS:
            return TokenCategory.ARITHMETIC_OPERATOR
        if lexeme in ASSIGNMENT_OPERATORS:
            return TokenCategory.ASSIGNMENT_OPERATOR
        if lexeme in LOGICAL_OPERATORS:
            return TokenCategory.LOGICAL_OPERATOR
        return TokenCategory.OPERATOR

    if NUMBER_RE.fullmatch(lexeme):
        return TokenCategory.NUMBER
    if CHAR_LITERAL_RE.fullmatch(lexeme):
        return TokenCategory.CHAR_LITERAL
    if STRING_LITERAL_RE.fullmatch(lexeme):
        return TokenCategory.STRING_LITERAL
    if IDENTIFIER_RE.fullmatch(lexeme):
        return TokenCategory.IDENTIFIER
    if lexeme in SEPARATORS:
        return TokenCategory.SEPARATOR
    return TokenCategory.UNKNOWN


class Lexer:
    """Regex-driven scanner for comment-free C++ subset source"""

    def iter_tokens(self, text: str) -> Iterator[Token]:
        """Yield tokens lazily in source order.

        Newlines only advance the line counter; other whitespace separates
        tokens and produces nothing.
        """
        line = 1
        for match in TOKEN_PATTERN.finditer(text):
            lexeme = match.group()
            if lexeme == '\n':
                line += 1
                continue
            yield Token(lexeme, line, categorize(lexeme))

    def tokenize(self, text: str) -> List[Token]:
        tokens = list(self.iter_tokens(text))
        logger.debug("Generated %d tokens", len(tokens))
        return tokens
