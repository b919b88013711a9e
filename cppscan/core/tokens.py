from enum import Enum
from dataclasses import dataclass

class TokenCategory(Enum):
    # Keywords
    DECLARATION = "DECLARATION"
    CONDITIONAL = "CONDITIONAL"
    LOOP = "LOOP"
    CONTROL = "CONTROL"

    # Operators
    RELATIONAL_OPERATOR = "RELATIONAL_OPERATOR"
    ARITHMETIC_OPERATOR = "ARITHMETIC_OPERATOR"
    ASSIGNMENT_OPERATOR = "ASSIGNMENT_OPERATOR"
    LOGICAL_OPERATOR = "LOGICAL_OPERATOR"
    OPERATOR = "OPERATOR"

    # Literals
    NUMBER = "NUMBER"
    CHAR_LITERAL = "CHAR_LITERAL"
    STRING_LITERAL = "STRING_LITERAL"

    IDENTIFIER = "IDENTIFIER"
    SEPARATOR = "SEPARATOR"
    UNKNOWN = "UNKNOWN"


# Keyword subsets, consulted first when categorizing a lexeme
DECLARATION_KEYWORDS = frozenset({
    'int', 'float', 'double', 'char', 'string', 'void',
    'bool', 'long', 'short', 'unsigned',
})
CONDITIONAL_KEYWORDS = frozenset({'if', 'else'})
LOOP_KEYWORDS = frozenset({'for', 'while', 'do'})
CONTROL_KEYWORDS = frozenset({'break', 'continue', 'return'})

KEYWORD_CATEGORIES = (
    (DECLARATION_KEYWORDS, TokenCategory.DECLARATION),
    (CONDITIONAL_KEYWORDS, TokenCategory.CONDITIONAL),
    (LOOP_KEYWORDS, TokenCategory.LOOP),
    (CONTROL_KEYWORDS, TokenCategory.CONTROL),
)

OPERATOR_CHARS = "+-*/%<>=!&|"
RELATIONAL_OPERATORS = frozenset({'==', '!=', '<', '>', '<=', '>='})
ARITHMETIC_OPERATORS = frozenset({'+', '-', '*', '/', '%'})
ASSIGNMENT_OPERATORS = frozenset({'='})
LOGICAL_OPERATORS = frozenset({'&&', '||'})

SEPARATORS = frozenset('{}();,')

# Reserved words of the analyzed C++ subset. Used by keyword-case checks,
# name validation and the undeclared-identifier rule.
RESERVED_KEYWORDS = frozenset({
    'int', 'float', 'double', 'char', 'bool', 'if', 'else', 'long', 'short',
    'unsigned', 'true', 'false', 'string', 'for', 'while', 'do', 'switch',
    'case', 'break', 'continue', 'return', 'void', 'struct', 'class', 'const',
    'static', 'enum', 'namespace', 'using', 'try', 'catch', 'throw',
})


@dataclass(frozen=True)
class Token:
    lexeme: str
    line: int
    category: TokenCategory

    def format(self) -> str:
        return f"[{self.category.value}]: {self.lexeme} (Line {self.line})"

    def __str__(self):
        return self.format()
