import re
from typing import Dict, FrozenSet, Optional

from .symbols import SymbolTable

# Declared-type vocabulary, longest spelling first so "long long" wins over "long"
DECLARED_TYPES = (
    'unsigned short', 'unsigned long', 'unsigned int', 'long long',
    'int', 'float', 'double', 'char', 'bool', 'long', 'short', 'string',
)
DECLARED_TYPE_PATTERN = '|'.join(t.replace(' ', r'\s+') for t in DECLARED_TYPES)

INTEGRAL_TYPES = frozenset({
    'int', 'long', 'short', 'long long',
    'unsigned int', 'unsigned short', 'unsigned long',
})
NUMERIC_TYPES = INTEGRAL_TYPES | {'float', 'double'}

# Types accepted by ++ / --
STEPPABLE_TYPES = NUMERIC_TYPES

_INT_RE = re.compile(r"-?\d+")
_LONG_LONG_RE = re.compile(r"-?\d+[lL]?")
_FLOAT_RE = re.compile(r"-?\d+(\.\d+)?([eE][+-]?\d+)?[fF]?")
_CHAR_RE = re.compile(r"'.'")
_STRING_RE = re.compile(r'".*"')
_NUMERIC_LITERAL_RE = re.compile(r"-?\d+(\.\d+)?")

ARITHMETIC_CHARS = "+-*/%"

# target type -> source variable types it accepts besides itself
_WIDENING: Dict[str, FrozenSet[str]] = {
    'double': frozenset({'int', 'float', 'long', 'short', 'long long', 'unsigned int',
                         'unsigned short', 'unsigned long'}),
    'float': frozenset({'int', 'short', 'long', 'unsigned int', 'unsigned short'}),
    'long long': frozenset({'int', 'short', 'long', 'unsigned int', 'unsigned short'}),
    'long': frozenset({'int', 'short', 'unsigned int', 'unsigned short'}),
    'unsigned long': frozenset({'int', 'short', 'unsigned int', 'unsigned short'}),
    'int': frozenset({'short'}),
    'unsigned int': frozenset({'short', 'unsigned short'}),
    'bool': INTEGRAL_TYPES,
    'string': frozenset({'char'}),
}


def normalize_type(name: str) -> str:
    """Collapse internal whitespace: 'long   long' -> 'long long'"""
    return ' '.join(name.split())


def is_numeric_type(type_name: Optional[str]) -> bool:
    return type_name in NUMERIC_TYPES


def is_numeric_literal(value: str) -> bool:
    return bool(_NUMERIC_LITERAL_RE.fullmatch(value))


def is_type_compatible(target_type: str, source_type: str) -> bool:
    """Whether a variable of source_type may initialize target_type.

    Numeric values never convert to string.
    """
    if target_type == source_type:
        return True
    if target_type == 'string' and source_type in NUMERIC_TYPES | {'bool'}:
        return False
    return source_type in _WIDENING.get(target_type, frozenset())


def is_valid_value(type_name: str, value: str, symbols: SymbolTable) -> bool:
    """Check an initializer or assigned value against a declared type.

    The checker does not evaluate expressions: any value containing an
    arithmetic operator is accepted.
    """
    value = value.strip()
    if not value:
        return False

    info = symbols.lookup(value)
    if info is not None:
        if not info.initialized:
            return False
        return is_type_compatible(type_name, info.type)

    if any(op in value for op in ARITHMETIC_CHARS):
        return True

    if type_name == 'bool' and value in ('true', 'false'):
        return True

    if type_name in ('int', 'long', 'short', 'unsigned int', 'unsigned short', 'unsigned long'):
        return bool(_INT_RE.fullmatch(value))
    if type_name == 'long long':
        return bool(_LONG_LONG_RE.fullmatch(value))
    if type_name in ('float', 'double'):
        return bool(_FLOAT_RE.fullmatch(value))
    if type_name == 'char':
        return bool(_CHAR_RE.fullmatch(value))
    if type_name == 'bool':
        return value in ('true', 'false', '0', '1')
    if type_name == 'string':
        return bool(_STRING_RE.fullmatch(value))
    return False
