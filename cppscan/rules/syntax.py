#!/usr/bin/env python3

"""
Stray-character heuristics for the body of main.

Every punctuation character the checker knows about is listed in
CHARACTER_ROLES together with the syntactic roles it may legally play.
Characters whose role depends on context have a detector in ROLE_DETECTORS
that reports the roles an occurrence actually plays; an occurrence is
flagged when none of them is allowed. A character with an empty role set is
never valid outside literals.
"""

import re
from typing import Callable, Dict, FrozenSet, List, Set

from .base import LineRule
from ..core.declarations import mask_literals
from ..core.diagnostics import Diagnostic, line_error
from ..core.symbols import SymbolTable

CHARACTER_ROLES: Dict[str, FrozenSet[str]] = {
    '!': frozenset({'operator', 'conditional'}),
    '@': frozenset(),
    '#': frozenset({'preprocessor', 'stringizing'}),
    '$': frozenset(),
    '`': frozenset(),
    '%': frozenset({'operator', 'formatstring'}),
    '^': frozenset({'operator'}),
    '&': frozenset({'operator', 'reference', 'address'}),
    '*': frozenset({'operator', 'pointer', 'dereference', 'multiplication'}),
    '(': frozenset({'grouping', 'call', 'precedence'}),
    ')': frozenset({'grouping', 'call', 'precedence'}),
    '_': frozenset({'identifier'}),
    '+': frozenset({'operator', 'addition', 'increment'}),
    '-': frozenset({'operator', 'subtraction', 'decrement', 'negative'}),
    '=': frozenset({'assignment', 'comparison', 'initialization'}),
    ':': frozenset({'label', 'scope', 'ternary', 'foreach'}),
    ';': frozenset({'statement_end'}),
    '{': frozenset({'block_start'}),
    '}': frozenset({'block_end'}),
    '[': frozenset({'array'}),
    ']': frozenset({'array'}),
    '<': frozenset({'comparison', 'template', 'stream'}),
    '>': frozenset({'comparison', 'template', 'stream'}),
    '?': frozenset({'ternary'}),
    ',': frozenset({'separator'}),
    '.': frozenset({'member', 'decimal'}),
    '/': frozenset({'operator', 'division', 'comment'}),
    '\\': frozenset({'escape', 'line_continuation'}),
    '|': frozenset({'operator', 'bitwise'}),
    '~': frozenset({'operator', 'destructor', 'bitwise'}),
}

CHARACTER_MESSAGES: Dict[str, str] = {
    '@': "Unexpected '@' symbol detected. This is not standard C++ syntax.",
    '$': "Unexpected '$' symbol detected. This is not standard C++ syntax.",
    '`': "Unexpected '`' symbol detected. This is not standard C++ syntax.",
    ':': "Unexpected colon detected. Check syntax.",
    '!': "Unexpected '!' symbol in this context. Check syntax.",
    '#': "Unexpected '#' symbol outside preprocessor directive. Check syntax.",
}

FOR_RANGE_RE = re.compile(r"\bfor\s*\(.*:.*\)")
LABEL_RE = re.compile(r"^\s*(case\b.*|default\s*|[A-Za-z_]\w*\s*):\s*$")
DEFINE_RE = re.compile(r"^\s*#\s*define\b")

STRAY_PUNCTUATION_RE = re.compile(
    r"(?<![\"'\w\s\\)\]])"
    r"([!#%^&*\[\]|~]|(?<!\+)\+(?!\+)|(?<!-)-(?!-))"
    r"(?![\"'\w\s\\(])"
)
REPEATED_SPECIAL_RE = re.compile(r"(?<![=<>!&|+-])([#%^&*+-])\1{2,}(?![=<>!&|+-])")


def _not_roles(line: str, i: int) -> Set[str]:
    following = line[i + 1] if i + 1 < len(line) else ''
    if following == '=':
        return {'operator'}
    if following.isalnum() or following in ('(', ' ', '_', '!'):
        return {'conditional'}
    return set()


def _hash_roles(line: str, i: int) -> Set[str]:
    if line.lstrip().startswith('#') and i == line.index('#'):
        return {'preprocessor'}
    if DEFINE_RE.match(line):
        return {'stringizing'}
    return set()


def _colon_roles(line: str, i: int) -> Set[str]:
    roles = set()
    if line[i - 1:i] == ':' or line[i + 1:i + 2] == ':':
        roles.add('scope')
    if '?' in line[:i]:
        roles.add('ternary')
    if FOR_RANGE_RE.search(line):
        roles.add('foreach')
    if LABEL_RE.match(line):
        roles.add('label')
    return roles


ROLE_DETECTORS: Dict[str, Callable[[str, int], Set[str]]] = {
    '!': _not_roles,
    '#': _hash_roles,
    ':': _colon_roles,
}


class StrayCharacterRule(LineRule):
    """Characters that are out of place outside string and char literals"""

    name = "stray-characters"
    main_only = True

    def check(self, line: str, line_no: int, symbols: SymbolTable) -> List[Diagnostic]:
        text = mask_literals(line)
        diagnostics = []
        flagged = set()

        for i, ch in enumerate(text):
            if ch not in CHARACTER_ROLES or ch in flagged:
                continue
            allowed = CHARACTER_ROLES[ch]
            detector = ROLE_DETECTORS.get(ch)
            observed = detector(text, i) if detector else set(allowed)
            if not observed & allowed:
                flagged.add(ch)
                message = CHARACTER_MESSAGES.get(
                    ch, f"Unexpected '{ch}' symbol in this context. Check syntax.")
                diagnostics.append(line_error(line_no, message))

        stray = STRAY_PUNCTUATION_RE.search(text)
        if stray:
            diagnostics.append(line_error(
                line_no, f"Unexpected stray character '{stray.group(1)}' detected. Check syntax."))

        repeated = REPEATED_SPECIAL_RE.search(text)
        if repeated:
            diagnostics.append(line_error(
                line_no,
                f"Invalid sequence of special characters '{repeated.group(0)}' detected. Check syntax."))

        return diagnostics
