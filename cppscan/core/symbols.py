from dataclasses import dataclass, replace
from typing import Dict, Iterator, List, Optional, Tuple


@dataclass
class VariableInfo:
    """Declared type and initialization state of one identifier"""
    type: str
    initialized: bool = False
    line: int = 0  # declaring line, 0 when unknown

    def copy(self) -> "VariableInfo":
        return replace(self)


class SymbolTable:
    """Run-scoped symbol table with lexical scoping"""

    def __init__(self):
        self.scopes: List[Dict[str, VariableInfo]] = [{}]  # Stack of scopes
        self.current_scope_level = 0
        self.global_scope = self.scopes[0]

    def enter_scope(self):
        """Enter a new lexical scope"""
        self.current_scope_level += 1
        self.scopes.append({})

    def exit_scope(self):
        """Exit current scope"""
        if self.current_scope_level > 0:
            self.scopes.pop()
            self.current_scope_level -= 1

    def declare(self, name: str, info: VariableInfo) -> bool:
        """Register a name in the current scope; False if already there"""
        current = self.scopes[self.current_scope_level]
        if name in current:
            return False
        current[name] = info
        return True

    def lookup(self, name: str) -> Optional[VariableInfo]:
        """Lookup a name in all visible scopes"""
        for scope in reversed(self.scopes):
            if name in scope:
                return scope[name]
        return None

    def lookup_current_scope(self, name: str) -> Optional[VariableInfo]:
        return self.scopes[self.current_scope_level].get(name)

    def mark_initialized(self, name: str) -> bool:
        info = self.lookup(name)
        if info is None:
            return False
        info.initialized = True
        return True

    def current_scope_items(self) -> List[Tuple[str, VariableInfo]]:
        return list(self.scopes[self.current_scope_level].items())

    def uninitialized(self) -> List[str]:
        """Names in the current scope that were never initialized"""
        return [name for name, info in self.current_scope_items() if not info.initialized]

    def __contains__(self, name: str) -> bool:
        return self.lookup(name) is not None

    def __len__(self):
        return len(self.global_scope)

    def __iter__(self) -> Iterator[Tuple[str, VariableInfo]]:
        """Global scope entries in insertion order"""
        return iter(list(self.global_scope.items()))
