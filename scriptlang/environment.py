from typing import Any, Dict, Optional, Set

from scriptlang.errors import ConstAssignmentError, DuplicateBindingError, UnboundIdentifierError


class Environment:
    """Represents a scope mapping identifiers to values, linked to its enclosing scope."""
    def __init__(self, parent: Optional['Environment'] = None):
        self.parent = parent
        self.values: Dict[str, Any] = {}
        self.consts: Set[str] = set()

    def is_local(self, name: str) -> bool:
        return name in self.values

    def declare(self, name: str, value: Any, is_const: bool = False):
        if name in self.values:
            raise DuplicateBindingError(name)
        self.values[name] = value
        if is_const:
            self.consts.add(name)

    def lookup(self, name: str) -> Any:
        if name in self.values:
            return self.values[name]
        if self.parent is not None:
            return self.parent.lookup(name)
        raise UnboundIdentifierError(name)

    def assign(self, name: str, value: Any):
        # Assignment never creates a binding: it updates the nearest scope that has one
        if name in self.values:
            if name in self.consts:
                raise ConstAssignmentError(name)
            self.values[name] = value
        elif self.parent is not None:
            self.parent.assign(name, value)
        else:
            raise UnboundIdentifierError(name)

    def child(self) -> 'Environment':
        return Environment(parent=self)

    def __repr__(self) -> str:
        depth = 0
        scope = self.parent
        while scope is not None:
            depth += 1
            scope = scope.parent
        return f"<Environment depth={depth} names={sorted(self.values)}>"
