# env.py
"""Variable environment for the evaluator."""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from runtime.errors import NonexistentVarError
from runtime.matrix import Matrix
from runtime.values import RuntimeVal


@dataclass
class Env:
    """Mapping from variable names to their current values.

    Supports optional parent-pointer scope chains. get() walks the chain;
    set() writes to local scope only. The evaluator runs each statement in a
    child scope and commits it into the parent only when the statement
    succeeds.
    """
    bindings: Dict[str, RuntimeVal] = field(default_factory=dict)
    parent: Optional[Env] = None

    def copy(self) -> Env:
        """Shallow copy of local scope, sharing the same parent."""
        return Env(bindings=self.bindings.copy(), parent=self.parent)

    def lookup(self, name: str) -> Optional[RuntimeVal]:
        """Value bound to name anywhere in the scope chain, or None."""
        if name in self.bindings:
            return self.bindings[name]
        if self.parent is not None:
            return self.parent.lookup(name)
        return None

    def get(self, name: str) -> RuntimeVal:
        """Value bound to name.

        Raises:
            NonexistentVarError: if the name is not bound
        """
        value = self.lookup(name)
        if value is None:
            raise NonexistentVarError(name)
        return value

    def set(self, name: str, value: RuntimeVal) -> None:
        """Bind in local scope. Matrices are copied so bindings never alias."""
        if isinstance(value, Matrix):
            value = value.copy()
        self.bindings[name] = value

    def has_local(self, name: str) -> bool:
        return name in self.bindings

    def __contains__(self, name: str) -> bool:
        """Check if name is bound anywhere in the scope chain."""
        if name in self.bindings:
            return True
        return self.parent is not None and name in self.parent

    def names(self) -> List[str]:
        """All visible names, sorted."""
        seen = set(self.bindings)
        if self.parent is not None:
            seen.update(self.parent.names())
        return sorted(seen)

    def push_scope(self) -> Env:
        """Create a child scope with this env as parent."""
        return Env(parent=self)

    def commit(self, child: Env) -> None:
        """Publish a child scope's local bindings into this scope."""
        assert child.parent is self, "can only commit a direct child scope"
        self.bindings.update(child.bindings)
        child.bindings = {}

    def __repr__(self) -> str:
        parts = [f"{var_name}: {value!r}" for var_name, value in self.bindings.items()]
        return "Env{" + ", ".join(parts) + "}"
