"""Lexical scope chain holding the bindings of the analysed script."""

from __future__ import annotations

from collections.abc import Iterator

from vuedoc.resolved_value import UNRESOLVED, Binding, Unresolved


class Scope:
    """Ordered name-to-binding mapping chained to an enclosing scope."""

    def __init__(self, parent: Scope | None = None) -> None:
        """Create a scope nested in an optional parent scope."""
        self.parent = parent
        self.depth = 0 if parent is None else parent.depth + 1
        self.bindings: dict[str, Binding] = {}

    def bind(self, binding: Binding) -> None:
        """Register a binding, replacing any previous one with the same key."""
        self.bindings[binding.key] = binding

    def lookup(self, name: str) -> Binding | Unresolved:
        """Find the binding of a name, walking outward through the chain."""
        scope: Scope | None = self
        while scope is not None:
            binding = scope.bindings.get(name)
            if binding is not None:
                return binding
            scope = scope.parent
        return UNRESOLVED

    def owner(self, name: str) -> Scope | None:
        """Return the nearest scope that declares a name."""
        scope: Scope | None = self
        while scope is not None:
            if name in scope.bindings:
                return scope
            scope = scope.parent
        return None

    def __contains__(self, name: object) -> bool:
        """Check whether a name is declared in this exact scope."""
        return name in self.bindings

    def __getitem__(self, name: str) -> Binding:
        """Return the binding declared in this exact scope."""
        return self.bindings[name]

    def __iter__(self) -> Iterator[str]:
        """Iterate over the names declared in this exact scope."""
        return iter(self.bindings)
