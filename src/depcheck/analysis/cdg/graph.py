"""
Control Dependence Graph data structures.

This module defines the store holding the result of control dependence
construction.

**Control Dependence Direction:**
Entries map a controller to its dependents:
- If node A controls node B, B is in ``cdg.dependents(A)``
- A node's dependents are the nodes whose execution its branch decides
- A node's controllers are the nodes it is control dependent on

A loop header that decides whether it is evaluated again is its own
dependent.

The graph is filled insert-only by the constructor and frozen before it is
handed out; after that it can only be queried.
"""

from typing import Any, Dict, FrozenSet, Iterator, List, Set, Tuple

from depcheck.application.errors import FrozenGraphError


class ControlDependenceGraph:
    """
    Mapping from control nodes to the nodes they control.

    Tails are kept in first-insertion order, so enumeration is stable for a
    given construction.

    Attributes:
        name: Name of the analyzed procedure
        frozen: Whether the graph still accepts insertions
    """

    def __init__(self, name: str = ""):
        self.name = name
        self.frozen = False
        self._deps: Dict[Any, Set[Any]] = {}

    def insert(self, tail, node):
        """
        Make node control dependent on tail.

        Inserting an existing pair has no effect.

        Raises:
            FrozenGraphError: If the graph was already frozen
        """
        if self.frozen:
            raise FrozenGraphError("control dependence graph %r is read-only" % self.name)
        self._deps.setdefault(tail, set()).add(node)

    def freeze(self):
        """Reject any further insertion."""
        self.frozen = True

    def dependents(self, tail) -> FrozenSet[Any]:
        """
        Get the nodes control dependent on tail.

        Returns:
            A frozenset, empty if tail controls nothing or is unknown
        """
        return frozenset(self._deps.get(tail, ()))

    def controllers(self, node) -> Set[Any]:
        """Get the nodes that node is control dependent on."""
        return {tail for tail, deps in self._deps.items() if node in deps}

    def is_control_dependent(self, dependent, controller) -> bool:
        """Check if dependent is control dependent on controller."""
        return dependent in self._deps.get(controller, ())

    def items(self) -> Iterator[Tuple[Any, FrozenSet[Any]]]:
        """Iterate over (tail, dependents) pairs."""
        for tail, deps in self._deps.items():
            yield tail, frozenset(deps)

    def edges(self) -> Iterator[Tuple[Any, Any]]:
        """Iterate over (tail, dependent) pairs."""
        for tail, deps in self._deps.items():
            for dep in deps:
                yield tail, dep

    def nodes(self) -> List[Any]:
        """
        Get every node taking part in a dependence.

        Each node appears once, ordered by first reference (a tail before its
        dependents).
        """
        seen = {}
        for tail, deps in self._deps.items():
            seen.setdefault(tail, None)
            for dep in deps:
                seen.setdefault(dep, None)
        return list(seen)

    def as_dict(self) -> Dict[Any, FrozenSet[Any]]:
        return dict(self.items())

    def get_statistics(self) -> Dict[str, Any]:
        """
        Get statistics about the CDG.

        Returns:
            Dictionary containing:
            - controllers: Number of nodes with at least one dependent
            - total_nodes: Number of distinct nodes referenced
            - total_edges: Number of (tail, dependent) pairs
            - self_dependent: Number of nodes control dependent on themselves
        """
        return {
            'controllers': len(self._deps),
            'total_nodes': len(self.nodes()),
            'total_edges': sum(len(deps) for deps in self._deps.values()),
            'self_dependent': sum(1 for tail, deps in self._deps.items() if tail in deps),
        }

    def __len__(self):
        return len(self._deps)

    def __iter__(self):
        return iter(self._deps)

    def __contains__(self, tail):
        return tail in self._deps

    def __eq__(self, other):
        if not isinstance(other, ControlDependenceGraph):
            return NotImplemented
        return self._deps == other._deps

    __hash__ = None

    def __repr__(self):
        stats = self.get_statistics()
        return f"ControlDependenceGraph({self.name!r}, controllers={stats['controllers']}, edges={stats['total_edges']})"
