"""Control Flow Graph (CFG) representation.

This module provides the CFG provider consumed by the dependence analyses:
basic blocks, edges, and a graph of one procedure.

The analyses only need two queries from a CFG, ``nodes()`` and
``successors(node)``. Any object offering them can be analyzed; the nodes
themselves can be any hashable value. ``ControlFlowGraph`` is the concrete
provider used by the command line and by the tests, built either edge by
edge or from a JSON-style mapping::

    {"name": "f",
     "blocks": [{"name": "entry", "successors": ["a", "b"],
                 "instructions": ["br %c, a, b"]},
                ...]}
"""

from typing import Dict, List, NamedTuple, Any

from depcheck.application.errors import PreconditionError


class BasicBlock(object):
    """A basic block of a procedure.

    Blocks compare by identity. The name is only used for rendering and for
    lookups in ``ControlFlowGraph.block``.

    Attributes:
        name: Block label, unique within its procedure.
        instructions: Rendered instructions of the block, in order.
    """
    __slots__ = "name", "instructions"

    def __init__(self, name, instructions=()):
        self.name = name
        self.instructions = list(instructions)

    def render(self):
        """Return the textual contents of the block, one line per instruction."""
        lines = ["%s:" % self.name]
        lines.extend("  %s" % inst for inst in self.instructions)
        return "\n".join(lines)

    def __str__(self):
        return self.name

    def __repr__(self):
        return "BasicBlock(%s)" % self.name


class CFGEdge(NamedTuple):
    """A CFG edge tail -> head."""
    tail: Any
    head: Any

    def __str__(self):
        return "%s -> %s" % (self.tail, self.head)


class ControlFlowGraph(object):
    """The control flow graph of a single procedure.

    Nodes and successor lists keep insertion order, so every traversal of
    the graph is deterministic. Parallel edges are collapsed.

    Attributes:
        name: Procedure name.
    """

    def __init__(self, name=""):
        self.name = name
        self._succ: Dict[Any, List[Any]] = {}
        self._pred: Dict[Any, List[Any]] = {}
        self._blocks: Dict[str, BasicBlock] = {}

    def add_node(self, node):
        """Add a node if it is not present yet and return it."""
        if node not in self._succ:
            self._succ[node] = []
            self._pred[node] = []
            if isinstance(node, BasicBlock):
                if node.name in self._blocks:
                    raise PreconditionError("duplicate block name %r in %r" % (node.name, self.name))
                self._blocks[node.name] = node
        return node

    def add_edge(self, tail, head):
        """Add the edge tail -> head, adding missing nodes."""
        self.add_node(tail)
        self.add_node(head)
        if head not in self._succ[tail]:
            self._succ[tail].append(head)
            self._pred[head].append(tail)

    def _check(self, node):
        if node not in self._succ:
            raise PreconditionError("%r is not a node of %r" % (node, self.name))

    def nodes(self):
        """All nodes, in insertion order."""
        return list(self._succ)

    def successors(self, node):
        self._check(node)
        return list(self._succ[node])

    def predecessors(self, node):
        self._check(node)
        return list(self._pred[node])

    def exits(self):
        """Nodes without successors."""
        return [node for node, succ in self._succ.items() if not succ]

    def edges(self):
        """Iterate over all edges, grouped by tail in node order."""
        for tail, succ in self._succ.items():
            for head in succ:
                yield CFGEdge(tail, head)

    def block(self, name):
        """Look up a BasicBlock by name."""
        try:
            return self._blocks[name]
        except KeyError:
            raise PreconditionError("no block named %r in %r" % (name, self.name)) from None

    @classmethod
    def from_mapping(cls, data):
        """Build a graph of BasicBlocks from a JSON-style mapping.

        Raises:
            PreconditionError: If the mapping is malformed or a successor
                names an undeclared block.
        """
        if not isinstance(data, dict) or not isinstance(data.get("blocks"), list):
            raise PreconditionError("a procedure needs a 'blocks' list")

        cfg = cls(data.get("name", ""))
        for entry in data["blocks"]:
            if not isinstance(entry, dict) or "name" not in entry:
                raise PreconditionError("every block needs a 'name': %r" % (entry,))
            cfg.add_node(BasicBlock(entry["name"], entry.get("instructions", ())))

        for entry in data["blocks"]:
            tail = cfg.block(entry["name"])
            for name in entry.get("successors", ()):
                cfg.add_edge(tail, cfg.block(name))

        return cfg

    def __contains__(self, node):
        return node in self._succ

    def __len__(self):
        return len(self._succ)

    def __repr__(self):
        return "ControlFlowGraph(%s, nodes=%d)" % (self.name, len(self._succ))
