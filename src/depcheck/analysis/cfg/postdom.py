"""Post-dominance analysis for control flow graphs.

This module provides the post-dominance oracle used by control dependence
construction, and a builder computing it from a CFG.

- Node Y post-dominates X if every path from X to the procedure exit passes
  through Y; Y properly post-dominates X if additionally Y != X.
- The immediate post-dominator of X is its closest proper post-dominator.
  Immediate post-dominators form a tree, rooted at the exit.

``PostDominatorTree`` is immutable after construction. Nodes are stored in an
arena: each node gets an index, and parent links and depths are plain lists
indexed by it, so queries never touch the caller's node objects beyond one
dictionary lookup. The structure may be a forest: a node whose immediate
post-dominator is None is a root.
"""

import logging

from depcheck.application.errors import PreconditionError
from depcheck.util.graphalgorithim import dominator

LOG = logging.getLogger(__name__)


class VirtualExit(object):
    """Sentinel root joining the exits of a multi-exit procedure."""
    __slots__ = ()

    def __str__(self):
        return "VirtualExit"

    def __repr__(self):
        return "<virtual exit>"


VIRTUAL_EXIT = VirtualExit()


class PostDominatorTree(object):
    """Read-only post-dominator tree (or forest) over a fixed node set.

    Attributes:
        virtual_exit: The sentinel root, if the tree was normalized with one.
    """

    def __init__(self, idoms, virtual_exit=None):
        """
        Args:
            idoms: Mapping from every node to its immediate post-dominator,
                None for roots. Parents must be keys of the mapping too.
            virtual_exit: Sentinel root added by normalization, if any.

        Raises:
            PreconditionError: If a parent is not a node of the mapping or
                the parent links contain a cycle.
        """
        self.virtual_exit = virtual_exit

        self._index = {}
        self._nodes = []
        for node in idoms:
            self._index[node] = len(self._nodes)
            self._nodes.append(node)

        count = len(self._nodes)
        self._parent = [-1] * count
        self._children = [[] for _ in range(count)]
        for node, parent in idoms.items():
            if parent is None:
                continue
            if parent not in self._index:
                raise PreconditionError("parent %r of %r is not in the tree" % (parent, node))
            i = self._index[node]
            p = self._index[parent]
            self._parent[i] = p
            self._children[p].append(i)

        self._depth = [None] * count
        for i in range(count):
            path = []
            onPath = set()
            j = i
            while j != -1 and self._depth[j] is None:
                if j in onPath:
                    raise PreconditionError("cycle in post-dominator links at %r" % (self._nodes[j],))
                onPath.add(j)
                path.append(j)
                j = self._parent[j]

            level = -1 if j == -1 else self._depth[j]
            for k in reversed(path):
                level += 1
                self._depth[k] = level

    def _lookup(self, node):
        try:
            return self._index[node]
        except KeyError:
            raise PreconditionError("%r is not in the post-dominator tree" % (node,)) from None

    def _node(self, i):
        return None if i < 0 else self._nodes[i]

    def immediate_dominator(self, node):
        """The immediate post-dominator of node, or None for a root."""
        return self._node(self._parent[self._lookup(node)])

    def children(self, node):
        """Nodes immediately post-dominated by node."""
        return [self._nodes[c] for c in self._children[self._lookup(node)]]

    def depth(self, node):
        """Distance from node to the root of its tree."""
        return self._depth[self._lookup(node)]

    def roots(self):
        return [node for i, node in enumerate(self._nodes) if self._parent[i] < 0]

    def nodes(self):
        return list(self._nodes)

    def _climb(self, i, steps):
        for _ in range(steps):
            i = self._parent[i]
        return i

    def post_dominates(self, x, y):
        """True if x post-dominates y (x is y or an ancestor of y)."""
        ix = self._lookup(x)
        iy = self._lookup(y)
        steps = self._depth[iy] - self._depth[ix]
        if steps < 0:
            return False
        return self._climb(iy, steps) == ix

    def properly_post_dominates(self, x, y):
        """True if x post-dominates y and x != y."""
        return self._lookup(x) != self._lookup(y) and self.post_dominates(x, y)

    def least_common_ancestor(self, x, y):
        """The deepest common ancestor of x and y.

        Returns:
            The ancestor node, or None if x and y lie in different trees.
        """
        ix = self._lookup(x)
        iy = self._lookup(y)

        dx = self._depth[ix]
        dy = self._depth[iy]
        if dx > dy:
            ix = self._climb(ix, dx - dy)
        elif dy > dx:
            iy = self._climb(iy, dy - dx)

        while ix != iy:
            ix = self._parent[ix]
            iy = self._parent[iy]

        return self._node(ix)

    def __contains__(self, node):
        return node in self._index

    def __len__(self):
        return len(self._nodes)

    def __repr__(self):
        return "PostDominatorTree(nodes=%d, roots=%d)" % (len(self._nodes), len(self.roots()))


def build_post_dominator_tree(cfg, virtual_exit=True):
    """Compute the post-dominator tree of a CFG.

    Immediate post-dominators are the immediate dominators of the reversed
    CFG, headed at the exit. A procedure with zero or several exit blocks has
    no single head; a VIRTUAL_EXIT sentinel is used as the head, with every
    exit block as its child.

    Args:
        cfg: A CFG provider (``nodes()``, ``successors(node)``).
        virtual_exit: Keep the sentinel as the root of the result. When False
            the exits become separate roots and the result is a forest.

    Returns:
        A PostDominatorTree over every node of the CFG. Nodes that cannot
        reach an exit are roots of their own single-node trees.
    """
    nodes = cfg.nodes()

    reverse = {}
    exits = []
    for node in nodes:
        successors = cfg.successors(node)
        if not successors:
            exits.append(node)
        for succ in successors:
            reverse.setdefault(succ, []).append(node)

    if len(exits) == 1:
        head = exits[0]
    else:
        head = VIRTUAL_EXIT
        reverse[VIRTUAL_EXIT] = exits

    _tree, idoms = dominator.dominatorTree(reverse, head)

    keepSentinel = head is VIRTUAL_EXIT and virtual_exit
    parents = {}
    if keepSentinel:
        parents[VIRTUAL_EXIT] = None

    unreached = 0
    for node in nodes:
        parent = idoms.get(node)
        if parent is None and node is not head:
            unreached += 1
        if parent is VIRTUAL_EXIT and not keepSentinel:
            parent = None
        parents[node] = parent

    LOG.debug("post-dominator tree of %r: %d nodes, %d exits, %d cannot reach an exit",
              getattr(cfg, "name", cfg), len(nodes), len(exits), unreached)

    return PostDominatorTree(parents, VIRTUAL_EXIT if keepSentinel else None)
