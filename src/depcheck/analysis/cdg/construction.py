"""
Control Dependence Graph construction.

This module builds the Control Dependence Graph of a procedure from its CFG
and its post-dominator tree, following Ferrante, Ottenstein and Warren.

**Construction Algorithm Overview:**

1. **Classify edges**: Let S be the set of CFG edges (A, B) such that B does
   not properly post-dominate A. Only these edges carry control dependence.
   A self loop (A, A) is always in S, no node properly post-dominates itself.

2. **Propagate**: For each (A, B) in S, let L be the least common ancestor of
   A and B in the post-dominator tree. L is either:

   - the parent of A: every node on the tree path from B up to L, excluding
     L, is control dependent on A; or
   - A itself: every node on the tree path from B up to A, including both,
     is control dependent on A. This is how loop headers end up dependent
     on themselves.

   Both cases are the same walk: climb from B until reaching the parent of
   A, marking each visited node as dependent on A.

Each edge contributes an independent set union, so the order in which S is
processed does not change the result.

An edge whose ends have no common ancestor (the post-dominator structure is a
forest, because of blocks that cannot reach the exit or exits left
unconnected) is skipped and reported as a diagnostic; the other edges are
processed normally.
"""

import logging
from typing import Any, Dict, List, Optional

from depcheck.analysis.cfg.graph import CFGEdge
from depcheck.application import errors
from depcheck.util.application.errorhandler import DiagnosticLog
from .graph import ControlDependenceGraph

LOG = logging.getLogger(__name__)


def candidate_edges(cfg, pdt) -> List[CFGEdge]:
    """
    Collect the edges that can carry control dependence.

    Args:
        cfg: CFG provider (``nodes()``, ``successors(node)``)
        pdt: Post-dominator tree over the same nodes

    Returns:
        Every edge (A, B) such that B does not properly post-dominate A, in
        CFG order
    """
    S = []
    for tail in cfg.nodes():
        for head in cfg.successors(tail):
            if not pdt.properly_post_dominates(head, tail):
                S.append(CFGEdge(tail, head))
    return S


class CDGConstructor:
    """
    Constructs the Control Dependence Graph of one procedure.

    A constructor is used once; it borrows the CFG and the post-dominator
    tree for the duration of ``construct`` and never modifies them.

    Attributes:
        cfg: The Control Flow Graph
        pdt: The post-dominator tree of cfg
        diagnostics: Log receiving MissingAncestor diagnostics
        cdg: The resulting Control Dependence Graph
        candidates: The classified edge set S
        skipped: Edges of S that contributed nothing for lack of an ancestor
    """

    def __init__(self, cfg, pdt, diagnostics: Optional[DiagnosticLog] = None):
        self.cfg = cfg
        self.pdt = pdt
        self.diagnostics = diagnostics if diagnostics is not None else DiagnosticLog()
        self.cdg = ControlDependenceGraph(getattr(cfg, "name", ""))
        self.candidates: List[CFGEdge] = []
        self.skipped: List[CFGEdge] = []

    def construct(self) -> ControlDependenceGraph:
        """
        Classify the CFG edges, propagate every candidate edge and freeze
        the result.

        Returns:
            The constructed, read-only Control Dependence Graph
        """
        self.candidates = candidate_edges(self.cfg, self.pdt)
        LOG.debug("%r: %d candidate edges", self.cdg.name, len(self.candidates))

        for edge in self.candidates:
            self._propagate(edge)

        self.cdg.freeze()
        return self.cdg

    def _propagate(self, edge: CFGEdge):
        """Mark the tree path from the edge's head up to its tail's parent."""
        A, B = edge

        if self.pdt.least_common_ancestor(A, B) is None:
            self.skipped.append(edge)
            self.diagnostics.warn(
                errors.MISSING_ANCESTOR,
                "%s and %s have no common post-dominator, edge ignored" % (A, B),
                edge,
            )
            return

        parent = self.pdt.immediate_dominator(A)

        cur = B
        while cur != parent:
            if cur is None:
                raise errors.InternalError(
                    "walk from %s never reached the post-dominator of %s" % (B, A))
            self.cdg.insert(A, cur)
            cur = self.pdt.immediate_dominator(cur)

        LOG.debug("edge %s: walked up to %s", edge, parent)


def construct_cdg(cfg, pdt, diagnostics: Optional[DiagnosticLog] = None) -> ControlDependenceGraph:
    """
    Convenience function to construct a CDG.

    Args:
        cfg: The Control Flow Graph
        pdt: Its post-dominator tree
        diagnostics: Optional log for recoverable conditions

    Returns:
        The constructed Control Dependence Graph
    """
    return CDGConstructor(cfg, pdt, diagnostics).construct()


def analyze_control_dependencies(cfg, pdt, diagnostics: Optional[DiagnosticLog] = None) -> Dict[str, Any]:
    """
    Construct a CDG and return statistics about it and its construction.

    Returns:
        Dictionary containing the CDG statistics (see
        ``ControlDependenceGraph.get_statistics``) plus:
        - candidate_edges: Size of the classified edge set S
        - skipped_edges: Edges ignored for lack of a common ancestor
        - dependents: Mapping from str(tail) to sorted str(dependent)
    """
    constructor = CDGConstructor(cfg, pdt, diagnostics)
    cdg = constructor.construct()

    stats = cdg.get_statistics()
    stats['candidate_edges'] = len(constructor.candidates)
    stats['skipped_edges'] = len(constructor.skipped)
    stats['dependents'] = {
        str(tail): sorted(str(dep) for dep in deps)
        for tail, deps in cdg.items()
    }
    return stats
