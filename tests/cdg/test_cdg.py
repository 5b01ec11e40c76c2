"""
Tests for Control Dependence Graph (CDG) construction and analysis.

This module tests the CDG construction from a CFG and its post-dominator
tree, including:
- Edge classification
- Control dependence relationships for common control structures
- Procedures whose post-dominator structure is a forest
- CDG graph structure and statistics
"""

import unittest

from depcheck.analysis.cfg import CFGEdge, ControlFlowGraph, build_post_dominator_tree
from depcheck.analysis.cdg import (
    CDGConstructor,
    analyze_control_dependencies,
    candidate_edges,
    construct_cdg,
)
from depcheck.analysis.cdg.graph import ControlDependenceGraph
from depcheck.application import errors
from depcheck.util.application.errorhandler import DiagnosticLog


def makeCFG(name, edges):
    cfg = ControlFlowGraph(name)
    for tail, head in edges:
        cfg.add_edge(tail, head)
    return cfg


DIAMOND = [("Entry", "A"), ("Entry", "B"), ("A", "Exit"), ("B", "Exit")]
DIAMOND_MERGE = [("Entry", "A"), ("Entry", "B"), ("A", "Merge"), ("B", "Merge"), ("Merge", "Exit")]
IF_THEN = [("Entry", "Then"), ("Entry", "Exit"), ("Then", "Exit")]
WHILE_LOOP = [("Entry", "Header"), ("Header", "Body"), ("Body", "Header"), ("Header", "Exit")]
SELF_LOOP = [("Entry", "Loop"), ("Loop", "Loop"), ("Loop", "Exit")]
STUCK = [("Entry", "A"), ("Entry", "U"), ("A", "Exit"), ("U", "U")]
NESTED = [
    ("Entry", "Outer"), ("Entry", "Join"),
    ("Outer", "Inner"), ("Outer", "Join"),
    ("Inner", "Join"), ("Join", "Exit"),
]
LOOP_WITH_BREAK = [
    ("Entry", "Header"), ("Header", "Test"), ("Header", "Exit"),
    ("Test", "Break"), ("Test", "Latch"), ("Latch", "Header"), ("Break", "Exit"),
]


def build(edges, name="f", virtual_exit=True, diagnostics=None):
    cfg = makeCFG(name, edges)
    pdt = build_post_dominator_tree(cfg, virtual_exit)
    return construct_cdg(cfg, pdt, diagnostics)


class ReversedCFG(object):
    """Presents a CFG with its nodes and successor lists reversed."""

    def __init__(self, cfg):
        self.cfg = cfg
        self.name = cfg.name

    def nodes(self):
        return list(reversed(self.cfg.nodes()))

    def successors(self, node):
        return list(reversed(self.cfg.successors(node)))


class InconsistentTree(object):
    """Claims a common ancestor exists but its parent links never reach it."""

    def properly_post_dominates(self, x, y):
        return False

    def least_common_ancestor(self, x, y):
        return "Somewhere"

    def immediate_dominator(self, node):
        return "Somewhere" if node == "Entry" else None


class TestCandidateEdges(unittest.TestCase):
    def testDiamond(self):
        cfg = makeCFG("diamond", DIAMOND)
        S = candidate_edges(cfg, build_post_dominator_tree(cfg))
        self.assertEqual(S, [CFGEdge("Entry", "A"), CFGEdge("Entry", "B")])

    def testSelfLoopAlwaysCandidate(self):
        cfg = makeCFG("selfloop", SELF_LOOP)
        S = candidate_edges(cfg, build_post_dominator_tree(cfg))
        self.assertIn(CFGEdge("Loop", "Loop"), S)
        self.assertNotIn(CFGEdge("Entry", "Loop"), S)

    def testStraightLineHasNone(self):
        cfg = makeCFG("line", [("Entry", "A"), ("A", "Exit")])
        self.assertEqual(candidate_edges(cfg, build_post_dominator_tree(cfg)), [])


class TestCDG(unittest.TestCase):
    """Test cases for Control Dependence Graph construction."""

    def testDiamond(self):
        cdg = build(DIAMOND)
        self.assertEqual(cdg.dependents("Entry"), frozenset({"A", "B"}))
        self.assertEqual(cdg.dependents("A"), frozenset())
        self.assertEqual(cdg.dependents("B"), frozenset())
        self.assertEqual(len(cdg), 1)

    def testDiamondWithMerge(self):
        cdg = build(DIAMOND_MERGE)
        self.assertEqual(cdg.as_dict(), {"Entry": frozenset({"A", "B"})})
        self.assertFalse(cdg.is_control_dependent("Merge", "Entry"))
        self.assertEqual(cdg.controllers("Merge"), set())
        self.assertEqual(cdg.controllers("Exit"), set())

    def testIfWithoutElse(self):
        cdg = build(IF_THEN)
        self.assertEqual(cdg.as_dict(), {"Entry": frozenset({"Then"})})
        self.assertFalse(cdg.is_control_dependent("Exit", "Entry"))

    def testWhileLoop(self):
        cdg = build(WHILE_LOOP)
        self.assertEqual(cdg.as_dict(), {"Header": frozenset({"Body", "Header"})})
        self.assertTrue(cdg.is_control_dependent("Header", "Header"))

    def testSelfLoop(self):
        cdg = build(SELF_LOOP)
        self.assertEqual(cdg.as_dict(), {"Loop": frozenset({"Loop"})})
        self.assertEqual(cdg.get_statistics()["self_dependent"], 1)

    def testNestedIf(self):
        cdg = build(NESTED)
        self.assertEqual(cdg.dependents("Entry"), frozenset({"Outer"}))
        self.assertEqual(cdg.dependents("Outer"), frozenset({"Inner"}))
        self.assertEqual(cdg.controllers("Inner"), {"Outer"})

    def testLoopWithBreak(self):
        cdg = build(LOOP_WITH_BREAK)
        self.assertEqual(cdg.dependents("Header"), frozenset({"Test"}))
        self.assertEqual(cdg.dependents("Test"), frozenset({"Break", "Latch", "Header"}))

    def testUnreachableBlock(self):
        log = DiagnosticLog()
        cfg = makeCFG("stuck", STUCK)
        constructor = CDGConstructor(cfg, build_post_dominator_tree(cfg), log)
        cdg = constructor.construct()

        self.assertEqual(cdg.as_dict(), {"U": frozenset({"U"})})
        self.assertEqual(cdg.dependents("Entry"), frozenset())
        self.assertEqual(constructor.skipped, [CFGEdge("Entry", "U")])

        missing = log.of_kind(errors.MISSING_ANCESTOR)
        self.assertEqual(len(missing), 1)
        self.assertEqual(missing[0].subject, CFGEdge("Entry", "U"))
        self.assertEqual(log.warningCount, 1)

    def testForestSkipsCrossTreeEdges(self):
        log = DiagnosticLog()
        cdg = build([("Entry", "A"), ("Entry", "B")], virtual_exit=False, diagnostics=log)
        self.assertEqual(len(cdg), 0)
        self.assertEqual(len(log.of_kind(errors.MISSING_ANCESTOR)), 2)

    def testVirtualExitJoinsExits(self):
        log = DiagnosticLog()
        cdg = build([("Entry", "A"), ("Entry", "B")], diagnostics=log)
        self.assertEqual(cdg.dependents("Entry"), frozenset({"A", "B"}))
        self.assertEqual(len(log), 0)

    def testControllersBranch(self):
        # Every controller has two successors or a self loop.
        for edges in (DIAMOND, DIAMOND_MERGE, IF_THEN, WHILE_LOOP, SELF_LOOP, STUCK, NESTED, LOOP_WITH_BREAK):
            cfg = makeCFG("f", edges)
            cdg = construct_cdg(cfg, build_post_dominator_tree(cfg))
            for tail in cdg:
                successors = cfg.successors(tail)
                self.assertTrue(len(successors) >= 2 or tail in successors, (edges, tail))

    def testEdgeOrderIrrelevant(self):
        for edges in (DIAMOND, WHILE_LOOP, NESTED, LOOP_WITH_BREAK, STUCK):
            cfg = makeCFG("f", edges)
            pdt = build_post_dominator_tree(cfg)
            forward = construct_cdg(cfg, pdt)
            backward = construct_cdg(ReversedCFG(cfg), pdt)
            self.assertEqual(forward, backward)

    def testBasicBlocks(self):
        cfg = ControlFlowGraph.from_mapping({
            "name": "diamond",
            "blocks": [
                {"name": "entry", "successors": ["a", "b"]},
                {"name": "a", "successors": ["exit"]},
                {"name": "b", "successors": ["exit"]},
                {"name": "exit"},
            ],
        })
        cdg = construct_cdg(cfg, build_post_dominator_tree(cfg))
        self.assertEqual(cdg.name, "diamond")
        self.assertEqual(cdg.dependents(cfg.block("entry")), frozenset({cfg.block("a"), cfg.block("b")}))

    def testInconsistentTree(self):
        cfg = makeCFG("f", [("Entry", "A"), ("Entry", "B")])
        with self.assertRaises(errors.InternalError):
            CDGConstructor(cfg, InconsistentTree()).construct()

    def testUnknownNode(self):
        cfg = makeCFG("f", DIAMOND)
        other = makeCFG("g", [("X", "Y")])
        with self.assertRaises(errors.PreconditionError):
            construct_cdg(cfg, build_post_dominator_tree(other))

    def testAnalyzeControlDependencies(self):
        cfg = makeCFG("diamond", DIAMOND)
        stats = analyze_control_dependencies(cfg, build_post_dominator_tree(cfg))
        self.assertEqual(stats["controllers"], 1)
        self.assertEqual(stats["total_nodes"], 3)
        self.assertEqual(stats["total_edges"], 2)
        self.assertEqual(stats["candidate_edges"], 2)
        self.assertEqual(stats["skipped_edges"], 0)
        self.assertEqual(stats["dependents"], {"Entry": ["A", "B"]})


class TestControlDependenceGraph(unittest.TestCase):
    def testFrozenAfterConstruction(self):
        cdg = build(DIAMOND)
        self.assertTrue(cdg.frozen)
        with self.assertRaises(errors.FrozenGraphError):
            cdg.insert("Entry", "Exit")
        self.assertEqual(cdg.dependents("Entry"), frozenset({"A", "B"}))

    def testUnknownTail(self):
        cdg = build(DIAMOND)
        self.assertEqual(cdg.dependents("Nowhere"), frozenset())
        self.assertNotIn("Nowhere", cdg)

    def testInsertIdempotent(self):
        cdg = ControlDependenceGraph("g")
        cdg.insert("a", "b")
        cdg.insert("a", "b")
        cdg.insert("a", "a")
        self.assertEqual(list(cdg.edges()).count(("a", "b")), 1)
        self.assertEqual(cdg.nodes(), ["a", "b"])
        self.assertEqual(cdg.get_statistics(), {
            "controllers": 1,
            "total_nodes": 2,
            "total_edges": 2,
            "self_dependent": 1,
        })

    def testEquality(self):
        self.assertEqual(build(DIAMOND), build(DIAMOND))
        self.assertNotEqual(build(DIAMOND), build(IF_THEN))


if __name__ == "__main__":
    unittest.main()
