import unittest

from depcheck.util.graphalgorithim import dominator


class TestReversePostorder(unittest.TestCase):
    def testHeadFirst(self):
        G = {0: [1, 2], 1: [3], 2: [3]}
        order = dominator.ReversePostorderCrawler(G, 0).order
        self.assertEqual(order[0], 0)
        self.assertEqual(order[-1], 3)
        self.assertEqual(set(order), {0, 1, 2, 3})

    def testUnreachableExcluded(self):
        G = {0: [1], 1: [], 9: [0]}
        order = dominator.ReversePostorderCrawler(G, 0).order
        self.assertEqual(order, [0, 1])

    def testDeepChain(self):
        # Deeper than the default recursion limit.
        G = {i: [i + 1] for i in range(5000)}
        order = dominator.ReversePostorderCrawler(G, 0).order
        self.assertEqual(order, list(range(5001)))


class TestDominatorTree(unittest.TestCase):
    def testDiamond(self):
        G = {"a": ["b", "c"], "b": ["d"], "c": ["d"], "d": []}
        tree, idoms = dominator.dominatorTree(G, "a")
        self.assertEqual(idoms, {"b": "a", "c": "a", "d": "a"})
        self.assertEqual(sorted(tree["a"]), ["b", "c", "d"])

    def testLoop(self):
        G = {"a": ["b"], "b": ["c", "e"], "c": ["d"], "d": ["b"], "e": []}
        _tree, idoms = dominator.dominatorTree(G, "a")
        self.assertEqual(idoms, {"b": "a", "c": "b", "d": "c", "e": "b"})

    def testSelfLoop(self):
        G = {"a": ["b"], "b": ["b", "c"], "c": []}
        _tree, idoms = dominator.dominatorTree(G, "a")
        self.assertEqual(idoms, {"b": "a", "c": "b"})

    def testUnreachableOmitted(self):
        G = {"a": ["b"], "b": [], "x": ["b"]}
        _tree, idoms = dominator.dominatorTree(G, "a")
        self.assertEqual(idoms, {"b": "a"})

    def testHeadOnly(self):
        tree, idoms = dominator.dominatorTree({}, "a")
        self.assertEqual(idoms, {})
        self.assertEqual(tree, {})

    def testTreeFromIDoms(self):
        tree = dominator.treeFromIDoms({"b": "a", "c": "a", "d": "c"})
        self.assertEqual(tree, {"a": ["b", "c"], "c": ["d"]})


if __name__ == "__main__":
    unittest.main()
