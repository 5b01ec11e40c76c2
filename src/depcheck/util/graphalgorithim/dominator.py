"""
Dominator tree computation.

This module computes immediate dominators over a directed graph given as a
successor mapping, using the iterative algorithm of Cooper, Harvey and
Kennedy: nodes are numbered in reverse post-order and the immediate dominator
of each node is refined by intersecting the dominators of its predecessors
until a fixed point is reached.

Running it over the reversed control flow graph, headed at the exit, yields
immediate post-dominators.

Only nodes reachable from the head take part. Unlike a forward CFG, where
every block is usually reachable from the entry, a reversed CFG routinely
contains blocks that never reach the exit (infinite loops, aborting paths);
those are left out of the result instead of being grafted onto the head.
"""


def intersect(doms, b1, b2):
    """
    Find the common dominator of two nodes.

    Advances two "fingers" up the dominator chains until they meet.

    Parameters
    ----------
    doms : list
        doms[i] is the current immediate dominator of node i, in reverse
        post-order numbering (dominators have smaller numbers).
    b1, b2 : int
        Nodes in reverse post-order numbering.

    Returns
    -------
    int
        The node where the two chains meet.
    """
    finger1 = b1
    finger2 = b2
    while finger1 != finger2:
        while finger1 > finger2:
            finger1 = doms[finger1]
        while finger2 > finger1:
            finger2 = doms[finger2]
    return finger1


class ReversePostorderCrawler(object):
    """
    Depth-first traversal computing reverse post-order from a head node.

    Attributes
    ----------
    order : list
        Nodes reachable from the head, in reverse post-order. The head is
        always first.
    """

    def __init__(self, G, head):
        """
        Parameters
        ----------
        G : dict
            Directed graph mapping nodes to iterables of successor nodes.
            Nodes without an entry have no successors.
        head : any
            The node to start traversal from.
        """
        self.G = G
        self.head = head

        self.processed = set()
        self.order = []

        self(head)

        self.order.reverse()

    def __call__(self, node):
        # Explicit stack, deep CFGs would exceed the recursion limit.
        if node in self.processed:
            return

        self.processed.add(node)
        stack = [(node, iter(self.G.get(node, ())))]
        while stack:
            _parent, children = stack[-1]
            try:
                child = next(children)
                if child not in self.processed:
                    self.processed.add(child)
                    stack.append((child, iter(self.G.get(child, ()))))
            except StopIteration:
                self.order.append(stack[-1][0])
                stack.pop()


def dominatorTree(G, head):
    """
    Compute immediate dominators by fixed-point iteration.

    Parameters
    ----------
    G : dict
        Directed graph mapping nodes to iterables of successor nodes.
    head : any
        The entry point of the traversal.

    Returns
    -------
    tuple of (dict, dict)
        - dominator tree: dominator -> list of directly dominated nodes
        - idoms: node -> immediate dominator, for every node reachable from
          head except head itself
    """
    order = ReversePostorderCrawler(G, head).order

    forward = {}
    for i, node in enumerate(order):
        forward[node] = i

    pred = {}
    for node in order:
        i = forward[node]
        for nextNode in G.get(node, ()):
            n = forward[nextNode]

            # Self-cycles say nothing about dominance.
            if i == n:
                continue

            pred.setdefault(n, []).append(i)

    count = len(order)
    doms = [None] * count
    doms[0] = 0

    changed = True
    while changed:
        changed = False
        for node in range(1, count):
            if doms[node] is None:
                # The DFS parent precedes the node in reverse post-order.
                new_idom = min(pred[node])
                assert new_idom < node
            else:
                new_idom = doms[node]

            for p in pred[node]:
                if doms[p] is not None:
                    new_idom = intersect(doms, new_idom, p)

            if doms[node] != new_idom:
                assert doms[node] is None or new_idom < doms[node]
                doms[node] = new_idom
                changed = True

    idoms = {}
    for node in range(1, count):
        idoms[order[node]] = order[doms[node]]

    return treeFromIDoms(idoms), idoms


def treeFromIDoms(idoms):
    """
    Convert an immediate dominator map into a dominator tree.

    Parameters
    ----------
    idoms : dict
        Mapping from each node to its immediate dominator

    Returns
    -------
    dict
        Mapping from dominator nodes to lists of directly dominated nodes.
    """
    tree = {}

    for node, idom in idoms.items():
        tree.setdefault(idom, []).append(node)

    return tree
