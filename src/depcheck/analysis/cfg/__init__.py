"""Control flow graphs and post-dominance.

- graph.py: BasicBlock, CFGEdge and the ControlFlowGraph provider
- postdom.py: PostDominatorTree and its builder
"""

from .graph import BasicBlock, CFGEdge, ControlFlowGraph
from .postdom import VIRTUAL_EXIT, PostDominatorTree, build_post_dominator_tree

__all__ = [
    "BasicBlock",
    "CFGEdge",
    "ControlFlowGraph",
    "VIRTUAL_EXIT",
    "PostDominatorTree",
    "build_post_dominator_tree",
]
