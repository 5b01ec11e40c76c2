"""
Control Dependence Graph (CDG) analysis.

A node B is control dependent on node A if A has a successor from which every
path to the exit passes through B, and another successor from which some path
avoids B. In other words, the branch taken at A decides whether B executes.

**Construction Algorithm:**
The CDG is derived from the post-dominator tree (Ferrante, Ottenstein and
Warren). CFG edges whose head does not properly post-dominate their tail are
walked up the tree to find the nodes each branch governs. See
``construction`` for details.

**Module Structure:**
- graph.py: The ControlDependenceGraph store
- construction.py: Edge classification and dependence propagation
- dump.py: DOT, text and JSON export
"""

from .graph import ControlDependenceGraph
from .construction import CDGConstructor, candidate_edges, construct_cdg, analyze_control_dependencies
from .dump import CDGDumper, dump_cdg, dump_cdg_to_directory, format_cdg

__all__ = [
    'ControlDependenceGraph',
    'CDGConstructor',
    'candidate_edges',
    'construct_cdg',
    'analyze_control_dependencies',
    'CDGDumper',
    'dump_cdg',
    'dump_cdg_to_directory',
    'format_cdg',
]
