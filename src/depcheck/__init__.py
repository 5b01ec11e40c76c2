"""depcheck - Control and data dependence analysis of procedures.
"""

__version__ = "0.1.0"

# Import main components for easy access
from .application.context import AnalysisContext, AnalysisOptions
from .application.pipeline import analyze_procedure, analyze_procedures
from .analysis.cfg import ControlFlowGraph, build_post_dominator_tree
from .analysis.cdg import ControlDependenceGraph, construct_cdg

__all__ = [
    "AnalysisContext",
    "AnalysisOptions",
    "analyze_procedure",
    "analyze_procedures",
    "ControlFlowGraph",
    "build_post_dominator_tree",
    "ControlDependenceGraph",
    "construct_cdg",
    "__version__",
]
