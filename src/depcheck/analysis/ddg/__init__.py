"""
Data dependence records for depcheck.

Memory dependences are not computed here. An external memory-dependence
oracle (alias analysis plus memory-dependence analysis of the host compiler)
answers one query per memory-accessing instruction, and this package files
the answers by kind:

- Local answers: Clobber, Def, NonFuncLocal or Unknown, with one dependent
  instruction
- Non-local answers: a list of (address, dependent instruction) pairs

**Module Structure:**
- graph.py: Oracle values and the DataDependenceGraph store
- construction.py: The aggregator querying the oracle
- dump.py: Text report
"""

from .graph import (
    AccessKind,
    DataDependenceGraph,
    DepKind,
    LocalDependence,
    LocalResult,
    MemoryInstruction,
    NonLocalDependence,
    NonLocalResult,
)
from .construction import DataDependenceAggregator, collect_data_dependencies
from .dump import format_ddg_report

__all__ = [
    "AccessKind",
    "DataDependenceGraph",
    "DepKind",
    "LocalDependence",
    "LocalResult",
    "MemoryInstruction",
    "NonLocalDependence",
    "NonLocalResult",
    "DataDependenceAggregator",
    "collect_data_dependencies",
    "format_ddg_report",
]
