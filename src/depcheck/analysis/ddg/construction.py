"""
Data dependence collection.

This module records the memory dependences of a procedure as reported by an
external memory-dependence oracle. It performs no analysis of its own: every
memory-accessing instruction is sent to the oracle and the answer is filed
under the instruction.

**Oracle Protocol:**
``oracle.query(instruction)`` returns either
- ``LocalResult(kind, dependent)`` for a dependence within the block, or
- ``NonLocalResult(dependencies)`` with (address, dependent) pairs found by
  the oracle's non-local pointer query on the access location.

Non-local answers only make sense for loads, stores and va_arg accesses.
Atomic and volatile loads and stores are not handled by the non-local query;
such an instruction is left unrecorded and an UnsupportedAccessKind diagnostic
is emitted, the rest of the procedure is processed normally.
"""

import logging
from typing import Iterable, Optional

from depcheck.application import errors
from depcheck.util.application.errorhandler import DiagnosticLog
from .graph import AccessKind, DataDependenceGraph, LocalResult, NonLocalResult

LOG = logging.getLogger(__name__)

NON_LOCAL_ACCESSES = (AccessKind.LOAD, AccessKind.STORE, AccessKind.VAARG)
ORDERED_ACCESSES = (AccessKind.LOAD, AccessKind.STORE)


class DataDependenceAggregator(object):
    """
    Collects the oracle's answers for the instructions of one procedure.

    Attributes:
        oracle: The memory-dependence oracle
        diagnostics: Log receiving UnsupportedAccessKind diagnostics
        ddg: The store being filled
    """
    __slots__ = ("oracle", "diagnostics", "ddg")

    def __init__(self, oracle, diagnostics: Optional[DiagnosticLog] = None, name: str = ""):
        self.oracle = oracle
        self.diagnostics = diagnostics if diagnostics is not None else DiagnosticLog()
        self.ddg = DataDependenceGraph(name)

    def collect(self, instructions: Iterable) -> DataDependenceGraph:
        """
        Query the oracle for every memory-accessing instruction.

        Raises:
            PreconditionError: If the oracle answers with something other than
                a LocalResult or NonLocalResult, or gives a non-local answer
                for an access that has no location
        """
        for inst in instructions:
            if not inst.touches_memory:
                continue
            self.process(inst)

        LOG.debug("%r: %d local, %d non-local dependences", self.ddg.name,
                  len(self.ddg.local_deps), len(self.ddg.non_local_deps))
        return self.ddg

    def process(self, inst):
        result = self.oracle.query(inst)

        if isinstance(result, LocalResult):
            self.ddg.add_local(inst, result.kind, result.dependent)
        elif isinstance(result, NonLocalResult):
            if inst.access not in NON_LOCAL_ACCESSES:
                raise errors.PreconditionError(
                    "non-local dependence for %s access %s" % (inst.access.value, inst))

            if inst.access in ORDERED_ACCESSES and not inst.unordered:
                self.diagnostics.warn(
                    errors.UNSUPPORTED_ACCESS_KIND,
                    "atomic/volatile %s %s is not handled" % (inst.access.value, inst),
                    inst,
                )
                return

            self.ddg.add_non_local(inst, result.dependencies)
        else:
            raise errors.PreconditionError("unexpected oracle answer %r for %s" % (result, inst))


def collect_data_dependencies(instructions, oracle, diagnostics=None, name="") -> DataDependenceGraph:
    """Convenience function running a DataDependenceAggregator."""
    return DataDependenceAggregator(oracle, diagnostics, name).collect(instructions)
