"""
Data dependence records.

This module defines the values exchanged with an external memory-dependence
oracle and the store keeping what it reported for a procedure.

**Dependence Kinds:**
- CLOBBER: the instruction depends on one that may overwrite the accessed
  memory (a may-alias store, a partially aliasing load)
- DEF: the instruction depends on one that defines the accessed memory (the
  store or load of the value, or the allocation)
- NON_FUNC_LOCAL: no dependence inside the function
- NON_LOCAL: no dependence inside the instruction's block; the dependences
  come from predecessor blocks and are listed per address
- UNKNOWN: the oracle could not tell

A local result carries one dependent instruction (None for NON_FUNC_LOCAL and
often for UNKNOWN). A non-local result carries a list of
(address, dependent instruction) pairs.
"""

import enum
from typing import Any, Dict, List, Optional


class DepKind(enum.Enum):
    CLOBBER = "Clobber"
    DEF = "Def"
    NON_FUNC_LOCAL = "NonFuncLocal"
    NON_LOCAL = "NonLocal"
    UNKNOWN = "Unknown"

    def __str__(self):
        return self.value


LOCAL_KINDS = (DepKind.CLOBBER, DepKind.DEF, DepKind.NON_FUNC_LOCAL, DepKind.UNKNOWN)


class AccessKind(enum.Enum):
    LOAD = "load"
    STORE = "store"
    VAARG = "va_arg"
    CALL = "call"


class MemoryInstruction(object):
    """
    Description of an instruction, as far as data dependence cares.

    Attributes:
        name: Rendering of the instruction
        access: The AccessKind, or None if it does not touch memory
        unordered: False for atomic or volatile accesses
        block: The block holding the instruction, if known
    """
    __slots__ = ("name", "access", "unordered", "block")

    def __init__(self, name: str, access: Optional[AccessKind] = None,
                 unordered: bool = True, block: Any = None):
        self.name = name
        self.access = access
        self.unordered = unordered
        self.block = block

    @property
    def touches_memory(self) -> bool:
        return self.access is not None

    def __str__(self):
        return self.name

    def __repr__(self):
        return "MemoryInstruction(%s)" % self.name


class LocalResult(object):
    """Oracle answer for a dependence found without leaving the block."""
    __slots__ = ("kind", "dependent")

    def __init__(self, kind: DepKind, dependent: Any = None):
        if kind not in LOCAL_KINDS:
            raise ValueError("%s is not a local dependence kind" % kind)
        self.kind = kind
        self.dependent = dependent

    def __repr__(self):
        return "LocalResult(%s, %r)" % (self.kind, self.dependent)


class NonLocalResult(object):
    """Oracle answer listing (address, dependent) pairs from other blocks."""
    __slots__ = ("dependencies",)

    def __init__(self, dependencies=()):
        self.dependencies = list(dependencies)

    def __repr__(self):
        return "NonLocalResult(%r)" % (self.dependencies,)


class LocalDependence(object):
    """
    A recorded local dependence.

    Attributes:
        kind: One of LOCAL_KINDS
        dependent: The instruction depended on, or None
    """
    __slots__ = ("kind", "dependent")

    def __init__(self, kind: DepKind, dependent: Any):
        self.kind = kind
        self.dependent = dependent

    def __eq__(self, other):
        return (isinstance(other, LocalDependence) and self.kind == other.kind
                and self.dependent == other.dependent)

    __hash__ = None

    def __repr__(self):
        return "LocalDependence(%s, %r)" % (self.kind, self.dependent)


class NonLocalDependence(object):
    """
    A recorded non-local dependence.

    Attributes:
        address: The pointer value the dependence is about
        dependent: The instruction depended on
    """
    __slots__ = ("address", "dependent")

    def __init__(self, address: Any, dependent: Any):
        self.address = address
        self.dependent = dependent

    def __eq__(self, other):
        return (isinstance(other, NonLocalDependence) and self.address == other.address
                and self.dependent == other.dependent)

    __hash__ = None

    def __repr__(self):
        return "NonLocalDependence(%r, %r)" % (self.address, self.dependent)


class DataDependenceGraph(object):
    """
    The data dependences of one procedure, as reported by the oracle.

    Attributes:
        name: Name of the analyzed procedure
        local_deps: Instruction -> LocalDependence
        non_local_deps: Instruction -> list of NonLocalDependence
    """

    def __init__(self, name: str = ""):
        self.name = name
        self.local_deps: Dict[Any, LocalDependence] = {}
        self.non_local_deps: Dict[Any, List[NonLocalDependence]] = {}

    def add_local(self, inst, kind: DepKind, dependent):
        self.local_deps[inst] = LocalDependence(kind, dependent)

    def add_non_local(self, inst, dependencies):
        """Record (address, dependent) pairs for inst."""
        deps = self.non_local_deps.setdefault(inst, [])
        for address, dependent in dependencies:
            deps.append(NonLocalDependence(address, dependent))

    def dependence(self, inst):
        """
        Get what was recorded for inst.

        Returns:
            A LocalDependence, a list of NonLocalDependence, or None if the
            instruction has no recorded dependence
        """
        if inst in self.local_deps:
            return self.local_deps[inst]
        return self.non_local_deps.get(inst)

    def stats(self) -> Dict[str, Any]:
        kinds = {}
        for dep in self.local_deps.values():
            kinds[str(dep.kind)] = kinds.get(str(dep.kind), 0) + 1
        return {
            "local": len(self.local_deps),
            "non_local": len(self.non_local_deps),
            "non_local_pairs": sum(len(deps) for deps in self.non_local_deps.values()),
            "kinds": kinds,
        }

    def __contains__(self, inst):
        return inst in self.local_deps or inst in self.non_local_deps

    def __repr__(self):
        return "DataDependenceGraph(%r, local=%d, non_local=%d)" % (
            self.name, len(self.local_deps), len(self.non_local_deps))
