"""
Text report for recorded data dependences.

The report lists local dependences (instruction, dependent instruction,
kind) and then non-local ones (instruction and the addresses it depends on
through other blocks).
"""

from .graph import DataDependenceGraph


def format_ddg_report(ddg: DataDependenceGraph) -> str:
    lines = ["Local Dependence map size: %d" % len(ddg.local_deps)]
    for inst, dep in ddg.local_deps.items():
        lines.append("Instruction: %s" % inst)
        lines.append("    has dependence")
        lines.append("    with instruction %s" % ("<none>" if dep.dependent is None else dep.dependent))
        lines.append("    of type %s" % dep.kind)

    lines.append("Non-Local Dependence map size: %d" % len(ddg.non_local_deps))
    for inst, deps in ddg.non_local_deps.items():
        lines.append("Instruction: %s" % inst)
        lines.append("    has non local dependence(s) with:")
        for dep in deps:
            lines.append("    Address: %s (instruction %s)" % (dep.address, dep.dependent))

    return "\n".join(lines) + "\n"
