"""
Control Dependence Graph visualization and dumping functionality.

This module exports Control Dependence Graphs for inspection and for tools
that do not want to link against the analysis.

**Supported Formats:**
- DOT: Graphviz digraph, built with pydot. One node declaration per distinct
  node taking part in a dependence and one edge per (controller, dependent)
  pair. Nodes are shown as records labelled with the block contents.
- Text: Human-readable listing with statistics
- JSON: Machine-readable mapping from controller to dependents

Exporting never changes the graph. A failed write is logged, reported as an
ExportIOFailure diagnostic when a diagnostic log is supplied, and signalled by
a False return value.
"""

import json
import logging
import os
from typing import Any, Dict, List, Optional

import pydot

from depcheck.application import errors
from .graph import ControlDependenceGraph

LOG = logging.getLogger(__name__)

# Characters with a meaning inside graphviz record labels
_RECORD_SPECIAL = "{}|<>"


def render_node(node) -> str:
    """Render a node's contents, using ``node.render()`` when available."""
    render = getattr(node, "render", None)
    return render() if callable(render) else str(node)


def record_label(node) -> str:
    """Build a left-aligned graphviz record label for a node."""
    text = render_node(node)
    for c in _RECORD_SPECIAL:
        text = text.replace(c, "\\" + c)
    return text.replace("\n", "\\l") + "\\l"


class CDGDumper:
    """
    Handles dumping of a Control Dependence Graph.

    Attributes:
        cdg: The Control Dependence Graph to dump
        diagnostics: Optional log receiving ExportIOFailure diagnostics
    """

    def __init__(self, cdg: ControlDependenceGraph, diagnostics=None):
        self.cdg = cdg
        self.diagnostics = diagnostics

    def to_dot(self) -> pydot.Dot:
        """
        Build the pydot graph.

        Nodes are named ``Node<i>`` in the order the CDG first references
        them.
        """
        title = f"CDG for {self.cdg.name}" if self.cdg.name else "CDG"
        graph = pydot.Dot("cdg", graph_type="digraph", label=title)

        names = {}
        for node in self.cdg.nodes():
            names[node] = f"Node{len(names)}"
            graph.add_node(pydot.Node(names[node], shape="record", label=record_label(node)))

        for tail, dep in self.cdg.edges():
            graph.add_edge(pydot.Edge(names[tail], names[dep]))

        return graph

    def format_dot(self) -> str:
        return self.to_dot().to_string()

    def format_text(self) -> str:
        """
        Format the CDG as text: a header, statistics, then every controller
        with its dependents.
        """
        title = f"Control Dependence Graph{' for function: ' + self.cdg.name if self.cdg.name else ''}"
        lines = [title, "=" * 60, ""]

        stats = self.cdg.get_statistics()
        lines.append("Statistics:")
        lines.extend(f"  {key}: {value}" for key, value in stats.items())
        lines.append("")

        lines.append("Control Dependencies:")
        lines.append("-" * 40)
        for tail, deps in self.cdg.items():
            lines.append(f"{tail} controls:")
            lines.extend(f"  -> {name}" for name in sorted(str(dep) for dep in deps))
        return "\n".join(lines) + "\n"

    def to_json_data(self) -> Dict[str, Any]:
        return {
            "function_name": self.cdg.name,
            "statistics": self.cdg.get_statistics(),
            "dependents": {
                str(tail): sorted(str(dep) for dep in deps)
                for tail, deps in self.cdg.items()
            },
        }

    def format_json(self) -> str:
        return json.dumps(self.to_json_data(), indent=2)

    def dump_dot(self, output_file: str) -> bool:
        """Write the DOT form to output_file."""
        return self._write(output_file, self.format_dot())

    def dump_text(self, output_file: str) -> bool:
        """Write the text form to output_file."""
        return self._write(output_file, self.format_text())

    def dump_json(self, output_file: str) -> bool:
        """Write the JSON form to output_file."""
        return self._write(output_file, self.format_json())

    def _write(self, output_file: str, content: str) -> bool:
        try:
            with open(output_file, 'w') as f:
                f.write(content)
        except OSError as e:
            message = f"cannot write {output_file}: {e}"
            if self.diagnostics is not None:
                self.diagnostics.warn(errors.EXPORT_IO_FAILURE, message, output_file)
            else:
                LOG.warning("%s", message)
            return False

        LOG.info("CDG dumped to: %s", output_file)
        return True


FORMATS = ("dot", "text", "json")


def format_cdg(cdg: ControlDependenceGraph, format: str = "dot") -> str:
    """
    Render a CDG as a string.

    Raises:
        ValueError: If the format is not supported
    """
    if format not in FORMATS:
        raise ValueError(f"Unsupported format: {format}")
    return getattr(CDGDumper(cdg), f"format_{format}")()


def dump_cdg(cdg: ControlDependenceGraph, output_file: str,
             format: str = "dot", diagnostics=None) -> bool:
    """
    Convenience function to dump a CDG in one of the supported formats.

    Returns:
        True if the file was written

    Raises:
        ValueError: If the format is not supported
    """
    if format not in FORMATS:
        raise ValueError(f"Unsupported format: {format}")
    dumper = CDGDumper(cdg, diagnostics)
    return getattr(dumper, f"dump_{format}")(output_file)


def dump_cdg_to_directory(cdg: ControlDependenceGraph, directory: str,
                          formats: Optional[List[str]] = None, diagnostics=None,
                          stem: Optional[str] = None) -> List[str]:
    """
    Dump a CDG in several formats to a directory.

    Files are named ``<stem>_cdg.<format>``; the stem defaults to the
    procedure name.

    Returns:
        The paths that were written successfully
    """
    formats = formats or list(FORMATS)
    try:
        os.makedirs(directory, exist_ok=True)
    except OSError as e:
        message = f"cannot create {directory}: {e}"
        if diagnostics is not None:
            diagnostics.warn(errors.EXPORT_IO_FAILURE, message, directory)
        else:
            LOG.warning("%s", message)
        return []

    stem = stem or cdg.name or "procedure"
    written = []
    for fmt in formats:
        output_file = os.path.join(directory, f"{stem}_cdg.{fmt}")
        if dump_cdg(cdg, output_file, fmt, diagnostics):
            written.append(output_file)
    return written
