"""
Context management for depcheck analyses.

This module provides the configuration and per-run state shared by the
analysis driver and the command line.

**Context Types:**
- `AnalysisOptions`: Settings of an analysis run
- `AnalysisContext`: Options, diagnostic log and statistics of one run
"""

import collections

from depcheck.util.application.errorhandler import DiagnosticLog


class AnalysisOptions(object):
    """
    Settings of an analysis run.

    Attributes:
        virtual_exit: Normalize procedures with zero or several exits with a
            virtual exit node before post-dominance analysis. When disabled
            the post-dominator structure of such a procedure is a forest, and
            edges spanning two of its trees are skipped.
        export_format: Format used when exporting a CDG ("dot", "text" or
            "json").
        strict: Record warnings as errors, so that any diagnostic makes the
            run fail.
    """
    __slots__ = "virtual_exit", "export_format", "strict"

    def __init__(self, virtual_exit=True, export_format="dot", strict=False):
        self.virtual_exit = virtual_exit
        self.export_format = export_format
        self.strict = strict

    @classmethod
    def from_args(cls, args):
        """Build options from an argparse namespace."""
        return cls(
            virtual_exit=not getattr(args, "no_virtual_exit", False),
            export_format=getattr(args, "format", "dot"),
            strict=getattr(args, "strict", False),
        )

    def __repr__(self):
        return "AnalysisOptions(virtual_exit=%r, export_format=%r, strict=%r)" % (
            self.virtual_exit, self.export_format, self.strict)


class AnalysisContext(object):
    """
    Context shared by the analyses of one run.

    Attributes:
        options: AnalysisOptions of the run
        diagnostics: DiagnosticLog collecting recoverable conditions
        stats: Per-procedure statistics (procedure name -> dict)
    """
    __slots__ = "options", "diagnostics", "stats"

    def __init__(self, options=None, diagnostics=None):
        self.options = options if options is not None else AnalysisOptions()
        self.diagnostics = diagnostics if diagnostics is not None else DiagnosticLog(self.options.strict)
        self.stats = collections.defaultdict(dict)
