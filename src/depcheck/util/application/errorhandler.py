"""
Diagnostic collection and reporting.

This module provides the diagnostic log used by the analyses to record
recoverable conditions. A diagnostic never stops the analysis that emits it;
the caller decides afterwards whether the collected diagnostics are fatal
(see ``DiagnosticLog.finalize``).
"""

import logging
from typing import NamedTuple, Any

from depcheck.application import errors

LOG = logging.getLogger(__name__)


class DiagnosticScope(object):
    """Context manager isolating diagnostic counts.

    Inside the scope the log counts from zero; on exit the counts from
    before the scope are added back, so the outer totals stay complete.

    Example:
        with log.scope():
            constructor.construct()
            found = log.errorCount + log.warningCount
    """

    __slots__ = "log"

    def __init__(self, log):
        self.log = log

    def __enter__(self):
        self.log._push()
        return self.log

    def __exit__(self, type, value, tb):
        self.log._pop()


class Diagnostic(NamedTuple):
    """A single recorded condition.

    Attributes:
        classification: Diagnostic kind, e.g. ``errors.MISSING_ANCESTOR``.
        message: Human readable description.
        subject: The object the diagnostic is about (an edge, an instruction,
            a file name), or None.
        severity: "warning" or "error".
    """
    classification: str
    message: str
    subject: Any = None
    severity: str = "warning"

    def __str__(self):
        return "%s: %s" % (self.classification, self.message)


class DiagnosticLog(object):
    """Collects warnings and errors produced during an analysis.

    Every recorded diagnostic is also forwarded to the logging module, so a
    configured logger sees them as they happen while the log keeps them for
    later inspection.

    Attributes:
        errorCount: Number of errors recorded.
        warningCount: Number of warnings recorded.
        buffer: Recorded diagnostics, oldest first.
        warningsAsErrors: Record warnings as errors, making them fatal in
            finalize.
    """

    def __init__(self, warningsAsErrors=False):
        self.warningsAsErrors = warningsAsErrors

        self.errorCount = 0
        self.warningCount = 0

        self.buffer = []
        self.stack = []

    def error(self, classification, message, subject=None):
        """Record an error."""
        diagnostic = Diagnostic(classification, message, subject, "error")
        self.buffer.append(diagnostic)
        self.errorCount += 1
        LOG.error("%s", diagnostic)
        return diagnostic

    def warn(self, classification, message, subject=None):
        """Record a warning.

        Recorded as an error instead when warningsAsErrors is set.
        """
        if self.warningsAsErrors:
            return self.error(classification, message, subject)
        diagnostic = Diagnostic(classification, message, subject, "warning")
        self.buffer.append(diagnostic)
        self.warningCount += 1
        LOG.warning("%s", diagnostic)
        return diagnostic

    def of_kind(self, classification):
        """Return the diagnostics with the given classification."""
        return [d for d in self.buffer if d.classification == classification]

    def statusString(self):
        """Get formatted status string.

        Returns:
            String describing error and warning counts.
        """
        return "%d errors, %d warnings" % (self.errorCount, self.warningCount)

    def finalize(self):
        """Raise if any errors were recorded.

        Raises:
            AnalysisAbort: If any errors were recorded.
        """
        if self.errorCount > 0:
            errors.abort(self.statusString())

    def flush(self, out):
        """Write the buffered diagnostics to out, one per line, and clear
        the buffer. Counts are not affected."""
        for diagnostic in self.buffer:
            out.write("%s: %s\n" % (diagnostic.severity, diagnostic))
        self.buffer = []

    def _push(self):
        self.stack.append((self.errorCount, self.warningCount))
        self.errorCount = 0
        self.warningCount = 0

    def _pop(self):
        errorCount, warningCount = self.stack.pop()
        self.errorCount += errorCount
        self.warningCount += warningCount

    def scope(self):
        """Create a DiagnosticScope for use in a with statement."""
        return DiagnosticScope(self)

    def __iter__(self):
        return iter(self.buffer)

    def __len__(self):
        return len(self.buffer)

    def __repr__(self):
        return "DiagnosticLog(%s)" % self.statusString()
