"""
Error handling for depcheck analyses.

This module defines the exception classes raised by the dependence analyses
and the classification names used for recoverable diagnostics.

Exceptions are reserved for programmer errors and broken invariants. Conditions
the analysis can recover from (a missing common ancestor, an unsupported
memory access, a failed export) are recorded as diagnostics instead, see
``depcheck.util.application.errorhandler``.
"""

# Diagnostic classifications
MISSING_ANCESTOR = "MissingAncestor"
UNSUPPORTED_ACCESS_KIND = "UnsupportedAccessKind"
EXPORT_IO_FAILURE = "ExportIOFailure"


class DepcheckError(Exception):
    """Base class for all depcheck exceptions."""
    pass


class InternalError(DepcheckError):
    """
    Exception raised for internal errors in depcheck.

    Indicates an inconsistent collaborator (for example a post-dominator tree
    whose ancestor queries disagree with its parent links) or a bug, as
    opposed to an error in the analyzed procedure.
    """
    pass


class PreconditionError(DepcheckError):
    """
    Exception raised when a caller breaks an operation's contract.

    Examples are querying a node that is not part of the supplied CFG or
    post-dominator tree, or feeding a malformed CFG description.
    """
    pass


class FrozenGraphError(DepcheckError):
    """Exception raised when a finished dependence graph is mutated."""
    pass


class AnalysisAbort(DepcheckError):
    """
    Exception raised to abort an analysis run.

    Raised by ``DiagnosticLog.finalize`` when errors were recorded.
    """
    pass


def abort(msg=None):
    """
    Abort the analysis with an optional message.

    Raises:
        AnalysisAbort: Always raises this exception
    """
    raise AnalysisAbort(msg)
