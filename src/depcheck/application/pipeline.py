"""Analysis driver for depcheck.

This module runs control dependence analysis on whole procedures: it builds
the post-dominator tree of a CFG (unless the caller supplies one), constructs
the Control Dependence Graph, and records statistics in the run's context.

Procedures are independent of each other. ``analyze_procedures`` analyzes
several of them on a thread pool, each task with its own context, tree and
graph; only the read-only options are shared.
"""

import logging
from concurrent.futures import ThreadPoolExecutor

from depcheck.analysis.cfg.postdom import build_post_dominator_tree
from depcheck.analysis.cdg.construction import CDGConstructor
from .context import AnalysisContext

LOG = logging.getLogger(__name__)


class ProcedureResult(object):
    """Everything computed for one procedure.

    Attributes:
        cfg: The analyzed CFG
        pdt: Its post-dominator tree
        cdg: The Control Dependence Graph
        diagnostics: The DiagnosticLog of the run that produced it
    """
    __slots__ = "cfg", "pdt", "cdg", "diagnostics"

    def __init__(self, cfg, pdt, cdg, diagnostics):
        self.cfg = cfg
        self.pdt = pdt
        self.cdg = cdg
        self.diagnostics = diagnostics

    @property
    def name(self):
        return self.cdg.name

    def __repr__(self):
        return "ProcedureResult(%r, %r)" % (self.name, self.diagnostics)


def analyze_procedure(cfg, context=None, pdt=None):
    """Build the post-dominator tree and the CDG of one procedure.

    Args:
        cfg: CFG provider of the procedure.
        context: AnalysisContext of the run; a fresh one if None.
        pdt: Post-dominator tree to use instead of computing one.

    Returns:
        A ProcedureResult.
    """
    if context is None:
        context = AnalysisContext()

    if pdt is None:
        pdt = build_post_dominator_tree(cfg, context.options.virtual_exit)

    constructor = CDGConstructor(cfg, pdt, context.diagnostics)
    with context.diagnostics.scope() as log:
        cdg = constructor.construct()
        found = log.errorCount + log.warningCount

    stats = cdg.get_statistics()
    stats["diagnostics"] = found
    stats["candidate_edges"] = len(constructor.candidates)
    stats["skipped_edges"] = len(constructor.skipped)
    context.stats[cdg.name] = stats

    LOG.info("%s: %d controllers, %d dependences, %d edges skipped",
             cdg.name or "<procedure>", stats["controllers"], stats["total_edges"],
             stats["skipped_edges"])

    return ProcedureResult(cfg, pdt, cdg, context.diagnostics)


def analyze_procedures(cfgs, options=None, workers=None):
    """Analyze several procedures concurrently.

    Args:
        cfgs: Iterable of CFG providers.
        options: AnalysisOptions shared by all tasks.
        workers: Maximum number of threads; the executor default if None.

    Returns:
        ProcedureResults in the order of cfgs.
    """
    def task(cfg):
        return analyze_procedure(cfg, AnalysisContext(options))

    with ThreadPoolExecutor(max_workers=workers) as executor:
        return list(executor.map(task, cfgs))
