"""
CLI functionality for control dependence analysis.

Procedures are read from a JSON file holding one procedure object or a list
of them, in the form accepted by ``ControlFlowGraph.from_mapping``.
"""

import collections
import json
import logging
import sys
from pathlib import Path

from depcheck.analysis.cfg.graph import ControlFlowGraph
from depcheck.analysis.cfg.postdom import build_post_dominator_tree
from depcheck.analysis.cdg.dump import FORMATS, CDGDumper, dump_cdg_to_directory, format_cdg
from depcheck.application.context import AnalysisOptions
from depcheck.application.errors import AnalysisAbort, PreconditionError
from depcheck.application.pipeline import analyze_procedures

LOG = logging.getLogger(__name__)


def load_procedures(input_path):
    """Read the CFGs described in a JSON file.

    Raises:
        OSError: If the file cannot be read
        ValueError: If it is not valid JSON
        PreconditionError: If a procedure description is malformed
    """
    with open(input_path) as f:
        data = json.load(f)
    if isinstance(data, dict):
        data = [data]
    if not isinstance(data, list):
        raise PreconditionError("expected a procedure or a list of procedures")
    return [ControlFlowGraph.from_mapping(entry) for entry in data]


def file_stems(results):
    """Name the output file of every result.

    Unnamed procedures are called "procedure". A name shared by several
    procedures gets the position appended, so no export overwrites another.
    """
    counts = collections.Counter(result.name or "procedure" for result in results)
    stems = []
    for i, result in enumerate(results):
        stem = result.name or "procedure"
        stems.append(stem if counts[stem] == 1 else f"{stem}_{i}")
    return stems


def run_cdg(args):
    """Build and print or export the CDG of every procedure in the input."""
    try:
        cfgs = load_procedures(args.input)
    except (OSError, ValueError, PreconditionError) as e:
        print(f"Error: cannot load '{args.input}': {e}", file=sys.stderr)
        return 1

    options = AnalysisOptions.from_args(args)
    results = analyze_procedures(cfgs, options, args.jobs)

    failed = False
    if args.output_dir:
        for stem, result in zip(file_stems(results), results):
            written = dump_cdg_to_directory(result.cdg, str(args.output_dir),
                                            [options.export_format], result.diagnostics, stem)
            failed = failed or not written
            for path in written:
                if args.verbose:
                    print(f"CDG dumped to: {path}")
    else:
        if options.export_format == "json" and len(results) > 1:
            output = json.dumps([CDGDumper(result.cdg).to_json_data() for result in results],
                                indent=2)
        else:
            output = "\n".join(format_cdg(result.cdg, options.export_format) for result in results)
        if not output.endswith("\n"):
            output += "\n"
        if args.output:
            try:
                with open(args.output, "w") as f:
                    f.write(output)
            except OSError as e:
                LOG.warning("cannot write %s: %s", args.output, e)
                failed = True
        else:
            sys.stdout.write(output)

    status = 1 if failed else 0
    for result in results:
        if args.verbose:
            print(f"{result.name}: {result.diagnostics.statusString()}", file=sys.stderr)
            result.diagnostics.flush(sys.stderr)
        try:
            result.diagnostics.finalize()
        except AnalysisAbort as e:
            print(f"Error: {result.name}: {e}", file=sys.stderr)
            status = 2
    return status


def run_postdom(args):
    """Print the immediate post-dominator of every block."""
    try:
        cfgs = load_procedures(args.input)
    except (OSError, ValueError, PreconditionError) as e:
        print(f"Error: cannot load '{args.input}': {e}", file=sys.stderr)
        return 1

    for cfg in cfgs:
        pdt = build_post_dominator_tree(cfg, not args.no_virtual_exit)
        print(f"Post-dominator tree for {cfg.name}:")
        for node in pdt.nodes():
            print(f"  {node} -> {pdt.immediate_dominator(node)}")
    return 0


def _add_common_arguments(parser):
    parser.add_argument("input", type=Path, help="JSON file describing one or more procedures")
    parser.add_argument(
        "--no-virtual-exit",
        action="store_true",
        help="Do not join multiple exits under a virtual exit node",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable verbose output"
    )


def add_cdg_parser(subparsers):
    """Add the cdg subcommand to the argument parser."""
    parser = subparsers.add_parser(
        "cdg", help="Compute control dependence graphs"
    )
    _add_common_arguments(parser)

    parser.add_argument(
        "--format",
        "-f",
        choices=FORMATS,
        default="dot",
        help="Output format (default: dot)",
    )
    parser.add_argument(
        "--output", "-o", type=Path, help="Output file (default: stdout)"
    )
    parser.add_argument(
        "--output-dir", type=Path, help="Write one file per procedure to this directory"
    )
    parser.add_argument(
        "--jobs", "-j", type=int, default=None, help="Number of procedures analyzed in parallel"
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Fail when any diagnostic is recorded",
    )

    parser.set_defaults(func=run_cdg)


def add_postdom_parser(subparsers):
    """Add the postdom subcommand to the argument parser."""
    parser = subparsers.add_parser(
        "postdom", help="Print post-dominator trees"
    )
    _add_common_arguments(parser)

    parser.set_defaults(func=run_postdom)
