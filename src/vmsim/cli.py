"""Command-line entry point: run a trace file through a simulator.

Usage::

    vmsim --virtual-pages 16 --physical-frames 4 --page-size 8 \\
          --tlb-entries 2 --page-policy lru --tlb-policy rr trace.txt

The trace format is described in ``vmsim.trace``.  Reads print their
values, then the statistics report follows.  ``-`` reads the trace from
standard input.

The helpers (``build_parser``, ``config_from_args``) are pure and
testable; ``main()`` is the I/O wrapper.
"""

import argparse
import sys
from collections.abc import Sequence
from pathlib import Path

from vmsim.config import ConfigError, ReplacementPolicy, VMConfig
from vmsim.engine import TranslationEngine
from vmsim.trace import TraceError, TraceRunner

EXIT_OK = 0
EXIT_TRACE_ERROR = 1
EXIT_CONFIG_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    """Return the argument parser for the ``vmsim`` command."""
    parser = argparse.ArgumentParser(
        prog="vmsim",
        description="Simulate a TLB and page table over a trace of memory accesses.",
    )
    parser.add_argument("-v", "--virtual-pages", type=int, required=True, help="virtual memory size in pages")
    parser.add_argument("-p", "--physical-frames", type=int, required=True, help="physical memory size in frames")
    parser.add_argument("-s", "--page-size", type=int, required=True, help="page size in words (power of 2)")
    parser.add_argument("-t", "--tlb-entries", type=int, required=True, help="number of TLB entries")
    parser.add_argument("--page-policy", default="rr", help="page replacement: rr|lru|0|1 (default: rr)")
    parser.add_argument("--tlb-policy", default="rr", help="TLB replacement: rr|lru|0|1 (default: rr)")
    parser.add_argument("--verbose", action="store_true", help="print every event and a per-source count")
    parser.add_argument("tracefile", help="trace file path, or '-' for stdin")
    return parser


def config_from_args(args: argparse.Namespace) -> VMConfig:
    """Build a configuration from parsed arguments.

    Raises:
        ConfigError: If a policy name is not recognised.

    """
    return VMConfig(
        virtual_pages=args.virtual_pages,
        physical_frames=args.physical_frames,
        page_size=args.page_size,
        tlb_entries=args.tlb_entries,
        page_policy=ReplacementPolicy.parse(args.page_policy),
        tlb_policy=ReplacementPolicy.parse(args.tlb_policy),
    )


def main(argv: Sequence[str] | None = None) -> int:
    """Run the simulator CLI and return the process exit status."""
    args = build_parser().parse_args(argv)

    try:
        engine = TranslationEngine.create(config_from_args(args))
    except ConfigError as e:
        print(f"vmsim: {e.kind}: {e}", file=sys.stderr)  # noqa: T201
        return EXIT_CONFIG_ERROR

    runner = TraceRunner(engine=engine)
    status = EXIT_OK
    try:
        if args.tracefile == "-":
            output = runner.run(sys.stdin)
        else:
            with Path(args.tracefile).open(encoding="utf-8") as trace:
                output = runner.run(trace)
    except (TraceError, OSError) as e:
        print(f"vmsim: {e}", file=sys.stderr)  # noqa: T201
        output = []
        status = EXIT_TRACE_ERROR

    for line in output:
        print(line)  # noqa: T201
    print(engine.counters.report())  # noqa: T201
    if args.verbose:
        for event in engine.events.events:
            print(event)  # noqa: T201
        counts = ", ".join(f"{source}={n}" for source, n in engine.events.summary().items())
        print(f"Events: {counts}")  # noqa: T201
    engine.destroy()
    return status


def run() -> None:
    """Console-script wrapper around ``main()``."""
    sys.exit(main())
