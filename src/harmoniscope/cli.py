"""
Command line scanner.

Analyses one or more audio files and prints the dominant frequency, the
matched canonical tone and the safety tier for each, optionally writing a
JSON report.
"""

import argparse
import logging
import sys
from pathlib import Path

from harmoniscope.core.safety import safety_warning
from harmoniscope.io.exporter import ReportExporter
from harmoniscope.pipeline import AnalysisConfig, FrequencyPipeline
from harmoniscope.scan import DEFAULT_TIMEOUT, LibraryScanner, ScanOutcome


def format_outcome(outcome: ScanOutcome) -> str:
    """One summary line for a scan outcome."""
    name = Path(str(outcome.item)).name
    if outcome.result is None:
        reason = f" ({outcome.error})" if outcome.error else ""
        return f"{name}: unanalyzed [{outcome.status}]{reason}"

    result = outcome.result
    return (
        f"{name}: {result.detected_hz:.1f} Hz -> {result.canonical.hz} Hz "
        f"{result.canonical.entry.name} ({result.canonical.entry.chakra}), "
        f"{result.safety.tier.name} @ {result.safety.recommended_volume:.0%}"
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Detect dominant frequency and canonical tone of audio files"
    )

    parser.add_argument(
        "audio",
        type=Path,
        nargs="+",
        help="Input audio files (wav, mp3, flac)",
    )

    parser.add_argument(
        "-o", "--output",
        type=Path,
        default=None,
        help="Write a JSON report to this path",
    )

    parser.add_argument(
        "-w", "--window",
        type=int,
        default=None,
        help="Analysis window length, power of two (default: auto, max 32768)",
    )

    parser.add_argument(
        "--high-cutoff",
        type=float,
        default=4000.0,
        help="Highest analysed frequency in Hz (default: 4000)",
    )

    parser.add_argument(
        "-d", "--duration",
        type=float,
        default=3.0,
        help="Excerpt length in seconds (default: 3)",
    )

    parser.add_argument(
        "-t", "--timeout",
        type=float,
        default=DEFAULT_TIMEOUT,
        help=f"Per-file timeout in seconds (default: {DEFAULT_TIMEOUT:.0f})",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    return parser


def main(argv=None) -> int:
    """CLI entry point."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    missing = [p for p in args.audio if not p.exists()]
    for path in missing:
        print(f"Error: Audio file not found: {path}", file=sys.stderr)
    if missing:
        return 1

    try:
        config = AnalysisConfig(
            window_length=args.window,
            high_cutoff=args.high_cutoff,
            excerpt_duration=args.duration,
        )
        scanner = LibraryScanner(FrequencyPipeline(config), timeout=args.timeout)
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2

    outcomes = scanner.scan_sync(args.audio)

    for outcome in outcomes:
        print(format_outcome(outcome), flush=True)
        if outcome.result is not None:
            warning = safety_warning(outcome.result.detected_hz)
            if warning:
                print(warning, flush=True)

    if args.output is not None:
        path = ReportExporter().export_json(outcomes, args.output)
        print(f"Report written to {path}", flush=True)

    return 0


if __name__ == "__main__":
    sys.exit(main())
