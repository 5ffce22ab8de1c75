"""CLI entrypoint: summarize a file of numbers or run the HTTP service."""

from __future__ import annotations

import argparse
import dataclasses
import logging
import math
import sys

from statscalc.config import load_settings
from statscalc.observability.logging import setup_logging
from statscalc.services.calculator import Calculator
from statscalc.services.errors import StatsCalcError

logger = logging.getLogger("statscalc.cli")


def run_report(input_path: str, output_path: str | None) -> int:
    """Read INPUT and print its summary (or write it to OUTPUT). Returns an exit code."""
    calc = Calculator()
    try:
        added = calc.read_from(input_path)
        logger.info("read %d value(s) from %s", added, input_path)
        if not all(map(math.isfinite, (calc.get_sum(), calc.get_standard_deviation()))):
            logger.warning("statistics for %s overflow or include non-finite values", input_path)
        if output_path:
            calc.write_summary_to(output_path)
            logger.info("wrote summary to %s", output_path)
        else:
            calc.print_summary()
    except (OSError, StatsCalcError) as exc:
        logger.error("report failed: %s", exc)
        return 1
    return 0


def run_serve(host: str, port: int) -> int:
    import uvicorn

    from statscalc.main import create_app

    settings = dataclasses.replace(load_settings(), host=host, port=port)
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)
    return 0


def main(argv: list[str] | None = None) -> int:
    settings = load_settings()
    parser = argparse.ArgumentParser(
        prog="statscalc",
        description="Sum, mean and sample standard deviation of whitespace-separated numbers.",
        epilog="Report: %(prog)s report FILE [-o OUT]  |  Service: %(prog)s serve",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    report = sub.add_parser("report", help="Summarize a file of numbers")
    report.add_argument("input", help="Text file of whitespace-separated numbers")
    report.add_argument(
        "-o",
        "--output",
        default=None,
        help="Write the summary to this file instead of stdout",
    )

    serve = sub.add_parser("serve", help="Run the handle-based HTTP service")
    serve.add_argument("--host", default=settings.host)
    serve.add_argument("--port", type=int, default=settings.port)

    args = parser.parse_args(argv)
    setup_logging(settings.log_level)

    if args.command == "report":
        return run_report(args.input, args.output)
    return run_serve(args.host, args.port)


if __name__ == "__main__":
    sys.exit(main())
