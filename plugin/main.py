"""
Munin plugin entry point for Sphinx search statistics.

Install it once and symlink it as sphinx_<metric>, e.g.

    ln -s /usr/local/bin/sphinx_ /etc/munin/plugins/sphinx_query_rate

Munin then calls it with no argument (fetch), or with suggest, config,
autoconf or debug.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import List, Optional, TextIO

from models.data_models import Command, Metric
from models.errors import UnsupportedMetric
from services.aggregator import Aggregator
from services.reporter import MetricReporter
from utils.config import PluginConfig

logger = logging.getLogger(__name__)

PROGRAM_PREFIX = "sphinx_"

EXIT_OK = 0
EXIT_AUTOCONF_NO = 1
EXIT_UNSUPPORTED_METRIC = 2

# ──────────────────────────────────────────────────────────────────────────────
# Core dispatch
# ──────────────────────────────────────────────────────────────────────────────


def run(
    command: Command,
    metric_name: Optional[str],
    config: PluginConfig,
    out: Optional[TextIO] = None,
) -> int:
    """Execute one plugin command and return the process exit code"""
    reporter = MetricReporter(config, out)

    if command is Command.SUGGEST:
        reporter.suggest()
        return EXIT_OK

    if command is Command.AUTOCONF:
        return EXIT_OK if reporter.autoconf() else EXIT_AUTOCONF_NO

    try:
        metric = Metric.from_name(metric_name or "")
    except UnsupportedMetric as exc:
        logger.error("%s, expected one of: %s", exc, ", ".join(Metric.names()))
        return EXIT_UNSUPPORTED_METRIC

    if command is Command.CONFIG:
        reporter.describe(metric)
        return EXIT_OK

    aggregate = Aggregator(config).collect(metric)
    if command is Command.DEBUG:
        logger.debug("Processed %d query lines", aggregate.query_lines_processed)
    reporter.value(metric, aggregate)
    return EXIT_OK


# ──────────────────────────────────────────────────────────────────────────────
# CLI
# ──────────────────────────────────────────────────────────────────────────────


def metric_from_program(program: str) -> Optional[str]:
    """Metric name encoded in a sphinx_<metric> symlink name"""
    name = os.path.basename(program)
    if name.startswith(PROGRAM_PREFIX) and len(name) > len(PROGRAM_PREFIX):
        return name[len(PROGRAM_PREFIX):]
    return None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sphinx_",
        description="Munin plugin reporting Sphinx query and index rotation statistics.",
    )
    parser.add_argument(
        "command",
        nargs="?",
        default=Command.FETCH.value,
        choices=[c.value for c in Command],
        help="plugin command (default: fetch)",
    )
    parser.add_argument(
        "--metric",
        help="metric to report; defaults to the suffix of the sphinx_<metric> program name",
    )
    return parser


def main(argv: Optional[List[str]] = None, program: Optional[str] = None) -> int:
    args = build_parser().parse_args(argv)
    command = Command(args.command)

    logging.basicConfig(
        level=logging.DEBUG if command is Command.DEBUG else logging.WARNING,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )

    metric_name = args.metric or metric_from_program(program or sys.argv[0])
    return run(command, metric_name, PluginConfig.from_env())


if __name__ == "__main__":
    sys.exit(main())
