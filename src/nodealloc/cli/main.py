"""
Command-line interface for the nodealloc sampler.

This module provides the CLI entry point: it parses arguments, loads and
overrides the configuration, resolves the nodes to sample and writes the
tab-separated report to standard output. Logs go to standard error.
"""

import argparse
import dataclasses
import logging
import signal
import sys
import tomllib
from pathlib import Path
from typing import List, Optional, Sequence

from ..config import get_config, set_config_path
from ..models.config import AppConfig
from ..models.stats import RESOURCE_CLASS_ATTRIBUTES
from ..system import check_command_installed, list_nodes
from ..validation import (
    SampleSourceError,
    ValidationError,
    handle_cli_error,
    validate_choice_list,
    validate_node_name,
    validate_positive_float,
    validate_positive_integer,
)
from .orchestrator import AllocationRunner

# --- Logging Setup ---
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)-5.5s] %(name)s:%(filename)s:%(lineno)d\t %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nodealloc",
        description="Measure the average resource allocation of node system components.",
    )
    parser.add_argument(
        "nodes",
        nargs="*",
        metavar="NODE",
        help="Nodes to sample. Defaults to all nodes of the cluster.",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        help="Path to the config.toml file.",
    )
    parser.add_argument(
        "-d",
        "--min-duration",
        type=str,
        help="Seconds every system container must be observed for.",
    )
    parser.add_argument(
        "-i",
        "--interval",
        type=str,
        help="Seconds between two polls of the kubelet summary API.",
    )
    parser.add_argument(
        "--classes",
        type=str,
        help=f"Comma-separated resource classes to track. Available: {list(RESOURCE_CLASS_ATTRIBUTES)}",
    )
    parser.add_argument(
        "-j",
        "--max-concurrent-nodes",
        type=str,
        help="Number of nodes sampled at the same time.",
    )
    parser.add_argument(
        "--no-cgtop",
        action="store_true",
        help="Skip the systemd-cgtop section (no ssh access required).",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )
    return parser


def apply_overrides(app_config: AppConfig, args: argparse.Namespace) -> AppConfig:
    """
    Return a copy of the configuration with command-line overrides applied.

    Raises:
        ValidationError: If an override value is invalid
    """
    allocation = app_config.allocation
    general = app_config.general
    cgtop = app_config.cgtop

    if args.min_duration is not None:
        allocation = dataclasses.replace(
            allocation,
            min_duration_seconds=validate_positive_float(
                args.min_duration, min_value=0.0, field_name="--min-duration"
            ),
        )
    if args.interval is not None:
        allocation = dataclasses.replace(
            allocation,
            poll_interval_seconds=validate_positive_float(
                args.interval, min_value=0.01, field_name="--interval"
            ),
        )
    if args.classes is not None:
        allocation = dataclasses.replace(
            allocation,
            resource_classes=validate_choice_list(
                args.classes, choices=list(RESOURCE_CLASS_ATTRIBUTES), field_name="--classes"
            ),
        )
    if args.max_concurrent_nodes is not None:
        general = dataclasses.replace(
            general,
            max_concurrent_nodes=validate_positive_integer(
                args.max_concurrent_nodes, min_value=1, max_value=64,
                field_name="--max-concurrent-nodes",
            ),
        )
    if args.no_cgtop:
        cgtop = dataclasses.replace(cgtop, enabled=False)

    return dataclasses.replace(app_config, allocation=allocation, general=general, cgtop=cgtop)


def resolve_nodes(requested: Sequence[str], app_config: AppConfig) -> List[str]:
    """
    Validate the requested node names, or discover all nodes when none are given.

    Raises:
        ValidationError: If a node name is invalid
        SampleSourceError: If node discovery fails
    """
    if requested:
        return [validate_node_name(node, field_name="NODE argument") for node in requested]
    return list_nodes(
        oc_binary=app_config.collection.oc_binary,
        timeout=app_config.collection.fetch_timeout,
    )


def main_cli(argv: Optional[Sequence[str]] = None) -> None:
    """
    Main command-line interface.

    Raises:
        SystemExit: On configuration errors, validation failures, when no
            nodes are available, or when any node could not be sampled.
    """
    args = build_parser().parse_args(argv)

    if args.config is not None:
        set_config_path(args.config)

    try:
        app_config = apply_overrides(get_config(), args)
    except (FileNotFoundError, ValidationError, tomllib.TOMLDecodeError) as e:
        handle_cli_error(error=e, context="configuration loading", exit_code=1, logger=logger)

    log_level = "DEBUG" if args.verbose else app_config.general.log_level
    logging.getLogger().setLevel(log_level)

    oc_binary = app_config.collection.oc_binary
    if not check_command_installed(oc_binary):
        logger.error(f"'{oc_binary}' is not installed or not in PATH.")
        sys.exit(1)

    if app_config.cgtop.enabled and not check_command_installed(app_config.cgtop.ssh_binary):
        logger.warning(
            f"'{app_config.cgtop.ssh_binary}' is not installed; skipping the systemd-cgtop section."
        )
        app_config = dataclasses.replace(
            app_config, cgtop=dataclasses.replace(app_config.cgtop, enabled=False)
        )

    try:
        nodes = resolve_nodes(args.nodes, app_config)
    except (ValidationError, SampleSourceError) as e:
        handle_cli_error(error=e, context="node selection", exit_code=1, logger=logger)

    if not nodes:
        logger.error("No nodes given!")
        sys.exit(1)

    runner = AllocationRunner(app_config)

    def signal_handler(signum, frame):
        if runner.shutdown_requested:
            logger.warning("Shutdown already in progress. Please be patient.")
            return
        logger.info(f"Signal {signal.strsignal(signum)} received. Initiating graceful shutdown...")
        runner.request_shutdown()

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    logger.info(
        f"Sampling {len(nodes)} node(s) for at least {app_config.allocation.min_duration_seconds}s"
    )

    failed = []
    for report in runner.iter_reports(nodes):
        # Sections that did complete are written even for a failed node.
        if report.lines:
            sys.stdout.write("\n".join(report.lines) + "\n")
            sys.stdout.flush()
        if not report.succeeded:
            failed.append(report.node)

    if runner.shutdown_requested:
        logger.info("Sampling was terminated prematurely due to a shutdown request.")
        sys.exit(1)
    if failed:
        logger.error(f"Failed to sample node(s): {', '.join(failed)}")
        sys.exit(1)

    logger.info("All nodes sampled.")


if __name__ == "__main__":
    main_cli()
