"""
Per-node report orchestration.

This module provides the AllocationRunner that samples one or more nodes
concurrently and assembles each node's report from numbered sections:

    0. the ``Node`` header line
    1. systemd unit averages from systemd-cgtop (optional)
    2. system container averages from the kubelet summary API

Sections of a node are sampled at the same time and emitted in section
order; node reports are emitted in the order the nodes were given.
"""

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterator, List, Optional, Sequence

from ..aggregation import poll_loop, render, render_cgtop
from ..collectors import CgtopSampler, KubeletSummarySource
from ..models.config import AppConfig
from ..validation import ErrorSeverity, handle_error

logger = logging.getLogger(__name__)


class ShutdownRequested(Exception):
    """Raised inside a poll loop once a shutdown has been requested."""


@dataclass
class NodeReport:
    """The rendered sections of one node and the first error raised while sampling it."""

    node: str
    lines: List[str] = field(default_factory=list)
    error: Optional[Exception] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


class AllocationRunner:
    """
    Samples the system allocation of cluster nodes.

    Each node gets its own poll loop and run state; nothing is shared
    between nodes.
    """

    def __init__(self, app_config: AppConfig):
        self.config = app_config
        self._shutdown_event = threading.Event()

    def request_shutdown(self) -> None:
        """Stop all poll loops at their next pause."""
        logger.info("Shutdown requested, stopping poll loops")
        self._shutdown_event.set()

    @property
    def shutdown_requested(self) -> bool:
        return self._shutdown_event.is_set()

    def _sleep(self, seconds: float) -> None:
        if self._shutdown_event.wait(seconds):
            raise ShutdownRequested("shutdown requested during measurement")

    # --- Sections ---

    def header_section(self, node: str) -> List[str]:
        return [f"Node\t{node}\t\t"]

    def cgtop_section(self, node: str) -> List[str]:
        cgtop = self.config.cgtop
        sampler = CgtopSampler(
            node,
            iterations=cgtop.iterations,
            ssh_binary=cgtop.ssh_binary,
            ssh_user=cgtop.ssh_user,
            use_sudo=cgtop.use_sudo,
            timeout=cgtop.timeout,
        )
        return render_cgtop(sampler.sample(), indent=self.config.general.indent)

    def kubelet_section(self, node: str) -> List[str]:
        allocation = self.config.allocation
        source = KubeletSummarySource(
            node,
            allocation.resource_classes,
            oc_binary=self.config.collection.oc_binary,
            fetch_timeout=self.config.collection.fetch_timeout,
        )
        run_state = poll_loop(
            source,
            min_duration_seconds=allocation.min_duration_seconds,
            poll_interval_seconds=allocation.poll_interval_seconds,
            resource_classes=allocation.resource_classes,
            sleep=self._sleep,
        )
        return render(run_state, indent=self.config.general.indent)

    def sections(self) -> List[Callable[[str], List[str]]]:
        """Section builders in report order."""
        sections = [self.header_section]
        if self.config.cgtop.enabled:
            sections.append(self.cgtop_section)
        sections.append(self.kubelet_section)
        return sections

    # --- Execution ---

    def sample_node(self, node: str) -> NodeReport:
        """
        Sample one node and render its report.

        A failing section is logged and left out of the report; the other
        sections are still emitted. The first error is recorded in the
        returned report. An interrupted node yields no lines.
        """
        logger.info(f">>> Sampling node: {node}")
        sections = self.sections()
        lines: List[str] = []
        error: Optional[Exception] = None
        interrupted = False

        with ThreadPoolExecutor(
            max_workers=len(sections), thread_name_prefix=f"alloc-{node}"
        ) as pool:
            futures: Dict[int, Future] = {
                number: pool.submit(section, node)
                for number, section in enumerate(sections)
            }
            for number in sorted(futures):
                try:
                    lines.extend(futures[number].result())
                except Exception as e:
                    error = error or e
                    if isinstance(e, ShutdownRequested) or self.shutdown_requested:
                        interrupted = True
                        logger.warning(f"Sampling of node '{node}' interrupted")
                    else:
                        handle_error(
                            error=e,
                            context=f"sampling node '{node}'",
                            severity=ErrorSeverity.ERROR,
                            reraise=False,
                            logger=logger,
                        )

        if interrupted:
            return NodeReport(node=node, error=error)

        logger.info(f"<<< Finished node: {node}")
        return NodeReport(node=node, lines=lines, error=error)

    def iter_reports(self, nodes: Sequence[str]) -> Iterator[NodeReport]:
        """
        Sample nodes concurrently, yielding reports in the order of ``nodes``.
        """
        if not nodes:
            return

        max_workers = min(len(nodes), self.config.general.max_concurrent_nodes)
        with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="NodeWorker") as pool:
            futures = [pool.submit(self.sample_node, node) for node in nodes]
            for future in futures:
                yield future.result()

    def run(self, nodes: Sequence[str]) -> List[NodeReport]:
        return list(self.iter_reports(nodes))
