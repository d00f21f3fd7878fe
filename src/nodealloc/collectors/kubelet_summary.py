"""
Kubelet summary API sample source.

Reads ``/api/v1/nodes/<node>/proxy/stats/summary`` through ``oc get --raw``
and extracts the readings of the node's system containers (kubelet,
runtime, pods, misc).
"""

import json
import logging
from datetime import datetime
from typing import Any, Dict, Iterable, Optional

from ..models.stats import RESOURCE_CLASS_ATTRIBUTES, Sample, Snapshot
from ..system.commands import run_command
from ..validation import SampleSourceError
from .base import AbstractSampleSource

logger = logging.getLogger(__name__)


def parse_timestamp(value: str) -> float:
    """
    Convert an RFC 3339 timestamp into seconds since epoch.

    Raises:
        ValueError: If the value is not a valid timestamp
    """
    return datetime.fromisoformat(value.replace("Z", "+00:00")).timestamp()


def _read_sample(container: Dict[str, Any], name: str, resource_class: str) -> Optional[Sample]:
    section, attribute = RESOURCE_CLASS_ATTRIBUTES[resource_class]
    stats = container.get(section)
    if not isinstance(stats, dict):
        return None

    value = stats.get(attribute)
    time_str = stats.get("time")
    if value is None or time_str is None:
        return None

    try:
        return Sample(component_name=name, timestamp=parse_timestamp(time_str), raw_value=float(value))
    except (AttributeError, TypeError, ValueError) as e:
        logger.debug(f"Skipping {resource_class} reading of '{name}': {e}")
        return None


def extract_snapshot(document: Dict[str, Any], resource_classes: Iterable[str]) -> Snapshot:
    """
    Build a snapshot from a parsed stats/summary document.

    Args:
        document: Parsed JSON of the summary endpoint
        resource_classes: Classes to extract

    Returns:
        Snapshot with one entry per requested class; containers lacking a
        reading for a class are absent from that class
    """
    node_stats = document.get("node") or {}
    containers = node_stats.get("systemContainers") or []

    snapshot: Snapshot = {resource_class: {} for resource_class in resource_classes}
    for container in containers:
        name = container.get("name")
        if not name:
            continue
        for resource_class, samples in snapshot.items():
            sample = _read_sample(container, name, resource_class)
            if sample is not None:
                samples[name] = sample
    return snapshot


class KubeletSummarySource(AbstractSampleSource):
    """
    Sample source backed by the kubelet summary API of one node.
    """

    def __init__(
        self,
        node: str,
        resource_classes: Iterable[str],
        oc_binary: str = "oc",
        fetch_timeout: Optional[float] = 60.0,
    ):
        super().__init__(node, resource_classes)
        self.oc_binary = oc_binary
        self.fetch_timeout = fetch_timeout

    @property
    def stats_path(self) -> str:
        return f"/api/v1/nodes/{self.node}/proxy/stats/summary"

    def fetch_snapshot(self) -> Snapshot:
        command = [self.oc_binary, "get", "--raw", self.stats_path]
        returncode, stdout, stderr = run_command(command, timeout=self.fetch_timeout)
        if returncode != 0:
            raise SampleSourceError(
                f"failed to fetch node stats of '{self.node}' (exit {returncode}): {stderr.strip()}",
                node=self.node,
                returncode=returncode,
            )

        try:
            document = json.loads(stdout)
        except json.JSONDecodeError as e:
            raise SampleSourceError(
                f"node stats of '{self.node}' are not valid JSON: {e}", node=self.node
            ) from e

        if not isinstance(document, dict):
            raise SampleSourceError(
                f"unexpected node stats document for '{self.node}'", node=self.node
            )

        return extract_snapshot(document, self.resource_classes)
