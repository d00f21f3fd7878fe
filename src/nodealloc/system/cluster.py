"""
Cluster queries through the `oc` client.
"""

import logging
from typing import List, Optional

from ..validation import SampleSourceError
from .commands import run_command

logger = logging.getLogger(__name__)


def list_nodes(oc_binary: str = "oc", timeout: Optional[float] = 60.0) -> List[str]:
    """
    List the names of all cluster nodes.

    Returns:
        Node names in the order reported by the API server

    Raises:
        SampleSourceError: If the cluster cannot be queried
    """
    returncode, stdout, stderr = run_command(
        [oc_binary, "get", "nodes", "-o", "name"], timeout=timeout
    )
    if returncode != 0:
        raise SampleSourceError(
            f"failed to list nodes (exit {returncode}): {stderr.strip()}",
            returncode=returncode,
        )

    nodes = [line.strip().split("/", 1)[-1] for line in stdout.splitlines() if line.strip()]
    logger.info(f"Found {len(nodes)} nodes")
    return nodes
