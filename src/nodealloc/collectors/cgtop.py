"""
systemd-cgtop sampling over ssh.

Runs ``systemd-cgtop --batch --raw`` on a node for a number of one-second
iterations and averages CPU and memory of the top-level systemd units.
"""

import logging
import re
from typing import Dict, List

import polars as pl

from ..system.commands import build_ssh_command, run_command
from ..validation import SampleSourceError

logger = logging.getLogger(__name__)

# Top-level cgroups that make up the node's system allocation.
UNIT_PATTERN = re.compile(r"^/(system\.slice|init\.scope|kubepods\.slice)$")

# systemd-cgtop reports CPU in percent of one core.
MILLICORES_PER_PERCENT = 10.0
BYTES_PER_MEBIBYTE = 1024.0 * 1024.0

READINGS_SCHEMA = {
    "unit": pl.Utf8,
    "cpu_millicores": pl.Float64,
    "memory_mebibytes": pl.Float64,
}


def _to_number(field: str) -> float:
    # cgtop prints "-" where a value is not available.
    try:
        return float(field)
    except ValueError:
        return 0.0


def parse_cgtop_output(output: str) -> pl.DataFrame:
    """
    Parse raw batch output of systemd-cgtop into per-iteration readings.

    The first reading of each unit has no CPU value: cgtop needs two
    snapshots to compute utilisation.

    Returns:
        Frame with ``unit``, ``cpu_millicores`` and ``memory_mebibytes``
    """
    rows: List[Dict] = []
    seen: Dict[str, int] = {}

    for line in output.splitlines():
        fields = line.split()
        if len(fields) < 4 or not UNIT_PATTERN.match(fields[0]):
            continue

        unit = fields[0]
        occurrence = seen.get(unit, 0)
        seen[unit] = occurrence + 1

        rows.append({
            "unit": unit,
            "cpu_millicores": None if occurrence == 0 else _to_number(fields[2]) * MILLICORES_PER_PERCENT,
            "memory_mebibytes": _to_number(fields[3]) / BYTES_PER_MEBIBYTE,
        })

    return pl.DataFrame(rows, schema=READINGS_SCHEMA)


def average_readings(readings: pl.DataFrame) -> pl.DataFrame:
    """Average CPU and memory readings per unit."""
    return readings.group_by("unit").agg(
        pl.col("cpu_millicores").mean(),
        pl.col("memory_mebibytes").mean(),
    )


class CgtopSampler:
    """
    Samples systemd unit allocation of one node with systemd-cgtop.
    """

    def __init__(
        self,
        node: str,
        iterations: int = 10,
        ssh_binary: str = "ssh",
        ssh_user: str = "",
        use_sudo: bool = True,
        timeout: float = 120.0,
    ):
        self.node = node
        self.iterations = iterations
        self.ssh_binary = ssh_binary
        self.ssh_user = ssh_user
        self.use_sudo = use_sudo
        self.timeout = timeout

    def build_command(self) -> List[str]:
        return build_ssh_command(
            self.node,
            ["systemd-cgtop", "--batch", "--raw", f"--iterations={self.iterations}"],
            ssh_binary=self.ssh_binary,
            ssh_user=self.ssh_user,
            use_sudo=self.use_sudo,
        )

    def sample(self) -> pl.DataFrame:
        """
        Run systemd-cgtop on the node and return per-unit averages.

        Raises:
            SampleSourceError: If the remote command fails
        """
        logger.info(f"Sampling systemd units on '{self.node}' for {self.iterations} iterations")
        returncode, stdout, stderr = run_command(self.build_command(), timeout=self.timeout)
        if returncode != 0:
            raise SampleSourceError(
                f"systemd-cgtop failed on '{self.node}' (exit {returncode}): {stderr.strip()}",
                node=self.node,
                returncode=returncode,
            )

        readings = parse_cgtop_output(stdout)
        if readings.is_empty():
            logger.warning(f"systemd-cgtop on '{self.node}' reported none of the tracked units")
        return average_readings(readings)
