"""
Tab-separated report rendering.

The kubelet section shows one column per populated resource class, one row
per component sorted by name and a totals row. Labels and unit suffixes are
part of the output format consumed by other tooling and must stay as they are.
"""

import math
from typing import Dict, List, Optional

import polars as pl

from ..models.stats import RunState

KUBELET_HEADER = "K8s API Node Stats System Component"
CGTOP_HEADER = "Systemd Unit"
TOTAL_LABEL = "Total"

# Column order of the kubelet section.
COLUMN_LABELS: Dict[str, str] = {
    "cpu": "Cores (avg)",
    "rss": "Memory RSS (avg)",
    "usage": "Memory Usage (avg)",
    "memory": "Memory (avg)",
    "working_set": "Memory Working Set (avg)",
}

NANOCORES_PER_MILLICORE = 1_000_000
BYTES_PER_MEBIBYTE = 1024 * 1024
MISSING_VALUE = "-"


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    if value < 0:
        return -int(math.floor(-value + 0.5))
    return int(math.floor(value + 0.5))


def format_usage(resource_class: str, usage: Optional[float]) -> str:
    """
    Convert a raw average into its display unit.

    CPU nanocores become millicores with an ``m`` suffix, byte counts become
    mebibytes with an ``Mi`` suffix.
    """
    if usage is None:
        return MISSING_VALUE
    if resource_class == "cpu":
        return f"{round_half_up(usage / NANOCORES_PER_MILLICORE)}m"
    return f"{round_half_up(usage / BYTES_PER_MEBIBYTE)}Mi"


def _usage_frame(run_state: RunState, classes: List[str]) -> pl.DataFrame:
    names = set()
    for resource_class in classes:
        names.update(run_state.classes[resource_class])

    rows = []
    for name in names:
        row = {"component": name}
        for resource_class in classes:
            state = run_state.classes[resource_class].get(name)
            row[resource_class] = float(state.usage) if state is not None else None
        rows.append(row)

    schema = {"component": pl.Utf8, **{c: pl.Float64 for c in classes}}
    return pl.DataFrame(rows, schema=schema).sort("component")


def render(run_state: RunState, indent: str = "") -> List[str]:
    """
    Render the averaged kubelet statistics as tab-separated rows.

    Args:
        run_state: Final state of a poll loop
        indent: Prefix put in front of every row

    Returns:
        Header row, one row per component in ascending name order, and the
        totals row
    """
    classes = [c for c in COLUMN_LABELS if run_state.classes.get(c)]
    frame = _usage_frame(run_state, classes)

    lines = ["\t".join([f"{indent}{KUBELET_HEADER}"] + [COLUMN_LABELS[c] for c in classes])]

    for row in frame.iter_rows(named=True):
        fields = [f"{indent}  {row['component']}"]
        fields.extend(format_usage(c, row[c]) for c in classes)
        lines.append("\t".join(fields))

    totals = [f"{indent}{TOTAL_LABEL}"]
    totals.extend(format_usage(c, frame[c].sum()) for c in classes)
    lines.append("\t".join(totals))

    return lines


def render_cgtop(averages: pl.DataFrame, indent: str = "") -> List[str]:
    """
    Render per-unit systemd-cgtop averages as tab-separated rows.

    Args:
        averages: Frame with ``unit``, ``cpu_millicores`` and
            ``memory_mebibytes`` columns
        indent: Prefix put in front of every row

    Returns:
        Header row, one row per unit sorted by name, and the totals row.
        Values are truncated to whole units.
    """
    frame = averages.sort("unit")

    lines = [f"{indent}{CGTOP_HEADER}\tCores (avg)\tMemory (avg)"]
    for row in frame.iter_rows(named=True):
        cpu = row["cpu_millicores"] or 0.0
        memory = row["memory_mebibytes"] or 0.0
        lines.append(f"{indent}  {row['unit']}\t{int(cpu)}m\t{int(memory)}Mi")

    total_cpu = frame["cpu_millicores"].fill_null(0.0).sum()
    total_memory = frame["memory_mebibytes"].fill_null(0.0).sum()
    lines.append(f"{indent}{TOTAL_LABEL}\t{int(total_cpu)}m\t{int(total_memory)}Mi")
    return lines
