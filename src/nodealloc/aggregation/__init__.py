"""
Streaming statistics aggregation.

- accumulator: time-weighted folding of one sample into a component's state
- controller: the poll loop and its convergence decision
- renderer: tab-separated report tables
"""

from .accumulator import fold
from .controller import is_finished, merge_snapshot, observed_duration, poll_loop
from .renderer import format_usage, render, render_cgtop, round_half_up

__all__ = [
    "fold",
    "is_finished",
    "merge_snapshot",
    "observed_duration",
    "poll_loop",
    "format_usage",
    "render",
    "render_cgtop",
    "round_half_up",
]
