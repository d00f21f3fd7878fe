"""
Sampling and aggregation data models.

This module defines the structures that flow through a poll loop: the
samples read from a source, the per-component accumulator state, and the
run state that owns all accumulators of one node.
"""

from dataclasses import dataclass, field
from typing import Dict, Tuple

# Resource class -> (kubelet stats section, attribute holding the raw value).
RESOURCE_CLASS_ATTRIBUTES: Dict[str, Tuple[str, str]] = {
    "cpu": ("cpu", "usageNanoCores"),
    "rss": ("memory", "rssBytes"),
    "usage": ("memory", "usageBytes"),
    "memory": ("memory", "usageBytes"),
    "working_set": ("memory", "workingSetBytes"),
}

DEFAULT_RESOURCE_CLASSES = ["cpu", "rss", "usage"]


@dataclass(frozen=True)
class Sample:
    """
    One reading of a component at a point in time.

    Attributes:
        component_name: Name of the component, unique within a resource class.
        timestamp: Seconds since epoch at which the source took the reading.
        raw_value: Instantaneous reading (nanocores or bytes), not a delta.
    """

    component_name: str
    timestamp: float
    raw_value: float


@dataclass(frozen=True)
class AccumulatorState:
    """
    Running statistics of one component within one resource class.

    ``usage`` is the time-weighted average of all accepted samples; the
    remaining fields record the observed window and value range.
    """

    started: float
    ended: float
    count: int
    initial_value: float
    latest_value: float
    min_value: float
    max_value: float
    usage: float

    @property
    def duration(self) -> float:
        """Seconds observed between the first and the latest accepted sample."""
        return self.ended - self.started


# Resource class -> component name -> sample taken in one poll.
Snapshot = Dict[str, Dict[str, Sample]]


@dataclass
class RunState:
    """
    State of one poll loop: accumulators by resource class and component.
    """

    # Resource class -> component name -> accumulator.
    classes: Dict[str, Dict[str, AccumulatorState]] = field(default_factory=dict)
    # Set once every tracked component has been observed long enough.
    finished: bool = False
    # Number of snapshots fetched so far.
    polls: int = 0
