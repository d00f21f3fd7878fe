"""
Poll loop and convergence decision.

The loop fetches snapshots from a sample source, folds them into a RunState
and stops once every tracked component of every tracked resource class has
been observed for at least the requested duration.
"""

import logging
import time
from typing import Callable, Iterable, List, Optional

from ..models.stats import DEFAULT_RESOURCE_CLASSES, RunState, Snapshot
from ..validation import MeasurementDataError
from .accumulator import fold

logger = logging.getLogger(__name__)


def merge_snapshot(
    run_state: RunState, snapshot: Snapshot, resource_classes: Iterable[str]
) -> RunState:
    """
    Fold every sample of a snapshot into the run state, in place.

    Components absent from the snapshot keep their state. A sample rejected
    by the accumulator is logged and leaves its component unchanged.

    Returns:
        The same run_state, for chaining
    """
    for resource_class in resource_classes:
        accumulators = run_state.classes.setdefault(resource_class, {})
        for name, sample in snapshot.get(resource_class, {}).items():
            try:
                accumulators[name] = fold(accumulators.get(name), sample)
            except MeasurementDataError as e:
                logger.warning(f"Ignoring {resource_class} sample: {e}")

    run_state.polls += 1
    return run_state


def observed_duration(
    run_state: RunState, resource_classes: Optional[Iterable[str]] = None
) -> Optional[float]:
    """
    Shortest observed window across all tracked components.

    Args:
        run_state: State to inspect
        resource_classes: Classes that must be covered, defaults to every
            class present in run_state

    Returns:
        The minimum of ``ended - started`` over all components of all the
        classes, or None while any of the classes has no component yet
    """
    classes = list(resource_classes) if resource_classes is not None else list(run_state.classes)
    if not classes:
        return None

    minimums: List[float] = []
    for resource_class in classes:
        accumulators = run_state.classes.get(resource_class)
        if not accumulators:
            return None
        minimums.append(min(state.duration for state in accumulators.values()))
    return min(minimums)


def is_finished(
    run_state: RunState,
    min_duration_seconds: float,
    resource_classes: Optional[Iterable[str]] = None,
) -> bool:
    """Whether every tracked component has been observed long enough."""
    duration = observed_duration(run_state, resource_classes)
    return duration is not None and duration >= min_duration_seconds


def poll_loop(
    source: Callable[[], Snapshot],
    min_duration_seconds: float,
    poll_interval_seconds: float = 1.0,
    resource_classes: Optional[Iterable[str]] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> RunState:
    """
    Poll a sample source until every tracked component has converged.

    There is no overall deadline: a source that stops advancing, or a
    component that disappears for good, keeps the loop running. Exceptions
    raised by the source propagate to the caller.

    Args:
        source: Callable returning a fresh snapshot on each call
        min_duration_seconds: Observation window required for every component
        poll_interval_seconds: Pause between two polls
        resource_classes: Classes to track, defaults to cpu, rss and usage
        sleep: Sleep function, replaceable in tests

    Returns:
        The finished RunState
    """
    classes = list(resource_classes) if resource_classes else list(DEFAULT_RESOURCE_CLASSES)
    run_state = RunState()

    while True:
        snapshot = source()
        merge_snapshot(run_state, snapshot, classes)

        duration = observed_duration(run_state, classes)
        run_state.finished = duration is not None and duration >= min_duration_seconds
        logger.debug(
            f"Poll {run_state.polls}: observed {duration if duration is not None else 'nothing'}"
            f" of {min_duration_seconds}s"
        )

        if run_state.finished:
            logger.info(
                f"Measurement converged after {run_state.polls} polls "
                f"({duration:.1f}s observed)"
            )
            return run_state

        sleep(poll_interval_seconds)
