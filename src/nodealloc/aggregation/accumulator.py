"""
Per-component time-weighted accumulation.

Each accepted sample is assumed to hold its reading constant over the
interval since the previous accepted sample, so the running average is

    usage_new = (usage_prev * (ended_prev - started)
                 + value * (t_new - ended_prev)) / (t_new - started)

The first sample has no known interval; it seeds the average and carries
zero weight once a second sample arrives.
"""

from dataclasses import replace
from typing import Optional

from ..models.stats import AccumulatorState, Sample
from ..validation import MeasurementDataError


def fold(prev: Optional[AccumulatorState], sample: Sample) -> AccumulatorState:
    """
    Fold one sample into a component's accumulator.

    Args:
        prev: Current state of the component, None before its first sample
        sample: The new reading

    Returns:
        The new state. ``prev`` itself is returned when the sample repeats the
        timestamp of the latest accepted one.

    Raises:
        MeasurementDataError: If the sample is older than the latest
            accepted one
    """
    value = sample.raw_value
    timestamp = sample.timestamp

    if prev is None:
        return AccumulatorState(
            started=timestamp,
            ended=timestamp,
            count=1,
            initial_value=value,
            latest_value=value,
            min_value=value,
            max_value=value,
            usage=value,
        )

    # The source has not refreshed since the last poll.
    if timestamp == prev.ended:
        return prev

    # Covers t <= started as well, so the window below is always positive.
    if timestamp < prev.ended:
        raise MeasurementDataError(
            f"sample for '{sample.component_name}' at {timestamp} precedes "
            f"the latest sample at {prev.ended} (window started at {prev.started})",
            component_name=sample.component_name,
            started=prev.started,
            timestamp=timestamp,
        )

    window = timestamp - prev.started
    usage = (prev.usage * (prev.ended - prev.started) + value * (timestamp - prev.ended)) / window

    return replace(
        prev,
        ended=timestamp,
        count=prev.count + 1,
        latest_value=value,
        min_value=min(prev.min_value, value),
        max_value=max(prev.max_value, value),
        usage=usage,
    )
