"""
Data models for the allocation sampler.

Configuration Models:
- Settings for logging, concurrency and report layout
- Poll loop parameters and tracked resource classes
- Remote access settings for `oc` and `ssh`

Sampling Models:
- Samples read from a source and the snapshots that group them
- Per-component accumulator state
- Run state owned by a single poll loop
"""

from .config import (
    AllocationConfig,
    AppConfig,
    CgtopConfig,
    CollectionConfig,
    GeneralConfig,
)
from .stats import (
    DEFAULT_RESOURCE_CLASSES,
    RESOURCE_CLASS_ATTRIBUTES,
    AccumulatorState,
    RunState,
    Sample,
    Snapshot,
)

__all__ = [
    # Configuration
    "AllocationConfig",
    "AppConfig",
    "CgtopConfig",
    "CollectionConfig",
    "GeneralConfig",
    # Sampling
    "DEFAULT_RESOURCE_CLASSES",
    "RESOURCE_CLASS_ATTRIBUTES",
    "AccumulatorState",
    "RunState",
    "Sample",
    "Snapshot",
]
