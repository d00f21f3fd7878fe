"""
nodealloc: system resource allocation sampler for OpenShift nodes.

This package measures how much CPU and memory the system components of a
node use: the kubelet's system containers, averaged over time from the
kubelet summary API, and the top-level systemd units, averaged from
systemd-cgtop.

The package is organized into specialized modules:
- config: Configuration loading and validation
- models: Data structures and type definitions
- validation: Input validation and error kinds
- system: External command execution and node discovery
- collectors: Sample sources (kubelet summary API, systemd-cgtop)
- aggregation: Time-weighted accumulation, poll loop and report rendering
- cli: Command-line interface and per-node orchestration

Usage:
    From command line:
        nodealloc [options] [NODE ...]

    Programmatically:
        from nodealloc import KubeletSummarySource, poll_loop, render
        source = KubeletSummarySource("worker-0", ["cpu", "rss", "usage"])
        run_state = poll_loop(source, min_duration_seconds=10)
        print("\\n".join(render(run_state)))
"""

from .config import get_config, clear_config_cache, set_config_path
from .cli import AllocationRunner, main_cli

from .models import (
    AccumulatorState,
    AppConfig,
    RunState,
    Sample,
)

from .aggregation import fold, is_finished, observed_duration, poll_loop, render

from .collectors import CgtopSampler, KubeletSummarySource

from .validation import (
    MeasurementDataError,
    SampleSourceError,
    ValidationError,
)

__version__ = "1.0.0"

__all__ = [
    # Main interfaces
    "get_config",
    "clear_config_cache",
    "set_config_path",
    "AllocationRunner",
    "main_cli",
    # Models
    "AccumulatorState",
    "AppConfig",
    "RunState",
    "Sample",
    # Aggregation
    "fold",
    "is_finished",
    "observed_duration",
    "poll_loop",
    "render",
    # Sources
    "CgtopSampler",
    "KubeletSummarySource",
    # Errors
    "MeasurementDataError",
    "SampleSourceError",
    "ValidationError",
]
