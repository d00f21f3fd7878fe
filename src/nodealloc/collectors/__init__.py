"""
Sample sources for node allocation statistics.

- AbstractSampleSource: interface of snapshot-producing sources
- KubeletSummarySource: system container readings from the kubelet summary API
- CgtopSampler: systemd unit averages from systemd-cgtop over ssh
"""

from .base import AbstractSampleSource
from .cgtop import CgtopSampler, average_readings, parse_cgtop_output
from .kubelet_summary import KubeletSummarySource, extract_snapshot, parse_timestamp

__all__ = [
    "AbstractSampleSource",
    "CgtopSampler",
    "KubeletSummarySource",
    "average_readings",
    "extract_snapshot",
    "parse_cgtop_output",
    "parse_timestamp",
]
