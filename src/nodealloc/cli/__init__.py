"""
Command-line interface for the nodealloc package.

This module provides the main CLI entry point and the per-node orchestration.
"""

from .main import main_cli
from .orchestrator import AllocationRunner, NodeReport

__all__ = [
    "AllocationRunner",
    "NodeReport",
    "main_cli",
]
