"""
System interaction utilities.

This module wraps the external command-line clients used to reach the
cluster: command execution with logging, ssh command construction,
dependency checks and node discovery.
"""

from .cluster import list_nodes
from .commands import (
    build_ssh_command,
    check_command_installed,
    run_command,
)

__all__ = [
    "build_ssh_command",
    "check_command_installed",
    "list_nodes",
    "run_command",
]
