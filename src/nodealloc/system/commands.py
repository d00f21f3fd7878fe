"""
Command execution utilities.

This module provides functions for executing the external clients the
sampler drives (`oc`, `ssh`), building their command lines, and checking
that they are installed.
"""

import logging
import shlex
import shutil
import subprocess
from typing import List, Optional, Sequence, Tuple

from ..validation import handle_subprocess_error

logger = logging.getLogger(__name__)


def run_command(
    command: Sequence[str], timeout: Optional[float] = None
) -> Tuple[int, str, str]:
    """Execute a command and capture its output.

    Args:
        command: The argument vector to execute.
        timeout: Seconds after which the command is killed, None for no limit.

    Returns:
        Tuple of (return_code, stdout_string, stderr_string).
        return_code is -1 when the command could not be run or timed out.

    Note:
        Uses UTF-8 encoding with error replacement for robust text handling.
    """
    command_str = shlex.join(command)
    logger.debug(f"Executing command: '{command_str}'")
    try:
        process = subprocess.run(
            list(command),
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            timeout=timeout,
            check=False,
        )
        return process.returncode, process.stdout, process.stderr
    except FileNotFoundError as e:
        handle_subprocess_error(error=e, command=command_str, reraise=False, logger=logger)
        return -1, "", f"Error: Command not found '{command[0]}'"
    except subprocess.TimeoutExpired as e:
        handle_subprocess_error(error=e, command=command_str, reraise=False, logger=logger)
        return -1, "", f"Error: Command timed out after {timeout}s"


def build_ssh_command(
    node: str,
    remote_command: Sequence[str],
    ssh_binary: str = "ssh",
    ssh_user: str = "",
    use_sudo: bool = False,
) -> List[str]:
    """Build the argument vector running a command on a node over ssh.

    Examples:
        >>> build_ssh_command("worker-0", ["uptime"], ssh_user="core", use_sudo=True)
        ['ssh', '-o', 'BatchMode=yes', 'core@worker-0', 'sudo', 'uptime']
    """
    target = f"{ssh_user}@{node}" if ssh_user else node
    remote = (["sudo"] if use_sudo else []) + list(remote_command)
    return [ssh_binary, "-o", "BatchMode=yes", target] + remote


def check_command_installed(name: str) -> bool:
    """Check if a command is available in the system PATH."""
    return shutil.which(name) is not None
