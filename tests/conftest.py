"""
Pytest configuration and shared fixtures for the nodealloc test suite.
"""

import shutil
import sys
import tempfile
from pathlib import Path
from unittest.mock import Mock, patch

import pytest

# Add src to Python path for testing
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


# ============================================================================
# Test Configuration
# ============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")


# ============================================================================
# Core Fixtures
# ============================================================================


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    temp_path = tempfile.mkdtemp()
    yield Path(temp_path)
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def sample_config_data():
    """Sample configuration data for testing."""
    return {
        "general": {
            "log_level": "INFO",
            "max_concurrent_nodes": 2,
            "indent": "\t",
        },
        "allocation": {
            "min_duration_seconds": 10,
            "poll_interval_seconds": 1,
            "resource_classes": ["cpu", "rss", "usage"],
        },
        "collection": {
            "oc_binary": "oc",
            "fetch_timeout": 30,
        },
        "cgtop": {
            "enabled": True,
            "iterations": 10,
            "ssh_binary": "ssh",
            "ssh_user": "core",
            "use_sudo": True,
            "timeout": 60,
        },
    }


@pytest.fixture
def config_file(temp_dir, sample_config_data):
    """Write the sample configuration to a temporary config.toml."""
    import toml

    path = temp_dir / "config.toml"
    with open(path, "w") as f:
        toml.dump(sample_config_data, f)
    return path


def make_summary(time_str, containers):
    """
    Build a stats/summary document.

    ``containers`` maps a container name to (usageNanoCores, rssBytes, usageBytes).
    """
    system_containers = []
    for name, (nanocores, rss, usage) in containers.items():
        system_containers.append({
            "name": name,
            "startTime": "2024-05-01T09:00:00Z",
            "cpu": {
                "time": time_str,
                "usageNanoCores": nanocores,
                "usageCoreNanoSeconds": 123456789,
            },
            "memory": {
                "time": time_str,
                "usageBytes": usage,
                "workingSetBytes": usage,
                "rssBytes": rss,
                "pageFaults": 0,
                "majorPageFaults": 0,
            },
        })
    return {"node": {"nodeName": "worker-0", "systemContainers": system_containers}, "pods": []}


@pytest.fixture
def summary_factory():
    """Provide the stats/summary document builder."""
    return make_summary


@pytest.fixture
def mock_subprocess():
    """Mock subprocess.run for testing command execution."""
    with patch("subprocess.run") as mock_run:
        mock_run.return_value = Mock(returncode=0, stdout="", stderr="")
        yield mock_run


@pytest.fixture(autouse=True)
def clear_config_after_test():
    """Automatically reset the configuration singleton after each test."""
    yield

    from nodealloc.config import clear_config_cache, reset_config_path

    reset_config_path()
    clear_config_cache()
