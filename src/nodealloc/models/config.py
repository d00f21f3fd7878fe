"""
Configuration data models.

This module contains the configuration structures loaded from `config.toml`,
one dataclass per TOML section plus the aggregating AppConfig.
"""

from dataclasses import dataclass, field
from typing import List

from .stats import DEFAULT_RESOURCE_CLASSES


@dataclass
class GeneralConfig:
    """
    Global behaviour, loaded from the `[general]` section.
    """

    log_level: str = "INFO"
    # Upper bound on nodes sampled at the same time.
    max_concurrent_nodes: int = 4
    # Prefix put in front of every line of a node's report sections.
    indent: str = "\t"


@dataclass
class AllocationConfig:
    """
    Settings of the kubelet statistics poll loop, loaded from `[allocation]`.
    """

    # Every component must be observed at least this long before the loop stops.
    min_duration_seconds: float = 10.0
    poll_interval_seconds: float = 1.0
    resource_classes: List[str] = field(default_factory=lambda: list(DEFAULT_RESOURCE_CLASSES))


@dataclass
class CollectionConfig:
    """
    Settings of the `oc` client, loaded from `[collection]`.
    """

    oc_binary: str = "oc"
    # Seconds allowed for a single `oc` invocation.
    fetch_timeout: float = 60.0


@dataclass
class CgtopConfig:
    """
    Settings of the systemd-cgtop section, loaded from `[cgtop]`.
    """

    enabled: bool = True
    # Number of systemd-cgtop iterations, one per second.
    iterations: int = 10
    ssh_binary: str = "ssh"
    # Remote user; empty means the ssh client default.
    ssh_user: str = ""
    use_sudo: bool = True
    timeout: float = 120.0


@dataclass
class AppConfig:
    """
    The root configuration object that aggregates all loaded settings.
    """

    general: GeneralConfig = field(default_factory=GeneralConfig)
    allocation: AllocationConfig = field(default_factory=AllocationConfig)
    collection: CollectionConfig = field(default_factory=CollectionConfig)
    cgtop: CgtopConfig = field(default_factory=CgtopConfig)
