"""
Configuration validation utilities.

This module turns the raw TOML sections into validated configuration
dataclasses, applying defaults for anything left out.
"""

import logging
from typing import Any, Dict

from ..models.config import (
    AllocationConfig,
    AppConfig,
    CgtopConfig,
    CollectionConfig,
    GeneralConfig,
)
from ..models.stats import DEFAULT_RESOURCE_CLASSES, RESOURCE_CLASS_ATTRIBUTES
from ..validation import (
    ValidationError,
    validate_choice_list,
    validate_enum_choice,
    validate_positive_float,
    validate_positive_integer,
)

logger = logging.getLogger(__name__)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def _validate_bool(value: Any, field_name: str) -> bool:
    if not isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a boolean", field_name=field_name, value=value)
    return value


def _validate_string(value: Any, field_name: str, allow_empty: bool = False) -> str:
    if not isinstance(value, str) or (not allow_empty and not value.strip()):
        raise ValidationError(
            f"{field_name} must be a {'' if allow_empty else 'non-empty '}string",
            field_name=field_name,
            value=value,
        )
    return value


def validate_general_config(general_settings: Dict[str, Any]) -> GeneralConfig:
    """
    Validate the `[general]` section.

    Raises:
        ValidationError: If validation fails
    """
    log_level = validate_enum_choice(
        general_settings.get("log_level", "INFO"),
        choices=LOG_LEVELS,
        field_name="general.log_level",
        case_sensitive=False,
    )

    max_concurrent_nodes = validate_positive_integer(
        general_settings.get("max_concurrent_nodes", 4),
        min_value=1,
        max_value=64,
        field_name="general.max_concurrent_nodes",
    )

    indent = _validate_string(
        general_settings.get("indent", "\t"), "general.indent", allow_empty=True
    )

    return GeneralConfig(
        log_level=log_level,
        max_concurrent_nodes=max_concurrent_nodes,
        indent=indent,
    )


def validate_allocation_config(allocation_settings: Dict[str, Any]) -> AllocationConfig:
    """
    Validate the `[allocation]` section.

    Raises:
        ValidationError: If validation fails
    """
    min_duration_seconds = validate_positive_float(
        allocation_settings.get("min_duration_seconds", 10),
        min_value=0.0,
        max_value=86400.0,
        field_name="allocation.min_duration_seconds",
    )

    poll_interval_seconds = validate_positive_float(
        allocation_settings.get("poll_interval_seconds", 1),
        min_value=0.01,
        max_value=300.0,
        field_name="allocation.poll_interval_seconds",
    )

    resource_classes = validate_choice_list(
        allocation_settings.get("resource_classes", list(DEFAULT_RESOURCE_CLASSES)),
        choices=list(RESOURCE_CLASS_ATTRIBUTES),
        field_name="allocation.resource_classes",
    )

    if "memory" in resource_classes and "usage" in resource_classes:
        logger.warning(
            "allocation.resource_classes lists both 'memory' and 'usage'; "
            "both read memory.usageBytes and will report the same values"
        )

    return AllocationConfig(
        min_duration_seconds=min_duration_seconds,
        poll_interval_seconds=poll_interval_seconds,
        resource_classes=resource_classes,
    )


def validate_collection_config(collection_settings: Dict[str, Any]) -> CollectionConfig:
    """
    Validate the `[collection]` section.

    Raises:
        ValidationError: If validation fails
    """
    oc_binary = _validate_string(
        collection_settings.get("oc_binary", "oc"), "collection.oc_binary"
    )

    fetch_timeout = validate_positive_float(
        collection_settings.get("fetch_timeout", 60.0),
        min_value=1.0,
        max_value=3600.0,
        field_name="collection.fetch_timeout",
    )

    return CollectionConfig(oc_binary=oc_binary, fetch_timeout=fetch_timeout)


def validate_cgtop_config(cgtop_settings: Dict[str, Any]) -> CgtopConfig:
    """
    Validate the `[cgtop]` section.

    Raises:
        ValidationError: If validation fails
    """
    enabled = _validate_bool(cgtop_settings.get("enabled", True), "cgtop.enabled")

    iterations = validate_positive_integer(
        cgtop_settings.get("iterations", 10),
        min_value=2,
        max_value=3600,
        field_name="cgtop.iterations",
    )

    ssh_binary = _validate_string(cgtop_settings.get("ssh_binary", "ssh"), "cgtop.ssh_binary")
    ssh_user = _validate_string(
        cgtop_settings.get("ssh_user", ""), "cgtop.ssh_user", allow_empty=True
    )
    use_sudo = _validate_bool(cgtop_settings.get("use_sudo", True), "cgtop.use_sudo")

    timeout = validate_positive_float(
        cgtop_settings.get("timeout", 120.0),
        min_value=1.0,
        max_value=7200.0,
        field_name="cgtop.timeout",
    )

    if timeout <= iterations:
        logger.warning(
            f"cgtop.timeout ({timeout}s) does not exceed cgtop.iterations ({iterations}); "
            "systemd-cgtop will likely be killed before it finishes"
        )

    return CgtopConfig(
        enabled=enabled,
        iterations=iterations,
        ssh_binary=ssh_binary,
        ssh_user=ssh_user,
        use_sudo=use_sudo,
        timeout=timeout,
    )


def validate_app_config(config_data: Dict[str, Any]) -> AppConfig:
    """
    Validate a complete parsed config.toml.

    Args:
        config_data: Parsed TOML document, possibly empty

    Returns:
        Validated AppConfig instance

    Raises:
        ValidationError: If any section fails validation
    """
    for section in ("general", "allocation", "collection", "cgtop"):
        if not isinstance(config_data.get(section, {}), dict):
            raise ValidationError(f"[{section}] must be a table", field_name=section)

    return AppConfig(
        general=validate_general_config(config_data.get("general", {})),
        allocation=validate_allocation_config(config_data.get("allocation", {})),
        collection=validate_collection_config(config_data.get("collection", {})),
        cgtop=validate_cgtop_config(config_data.get("cgtop", {})),
    )
