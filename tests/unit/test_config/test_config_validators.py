"""
Unit tests for configuration validation.
"""

import pytest

from nodealloc.config.validators import (
    validate_allocation_config,
    validate_app_config,
    validate_cgtop_config,
    validate_collection_config,
    validate_general_config,
)
from nodealloc.models.config import AppConfig
from nodealloc.validation import ValidationError


@pytest.mark.unit
class TestAppConfigValidation:
    """Test cases for whole-document validation."""

    def test_validate_sample_config(self, sample_config_data):
        config = validate_app_config(sample_config_data)

        assert config.general.max_concurrent_nodes == 2
        assert config.allocation.min_duration_seconds == 10.0
        assert config.allocation.resource_classes == ["cpu", "rss", "usage"]
        assert config.collection.fetch_timeout == 30.0
        assert config.cgtop.ssh_user == "core"

    def test_empty_document_yields_defaults(self):
        assert validate_app_config({}) == AppConfig()

    def test_section_must_be_a_table(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_app_config({"allocation": 10})

        assert "allocation" in str(exc_info.value)


@pytest.mark.unit
class TestGeneralValidation:
    """Test cases for the [general] section."""

    def test_log_level_is_case_insensitive(self):
        assert validate_general_config({"log_level": "debug"}).log_level == "DEBUG"

    def test_invalid_log_level(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_general_config({"log_level": "LOUD"})

        assert "general.log_level" in str(exc_info.value)

    def test_concurrency_bounds(self):
        with pytest.raises(ValidationError):
            validate_general_config({"max_concurrent_nodes": 0})
        with pytest.raises(ValidationError):
            validate_general_config({"max_concurrent_nodes": 65})

    def test_empty_indent_is_allowed(self):
        assert validate_general_config({"indent": ""}).indent == ""


@pytest.mark.unit
class TestAllocationValidation:
    """Test cases for the [allocation] section."""

    def test_zero_duration_is_allowed(self):
        assert validate_allocation_config({"min_duration_seconds": 0}).min_duration_seconds == 0.0

    def test_negative_duration(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_allocation_config({"min_duration_seconds": -1})

        assert "min_duration_seconds" in str(exc_info.value)

    def test_poll_interval_lower_bound(self):
        with pytest.raises(ValidationError):
            validate_allocation_config({"poll_interval_seconds": 0})

    def test_unknown_resource_class(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_allocation_config({"resource_classes": ["cpu", "swap"]})

        assert "swap" in str(exc_info.value)

    def test_empty_resource_classes(self):
        with pytest.raises(ValidationError):
            validate_allocation_config({"resource_classes": []})

    def test_duplicate_resource_classes_are_dropped(self):
        config = validate_allocation_config({"resource_classes": ["cpu", "memory", "cpu"]})

        assert config.resource_classes == ["cpu", "memory"]

    def test_memory_and_usage_warning(self, caplog):
        validate_allocation_config({"resource_classes": ["memory", "usage"]})

        assert "memory.usageBytes" in caplog.text


@pytest.mark.unit
class TestCollectionAndCgtopValidation:
    """Test cases for the [collection] and [cgtop] sections."""

    def test_blank_oc_binary(self):
        with pytest.raises(ValidationError):
            validate_collection_config({"oc_binary": "  "})

    def test_enabled_must_be_boolean(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_cgtop_config({"enabled": "yes"})

        assert "cgtop.enabled" in str(exc_info.value)

    def test_iterations_need_two_snapshots(self):
        with pytest.raises(ValidationError):
            validate_cgtop_config({"iterations": 1})

    def test_short_timeout_warning(self, caplog):
        validate_cgtop_config({"iterations": 30, "timeout": 10})

        assert "will likely be killed" in caplog.text

    def test_boolean_is_not_an_integer(self):
        with pytest.raises(ValidationError):
            validate_cgtop_config({"iterations": True})
