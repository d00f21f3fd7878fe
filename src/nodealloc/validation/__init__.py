"""
Validation and error handling for the nodealloc package.

This module provides input validation and the exception kinds used
across the package, with consistent error reporting.
"""

from .exceptions import (
    ErrorSeverity,
    MeasurementDataError,
    SampleSourceError,
    ValidationError,
    handle_cli_error,
    handle_config_error,
    handle_error,
    handle_subprocess_error,
)

from .validators import (
    validate_choice_list,
    validate_enum_choice,
    validate_node_name,
    validate_positive_float,
    validate_positive_integer,
)

__all__ = [
    # Core functionality
    "ErrorSeverity",
    "MeasurementDataError",
    "SampleSourceError",
    "ValidationError",
    "handle_error",
    "handle_config_error",
    "handle_subprocess_error",
    "handle_cli_error",
    # Validators
    "validate_choice_list",
    "validate_enum_choice",
    "validate_node_name",
    "validate_positive_float",
    "validate_positive_integer",
]
