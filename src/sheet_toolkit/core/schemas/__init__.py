"""
Schemas Package

JSON schema definitions and validation utilities.
"""

from .validator import (
    LAYOUT_SCHEMA_VERSION,
    ValidationError,
    ensure_generatable,
    validate_config_data,
    validate_layout,
    validate_layout_data,
    validate_layout_grid,
)

__all__ = [
    "LAYOUT_SCHEMA_VERSION",
    "ValidationError",
    "ensure_generatable",
    "validate_config_data",
    "validate_layout",
    "validate_layout_data",
    "validate_layout_grid",
]
