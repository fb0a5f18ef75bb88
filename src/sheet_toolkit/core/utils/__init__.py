"""
Utils Package

Serialization and file utilities.
"""

from .serialization import (
    serialize_config,
    deserialize_config,
    serialize_layout,
    deserialize_layout,
    load_config_json,
    save_config_json,
    load_layout_json,
    save_layout_json,
)

__all__ = [
    "serialize_config",
    "deserialize_config",
    "serialize_layout",
    "deserialize_layout",
    "load_config_json",
    "save_config_json",
    "load_layout_json",
    "save_layout_json",
]
