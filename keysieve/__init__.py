"""Keysieve - recursive key filtering for nested mappings.

Keep or drop keys of a nested structure by exact name or pattern, for
example to strip secrets before logging or to trim API payloads.
"""

from .core.config import FilterConfig
from .core.config_loader import ConfigLoader
from .core.object_filter import filter_object
from .core.types import MaxDepthExceededError
from .core.values import DEFAULT_OPAQUE_TYPES, extend_opaque_types

__all__ = [
    "filter_object",
    "FilterConfig",
    "ConfigLoader",
    "MaxDepthExceededError",
    "DEFAULT_OPAQUE_TYPES",
    "extend_opaque_types",
]
