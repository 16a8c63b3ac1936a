from .config import FilterConfig
from .config_loader import ConfigLoader
from .engine import recursive_filter
from .filters import normalize_filters, should_short_circuit
from .object_filter import filter_object
from .types import FilterResult, FilterSet, MaxDepthExceededError, ValueKind
from .values import DEFAULT_OPAQUE_TYPES, classify_value, extend_opaque_types

__all__ = [
    "FilterConfig",
    "ConfigLoader",
    "recursive_filter",
    "normalize_filters",
    "should_short_circuit",
    "filter_object",
    "FilterResult",
    "FilterSet",
    "MaxDepthExceededError",
    "ValueKind",
    "DEFAULT_OPAQUE_TYPES",
    "classify_value",
    "extend_opaque_types",
]
