"""Reusable filter configuration."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Pattern, Tuple, Union

from .filters import as_filter_list
from .object_filter import filter_object
from .types import (
    DEFAULT_MAX_DEPTH,
    DEFAULT_SUCCESSOR_POLICY,
    VALID_FILTER_TYPES,
    VALID_SUCCESSOR_POLICIES,
)
from .values import DEFAULT_OPAQUE_TYPES


def _string_tuple(value: Any, allow_patterns: bool = False) -> Tuple[Any, ...]:
    allowed = (str, re.Pattern) if allow_patterns else (str,)
    return tuple(v for v in as_filter_list(value) if isinstance(v, allowed))


@dataclass(frozen=True)
class FilterConfig:
    """Filter settings that can be applied to many mappings.

    Attributes:
        filters: Keys matched literally.
        regex_filters: Patterns searched against string keys.
        filter_type: ``include`` or ``exclude``.
        recursive: Whether nested mappings are filtered too.
        successor_policy: ``matched`` or ``all`` (inclusive filtering only).
        opaque_types: Types kept or dropped whole.
        max_depth: Deepest nesting level walked.
    """

    filters: Tuple[str, ...] = ()
    regex_filters: Tuple[Union[str, Pattern[str]], ...] = ()
    filter_type: str = "exclude"
    recursive: bool = True
    successor_policy: str = DEFAULT_SUCCESSOR_POLICY
    opaque_types: Tuple[type, ...] = DEFAULT_OPAQUE_TYPES
    max_depth: int = DEFAULT_MAX_DEPTH

    @staticmethod
    def from_dict(d: Optional[Dict[str, Any]]) -> Optional["FilterConfig"]:
        """Create a FilterConfig from a dictionary specification.

        Fields of the wrong type are ignored and fall back to defaults.

        Args:
            d: Dictionary with filter specification.

        Returns:
            FilterConfig instance or None if d is None/empty.
        """
        if not d:
            return None
        filter_type = d.get("filter_type")
        recursive = d.get("recursive")
        policy = d.get("successor_policy")
        max_depth = d.get("max_depth")
        return FilterConfig(
            filters=_string_tuple(d.get("filters")),
            regex_filters=_string_tuple(d.get("regex_filters"), allow_patterns=True),
            filter_type=filter_type if filter_type in VALID_FILTER_TYPES else "exclude",
            recursive=recursive if isinstance(recursive, bool) else True,
            successor_policy=(
                policy if policy in VALID_SUCCESSOR_POLICIES else DEFAULT_SUCCESSOR_POLICY
            ),
            max_depth=(
                max_depth
                if isinstance(max_depth, int) and not isinstance(max_depth, bool) and max_depth >= 0
                else DEFAULT_MAX_DEPTH
            ),
        )

    def apply(self, target_object: Mapping[Any, Any]) -> Mapping[Any, Any]:
        """Filter ``target_object`` with these settings."""
        return filter_object(
            target_object,
            filters=list(self.filters),
            regex_filters=list(self.regex_filters),
            filter_type=self.filter_type,
            recursive=self.recursive,
            successor_policy=self.successor_policy,
            opaque_types=self.opaque_types,
            max_depth=self.max_depth,
        )
