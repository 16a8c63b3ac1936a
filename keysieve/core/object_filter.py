"""Top-level entry point for filtering nested mappings by key."""

from __future__ import annotations

from typing import Any, Mapping, Optional, Tuple

import structlog

from .engine import recursive_filter
from .filters import FilterInput, RegexFilterInput, normalize_filters, should_short_circuit
from .types import (
    DEFAULT_FILTER_TYPE,
    DEFAULT_MAX_DEPTH,
    DEFAULT_SUCCESSOR_POLICY,
    VALID_SUCCESSOR_POLICIES,
)
from .values import DEFAULT_OPAQUE_TYPES

logger = structlog.get_logger(__name__)


def filter_object(
    target_object: Mapping[Any, Any],
    filters: Optional[FilterInput] = None,
    regex_filters: Optional[RegexFilterInput] = None,
    filter_type: Optional[str] = None,
    recursive: bool = True,
    *,
    successor_policy: str = DEFAULT_SUCCESSOR_POLICY,
    opaque_types: Tuple[type, ...] = DEFAULT_OPAQUE_TYPES,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> Mapping[Any, Any]:
    """Filter a mapping by matching its keys against the supplied filters.

    Two filter types are available:

    * ``include``: keeps only the keys that match a filter.
    * ``exclude``: drops the keys that match a filter.

    Args:
        target_object: Mapping to filter. Never mutated.
        filters: A key or a sequence of keys matched literally.
        regex_filters: A pattern (string or compiled) or a sequence of them,
            searched against string keys.
        filter_type: ``include`` or ``exclude``. None means ``exclude``.
        recursive: Whether nested mappings are filtered too.
        successor_policy: Which nested mappings an inclusive filter walks
            into: ``matched`` (only kept ones) or ``all``.
        opaque_types: Types that are kept or dropped whole, never walked.
        max_depth: Deepest nesting level walked.

    Returns:
        A new filtered dict, or ``target_object`` itself when the arguments
        are unusable or no key matched.

    Raises:
        MaxDepthExceededError: If ``target_object`` nests deeper than
            ``max_depth``, which includes cyclic structures.
    """
    if should_short_circuit(target_object, filter_type, filters, regex_filters):
        return target_object

    if successor_policy not in VALID_SUCCESSOR_POLICIES:
        logger.warning(
            "successor_policy_ignored",
            successor_policy=successor_policy,
            using=DEFAULT_SUCCESSOR_POLICY,
        )
        successor_policy = DEFAULT_SUCCESSOR_POLICY

    filter_set = normalize_filters(filters, regex_filters)
    if not filter_set:
        return target_object

    result = recursive_filter(
        target_object,
        filter_set,
        filter_type=filter_type or DEFAULT_FILTER_TYPE,
        recursive=recursive,
        successor_policy=successor_policy,
        opaque_types=opaque_types,
        max_depth=max_depth,
    )
    if not result.matched_count:
        logger.debug("filter_no_match", filters=list(filter_set.filter_keys))
        return target_object
    return result.value
