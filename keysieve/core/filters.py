"""Normalization and validation of key filters."""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any, List, Optional, Pattern, Sequence, Union

import structlog

from .types import VALID_FILTER_TYPES, FilterSet

logger = structlog.get_logger(__name__)

FilterInput = Union[str, Sequence[str]]
RegexFilterInput = Union[str, Pattern[str], Sequence[Union[str, Pattern[str]]]]

_SEQUENCE_TYPES = (list, tuple, set, frozenset)


def as_filter_list(value: Any) -> List[Any]:
    """Coerce a single filter or a sequence of filters into a list."""
    if value is None:
        return []
    if isinstance(value, (str, re.Pattern)):
        return [value]
    if isinstance(value, _SEQUENCE_TYPES):
        return list(value)
    return []


def _compile(regex: Any) -> Optional[Pattern[str]]:
    if isinstance(regex, re.Pattern):
        if isinstance(regex.pattern, bytes):
            logger.warning("regex_filter_skipped", regex=regex.pattern, error="bytes pattern")
            return None
        return regex
    if isinstance(regex, str):
        try:
            return re.compile(regex)
        except re.error as e:
            logger.warning("regex_filter_skipped", regex=regex, error=str(e))
    return None


def should_short_circuit(
    target_object: Any,
    filter_type: Optional[str] = None,
    filters: Optional[FilterInput] = None,
    regex_filters: Optional[RegexFilterInput] = None,
) -> bool:
    """Sanity check arguments before filtering.

    Args:
        target_object: Structure to filter.
        filter_type: Requested filter type, None for the default.
        filters: Raw exact filters.
        regex_filters: Raw pattern filters.

    Returns:
        True if the caller should return ``target_object`` unchanged.
    """
    if filter_type is not None and filter_type not in VALID_FILTER_TYPES:
        logger.debug("filter_short_circuit", reason="invalid_filter_type", filter_type=filter_type)
        return True

    if not isinstance(target_object, Mapping) or not target_object:
        logger.debug("filter_short_circuit", reason="empty_target")
        return True

    has_filters = any(isinstance(f, str) for f in as_filter_list(filters))
    has_regex_filters = any(
        isinstance(r, (str, re.Pattern)) for r in as_filter_list(regex_filters)
    )
    if not (has_filters or has_regex_filters):
        logger.debug("filter_short_circuit", reason="no_usable_filters")
        return True
    return False


def normalize_filters(
    filters: Optional[FilterInput] = None,
    regex_filters: Optional[RegexFilterInput] = None,
) -> FilterSet:
    """Build a FilterSet from raw exact and pattern filters.

    String patterns are compiled; those that fail to compile are skipped.
    Exact keys already matched by a pattern are dropped so every key is
    classified once, patterns first.

    Args:
        filters: A key or a sequence of keys.
        regex_filters: A pattern (string or compiled) or a sequence of them.

    Returns:
        Deduplicated exact and pattern filters.
    """
    regex_keys: List[Pattern[str]] = []
    for raw in as_filter_list(regex_filters):
        compiled = _compile(raw)
        if compiled is not None and compiled not in regex_keys:
            regex_keys.append(compiled)

    filter_keys = [
        key
        for key in dict.fromkeys(f for f in as_filter_list(filters) if isinstance(f, str))
        if not any(regex.search(key) for regex in regex_keys)
    ]
    return FilterSet(filter_keys=tuple(filter_keys), regex_keys=tuple(regex_keys))
