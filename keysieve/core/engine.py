"""Recursive key filtering engine."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Dict, Iterable, List, Optional, Pattern, Sequence, Tuple

import structlog

from .types import (
    DEFAULT_FILTER_TYPE,
    DEFAULT_MAX_DEPTH,
    DEFAULT_SUCCESSOR_POLICY,
    FilterResult,
    FilterSet,
    MaxDepthExceededError,
)
from .values import DEFAULT_OPAQUE_TYPES, determine_target_value, is_plain_container

logger = structlog.get_logger(__name__)


def filter_by_regex(keys: Iterable[Any], regex_keys: Sequence[Pattern[str]]) -> List[Any]:
    """Return the string keys matched by any of the patterns, in key order."""
    return [
        key
        for key in keys
        if isinstance(key, str) and any(regex.search(key) for regex in regex_keys)
    ]


def order_matched_keys(matched_keys: Iterable[Any], source_keys: Sequence[Any]) -> List[Any]:
    matched = set(matched_keys)
    return [key for key in source_keys if key in matched]


def single_level_filter(source_keys: Sequence[Any], filter_set: FilterSet) -> List[Any]:
    """Match the keys of one level against the filters.

    Patterns are applied first, in order, then exact keys. A key is claimed
    by the first filter that matches it and is not tested again.

    Args:
        source_keys: Keys of the current level, in insertion order.
        filter_set: Normalized filters.

    Returns:
        Matched keys ordered as in ``source_keys``.
    """
    remaining = list(source_keys)
    claimed: List[Any] = []

    for regex in filter_set.regex_keys:
        if not remaining:
            break
        hits = filter_by_regex(remaining, (regex,))
        if hits:
            claimed.extend(hits)
            hit_set = set(hits)
            remaining = [key for key in remaining if key not in hit_set]

    for key in filter_set.filter_keys:
        if not remaining:
            break
        if key in remaining:
            claimed.append(key)
            remaining.remove(key)

    return order_matched_keys(claimed, source_keys)


def keys_to_keep(
    source_keys: Sequence[Any], matched_keys: Sequence[Any], filter_type: str
) -> List[Any]:
    if filter_type == "include":
        return list(matched_keys)
    matched = set(matched_keys)
    return [key for key in source_keys if key not in matched]


def determine_successor_keys(
    source: Mapping,
    source_keys: Sequence[Any],
    matched_keys: Sequence[Any],
    kept_keys: Sequence[Any],
    filter_type: str,
    successor_policy: str = DEFAULT_SUCCESSOR_POLICY,
    opaque_types: Tuple[type, ...] = DEFAULT_OPAQUE_TYPES,
) -> List[Any]:
    """Select the keys whose values are walked at the next level.

    Only plain containers are walked. Exclusive filtering skips matched keys
    since they are dropped with all their descendants. Inclusive filtering
    walks kept containers under the ``matched`` policy and every container
    under the ``all`` policy.
    """
    if filter_type == "include":
        allowed = None if successor_policy == "all" else set(kept_keys)
    else:
        matched = set(matched_keys)
        allowed = {key for key in source_keys if key not in matched}
    return [
        key
        for key in source_keys
        if (allowed is None or key in allowed)
        and is_plain_container(source[key], opaque_types)
    ]


class _FilterWalk:
    """Depth-first walk building the filtered structure level by level."""

    def __init__(
        self,
        filter_set: FilterSet,
        filter_type: str,
        recursive: bool,
        successor_policy: str,
        opaque_types: Tuple[type, ...],
        max_depth: int,
    ):
        self.filter_set = filter_set
        self.filter_type = filter_type
        self.recursive = recursive
        self.successor_policy = successor_policy
        self.opaque_types = opaque_types
        self.max_depth = max_depth
        self.matched_count = 0

    def copy_containers(self, source: Mapping, path: Tuple[Any, ...]) -> Dict[Any, Any]:
        """Copy ``source`` rebuilding every nested plain container."""
        if len(path) > self.max_depth:
            raise MaxDepthExceededError(self.max_depth, path)
        return {
            key: (
                self.copy_containers(value, path + (key,))
                if is_plain_container(value, self.opaque_types)
                else value
            )
            for key, value in source.items()
        }

    def level(
        self, source: Mapping, existing: Any, path: Tuple[Any, ...]
    ) -> Optional[Dict[Any, Any]]:
        """Filter one level.

        Args:
            source: Source mapping at this level.
            existing: Value already written at this location by the parent
                level (a greedy include value, an exclude placeholder, or None).
            path: Keys leading from the root to this level.

        Returns:
            A new dict for this location, or None when nothing was written at
            this level or below and ``existing`` is not the source mapping, in
            which case ``existing`` stands.
        """
        if len(path) > self.max_depth:
            logger.error("filter_max_depth_exceeded", max_depth=self.max_depth, depth=len(path))
            raise MaxDepthExceededError(self.max_depth, path)

        source_keys = list(source)
        matched = single_level_filter(source_keys, self.filter_set)
        self.matched_count += len(matched)
        kept = keys_to_keep(source_keys, matched, self.filter_type)

        filtered: Optional[Dict[Any, Any]] = None
        if kept:
            # (re)initialized so nothing from the parent's value leaks in
            filtered = {
                key: determine_target_value(
                    source[key], self.filter_type, self.recursive, self.opaque_types
                )
                for key in kept
            }
        elif existing is source:
            # a greedily included value is still the source mapping itself
            filtered = self.copy_containers(source, path)

        if not self.recursive:
            return filtered

        successors = determine_successor_keys(
            source,
            source_keys,
            matched,
            kept,
            self.filter_type,
            self.successor_policy,
            self.opaque_types,
        )
        for key in successors:
            if filtered is not None:
                current = filtered.get(key)
            elif isinstance(existing, Mapping):
                current = existing.get(key)
            else:
                current = None
            child = self.level(source[key], current, path + (key,))
            if child is None:
                continue
            if filtered is None:
                filtered = dict(existing) if isinstance(existing, Mapping) else {}
            filtered[key] = child

        if filtered is None:
            return None
        return {key: filtered[key] for key in source_keys if key in filtered}


def recursive_filter(
    source: Mapping,
    filter_set: FilterSet,
    filter_type: str = DEFAULT_FILTER_TYPE,
    recursive: bool = True,
    successor_policy: str = DEFAULT_SUCCESSOR_POLICY,
    opaque_types: Tuple[type, ...] = DEFAULT_OPAQUE_TYPES,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> FilterResult:
    """Filter ``source`` against normalized filters.

    Args:
        source: Mapping to filter. Never mutated.
        filter_set: Normalized exact and pattern filters.
        filter_type: ``include`` or ``exclude``.
        recursive: Whether to walk into nested plain containers.
        successor_policy: ``matched`` or ``all``, see determine_successor_keys.
        opaque_types: Types kept or dropped whole.
        max_depth: Deepest nesting level walked before giving up.

    Returns:
        FilterResult with the new structure and the number of matched keys.

    Raises:
        MaxDepthExceededError: If ``source`` nests deeper than ``max_depth``.
    """
    walk = _FilterWalk(
        filter_set, filter_type, recursive, successor_policy, opaque_types, max_depth
    )
    filtered = walk.level(source, None, ())
    return FilterResult(value=filtered if filtered is not None else {}, matched_count=walk.matched_count)
