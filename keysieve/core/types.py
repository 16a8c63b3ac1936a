"""Type definitions for the keysieve filtering system."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Dict, Pattern, Tuple

VALID_FILTER_TYPES: Tuple[str, ...] = ("exclude", "include")
VALID_SUCCESSOR_POLICIES: Tuple[str, ...] = ("matched", "all")

DEFAULT_FILTER_TYPE = "exclude"
DEFAULT_SUCCESSOR_POLICY = "matched"
DEFAULT_MAX_DEPTH = 200


class ValueKind(enum.Enum):
    """Classification of a value found under a source key."""

    PRIMITIVE = "primitive"
    OPAQUE = "opaque"
    CONTAINER = "container"


@dataclass(frozen=True)
class FilterSet:
    """Normalized filters shared by every level of a single walk.

    Attributes:
        filter_keys: Literal keys that must equal a source key.
        regex_keys: Compiled patterns searched against string source keys.
    """

    filter_keys: Tuple[str, ...] = ()
    regex_keys: Tuple[Pattern[str], ...] = ()

    def __bool__(self) -> bool:
        return bool(self.filter_keys or self.regex_keys)


@dataclass(frozen=True)
class FilterResult:
    """Outcome of a recursive walk.

    Attributes:
        value: The filtered structure.
        matched_count: Number of source keys matched across all visited levels.
    """

    value: Dict[Any, Any]
    matched_count: int


class MaxDepthExceededError(RecursionError):
    """Raised when the source nests deeper than the configured max depth."""

    def __init__(self, max_depth: int, path: Tuple[Any, ...]):
        self.max_depth = max_depth
        self.path = path
        super().__init__(
            f"Nesting deeper than {max_depth} levels at path {list(path)!r}"
        )
