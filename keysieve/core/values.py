"""Value classification for recursive filtering."""

from __future__ import annotations

import array
import collections
import datetime
from collections.abc import Mapping
from typing import Any, Dict, Tuple, Union

from .types import ValueKind

# Values of these types are kept or dropped whole and never walked into.
DEFAULT_OPAQUE_TYPES: Tuple[type, ...] = (
    list,
    tuple,
    set,
    frozenset,
    collections.deque,
    collections.Counter,
    range,
    datetime.date,
    datetime.time,
    datetime.timedelta,
    bytes,
    bytearray,
    memoryview,
    array.array,
)


def extend_opaque_types(*types: type) -> Tuple[type, ...]:
    """Return the default opaque types extended with ``types``.

    Duplicates are dropped, order is kept.

    Example:
        >>> opaque = extend_opaque_types(MyRecord)
        >>> filter_object(data, "secret", opaque_types=opaque)
    """
    return tuple(dict.fromkeys(DEFAULT_OPAQUE_TYPES + tuple(types)))


def classify_value(
    value: Any, opaque_types: Tuple[type, ...] = DEFAULT_OPAQUE_TYPES
) -> ValueKind:
    """Tag a value as primitive, opaque or plain container.

    Opaque types are checked first so mapping subclasses such as
    ``collections.Counter`` stay opaque.

    Args:
        value: Value found under a source key.
        opaque_types: Types that are never traversed.

    Returns:
        The value's kind.
    """
    if opaque_types and isinstance(value, opaque_types):
        return ValueKind.OPAQUE
    if isinstance(value, Mapping):
        return ValueKind.CONTAINER
    return ValueKind.PRIMITIVE


def is_plain_container(
    value: Any, opaque_types: Tuple[type, ...] = DEFAULT_OPAQUE_TYPES
) -> bool:
    return classify_value(value, opaque_types) is ValueKind.CONTAINER


def is_valid_value(
    value: Any, opaque_types: Tuple[type, ...] = DEFAULT_OPAQUE_TYPES
) -> bool:
    """Check whether a value can be assigned to the output as-is.

    Primitives and opaque values are not filtered themselves, so they are
    always valid. Plain containers are not.
    """
    return classify_value(value, opaque_types) is not ValueKind.CONTAINER


def determine_target_value(
    value: Any,
    filter_type: str,
    recursive: bool = True,
    opaque_types: Tuple[type, ...] = DEFAULT_OPAQUE_TYPES,
) -> Union[Any, Dict[Any, Any]]:
    """Return the value to assign to the filtered structure for a kept key.

    Inclusive and non-recursive filtering is greedy and returns the value
    unchanged. Recursive exclusive filtering returns primitives and opaque
    values unchanged, and an empty placeholder for plain containers since
    their contents are rebuilt by the walk.
    """
    if filter_type == "include" or not recursive:
        return value
    if is_valid_value(value, opaque_types):
        return value
    return {}
