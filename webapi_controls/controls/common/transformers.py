"""Value coercion and ordering for extracted JSON values."""

import json
import math
import re
from functools import cmp_to_key
from typing import Any

from webapi_controls.shared.models import SortOrder

_FLOAT_PREFIX = re.compile(r"^\s*([+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?))")


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Unexpected token {name} in JSON")


def load_json(text: str | bytes) -> Any:
    """Parse strict JSON.

    ``NaN``, ``Infinity`` and ``-Infinity`` are rejected, undecodable bytes
    and nesting too deep to parse raise ValueError like any other bad input.
    """
    try:
        return json.loads(text, parse_constant=_reject_constant)
    except RecursionError as e:
        raise ValueError("JSON nested too deeply") from e


def is_int(value: Any) -> bool:
    """Whether a value counts as an integer for display.

    The rule is numeric truncation, not integer syntax: a value qualifies when
    its float parse survives signed 32-bit truncation unchanged. ``"007"``,
    ``1e2`` and ``4.0`` qualify; ``3.14``, ``True`` and ``2**31`` do not.
    """
    if _is_nan(value):
        return False

    parsed = _parse_float(value)
    if parsed is None or math.isinf(parsed):
        return False

    return _to_int32(parsed) == parsed


def coerce_value(value: Any) -> str | None:
    """Coerce a scalar JSON value to display text.

    Returns None for anything that is not a string, an integral number or a
    boolean. Callers decide what to do with those.
    """
    if isinstance(value, str):
        return value

    if isinstance(value, bool):
        return "true" if value else "false"

    if is_int(value):
        return str(int(value))

    return None


def item_text(value: Any) -> str:
    """Text shown for an arbitrary item, e.g. a dropdown option."""
    text = coerce_value(value)
    if text is not None:
        return text
    if isinstance(value, (int, float)):
        return repr(value)
    if value is None:
        return "null"
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def sort_items(items: list[Any], order: SortOrder | str | None) -> list[Any]:
    """Return items ordered by ``order``.

    ``As Is`` or no order keeps source order. The input list is not modified.
    """
    if order is None or order == "":
        return list(items)

    order = SortOrder(order)
    if order == SortOrder.AS_IS:
        return list(items)

    reverse = order == SortOrder.DESC
    try:
        return sorted(items, reverse=reverse)
    except TypeError:
        # Mixed or unorderable types
        return sorted(items, key=cmp_to_key(_compare_mixed), reverse=reverse)


def _compare_mixed(a: Any, b: Any) -> int:
    try:
        if a < b:
            return -1
        if a > b:
            return 1
        return 0
    except TypeError:
        key_a, key_b = item_text(a), item_text(b)
        return (key_a > key_b) - (key_a < key_b)


def _is_nan(value: Any) -> bool:
    """Loose numeric check: does the value fail conversion to a number?"""
    if value is None or isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return isinstance(value, float) and math.isnan(value)
    if isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            return False
        try:
            return math.isnan(float(stripped))
        except ValueError:
            return True
    return True


def _parse_float(value: Any) -> float | None:
    """Parse the leading number of a value, or None if there is none."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        match = _FLOAT_PREFIX.match(value)
        if match:
            return float(match.group(1).replace("Infinity", "inf"))
    return None


def _to_int32(value: float) -> int:
    truncated = int(value) % 2**32
    if truncated >= 2**31:
        truncated -= 2**32
    return truncated
