"""
Filter condition evaluation for ``control.filter`` steps.

Operands arrive as resolved parameter values, so they are usually strings
even when they look like numbers.  Comparison rules:

  contains / not_contains    case-insensitive substring test on the text forms;
                             a missing operand reads as "undefined"
  equals / not_equals        loose equality: numbers and numeric strings
                             compare numerically, booleans count as 1/0
  greater_than / less_than   both sides coerced to numbers; anything that does
                             not parse becomes NaN and every comparison is False

Unknown condition names raise ConditionError.
"""

from __future__ import annotations

import math
import re
from typing import Any, Callable

from flowagent.engine.resolver import stringify
from flowagent.exceptions import ConditionError

UNDEFINED = "undefined"

_DECIMAL_RE = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")
_RADIX_RE = re.compile(r"0([xX][0-9a-fA-F]+|[oO][0-7]+|[bB][01]+)")
_INFINITY_RE = re.compile(r"([+-]?)Infinity")


def to_text(value: Any) -> str:
    """Text form used by substring tests and filter log lines."""
    if value is None:
        return UNDEFINED
    return stringify(value)


def _parse_number(text: str) -> float:
    if not text:
        return 0.0
    if _DECIMAL_RE.fullmatch(text):
        return float(text)
    if _RADIX_RE.fullmatch(text):
        return float(int(text, 0))
    infinity = _INFINITY_RE.fullmatch(text)
    if infinity:
        return -math.inf if infinity.group(1) == "-" else math.inf
    return math.nan


def to_number(value: Any) -> float:
    """Coerce *value* to float; NaN when it has no numeric reading."""
    if value is None:
        return 0.0
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        return _parse_number(value.strip())
    return math.nan


def loose_equals(left: Any, right: Any) -> bool:
    """Type-coercing equality, so ``"5" == 5`` and ``True == "1"`` hold."""
    if left is None or right is None:
        return left is None and right is None
    if isinstance(left, str) and isinstance(right, str):
        return left == right
    scalar = (str, int, float, bool)
    if isinstance(left, scalar) and isinstance(right, scalar):
        return to_number(left) == to_number(right)
    return left == right


def _contains(left: Any, right: Any) -> bool:
    return to_text(right).lower() in to_text(left).lower()


CONDITIONS: dict[str, Callable[[Any, Any], bool]] = {
    "contains": _contains,
    "not_contains": lambda left, right: not _contains(left, right),
    "equals": loose_equals,
    "not_equals": lambda left, right: not loose_equals(left, right),
    "greater_than": lambda left, right: to_number(left) > to_number(right),
    "less_than": lambda left, right: to_number(left) < to_number(right),
}


def evaluate_filter(condition: str, left: Any, right: Any) -> bool:
    """Apply the named *condition* to ``left`` (the input) and ``right`` (the value).

    Raises:
        ConditionError: if *condition* is not a supported condition name.
    """
    check = CONDITIONS.get(condition)
    if check is None:
        raise ConditionError(f"Unknown filter condition: {condition}", condition=str(condition))
    return check(left, right)
