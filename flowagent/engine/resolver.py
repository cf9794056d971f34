"""
Placeholder resolution for step parameters.

Step parameters may embed ``{{outputs.<stepId>.<outputId>}}`` references to
outputs recorded by earlier steps.  All functions here are pure (no side
effects, no I/O): the same value and outputs always resolve to the same
result, and inputs are never mutated.

References to unknown steps or outputs are left verbatim.  Callers that want
to surface them use ``find_unresolved`` on the resolved parameters.
"""

from __future__ import annotations

import json
import math
import re
from typing import Any, Mapping

PLACEHOLDER_RE = re.compile(r"\{\{outputs\.([a-zA-Z0-9_-]+)\.([a-zA-Z0-9_-]+)\}\}")


def placeholder(step_id: str, output_id: str) -> str:
    """Return the placeholder expression that references *step_id*'s *output_id*."""
    return f"{{{{outputs.{step_id}.{output_id}}}}}"


def stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if value.is_integer():
            return str(int(value))
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"), default=str)
    return str(value)


def resolve(value: Any, outputs: Mapping[str, Mapping[str, Any]]) -> Any:
    """Substitute every resolvable placeholder in *value*.

    Non-string values are returned unchanged.  A reference whose step id or
    output name is missing (or whose value is None) keeps its literal text.
    """
    if not isinstance(value, str):
        return value

    def _substitute(match: re.Match) -> str:  # type: ignore[type-arg]
        step_id, output_id = match.group(1), match.group(2)
        found = outputs.get(step_id, {}).get(output_id)
        if found is None:
            return match.group(0)
        return stringify(found)

    return PLACEHOLDER_RE.sub(_substitute, value)


def resolve_parameters(
    params: Mapping[str, Any], outputs: Mapping[str, Mapping[str, Any]]
) -> dict[str, Any]:
    """Resolve every value of a step's parameter map into a new dict."""
    return {key: resolve(value, outputs) for key, value in params.items()}


def find_unresolved(params: Mapping[str, Any]) -> list[str]:
    """Return placeholder expressions still present in *params*, in order."""
    found: list[str] = []
    for value in params.values():
        if isinstance(value, str):
            found.extend(m.group(0) for m in PLACEHOLDER_RE.finditer(value))
    return found

