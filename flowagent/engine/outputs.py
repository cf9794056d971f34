"""Run-scoped store of step outputs."""

from __future__ import annotations

import copy
import logging
from typing import Any, Iterator, Optional

from flowagent.types import StepOutputs

logger = logging.getLogger(__name__)


class StepOutputStore:
    """Mapping of step id → that step's named outputs.

    One instance per workflow run.  Writes are last-writer-wins per step id;
    step ids are expected to be unique within an agent, so an overwrite is
    logged as a warning.  Readers get deep-copied snapshots so a branch can
    never mutate what another branch sees.
    """

    def __init__(self) -> None:
        self._outputs: StepOutputs = {}

    def record(self, step_id: str, outputs: dict[str, Any]) -> None:
        """Record *outputs* for *step_id*, replacing anything recorded before."""
        if step_id in self._outputs:
            logger.warning(f"[OutputStore] outputs for step '{step_id}' overwritten")
        self._outputs[step_id] = copy.deepcopy(dict(outputs))

    def get(self, step_id: str) -> Optional[dict[str, Any]]:
        found = self._outputs.get(step_id)
        return copy.deepcopy(found) if found is not None else None

    def snapshot(self) -> StepOutputs:
        """Deep copy of everything recorded so far."""
        return copy.deepcopy(self._outputs)

    def __contains__(self, step_id: object) -> bool:
        return step_id in self._outputs

    def __len__(self) -> int:
        return len(self._outputs)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._outputs))
