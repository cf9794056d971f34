"""Sequential execution of one branch of action steps."""

import asyncio
import json
import logging
from typing import Optional

from flowagent.engine.dispatcher import OperationDispatcher
from flowagent.engine.events import LogEmitter
from flowagent.engine.outputs import StepOutputStore
from flowagent.engine.resolver import find_unresolved, resolve_parameters
from flowagent.types import DispatchOutcome, StepResult, WorkflowStep

logger = logging.getLogger(__name__)


class BranchRunner:
    """Runs the steps of a branch in order against the shared output store.

    A branch ends early on the first FAILURE (returns False) or on a filter
    SHORT_CIRCUIT (returns True).  Runners never raise, so a failing branch
    cannot take its siblings down with it.

    Args:
        dispatcher:           OperationDispatcher performing each step.
        step_timeout_seconds: Optional per-step budget; None waits forever.
    """

    def __init__(
        self,
        dispatcher: OperationDispatcher,
        step_timeout_seconds: Optional[float] = None,
    ) -> None:
        self.dispatcher = dispatcher
        self.step_timeout_seconds = step_timeout_seconds

    async def run_branch(
        self,
        branch_index: int,
        steps: list[WorkflowStep],
        outputs: StepOutputStore,
        system_prompt: Optional[str],
        emitter: LogEmitter,
    ) -> bool:
        """Execute *steps* in order; return True unless a step failed."""
        label = f"[Branch {branch_index + 1}]"

        for position, step in enumerate(steps, start=1):
            snapshot = outputs.snapshot()
            params = resolve_parameters(step.parameters, snapshot)

            unresolved = find_unresolved(params)
            if unresolved:
                await emitter.warning(
                    f"{label} Unresolved placeholder(s) in step {position}: {', '.join(unresolved)}",
                    branch_index=branch_index, step_id=step.id,
                )

            await emitter.info(
                f'{label} Executing step {position}: "{step.name}"\n'
                f"with params: {json.dumps(params, indent=2, default=str)}",
                branch_index=branch_index, step_id=step.id,
            )
            logger.info(
                f"[Branch] branch={branch_index} step={position} id={step.id} "
                f"op={step.integration_id}.{step.operation_id}"
            )

            result = await self._dispatch(step, params, snapshot, system_prompt)

            if result.outcome == DispatchOutcome.SHORT_CIRCUIT:
                await emitter.info(f"{label} {result.log_text}", branch_index=branch_index, step_id=step.id)
                return True

            if not result.succeeded:
                await emitter.failure(
                    f"{label} FAILURE: {result.failure_reason}",
                    branch_index=branch_index, step_id=step.id,
                )
                return False

            if result.outputs:
                outputs.record(step.id, result.outputs)
            if result.generated_content is not None:
                await emitter.generated(
                    f"{label} AI Response:\n{result.generated_content}",
                    branch_index=branch_index, step_id=step.id,
                )
            await emitter.success(f"{label} SUCCESS: {result.log_text}", branch_index=branch_index, step_id=step.id)

        return True

    async def _dispatch(self, step, params, snapshot, system_prompt) -> StepResult:
        call = self.dispatcher.execute(step, params, snapshot, system_prompt)
        if self.step_timeout_seconds is None:
            return await call
        try:
            return await asyncio.wait_for(call, timeout=self.step_timeout_seconds)
        except asyncio.TimeoutError:
            logger.warning(f"[Branch] step {step.id} timed out after {self.step_timeout_seconds}s")
            return StepResult(
                outcome=DispatchOutcome.FAILURE,
                failure_reason=f"Step timed out after {self.step_timeout_seconds}s.",
            )
