"""Workflow orchestrator. The single public entry point of the execution engine.

Run flow:

  1. "Starting run..."            (info)
  2. no trigger → one failure line, verdict False, nothing else runs
  3. fire the trigger             (modeled: always succeeds)
  4. seed trigger outputs         (supplied test payload or synthesized sample)
  5. run every branch concurrently against one run-scoped StepOutputStore
  6. verdict = every branch returned True
  7. "Run finished."              (info)

A failing branch never cancels its siblings: branch runners report failures
as False instead of raising, and all of them are awaited before the verdict
is taken.
"""

import asyncio
import json
import logging
from typing import Any, Mapping, Optional

from flowagent.config import FlowAgentConfig
from flowagent.engine.branch import BranchRunner
from flowagent.engine.dispatcher import OperationDispatcher, OperationRegistry
from flowagent.engine.events import LogEmitter, LogSink
from flowagent.engine.outputs import StepOutputStore
from flowagent.engine.triggers import default_trigger_payload
from flowagent.llm.client import LLMClient, LLMTextGenerator, TextGenerator
from flowagent.types import (
    Agent, RunResult, RunState, StepKind, StepOutputs, WorkflowStep,
)

logger = logging.getLogger(__name__)


class WorkflowOrchestrator:
    """Runs agent workflows.

    Stateless between calls: every run gets its own output store and log
    emitter, so one orchestrator may serve concurrent runs of different
    agents.

    Constructor dependencies (all optional):
        - text_generator: TextGenerator for ``ai.*`` steps (defaults to litellm)
        - agent_store:    AgentStore for naming ``agent.callAgent`` targets
        - registry:       OperationRegistry (defaults to built-in handlers)
        - config:         FlowAgentConfig
    """

    def __init__(
        self,
        text_generator: Optional[TextGenerator] = None,
        agent_store: Any = None,
        registry: Optional[OperationRegistry] = None,
        config: Optional[FlowAgentConfig] = None,
    ) -> None:
        self.config = config or FlowAgentConfig()
        if text_generator is None:
            text_generator = LLMTextGenerator(LLMClient(config=self.config))
        self.dispatcher = OperationDispatcher(
            text_generator=text_generator,
            agent_store=agent_store,
            registry=registry,
        )
        self.branch_runner = BranchRunner(
            self.dispatcher, step_timeout_seconds=self.config.step_timeout_seconds
        )

    async def run(
        self,
        trigger: Optional[WorkflowStep],
        branches: list[list[WorkflowStep]],
        on_log: Optional[LogSink] = None,
        system_prompt: Optional[str] = None,
        trigger_input: Optional[StepOutputs] = None,
    ) -> RunResult:
        """Fire *trigger*, run *branches* concurrently, and return the verdict.

        Args:
            trigger:       Trigger step, or None (the run then fails immediately).
            branches:      Ordered branches of action steps.
            on_log:        Sink called once per LogEntry (sync or async).
            system_prompt: Forwarded verbatim to every text generation step.
            trigger_input: ``{trigger_step_id: outputs}`` overriding the
                           synthesized trigger payload.

        Returns:
            RunResult with ``success`` True iff every branch succeeded.
        """
        emitter = LogEmitter(on_log)
        state = RunState.NOT_STARTED

        await emitter.info("Starting run...")

        if trigger is None:
            await emitter.failure("FAILURE: No trigger defined for this agent.")
            logger.info("[Orchestrator] run aborted: no trigger defined")
            return RunResult(success=False, state=RunState.COMPLETED)

        if trigger.kind != StepKind.TRIGGER:
            logger.warning(f"[Orchestrator] step '{trigger.id}' used as trigger has kind={trigger.kind.value}")

        await emitter.info(f'Executing trigger: "{trigger.name}"', step_id=trigger.id)
        state = RunState.TRIGGER_FIRED

        outputs = StepOutputStore()
        supplied = (trigger_input or {}).get(trigger.id)
        if isinstance(supplied, Mapping):
            seeded = dict(supplied)
        else:
            if supplied is not None:
                logger.warning(
                    f"[Orchestrator] ignoring trigger input for '{trigger.id}': "
                    f"expected an object, got {type(supplied).__name__}"
                )
            seeded = default_trigger_payload(trigger)
        outputs.record(trigger.id, seeded)

        await emitter.success(
            "SUCCESS: Trigger fired successfully. Output:\n"
            f"{json.dumps(seeded, indent=2, default=str)}",
            step_id=trigger.id,
        )

        state = RunState.BRANCHES_RUNNING
        logger.info(
            f"[Orchestrator] trigger={trigger.id} op={trigger.integration_id}.{trigger.operation_id} "
            f"branches={len(branches)}"
        )

        branch_results = await asyncio.gather(*[
            self.branch_runner.run_branch(index, list(steps), outputs, system_prompt, emitter)
            for index, steps in enumerate(branches)
        ])
        success = all(branch_results)

        await emitter.info("Run finished.")
        state = RunState.COMPLETED
        logger.info(
            f"[Orchestrator] run finished success={success} "
            f"branches={list(branch_results)} log_lines={emitter.count}"
        )

        return RunResult(
            success=success,
            branch_results=list(branch_results),
            outputs=outputs.snapshot(),
            state=state,
        )

    async def run_agent(
        self,
        agent: Agent,
        on_log: Optional[LogSink] = None,
        trigger_input: Optional[StepOutputs] = None,
    ) -> RunResult:
        """Run *agent*'s workflow with its own system prompt."""
        return await self.run(
            agent.trigger, agent.actions, on_log,
            system_prompt=agent.system_prompt, trigger_input=trigger_input,
        )


async def run_agent_workflow(
    trigger: Optional[WorkflowStep],
    actions: list[list[WorkflowStep]],
    on_log: Optional[LogSink] = None,
    system_prompt: Optional[str] = None,
    trigger_input: Optional[StepOutputs] = None,
    *,
    text_generator: Optional[TextGenerator] = None,
    agent_store: Any = None,
) -> RunResult:
    """Run one workflow with a throwaway orchestrator.

    Usage::

        result = await run_agent_workflow(trigger, [[step_a, step_b]], print)
        if not result.success:
            ...
    """
    orchestrator = WorkflowOrchestrator(text_generator=text_generator, agent_store=agent_store)
    return await orchestrator.run(trigger, actions, on_log, system_prompt, trigger_input)
