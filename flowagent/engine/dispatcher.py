"""Operation dispatch: one resolved step in, one StepResult out.

Behaviour is keyed by the step's ``(integration_id, operation_id)`` pair and
looked up in an OperationRegistry.  Built-in handlers are registered with the
``@operation`` decorator at import time; anything without a handler is
modeled as an unconditional success with a synthesized confirmation, since
third-party effects are not performed for real.

Handlers are async callables::

    async def handler(dispatcher, step, params, outputs, system_prompt) -> StepResult

The dispatcher never writes step outputs anywhere; it only returns them.
"""

import logging
from typing import Any, Awaitable, Callable, Optional

from flowagent.engine.conditions import evaluate_filter, to_text
from flowagent.exceptions import ConditionError, TextGenerationError
from flowagent.llm.client import TextGenerator
from flowagent.types import DispatchOutcome, StepOutputs, StepResult, WorkflowStep

logger = logging.getLogger(__name__)

OperationKey = tuple[str, str]
OperationHandler = Callable[..., Awaitable[StepResult]]

DEFAULT_PROMPT = "Generate a short creative story."

# Built-in handlers, collected at import time
_builtin_operations: dict[OperationKey, OperationHandler] = {}


def operation(integration_id: str, *operation_ids: str):
    """Decorator registering a built-in handler for one or more operations."""
    def decorator(func: OperationHandler) -> OperationHandler:
        for operation_id in operation_ids:
            _builtin_operations[(integration_id, operation_id)] = func
        return func
    return decorator


class OperationRegistry:
    """Maps (integration_id, operation_id) to a handler."""

    def __init__(self, include_builtins: bool = True):
        self._handlers: dict[OperationKey, OperationHandler] = (
            dict(_builtin_operations) if include_builtins else {}
        )

    def register(self, integration_id: str, operation_id: str, handler: OperationHandler) -> None:
        """Register (or replace) the handler for an operation."""
        self._handlers[(integration_id, operation_id)] = handler

    def get(self, integration_id: str, operation_id: str) -> Optional[OperationHandler]:
        return self._handlers.get((integration_id, operation_id))

    def list_operations(self) -> list[OperationKey]:
        return sorted(self._handlers)

    def __contains__(self, key: object) -> bool:
        return key in self._handlers


class OperationDispatcher:
    """Performs the modeled effect of a fully resolved step.

    Args:
        text_generator: Text generation collaborator for ``ai.*`` steps.
        agent_store:    Optional AgentStore used to name agents referenced by
                        ``agent.callAgent`` steps.
        registry:       Handler registry; defaults to the built-in handlers.
    """

    def __init__(
        self,
        text_generator: Optional[TextGenerator] = None,
        agent_store: Any = None,
        registry: Optional[OperationRegistry] = None,
    ) -> None:
        self.text_generator = text_generator
        self.agent_store = agent_store
        self.registry = registry or OperationRegistry()

    async def execute(
        self,
        step: WorkflowStep,
        resolved_parameters: dict[str, Any],
        outputs: Optional[StepOutputs] = None,
        system_prompt: Optional[str] = None,
    ) -> StepResult:
        """Dispatch *step* and return its outcome.

        *outputs* is the read-only snapshot the parameters were resolved
        against; handlers may consult it but never write to it.

        Exceptions escaping a handler are reported as a FAILURE result, never
        raised to the caller.
        """
        handler = self.registry.get(step.integration_id, step.operation_id) or _synthesized_success
        try:
            return await handler(self, step, resolved_parameters, outputs or {}, system_prompt)
        except Exception as exc:
            logger.warning(
                f"[Dispatcher] {step.integration_id}.{step.operation_id} raised: {exc}",
                exc_info=True,
            )
            return StepResult(
                outcome=DispatchOutcome.FAILURE,
                failure_reason=str(exc) or "An unexpected error occurred.",
            )


# ── Built-in handlers ─────────────────────────────────────────────────────────


@operation("ai", "generateText", "analyzeText")
async def _generate_text(dispatcher, step, params, outputs, system_prompt) -> StepResult:
    prompt = params.get("prompt") or params.get("input") or DEFAULT_PROMPT
    if dispatcher.text_generator is None:
        return StepResult(
            outcome=DispatchOutcome.FAILURE,
            failure_reason="Error: Cannot generate text: no text generation service configured.",
        )
    try:
        text = await dispatcher.text_generator.generate(str(prompt), system_prompt)
    except TextGenerationError as exc:
        return StepResult(outcome=DispatchOutcome.FAILURE, failure_reason=f"Error: {exc}")

    return StepResult(
        outcome=DispatchOutcome.SUCCESS,
        # "output" is kept alongside "response" for older agent definitions
        outputs={"response": text, "output": text},
        log_text="AI generated text successfully.",
        generated_content=text,
    )


@operation("control", "filter")
async def _filter(dispatcher, step, params, outputs, system_prompt) -> StepResult:
    left, condition, right = params.get("input"), params.get("condition"), params.get("value")
    try:
        met = evaluate_filter(condition, left, right)
    except ConditionError as exc:
        return StepResult(outcome=DispatchOutcome.FAILURE, failure_reason=str(exc))

    if not met:
        return StepResult(
            outcome=DispatchOutcome.SHORT_CIRCUIT,
            log_text=(
                "Filter condition NOT met. Stopping branch. "
                f"({to_text(left)} {to_text(condition)} {to_text(right)})"
            ),
        )
    return StepResult(
        outcome=DispatchOutcome.SUCCESS,
        log_text="Filter condition met. Continuing branch.",
    )


@operation("agent", "callAgent")
async def _call_agent(dispatcher, step, params, outputs, system_prompt) -> StepResult:
    agent_id = params.get("agentId")
    message = f"Successfully initiated a call to agent with ID: {agent_id}."
    if dispatcher.agent_store is not None and agent_id:
        callee = await dispatcher.agent_store.find(str(agent_id))
        if callee is not None:
            message = f"Successfully initiated a call to agent with ID: {agent_id} ({callee.name})."
        else:
            logger.warning(f"[Dispatcher] callAgent references unknown agent '{agent_id}'")
    return StepResult(outcome=DispatchOutcome.SUCCESS, log_text=message)


# ── Unmodeled operations ──────────────────────────────────────────────────────


class _Params(dict):
    def __missing__(self, key: str) -> str:
        return "?"


_CONFIRMATIONS: dict[OperationKey, str] = {
    ("gmail", "sendEmail"): "Email sent to {to}.",
    ("slack", "sendMessage"): "Message posted to {channel}.",
    ("google_calendar", "createEvent"): "Calendar event '{title}' created.",
    ("hubspot", "createContact"): "HubSpot contact {email} created.",
    ("salesforce", "updateRecord"): "Salesforce record {recordId} updated.",
    ("google_drive", "uploadFile"): "File '{fileName}' uploaded to Google Drive.",
}


async def _synthesized_success(dispatcher, step, params, outputs, system_prompt) -> StepResult:
    template = _CONFIRMATIONS.get(step.operation_key)
    if template is None:
        message = f"Executed '{step.operation_id}'."
    else:
        message = template.format_map(_Params(params))
    return StepResult(outcome=DispatchOutcome.SUCCESS, log_text=message)
