"""flowagent — workflow agents: one trigger, parallel branches of integration steps.

Usage:
    from flowagent import WorkflowStep, StepKind, run_agent_workflow

    trigger = WorkflowStep(id="t1", kind=StepKind.TRIGGER, integration_id="gmail",
                           operation_id="onNewEmail", name="On new email")
    notify = WorkflowStep(id="s1", integration_id="slack", operation_id="sendMessage",
                          parameters={"text": "{{outputs.t1.subject}}"})
    result = await run_agent_workflow(trigger, [[notify]], on_log=print)
"""

from flowagent.types import (
    Agent, AgentStatus, DispatchOutcome, LogEntry, LogSeverity,
    RunResult, RunState, StepKind, StepOutputs, StepResult, WorkflowStep,
)
from flowagent.exceptions import (
    FlowAgentError,
    OperationError, ConditionError, TextGenerationError, AgentNotFound,
    AgentDefinitionError,
)
from flowagent.engine import WorkflowOrchestrator, run_agent_workflow
from flowagent.version import __version__

__all__ = [
    "Agent", "AgentStatus", "DispatchOutcome", "LogEntry", "LogSeverity",
    "RunResult", "RunState", "StepKind", "StepOutputs", "StepResult", "WorkflowStep",
    "FlowAgentError",
    "OperationError", "ConditionError", "TextGenerationError", "AgentNotFound",
    "AgentDefinitionError",
    "WorkflowOrchestrator", "run_agent_workflow",
    "__version__",
]
