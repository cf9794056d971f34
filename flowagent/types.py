"""All shared types, enums, and type aliases. Everything imports from here."""

from enum import Enum
from typing import Any, Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field
import uuid


# ── Type aliases ───────────────────────────────────────────────────────

# step id → output name → value
StepOutputs = dict[str, dict[str, Any]]


# ── Enums ──────────────────────────────────────────────────────────────

class StepKind(str, Enum):
    TRIGGER = "trigger"
    ACTION = "action"

class AgentStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"

class LogSeverity(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    FAILURE = "failure"
    GENERATED_CONTENT = "generated_content"  # raw text produced by an AI step
    WARNING = "warning"                      # e.g. placeholder left unresolved

class DispatchOutcome(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"
    SHORT_CIRCUIT = "short_circuit"  # filter false: branch stops, not a failure

class RunState(str, Enum):
    NOT_STARTED = "not_started"
    TRIGGER_FIRED = "trigger_fired"
    BRANCHES_RUNNING = "branches_running"
    COMPLETED = "completed"


# ── Workflow definition ────────────────────────────────────────────────

class WorkflowStep(BaseModel):
    """A single trigger or action bound to an (integration, operation) pair."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: f"step-{uuid.uuid4().hex[:9]}")
    kind: StepKind = StepKind.ACTION
    integration_id: str                 # "gmail", "slack", "ai", "control", "agent", ...
    operation_id: str                   # "sendEmail", "filter", "generateText", ...
    name: str = ""
    parameters: dict[str, Any] = Field(default_factory=dict)

    @property
    def operation_key(self) -> tuple[str, str]:
        return (self.integration_id, self.operation_id)

class Agent(BaseModel):
    """A trigger plus ordered branches of action steps."""
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    name: str
    description: str = ""
    trigger: Optional[WorkflowStep] = None
    actions: list[list[WorkflowStep]] = Field(default_factory=list)  # branches
    system_prompt: Optional[str] = None
    status: AgentStatus = AgentStatus.INACTIVE


# ── Run artefacts ──────────────────────────────────────────────────────

class LogEntry(BaseModel):
    """One line of the run log, delivered to the caller as it happens."""
    timestamp: datetime = Field(default_factory=datetime.now)
    severity: LogSeverity
    text: str
    branch_index: Optional[int] = None  # 0-based; None for run-level lines
    step_id: Optional[str] = None

class StepResult(BaseModel):
    """What the dispatcher reports back for one step."""
    outcome: DispatchOutcome
    outputs: dict[str, Any] = Field(default_factory=dict)
    log_text: str = ""
    failure_reason: Optional[str] = None
    generated_content: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.outcome == DispatchOutcome.SUCCESS

class RunResult(BaseModel):
    """Overall verdict of one workflow run."""
    success: bool
    branch_results: list[bool] = Field(default_factory=list)
    outputs: StepOutputs = Field(default_factory=dict)
    state: RunState = RunState.COMPLETED
