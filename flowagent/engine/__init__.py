"""flowagent.engine — workflow execution: resolve, dispatch, run branches, aggregate."""

from .branch import BranchRunner
from .dispatcher import OperationDispatcher, OperationRegistry, operation
from .events import LogEmitter
from .orchestrator import WorkflowOrchestrator, run_agent_workflow
from .outputs import StepOutputStore
from .resolver import find_unresolved, placeholder, resolve, resolve_parameters

__all__ = [
    "BranchRunner",
    "LogEmitter",
    "OperationDispatcher",
    "OperationRegistry",
    "StepOutputStore",
    "WorkflowOrchestrator",
    "find_unresolved",
    "operation",
    "placeholder",
    "resolve",
    "resolve_parameters",
    "run_agent_workflow",
]
