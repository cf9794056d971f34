"""Typed exception hierarchy. Every error flowagent can raise."""


class FlowAgentError(Exception):
    """Base exception for all flowagent errors."""
    def __init__(self, message: str, details: dict = None):
        super().__init__(message)
        self.details = details or {}


# ── Step execution ───────────────────────────────────────────────────────────


class OperationError(FlowAgentError):
    """A step's operation failed."""
    def __init__(self, message: str, integration_id: str = "", operation_id: str = "", **kwargs):
        super().__init__(message, **kwargs)
        self.integration_id = integration_id
        self.operation_id = operation_id


class ConditionError(OperationError):
    """Filter step names a condition the evaluator does not know."""
    def __init__(self, message: str, condition: str = "", **kwargs):
        super().__init__(message, integration_id="control", operation_id="filter", **kwargs)
        self.condition = condition


class TextGenerationError(FlowAgentError):
    """The text generation service could not produce a response."""
    def __init__(self, message: str, model: str = "", **kwargs):
        super().__init__(message, **kwargs)
        self.model = model


# ── Agent store ──────────────────────────────────────────────────────────────


class AgentNotFound(FlowAgentError):
    """Requested agent does not exist in the store."""
    def __init__(self, message: str, agent_id: str = "", **kwargs):
        super().__init__(message, **kwargs)
        self.agent_id = agent_id


class AgentDefinitionError(FlowAgentError):
    """Agent definition file is malformed."""
    def __init__(self, message: str, path: str = "", **kwargs):
        super().__init__(message, **kwargs)
        self.path = path
