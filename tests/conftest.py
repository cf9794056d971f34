"""Test fixtures: mock text generator, log collector, sample steps and agents.

All tests should use these fixtures for consistency.
"""

import pytest

from flowagent.agents.store import AgentStore
from flowagent.callbacks.logging import CollectingCallback
from flowagent.config import FlowAgentConfig
from flowagent.engine.dispatcher import OperationDispatcher
from flowagent.engine.orchestrator import WorkflowOrchestrator
from flowagent.exceptions import TextGenerationError
from flowagent.types import Agent, AgentStatus, StepKind, WorkflowStep


@pytest.fixture
def config():
    """Test configuration with safe defaults."""
    return FlowAgentConfig(
        debug=True,
        default_llm_model="mock/test-model",
        step_timeout_seconds=None,
        agents_dir="./does-not-exist",
    )


# ── Mock text generator ───────────────────────────────────────────────────────

class _MockTextGenerator:
    """Returns canned text without hitting any LLM API.

    Args:
        response: Text returned for every call (or a callable prompt → text).
        error:    If set, every call raises TextGenerationError(error).
    """
    def __init__(self, response="tech", error: str | None = None):
        self._response = response
        self._error = error
        self.calls: list[tuple[str, str | None]] = []

    async def generate(self, prompt: str, system_instruction: str | None = None) -> str:
        self.calls.append((prompt, system_instruction))
        if self._error is not None:
            raise TextGenerationError(self._error, model="mock/test-model")
        if callable(self._response):
            return self._response(prompt)
        return self._response


@pytest.fixture
def mock_generator():
    return _MockTextGenerator()


@pytest.fixture
def make_generator():
    """Factory for generators with custom responses / failures."""
    return _MockTextGenerator


@pytest.fixture
def log_collector():
    return CollectingCallback()


# ── Steps and agents ──────────────────────────────────────────────────────────

def make_step(step_id: str, integration: str, operation: str, **parameters) -> WorkflowStep:
    return WorkflowStep(
        id=step_id,
        kind=StepKind.ACTION,
        integration_id=integration,
        operation_id=operation,
        name=f"{integration}.{operation}",
        parameters=parameters,
    )


@pytest.fixture
def step():
    """Factory: step("s1", "slack", "sendMessage", channel="#x")."""
    return make_step


@pytest.fixture
def gmail_trigger():
    return WorkflowStep(
        id="trigger-1",
        kind=StepKind.TRIGGER,
        integration_id="gmail",
        operation_id="onNewEmail",
        name="On new email received",
    )


@pytest.fixture
def webhook_trigger():
    return WorkflowStep(
        id="hook-1",
        kind=StepKind.TRIGGER,
        integration_id="webhook",
        operation_id="onWebhook",
        name="On webhook",
    )


@pytest.fixture
def sales_agent():
    return Agent(
        id="agent-sales",
        name="Sales Follow-up",
        status=AgentStatus.ACTIVE,
    )


@pytest.fixture
def agent_store(sales_agent):
    return AgentStore([sales_agent])


@pytest.fixture
def dispatcher(mock_generator, agent_store):
    return OperationDispatcher(text_generator=mock_generator, agent_store=agent_store)


@pytest.fixture
def orchestrator(mock_generator, agent_store, config):
    return WorkflowOrchestrator(text_generator=mock_generator, agent_store=agent_store, config=config)
