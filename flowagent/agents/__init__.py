"""flowagent.agents — agent definition storage."""

from .store import AgentStore

__all__ = ["AgentStore"]
