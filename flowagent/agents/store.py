"""
AgentStore — load/save agent definitions.

The execution engine only uses the store to look up the agent referenced by
an ``agent.callAgent`` step; it never runs the callee.  State is kept
in-memory, optionally seeded from a directory of agent YAML files.

All methods are async for consistency with the rest of the framework even
though in-memory operations are synchronous internally.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from flowagent.config.loader import load_agents_dir
from flowagent.exceptions import AgentNotFound
from flowagent.types import Agent, AgentStatus

logger = logging.getLogger(__name__)


class AgentStore:
    """In-memory store of Agent definitions keyed by agent id."""

    def __init__(self, agents: Optional[list[Agent]] = None) -> None:
        self._store: dict[str, Agent] = {}
        for agent in agents or []:
            self._store[agent.id] = agent

    @classmethod
    def from_directory(cls, path: Optional[Path] = None) -> "AgentStore":
        """Build a store from every agent file in *path* (defaults to config.agents_dir)."""
        agents = load_agents_dir(path)
        logger.info(f"[AgentStore] loaded {len(agents)} agent(s) from {path or 'agents_dir'}")
        return cls(agents)

    async def get(self, agent_id: str) -> Agent:
        """Return the agent with *agent_id*.

        Raises:
            AgentNotFound: if no such agent is stored.
        """
        agent = self._store.get(agent_id)
        if agent is None:
            raise AgentNotFound(f"Agent '{agent_id}' not found.", agent_id=agent_id)
        return agent

    async def find(self, agent_id: str) -> Optional[Agent]:
        """Like get() but returns None for unknown ids."""
        return self._store.get(agent_id)

    async def save(self, agent: Agent) -> Agent:
        """Insert or replace *agent*."""
        self._store[agent.id] = agent
        return agent

    async def delete(self, agent_id: str) -> None:
        """Remove *agent_id*.

        Raises:
            AgentNotFound: if no such agent is stored.
        """
        if agent_id not in self._store:
            raise AgentNotFound(f"Agent '{agent_id}' not found.", agent_id=agent_id)
        del self._store[agent_id]

    async def list(self, status: Optional[AgentStatus] = None) -> list[Agent]:
        """All agents, optionally filtered by status, sorted by name."""
        agents = [a for a in self._store.values() if status is None or a.status == status]
        return sorted(agents, key=lambda a: a.name.lower())

    def __len__(self) -> int:
        return len(self._store)
