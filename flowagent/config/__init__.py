"""Application configuration + declarative YAML agent loader for flowagent.

All env vars defined here with FLOWAGENT_ prefix.
YAML loaders: load_agent_yaml(), load_agents_dir()
"""

from pydantic_settings import BaseSettings
from typing import Optional

from flowagent.config.loader import load_agent_yaml, load_agents_dir
from flowagent.config.schema import AgentYAML, StepYAML


class FlowAgentConfig(BaseSettings):
    # ── App ──
    app_name: str = "flowagent"
    debug: bool = False
    log_level: str = "INFO"

    # ── LLM (litellm) ──
    default_llm_model: str = "gemini/gemini-2.5-flash"
    llm_api_key: Optional[str] = None          # or GEMINI_API_KEY / OPENAI_API_KEY in env
    llm_max_tokens: int = 2048
    llm_temperature: float = 0.7
    llm_timeout_seconds: float = 60.0

    # ── Workflow runs ──
    step_timeout_seconds: Optional[float] = None    # None = steps may run indefinitely
    agents_dir: str = "./agents"

    model_config = {"env_prefix": "FLOWAGENT_", "env_file": ".env", "extra": "ignore"}


config = FlowAgentConfig()


__all__ = [
    "FlowAgentConfig",
    "config",
    "load_agent_yaml",
    "load_agents_dir",
    "AgentYAML",
    "StepYAML",
]
