"""Load and validate agent YAML files into Agent objects.

An agent file looks like::

    id: email-triage
    name: Email Triage
    trigger:
      id: trigger-1
      integration: gmail
      operation: onNewEmail
    branches:
      - - id: classify
          integration: ai
          operation: analyzeText
          parameters:
            input: "{{outputs.trigger-1.body}}"
"""

from pathlib import Path
from typing import Optional

import yaml
from pydantic import ValidationError

from flowagent.config.schema import AgentYAML, StepYAML
from flowagent.exceptions import AgentDefinitionError
from flowagent.types import Agent, StepKind, WorkflowStep


def _to_step(entry: StepYAML, kind: StepKind) -> WorkflowStep:
    return WorkflowStep(
        id=entry.id,
        kind=kind,
        integration_id=entry.integration,
        operation_id=entry.operation,
        name=entry.name or f"{entry.integration}.{entry.operation}",
        parameters=entry.parameters,
    )


def load_agent_yaml(path: Path) -> Agent:
    """Load one agent file → Agent.

    Raises:
        FileNotFoundError: if the file does not exist.
        AgentDefinitionError: if the YAML does not match the agent schema.
    """
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Agent file not found: {p}")

    try:
        raw = yaml.safe_load(p.read_text())
        parsed = AgentYAML.model_validate(raw or {})
    except (yaml.YAMLError, ValidationError) as exc:
        raise AgentDefinitionError(f"Invalid agent file {p}: {exc}", path=str(p)) from exc

    return Agent(
        id=parsed.id,
        name=parsed.name,
        description=parsed.description,
        system_prompt=parsed.system_prompt,
        status=parsed.status,
        trigger=_to_step(parsed.trigger, StepKind.TRIGGER) if parsed.trigger else None,
        actions=[
            [_to_step(s, StepKind.ACTION) for s in branch]
            for branch in parsed.branches
        ],
    )


def load_agents_dir(path: Optional[Path] = None) -> list[Agent]:
    """Load every *.yaml / *.yml agent file in a directory, sorted by filename.

    Args:
        path: Directory to scan. If None, uses config.agents_dir.

    Returns:
        List of Agent instances. A missing directory yields an empty list.
    """
    if path is None:
        from flowagent.config import config
        path = Path(config.agents_dir)
    directory = Path(path)
    if not directory.is_dir():
        return []

    files = sorted(list(directory.glob("*.yaml")) + list(directory.glob("*.yml")))
    return [load_agent_yaml(f) for f in files]
