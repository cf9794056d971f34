"""flowagent run — Execute an agent file from the command line."""

import asyncio
import json
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from flowagent.types import LogEntry, LogSeverity

console = Console()

_SEVERITY_STYLE = {
    LogSeverity.INFO: "blue",
    LogSeverity.SUCCESS: "green",
    LogSeverity.FAILURE: "red",
    LogSeverity.WARNING: "yellow",
    LogSeverity.GENERATED_CONTENT: "magenta",
}


def _print_entry(entry: LogEntry) -> None:
    style = _SEVERITY_STYLE.get(entry.severity, "white")
    ts = entry.timestamp.strftime("%H:%M:%S")
    console.print(f"[dim]{ts}[/dim] [{style}]{entry.severity.value.upper():<17}[/{style}] {escape(entry.text)}", highlight=False)


def _load_trigger_input(path: Optional[Path], trigger_id: str) -> Optional[dict]:
    """Read a JSON test payload.

    Accepts either ``{trigger_id: {...}}`` or the bare outputs object.
    """
    if path is None:
        return None
    data = json.loads(Path(path).read_text())
    if not isinstance(data, dict):
        raise typer.BadParameter("trigger input must be a JSON object", param_hint="--trigger-input")
    if trigger_id in data and isinstance(data[trigger_id], dict):
        return data
    return {trigger_id: data}


async def _execute(agent_file: Path, trigger_input: Optional[Path], system_prompt: Optional[str]) -> bool:
    from flowagent.agents.store import AgentStore
    from flowagent.config import FlowAgentConfig, load_agent_yaml
    from flowagent.engine.orchestrator import WorkflowOrchestrator

    cfg = FlowAgentConfig()
    agent = load_agent_yaml(agent_file)
    store = AgentStore.from_directory(Path(cfg.agents_dir))
    await store.save(agent)

    payload = _load_trigger_input(trigger_input, agent.trigger.id) if agent.trigger else None

    console.print(Panel(
        f"[bold]Agent:[/bold] {escape(agent.name)} [dim]({escape(agent.id)})[/dim]\n"
        f"[bold]Branches:[/bold] {len(agent.actions)}",
        title="[bold blue]flowagent run[/bold blue]",
        border_style="blue",
    ))

    orchestrator = WorkflowOrchestrator(agent_store=store, config=cfg)
    result = await orchestrator.run(
        agent.trigger,
        agent.actions,
        _print_entry,
        system_prompt=system_prompt or agent.system_prompt,
        trigger_input=payload,
    )

    color = "green" if result.success else "red"
    verdict = "SUCCESS" if result.success else "FAILED"
    console.print()
    console.print(f"[bold {color}]{verdict}[/bold {color}]  [dim]branches: {result.branch_results}[/dim]")
    return result.success


def run_agent(
    agent_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Agent YAML file"),
    trigger_input: Optional[Path] = typer.Option(
        None, "--trigger-input", "-t", exists=True, dir_okay=False,
        help="JSON file with test trigger data",
    ),
    system_prompt: Optional[str] = typer.Option(
        None, "--system-prompt", "-s", help="Override the agent's system prompt",
    ),
):
    """Run an agent's workflow once and stream its log.

    Third-party operations are modeled, not performed; AI steps call the
    configured LLM through litellm.  Exits with status 1 when the run fails.

    Example:
        flowagent run agents/email_triage.yaml
        flowagent run agents/email_triage.yaml --trigger-input payload.json
    """
    try:
        ok = asyncio.run(_execute(agent_file, trigger_input, system_prompt))
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted.[/yellow]")
        raise typer.Exit(1)
    except typer.BadParameter:
        raise
    except Exception as exc:
        console.print(f"\n[red]Error:[/red] {escape(str(exc))}")
        raise typer.Exit(1)
    if not ok:
        raise typer.Exit(1)
