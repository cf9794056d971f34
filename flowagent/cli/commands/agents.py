"""flowagent agents — List agent definitions in a directory."""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich import box

console = Console()


def agents_list(
    directory: Optional[Path] = typer.Argument(None, help="Directory of agent YAML files (default: FLOWAGENT_AGENTS_DIR)"),
):
    """List agents with their trigger and branch layout.

    Example:
        flowagent agents
        flowagent agents ./my-agents
    """
    from flowagent.config import FlowAgentConfig, load_agents_dir
    from flowagent.exceptions import AgentDefinitionError

    if directory is None:
        directory = Path(FlowAgentConfig().agents_dir)

    try:
        agents = load_agents_dir(directory)
    except AgentDefinitionError as exc:
        console.print(f"[red]Error:[/red] {escape(str(exc))}")
        raise typer.Exit(1)

    if not agents:
        console.print("[dim]No agents found.[/dim]")
        return

    table = Table(box=box.ROUNDED, header_style="bold dim", title="[bold]Agents[/bold]")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Status")
    table.add_column("Trigger", style="dim")
    table.add_column("Branches", justify="right")
    table.add_column("Steps", justify="right")

    for agent in agents:
        trigger = (
            f"{agent.trigger.integration_id}.{agent.trigger.operation_id}"
            if agent.trigger else "[red](none)[/red]"
        )
        status_color = "green" if agent.status.value == "active" else "dim"
        table.add_row(
            agent.id,
            agent.name,
            f"[{status_color}]{agent.status.value}[/{status_color}]",
            trigger,
            str(len(agent.actions)),
            str(sum(len(b) for b in agent.actions)),
        )

    console.print(table)
