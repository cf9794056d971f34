"""flowagent CLI — Typer application."""

import typer
from rich.console import Console

from flowagent.version import __version__

app = typer.Typer(
    name="flowagent",
    help="flowagent — run workflow agents: one trigger, parallel branches of integration steps.",
    no_args_is_help=True,
    invoke_without_command=True,
)
console = Console()


@app.callback()
def main(
    ctx: typer.Context,
    version: bool = typer.Option(False, "--version", "-v", is_eager=True, help="Show version"),
):
    """flowagent CLI."""
    if version:
        console.print(f"flowagent v{__version__}")
        raise typer.Exit()
    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())


from flowagent.cli.commands import run, agents, config  # noqa: E402

app.command(name="run", help="Run an agent file and stream its log")(run.run_agent)
app.command(name="agents", help="List agent files in a directory")(agents.agents_list)
app.command(name="config", help="Show resolved configuration")(config.config_show)


if __name__ == "__main__":
    app()
