"""flowagent config: show the resolved settings."""

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

console = Console()

_SECRETS = {"llm_api_key"}


def config_show():
    """Show every FlowAgentConfig field with its value and env var.

    Secrets are masked.

    Example:
        flowagent config
    """
    from flowagent.config import FlowAgentConfig

    cfg = FlowAgentConfig()
    prefix = cfg.model_config.get("env_prefix", "")

    table = Table(box=box.ROUNDED, header_style="bold dim", title="[bold]flowagent settings[/bold]")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    table.add_column("Env var", style="dim")

    for name in FlowAgentConfig.model_fields:
        value = getattr(cfg, name)
        if value is None:
            shown = "[dim](not set)[/dim]"
        elif name in _SECRETS:
            shown = "***"
        else:
            shown = escape(str(value))
        table.add_row(name, shown, f"{prefix}{name}".upper())

    console.print(table)
