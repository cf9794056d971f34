"""flowagent example — run the email triage agent with no API key.

The AI classification step is served by a canned text generator, so the run
is fully offline.  Swap in LLMTextGenerator() to use a real model.

Run:
    python examples/email_triage/main.py
"""

import asyncio
from pathlib import Path

from flowagent.agents import AgentStore
from flowagent.engine import WorkflowOrchestrator

HERE = Path(__file__).parent


class CannedGenerator:
    """Labels anything mentioning a product catalog as sales."""

    async def generate(self, prompt: str, system_instruction: str = None) -> str:
        return "sales" if "catalog" in prompt.lower() else "tech"


async def main() -> None:
    store = AgentStore.from_directory(HERE)
    agent = await store.get("email-triage")

    orchestrator = WorkflowOrchestrator(text_generator=CannedGenerator(), agent_store=store)
    result = await orchestrator.run_agent(
        agent, on_log=lambda e: print(f"[{e.severity.value}] {e.text}")
    )
    print(f"\nsuccess={result.success} branches={result.branch_results}")


if __name__ == "__main__":
    asyncio.run(main())
