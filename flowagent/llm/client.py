"""Thin wrapper around litellm for the text generation steps.

litellm handles Gemini, Anthropic, OpenAI, Ollama, and 100+ providers.
This wrapper adds: config defaults, a timeout, and error normalization.

Usage:
  generator = LLMTextGenerator()
  text = await generator.generate("Summarize this email", system_instruction="Be terse.")
"""

import asyncio
from typing import Optional, Protocol, runtime_checkable

import litellm
from flowagent.config import FlowAgentConfig, config as default_config
from flowagent.exceptions import TextGenerationError


@runtime_checkable
class TextGenerator(Protocol):
    """Anything that turns a prompt (+ optional system instruction) into text.

    Implementations raise TextGenerationError on failure.
    """

    async def generate(self, prompt: str, system_instruction: Optional[str] = None) -> str:
        ...


def build_messages(prompt: str, system_instruction: Optional[str] = None) -> list[dict]:
    """Chat messages for a single-turn generation."""
    messages = []
    if system_instruction:
        messages.append({"role": "system", "content": system_instruction})
    messages.append({"role": "user", "content": prompt})
    return messages


class LLMClient:
    """Thin wrapper around litellm.acompletion()."""

    def __init__(self, model: str = None, config: FlowAgentConfig = None):
        self.config = config or default_config
        self.model = model or self.config.default_llm_model
        litellm.drop_params = True  # ignore unsupported params per provider

    async def complete(
        self,
        messages: list[dict],
        temperature: float = None,
        max_tokens: int = None,
    ) -> dict:
        """Call LLM via litellm.acompletion().

        Args:
            messages:    Chat messages [{"role": "user", "content": "..."}]
            temperature: Override config temperature
            max_tokens:  Override config max_tokens

        Returns:
            {"content": str, "usage": {"input_tokens": int, "output_tokens": int}}

        Raises:
            TextGenerationError: On any LLM provider error or timeout
        """
        try:
            kwargs = {
                "model": self.model,
                "messages": messages,
                "temperature": self.config.llm_temperature if temperature is None else temperature,
                "max_tokens": self.config.llm_max_tokens if max_tokens is None else max_tokens,
            }
            if self.config.llm_api_key:
                kwargs["api_key"] = self.config.llm_api_key

            response = await asyncio.wait_for(
                litellm.acompletion(**kwargs), timeout=self.config.llm_timeout_seconds
            )

            choice = response.choices[0]
            return {
                "content": choice.message.content or "",
                "usage": {
                    "input_tokens": response.usage.prompt_tokens,
                    "output_tokens": response.usage.completion_tokens,
                }
            }
        except asyncio.TimeoutError:
            raise TextGenerationError(
                f"LLM call timed out after {self.config.llm_timeout_seconds}s", model=self.model
            )
        except Exception as e:
            raise TextGenerationError(f"LLM call failed: {e}", model=self.model)


class LLMTextGenerator:
    """TextGenerator backed by LLMClient."""

    def __init__(self, client: LLMClient = None):
        self.client = client or LLMClient()

    async def generate(self, prompt: str, system_instruction: Optional[str] = None) -> str:
        if not self.client.model:
            raise TextGenerationError("Cannot generate text: no LLM model configured.")
        result = await self.client.complete(build_messages(prompt, system_instruction))
        return result["content"]
