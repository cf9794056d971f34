"""flowagent.llm — text generation service used by AI workflow steps."""

from .client import LLMClient, LLMTextGenerator, TextGenerator, build_messages

__all__ = ["LLMClient", "LLMTextGenerator", "TextGenerator", "build_messages"]
