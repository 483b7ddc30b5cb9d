"""Port and helpers for the generative text service."""

from typing import Protocol


class GenerativeClient(Protocol):
    """Interface for structured LLM text generation."""

    async def generate(
        self,
        *,
        model: str,
        prompt: str,
        schema: dict[str, object],
        schema_name: str,
    ) -> str:
        """Return the raw text produced for a structured prompt."""


def strip_code_fence(raw: str) -> str:
    """Remove a surrounding Markdown code fence from model output."""
    text = raw.strip()
    if not text.startswith("```"):
        return text
    lines = text.splitlines()[1:]
    if lines and lines[-1].strip().startswith("```"):
        lines = lines[:-1]
    return "\n".join(lines).strip()
