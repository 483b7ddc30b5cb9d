"""OpenAI Responses API client for structured text generation."""

from dataclasses import dataclass

from openai import AsyncOpenAI, OpenAIError

from smart_pantry.domain.errors import ExternalServiceError
from smart_pantry.services.generation import GenerativeClient


@dataclass
class OpenAIGenerativeClient(GenerativeClient):
    """Generative client backed by OpenAI Responses API."""

    client: AsyncOpenAI

    @classmethod
    def create(cls, api_key: str, timeout: float) -> "OpenAIGenerativeClient":
        """Create an OpenAI client with a request timeout."""
        return cls(client=AsyncOpenAI(api_key=api_key, timeout=timeout))

    async def generate(
        self,
        *,
        model: str,
        prompt: str,
        schema: dict[str, object],
        schema_name: str,
    ) -> str:
        """Call OpenAI with a JSON schema output format and return the text."""
        try:
            response = await self.client.responses.create(
                model=model,
                input=[
                    {
                        "role": "user",
                        "content": [{"type": "input_text", "text": prompt}],
                    }
                ],
                text={
                    "format": {
                        "type": "json_schema",
                        "name": schema_name,
                        "strict": True,
                        "schema": schema,
                    }
                },
                store=False,
            )
        except OpenAIError as exc:
            raise ExternalServiceError(f"OpenAI request failed: {exc}") from exc
        output_text = response.output_text
        if not output_text:
            raise ExternalServiceError("OpenAI returned an empty response")
        return output_text

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.client.close()
