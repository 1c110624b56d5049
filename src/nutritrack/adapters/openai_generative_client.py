"""OpenAI Responses API client for nutrition estimates and tips."""

import json
from dataclasses import dataclass

import httpx
from openai import AsyncOpenAI

from nutritrack.services.estimation import GenerativeClient


@dataclass
class OpenAIGenerativeClient(GenerativeClient):
    """Generative client backed by OpenAI Responses API."""

    client: AsyncOpenAI

    @classmethod
    def create(
        cls, api_key: str, timeout_seconds: float = 30.0
    ) -> "OpenAIGenerativeClient":
        """Create a client with a bounded timeout and no automatic retries."""
        http_client = httpx.AsyncClient(timeout=httpx.Timeout(timeout_seconds))
        return cls(
            client=AsyncOpenAI(
                api_key=api_key, http_client=http_client, max_retries=0
            )
        )

    async def extract(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        image_data_url: str,
        schema: dict[str, object],
        prompt: str,
    ) -> dict[str, object]:
        """Call OpenAI Responses API with structured outputs."""
        request_payload: dict[str, object] = {
            "model": model,
            "input": [
                {
                    "role": "user",
                    "content": [
                        {"type": "input_image", "image_url": image_data_url},
                        {"type": "input_text", "text": prompt},
                    ],
                }
            ],
            "text": {
                "format": {
                    "type": "json_schema",
                    "name": "food_detection",
                    "strict": True,
                    "schema": schema,
                }
            },
            "store": store,
        }
        if reasoning_effort:
            request_payload["reasoning"] = {"effort": reasoning_effort}

        response = await self.client.responses.create(**request_payload)
        output_text = response.output_text
        if not output_text:
            raise RuntimeError("OpenAI returned an empty response")
        return json.loads(output_text.strip())

    async def generate_text(
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        prompt: str,
    ) -> str:
        """Call OpenAI Responses API for a plain text answer."""
        request_payload: dict[str, object] = {
            "model": model,
            "input": prompt,
            "store": store,
        }
        if reasoning_effort:
            request_payload["reasoning"] = {"effort": reasoning_effort}

        response = await self.client.responses.create(**request_payload)
        return response.output_text

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.client.close()
