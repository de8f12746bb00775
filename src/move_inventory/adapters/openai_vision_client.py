"""OpenAI Responses API client for photo analysis."""

from collections.abc import Sequence
from dataclasses import dataclass

from openai import AsyncOpenAI

from move_inventory.services.vision import VisionClient


@dataclass
class OpenAIVisionClient(VisionClient):
    """Vision client backed by OpenAI Responses API."""

    client: AsyncOpenAI

    @classmethod
    def create(cls, api_key: str) -> "OpenAIVisionClient":
        """Create an OpenAI vision client."""
        return cls(client=AsyncOpenAI(api_key=api_key))

    async def describe(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        prompt: str,
        image_data_urls: Sequence[str],
        schema: dict[str, object],
        schema_name: str,
    ) -> str:
        """Call OpenAI Responses API with labelled images and structured outputs."""
        content: list[dict[str, object]] = [{"type": "input_text", "text": prompt}]
        for position, image_data_url in enumerate(image_data_urls, start=1):
            if len(image_data_urls) > 1:
                content.append({"type": "input_text", "text": f"Image {position}:"})
            content.append(
                {"type": "input_image", "image_url": image_data_url, "detail": "high"}
            )
        request_payload: dict[str, object] = {
            "model": model,
            "input": [{"role": "user", "content": content}],
            "text": {
                "format": {
                    "type": "json_schema",
                    "name": schema_name,
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
        return output_text

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self.client.close()
