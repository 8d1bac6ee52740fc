"""OpenAI Responses API client for nutrition estimates."""

import json
from dataclasses import dataclass

from openai import AsyncOpenAI

from macro_tracker.services.ai_estimation import NutritionModelClient


@dataclass
class OpenAINutritionClient(NutritionModelClient):
    """Nutrition model client backed by OpenAI function calling."""

    client: AsyncOpenAI

    @classmethod
    def create(cls, api_key: str, timeout_seconds: float) -> "OpenAINutritionClient":
        """Create a client that makes a single attempt per call."""
        return cls(
            client=AsyncOpenAI(
                api_key=api_key, timeout=timeout_seconds, max_retries=0
            )
        )

    async def call_function(  # noqa: PLR0913
        self,
        *,
        model: str,
        store: bool,
        system_prompt: str,
        user_content: list[dict[str, object]],
        tool: dict[str, object],
    ) -> dict[str, object]:
        """Force a function call and return its parsed arguments."""
        response = await self.client.responses.create(
            model=model,
            input=[
                {
                    "role": "system",
                    "content": [{"type": "input_text", "text": system_prompt}],
                },
                {"role": "user", "content": user_content},
            ],
            tools=[tool],
            tool_choice={"type": "function", "name": tool["name"]},
            store=store,
        )
        for item in response.output or []:
            if getattr(item, "type", None) != "function_call":
                continue
            arguments = getattr(item, "arguments", None)
            if not arguments:
                break
            parsed = json.loads(arguments)
            if not isinstance(parsed, dict):
                raise RuntimeError("OpenAI function arguments are not an object")
            return parsed
        raise RuntimeError("OpenAI response contained no function call")

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.client.close()
