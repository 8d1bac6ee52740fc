"""AI nutrition estimation used when the food database has no match."""

import base64
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from openai import OpenAIError
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from macro_tracker.domain.lookup import (
    EstimateFailed,
    EstimateSucceeded,
    NutritionEstimate,
)
from macro_tracker.domain.nutrition import NutritionData, build_nutrition_data

RESOURCES_DIR = Path(__file__).resolve().parent.parent / "resources"
DEFAULT_PROMPT_PATH = RESOURCES_DIR / "nutrition_analysis.md"
DEFAULT_SCHEMA_PATH = RESOURCES_DIR / "nutrition_schema.json"

_logger = logging.getLogger(__name__)


class NutritionModelClient(Protocol):
    """Interface for a generative model that answers with a function call."""

    async def call_function(  # noqa: PLR0913
        self,
        *,
        model: str,
        store: bool,
        system_prompt: str,
        user_content: list[dict[str, object]],
        tool: dict[str, object],
    ) -> dict[str, object]:
        """Return the parsed arguments of the forced function call."""


@dataclass(frozen=True)
class AIEstimationConfig:
    """Prompt and output schema handed to the model."""

    system_prompt: str
    function_name: str
    function_description: str
    strict: bool
    schema: dict[str, object]

    def tool(self) -> dict[str, object]:
        """Return the function tool definition for the Responses API."""
        return {
            "type": "function",
            "name": self.function_name,
            "description": self.function_description,
            "strict": self.strict,
            "parameters": self.schema,
        }


def load_estimation_config(
    prompt_path: Path | None = None, schema_path: Path | None = None
) -> AIEstimationConfig:
    """Read the system prompt and function schema from disk."""
    prompt = (prompt_path or DEFAULT_PROMPT_PATH).read_text(encoding="utf-8")
    raw_schema = json.loads(
        (schema_path or DEFAULT_SCHEMA_PATH).read_text(encoding="utf-8")
    )
    return AIEstimationConfig(
        system_prompt=prompt,
        function_name=str(raw_schema["name"]),
        function_description=str(raw_schema.get("description", "")),
        strict=bool(raw_schema.get("strict", True)),
        schema=raw_schema["schema"],
    )


class _Payload(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class _EstimatedDetails(_Payload):
    name: str
    description: str


class _EstimatedCarbohydrates(_Payload):
    total_grams: float
    fiber_grams: float
    sugar_grams: float


class _EstimatedFat(_Payload):
    total_grams: float
    saturated_grams: float


class _EstimatedMacros(_Payload):
    calories: float
    protein_grams: float
    carbohydrates: _EstimatedCarbohydrates
    fat: _EstimatedFat


class _EstimatedNutrition(_Payload):
    food_details: _EstimatedDetails
    macronutrients: _EstimatedMacros

    def to_nutrition_data(self) -> NutritionData:
        macros = self.macronutrients
        return build_nutrition_data(
            name=self.food_details.name.strip(),
            description=self.food_details.description.strip(),
            calories=macros.calories,
            protein=macros.protein_grams,
            carbs=macros.carbohydrates.total_grams,
            fiber=macros.carbohydrates.fiber_grams,
            sugar=macros.carbohydrates.sugar_grams,
            fat=macros.fat.total_grams,
            saturated_fat=macros.fat.saturated_grams,
        )


@dataclass
class AIEstimationService:
    """Service that asks the model for nutrition facts in a fixed schema."""

    client: NutritionModelClient
    config: AIEstimationConfig
    model: str
    store: bool = False

    async def estimate(self, text: str) -> NutritionEstimate:
        """Estimate nutrition facts for a free-text food description."""
        return await self._call(
            [{"type": "input_text", "text": text}], subject=repr(text)
        )

    async def estimate_image(self, image_bytes: bytes) -> NutritionEstimate:
        """Estimate nutrition facts for a photo of a food."""
        return await self._call(
            [{"type": "input_image", "image_url": _to_data_url(image_bytes)}],
            subject=f"image ({len(image_bytes)} bytes)",
        )

    async def _call(
        self, user_content: list[dict[str, object]], *, subject: str
    ) -> NutritionEstimate:
        try:
            raw = await self.client.call_function(
                model=self.model,
                store=self.store,
                system_prompt=self.config.system_prompt,
                user_content=user_content,
                tool=self.config.tool(),
            )
            data = _EstimatedNutrition.model_validate(raw).to_nutrition_data()
        except (OpenAIError, RuntimeError, ValueError) as exc:
            _logger.warning("AI nutrition estimate for %s failed: %s", subject, exc)
            return EstimateFailed(reason=str(exc) or type(exc).__name__)
        _logger.info("AI nutrition estimate completed for %s", subject)
        return EstimateSucceeded(data=data)


def _to_data_url(image_bytes: bytes) -> str:
    """Convert bytes to a base64 data URL for image input."""
    mime_type = detect_image_type(image_bytes)
    encoded = base64.b64encode(image_bytes).decode("utf-8")
    return f"data:{mime_type or 'image/jpeg'};base64,{encoded}"


def detect_image_type(image_bytes: bytes) -> str | None:
    """Infer a JPEG, PNG or WebP MIME type from file signatures."""
    if image_bytes.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    return None
