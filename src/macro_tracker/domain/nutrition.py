"""Nutrition domain models."""

import math
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, localcontext
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

RawProduct = dict[str, object]

_WHOLE = Decimal("1")
_TENTH = Decimal("0.1")
# Digits needed to quantize the largest finite float to a tenth.
_PRECISION = 400


class DataSource(StrEnum):
    """Strategy that produced a nutrition record."""

    DATABASE_BARCODE = "database_barcode"
    DATABASE_SEARCH = "database_search"
    AI_ANALYSIS = "ai_analysis"


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )


class FoodDetails(_CamelModel):
    """Display name and description of a food."""

    name: str
    description: str


class Carbohydrates(_CamelModel):
    """Carbohydrate breakdown in grams."""

    total_grams: float = Field(ge=0.0)
    fiber_grams: float = Field(ge=0.0)
    sugar_grams: float = Field(ge=0.0)


class Fat(_CamelModel):
    """Fat breakdown in grams."""

    total_grams: float = Field(ge=0.0)
    saturated_grams: float = Field(ge=0.0)


class Macronutrients(_CamelModel):
    """Macronutrients for one portion of a food."""

    calories: int = Field(ge=0)
    protein_grams: float = Field(ge=0.0)
    carbohydrates: Carbohydrates
    fat: Fat


class NutritionData(_CamelModel):
    """Nutrition facts for a food before provenance is attached."""

    food_details: FoodDetails
    macronutrients: Macronutrients

    def tagged(self, source: DataSource) -> "NutritionRecord":
        """Return a record carrying the strategy that produced it."""
        return NutritionRecord(
            food_details=self.food_details,
            macronutrients=self.macronutrients,
            data_source=source,
        )


class NutritionRecord(NutritionData):
    """Resolved nutrition facts with provenance."""

    data_source: DataSource


@dataclass(frozen=True)
class ResolutionRequest:
    """Identifiers a caller can supply to resolve nutrition data."""

    food_name: str | None = None
    barcode: str | None = None
    search_terms: str | None = None

    def __post_init__(self) -> None:
        if not any(
            value and value.strip()
            for value in (self.food_name, self.barcode, self.search_terms)
        ):
            raise ValueError("Either foodName, barcode, or searchTerms is required")

    @property
    def barcode_value(self) -> str | None:
        """Return the trimmed barcode, if one was given."""
        return _clean(self.barcode)

    @property
    def search_query(self) -> str | None:
        """Return the text used for database search, if any."""
        return _clean(self.search_terms) or _clean(self.food_name)

    def estimation_input(self) -> str:
        """Return the text handed to the AI estimator."""
        return self.search_query or f"Product with barcode {self.barcode_value}"


def round_calories(value: float) -> int:
    """Round calories half away from zero, clamping negatives to zero."""
    return int(_quantize(value, _WHOLE))


def round_grams(value: float) -> float:
    """Round grams to one decimal half away from zero, clamping negatives."""
    return float(_quantize(value, _TENTH))


def build_nutrition_data(  # noqa: PLR0913
    *,
    name: str,
    description: str,
    calories: float,
    protein: float,
    carbs: float,
    fiber: float,
    sugar: float,
    fat: float,
    saturated_fat: float,
) -> NutritionData:
    """Build nutrition data with the rounding rules applied."""
    return NutritionData(
        food_details=FoodDetails(name=name, description=description),
        macronutrients=Macronutrients(
            calories=round_calories(calories),
            protein_grams=round_grams(protein),
            carbohydrates=Carbohydrates(
                total_grams=round_grams(carbs),
                fiber_grams=round_grams(fiber),
                sugar_grams=round_grams(sugar),
            ),
            fat=Fat(
                total_grams=round_grams(fat),
                saturated_grams=round_grams(saturated_fat),
            ),
        ),
    )


def round_half_up(value: float, places: int = 0) -> float:
    """Round half away from zero on the decimal form of the value."""
    if not math.isfinite(value):
        return 0.0
    return float(_half_up(value, Decimal(1).scaleb(-places)))


def _quantize(value: float, step: Decimal) -> Decimal:
    if not math.isfinite(value) or value <= 0:
        return Decimal(0).quantize(step)
    return _half_up(value, step)


def _half_up(value: float, step: Decimal) -> Decimal:
    with localcontext() as context:
        context.prec = _PRECISION
        return Decimal(str(value)).quantize(step, rounding=ROUND_HALF_UP)


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None
