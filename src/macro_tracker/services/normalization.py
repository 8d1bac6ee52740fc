"""Normalization of Open Food Facts products into nutrition data."""

import math
import re
from dataclasses import dataclass

from macro_tracker.domain.nutrition import (
    NutritionData,
    RawProduct,
    build_nutrition_data,
)

DEFAULT_BASIS = "100g"

# Field -> Open Food Facts nutriment key prefix.
NUTRIENT_KEYS: dict[str, str] = {
    "calories": "energy-kcal",
    "protein": "proteins",
    "carbs": "carbohydrates",
    "fiber": "fiber",
    "sugar": "sugars",
    "fat": "fat",
    "saturated_fat": "saturated-fat",
}

_WHITESPACE = re.compile(r"\s+")
_NUMERIC_LABEL = re.compile(r"\d+(?:\.\d+)?")


@dataclass(frozen=True)
class NutrientReading:
    """Which basis a nutrient value was read from."""

    field: str
    basis: str
    value: float | None


@dataclass(frozen=True)
class ProductAnalysis:
    """Step-by-step view of how a product is normalized."""

    serving_label: str | None
    uses_serving: bool
    readings: list[NutrientReading]


def normalize(
    product: RawProduct, serving_override: str | None = None
) -> NutritionData | None:
    """Convert a raw product into nutrition data.

    Each nutrient prefers its per-serving value when a serving size is known
    and falls back to its own per-100g value. Returns None when the product
    has no name or no nutrient block.
    """
    name = _text(product.get("product_name"))
    nutriments = product.get("nutriments")
    if not name or not isinstance(nutriments, dict):
        return None

    analysis = analyze_product(product, serving_override)
    values = {
        reading.field: reading.value or 0.0 for reading in analysis.readings
    }
    basis = (
        analysis.serving_label
        if analysis.serving_label and _read_from_serving(analysis)
        else DEFAULT_BASIS
    )
    return build_nutrition_data(
        name=name,
        description=_describe(name, _text(product.get("brands")), basis),
        calories=values["calories"],
        protein=values["protein"],
        carbs=values["carbs"],
        fiber=values["fiber"],
        sugar=values["sugar"],
        fat=values["fat"],
        saturated_fat=values["saturated_fat"],
    )


def analyze_product(
    product: RawProduct, serving_override: str | None = None
) -> ProductAnalysis:
    """Report which basis and raw value each nutrient resolves to."""
    nutriments = product.get("nutriments")
    if not isinstance(nutriments, dict):
        nutriments = {}
    serving_label = _serving_label(serving_override) or _text(
        product.get("serving_size")
    )
    uses_serving = serving_label is not None
    readings = [
        _read_nutrient(nutriments, field, key, uses_serving)
        for field, key in NUTRIENT_KEYS.items()
    ]
    return ProductAnalysis(
        serving_label=serving_label,
        uses_serving=uses_serving,
        readings=readings,
    )


def _read_nutrient(
    nutriments: dict[str, object], field: str, key: str, uses_serving: bool
) -> NutrientReading:
    if uses_serving:
        serving_value = _number(nutriments.get(f"{key}_serving"))
        if serving_value is not None:
            return NutrientReading(field=field, basis="serving", value=serving_value)
    value = _number(nutriments.get(f"{key}_100g"))
    if value is None:
        return NutrientReading(field=field, basis="missing", value=None)
    return NutrientReading(field=field, basis=DEFAULT_BASIS, value=value)


def _read_from_serving(analysis: ProductAnalysis) -> bool:
    return any(reading.basis == "serving" for reading in analysis.readings)


def _describe(name: str, brand: str | None, basis: str) -> str:
    brand_clause = f" by {brand}" if brand else ""
    return _WHITESPACE.sub(" ", f"{name}{brand_clause} (per {basis})").strip()


def _serving_label(override: str | None) -> str | None:
    label = _text(override)
    if label and _NUMERIC_LABEL.fullmatch(label):
        return f"{label}g"
    return label


def _text(value: object) -> str | None:
    if not isinstance(value, str):
        return None
    cleaned = _WHITESPACE.sub(" ", value).strip()
    return cleaned or None


def _number(value: object) -> float | None:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int | float):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    if not math.isfinite(number):
        return None
    return number
