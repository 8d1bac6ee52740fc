"""Domain models for food entries, macro goals and YOLO days."""

from dataclasses import dataclass
from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

PERCENTAGE_TOLERANCE = 0.1


@dataclass(frozen=True)
class FoodEntry:
    """A food a user logged for a day."""

    id: UUID
    user_id: UUID
    date: date
    name: str
    description: str | None
    calories: int
    protein_grams: float
    carbs_total_grams: float
    carbs_fiber_grams: float | None
    carbs_sugar_grams: float | None
    fat_total_grams: float
    fat_saturated_grams: float | None
    created_at: datetime | None = None


@dataclass(frozen=True)
class MacroGoal:
    """Daily calorie goal split into macro percentages."""

    id: UUID
    user_id: UUID
    daily_calorie_goal: int
    protein_percentage: float
    carbs_percentage: float
    fat_percentage: float


@dataclass(frozen=True)
class MacroTargets:
    """Daily gram targets derived from a macro goal."""

    calories: int
    protein_grams: float
    carbs_grams: float
    fat_grams: float


@dataclass(frozen=True)
class YoloDay:
    """A day the user skips tracking."""

    id: UUID
    user_id: UUID
    date: date
    reason: str | None


class _InputModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FoodEntryInput(_InputModel):
    """Validated payload for a new food entry."""

    name: str = Field(min_length=2, max_length=200)
    description: str | None = Field(default=None, max_length=500)
    calories: int = Field(ge=0, le=10000)
    protein_grams: float = Field(ge=0, le=1000)
    carbs_total_grams: float = Field(ge=0, le=1000)
    carbs_fiber_grams: float | None = Field(default=None, ge=0, le=1000)
    carbs_sugar_grams: float | None = Field(default=None, ge=0, le=1000)
    fat_total_grams: float = Field(ge=0, le=1000)
    fat_saturated_grams: float | None = Field(default=None, ge=0, le=1000)

    @model_validator(mode="before")
    @classmethod
    def _strip_name(cls, data: object) -> object:
        if isinstance(data, dict) and isinstance(data.get("name"), str):
            return {**data, "name": data["name"].strip()}
        return data

    @model_validator(mode="after")
    def _check_breakdown(self) -> "FoodEntryInput":
        _check_part(self.carbs_fiber_grams, self.carbs_total_grams, "Fiber", "carbs")
        _check_part(self.carbs_sugar_grams, self.carbs_total_grams, "Sugar", "carbs")
        _check_part(
            self.fat_saturated_grams, self.fat_total_grams, "Saturated fat", "fat"
        )
        return self


class FoodEntryUpdate(_InputModel):
    """Partial update for an existing food entry."""

    name: str | None = Field(default=None, min_length=2, max_length=200)
    description: str | None = Field(default=None, max_length=500)
    calories: int | None = Field(default=None, ge=0, le=10000)
    protein_grams: float | None = Field(default=None, ge=0, le=1000)
    carbs_total_grams: float | None = Field(default=None, ge=0, le=1000)
    carbs_fiber_grams: float | None = Field(default=None, ge=0, le=1000)
    carbs_sugar_grams: float | None = Field(default=None, ge=0, le=1000)
    fat_total_grams: float | None = Field(default=None, ge=0, le=1000)
    fat_saturated_grams: float | None = Field(default=None, ge=0, le=1000)

    def changes(self) -> dict[str, object]:
        """Return only the fields the caller set."""
        return self.model_dump(exclude_unset=True)


class MacroGoalInput(_InputModel):
    """Validated payload for a user's macro goal."""

    daily_calorie_goal: int = Field(ge=800, le=10000)
    protein_percentage: float = Field(ge=10, le=70)
    carbs_percentage: float = Field(ge=10, le=70)
    fat_percentage: float = Field(ge=10, le=70)

    @model_validator(mode="after")
    def _check_total(self) -> "MacroGoalInput":
        total = self.protein_percentage + self.carbs_percentage + self.fat_percentage
        if abs(total - 100) >= PERCENTAGE_TOLERANCE:
            raise ValueError(
                "Protein, carbs, and fat percentages must add up to 100%"
            )
        return self


def _check_part(part: float | None, total: float, label: str, whole: str) -> None:
    if part is not None and part > total:
        raise ValueError(f"{label} cannot be more than total {whole}")
