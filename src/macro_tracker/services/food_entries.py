"""Food entry logging service."""

from dataclasses import dataclass
from datetime import date
from typing import Protocol
from uuid import UUID

from macro_tracker.domain.entries import FoodEntry, FoodEntryInput, FoodEntryUpdate
from macro_tracker.domain.nutrition import NutritionData


class FoodEntryRepository(Protocol):
    """Persistence interface for food entries."""

    def create_entry(
        self, user_id: UUID, day: date, payload: dict[str, object]
    ) -> FoodEntry:
        """Create a food entry and return it."""

    def list_entries(self, user_id: UUID, start: date, end: date) -> list[FoodEntry]:
        """Return entries dated between start and end inclusive."""

    def update_entry(
        self, user_id: UUID, entry_id: UUID, changes: dict[str, object]
    ) -> FoodEntry | None:
        """Update an entry owned by the user, returning None when absent."""

    def delete_entry(self, user_id: UUID, entry_id: UUID) -> bool:
        """Delete an entry owned by the user, returning False when absent."""


@dataclass
class FoodEntryService:
    """Service for creating and editing a user's food entries."""

    repository: FoodEntryRepository

    def add_entry(self, user_id: UUID, day: date, entry: FoodEntryInput) -> FoodEntry:
        """Persist a validated manual entry."""
        return self.repository.create_entry(user_id, day, entry.model_dump())

    def add_from_nutrition(
        self, user_id: UUID, day: date, data: NutritionData
    ) -> FoodEntry:
        """Persist an entry built from resolved nutrition data."""
        macros = data.macronutrients
        entry = FoodEntryInput(
            name=data.food_details.name,
            description=data.food_details.description or None,
            calories=macros.calories,
            protein_grams=macros.protein_grams,
            carbs_total_grams=macros.carbohydrates.total_grams,
            carbs_fiber_grams=macros.carbohydrates.fiber_grams,
            carbs_sugar_grams=macros.carbohydrates.sugar_grams,
            fat_total_grams=macros.fat.total_grams,
            fat_saturated_grams=macros.fat.saturated_grams,
        )
        return self.add_entry(user_id, day, entry)

    def list_for_day(self, user_id: UUID, day: date) -> list[FoodEntry]:
        """Return the entries logged for a day."""
        return self.repository.list_entries(user_id, day, day)

    def update_entry(
        self, user_id: UUID, entry_id: UUID, update: FoodEntryUpdate
    ) -> FoodEntry | None:
        """Apply a partial update to an entry."""
        changes = update.changes()
        if not changes:
            raise ValueError("No changes supplied")
        return self.repository.update_entry(user_id, entry_id, changes)

    def delete_entry(self, user_id: UUID, entry_id: UUID) -> bool:
        """Delete an entry."""
        return self.repository.delete_entry(user_id, entry_id)
