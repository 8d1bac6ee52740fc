"""Macro goal service."""

from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from macro_tracker.domain.entries import MacroGoal, MacroGoalInput, MacroTargets
from macro_tracker.domain.nutrition import round_half_up

PROTEIN_KCAL_PER_GRAM = 4
CARBS_KCAL_PER_GRAM = 4
FAT_KCAL_PER_GRAM = 9


class GoalRepository(Protocol):
    """Persistence interface for macro goals."""

    def get_goal(self, user_id: UUID) -> MacroGoal | None:
        """Return the user's goal if one is set."""

    def create_goal(self, user_id: UUID, payload: dict[str, object]) -> MacroGoal:
        """Create the user's goal."""

    def update_goal(self, user_id: UUID, payload: dict[str, object]) -> MacroGoal:
        """Replace the user's goal values."""


@dataclass
class GoalService:
    """Service for reading and saving macro goals."""

    repository: GoalRepository

    def get_goal(self, user_id: UUID) -> MacroGoal | None:
        """Return the user's goal."""
        return self.repository.get_goal(user_id)

    def save_goal(self, user_id: UUID, goal: MacroGoalInput) -> MacroGoal:
        """Create or update the user's goal."""
        payload = goal.model_dump()
        if self.repository.get_goal(user_id) is None:
            return self.repository.create_goal(user_id, payload)
        return self.repository.update_goal(user_id, payload)


def macro_targets(goal: MacroGoal) -> MacroTargets:
    """Convert a calorie goal and percentages into daily gram targets."""
    calories = goal.daily_calorie_goal
    return MacroTargets(
        calories=calories,
        protein_grams=round_half_up(
            calories * goal.protein_percentage / 100 / PROTEIN_KCAL_PER_GRAM, 1
        ),
        carbs_grams=round_half_up(
            calories * goal.carbs_percentage / 100 / CARBS_KCAL_PER_GRAM, 1
        ),
        fat_grams=round_half_up(
            calories * goal.fat_percentage / 100 / FAT_KCAL_PER_GRAM, 1
        ),
    )
