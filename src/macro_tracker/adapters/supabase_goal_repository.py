"""Supabase repository for macro goals."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from macro_tracker.domain.entries import MacroGoal
from macro_tracker.services.goals import GoalRepository


@dataclass
class SupabaseGoalRepository(GoalRepository):
    """Supabase implementation for macro goals."""

    client: Client

    def get_goal(self, user_id: UUID) -> MacroGoal | None:
        """Return the most recent goal for a user."""
        response = (
            self.client.table("macro_goals")
            .select(
                "id, user_id, daily_calorie_goal, protein_percentage, "
                "carbs_percentage, fat_percentage"
            )
            .eq("user_id", str(user_id))
            .order("created_at", desc=True)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_row(response.data[0])

    def create_goal(self, user_id: UUID, payload: dict[str, object]) -> MacroGoal:
        """Insert the user's goal."""
        response = (
            self.client.table("macro_goals")
            .insert({**payload, "user_id": str(user_id)})
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to save macro goals")
        return _parse_row(response.data[0])

    def update_goal(self, user_id: UUID, payload: dict[str, object]) -> MacroGoal:
        """Update the user's goal."""
        response = (
            self.client.table("macro_goals")
            .update({**payload, "updated_at": datetime.now(tz=UTC).isoformat()})
            .eq("user_id", str(user_id))
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to save macro goals")
        return _parse_row(response.data[0])


def _parse_row(row: dict[str, object]) -> MacroGoal:
    return MacroGoal(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        daily_calorie_goal=int(row["daily_calorie_goal"]),
        protein_percentage=float(row["protein_percentage"]),
        carbs_percentage=float(row["carbs_percentage"]),
        fat_percentage=float(row["fat_percentage"]),
    )
