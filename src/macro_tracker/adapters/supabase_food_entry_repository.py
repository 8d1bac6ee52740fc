"""Supabase repository for food entries."""

from dataclasses import dataclass
from datetime import date, datetime
from uuid import UUID

from supabase import Client

from macro_tracker.domain.entries import FoodEntry
from macro_tracker.services.food_entries import FoodEntryRepository


@dataclass
class SupabaseFoodEntryRepository(FoodEntryRepository):
    """Supabase implementation for food entries."""

    client: Client

    def create_entry(
        self, user_id: UUID, day: date, payload: dict[str, object]
    ) -> FoodEntry:
        """Insert a food entry row and return it."""
        response = (
            self.client.table("food_entries")
            .insert({**payload, "user_id": str(user_id), "date": day.isoformat()})
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create food entry")
        return _parse_row(response.data[0])

    def list_entries(self, user_id: UUID, start: date, end: date) -> list[FoodEntry]:
        """Return entries dated in the range, oldest first."""
        response = (
            self.client.table("food_entries")
            .select("*")
            .eq("user_id", str(user_id))
            .gte("date", start.isoformat())
            .lte("date", end.isoformat())
            .order("date", desc=False)
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]

    def update_entry(
        self, user_id: UUID, entry_id: UUID, changes: dict[str, object]
    ) -> FoodEntry | None:
        """Update an entry owned by the user."""
        response = (
            self.client.table("food_entries")
            .update(changes)
            .eq("id", str(entry_id))
            .eq("user_id", str(user_id))
            .execute()
        )
        if not response.data:
            return None
        return _parse_row(response.data[0])

    def delete_entry(self, user_id: UUID, entry_id: UUID) -> bool:
        """Delete an entry owned by the user."""
        response = (
            self.client.table("food_entries")
            .delete()
            .eq("id", str(entry_id))
            .eq("user_id", str(user_id))
            .execute()
        )
        return bool(response.data)


def _parse_row(row: dict[str, object]) -> FoodEntry:
    created_raw = row.get("created_at")
    return FoodEntry(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        date=date.fromisoformat(str(row["date"])[:10]),
        name=str(row.get("name", "")),
        description=row.get("description"),
        calories=int(row.get("calories") or 0),
        protein_grams=float(row.get("protein_grams") or 0.0),
        carbs_total_grams=float(row.get("carbs_total_grams") or 0.0),
        carbs_fiber_grams=_optional_float(row.get("carbs_fiber_grams")),
        carbs_sugar_grams=_optional_float(row.get("carbs_sugar_grams")),
        fat_total_grams=float(row.get("fat_total_grams") or 0.0),
        fat_saturated_grams=_optional_float(row.get("fat_saturated_grams")),
        created_at=(
            datetime.fromisoformat(created_raw)
            if isinstance(created_raw, str) and created_raw
            else None
        ),
    )


def _optional_float(value: object) -> float | None:
    if value is None:
        return None
    return float(value)
