"""Supabase repository for YOLO days."""

from dataclasses import dataclass
from datetime import date
from uuid import UUID

from supabase import Client

from macro_tracker.domain.entries import YoloDay
from macro_tracker.services.yolo_days import YoloDayRepository


@dataclass
class SupabaseYoloDayRepository(YoloDayRepository):
    """Supabase implementation for YOLO days."""

    client: Client

    def get_yolo_day(self, user_id: UUID, day: date) -> YoloDay | None:
        """Return the YOLO day row for a date."""
        response = (
            self.client.table("yolo_days")
            .select("id, user_id, date, reason")
            .eq("user_id", str(user_id))
            .eq("date", day.isoformat())
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_row(response.data[0])

    def list_yolo_days(self, user_id: UUID, start: date, end: date) -> list[YoloDay]:
        """Return YOLO days in the range."""
        response = (
            self.client.table("yolo_days")
            .select("id, user_id, date, reason")
            .eq("user_id", str(user_id))
            .gte("date", start.isoformat())
            .lte("date", end.isoformat())
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]

    def create_yolo_day(self, user_id: UUID, day: date, reason: str | None) -> YoloDay:
        """Insert a YOLO day."""
        response = (
            self.client.table("yolo_days")
            .insert(
                {"user_id": str(user_id), "date": day.isoformat(), "reason": reason}
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create YOLO day")
        return _parse_row(response.data[0])

    def delete_yolo_day(self, yolo_day_id: UUID) -> None:
        """Delete a YOLO day."""
        self.client.table("yolo_days").delete().eq("id", str(yolo_day_id)).execute()


def _parse_row(row: dict[str, object]) -> YoloDay:
    return YoloDay(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        date=date.fromisoformat(str(row["date"])[:10]),
        reason=row.get("reason"),
    )
