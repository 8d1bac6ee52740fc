"""YOLO day service."""

from dataclasses import dataclass
from datetime import date
from typing import Protocol
from uuid import UUID

from macro_tracker.domain.entries import YoloDay

DEFAULT_REASON = "Living my best life!"


class YoloDayRepository(Protocol):
    """Persistence interface for YOLO days."""

    def get_yolo_day(self, user_id: UUID, day: date) -> YoloDay | None:
        """Return the YOLO day for a date, if declared."""

    def list_yolo_days(self, user_id: UUID, start: date, end: date) -> list[YoloDay]:
        """Return YOLO days between start and end inclusive."""

    def create_yolo_day(self, user_id: UUID, day: date, reason: str | None) -> YoloDay:
        """Declare a YOLO day."""

    def delete_yolo_day(self, yolo_day_id: UUID) -> None:
        """Remove a YOLO day."""


@dataclass(frozen=True)
class YoloToggle:
    """Result of toggling a YOLO day."""

    yolo_day: YoloDay | None
    is_new: bool


@dataclass
class YoloDayService:
    """Service for declaring and clearing YOLO days."""

    repository: YoloDayRepository

    def get(self, user_id: UUID, day: date) -> YoloDay | None:
        """Return the YOLO day for a date."""
        return self.repository.get_yolo_day(user_id, day)

    def toggle(
        self, user_id: UUID, day: date, reason: str | None = None
    ) -> YoloToggle:
        """Remove the YOLO day if declared, otherwise declare it."""
        existing = self.repository.get_yolo_day(user_id, day)
        if existing is not None:
            self.repository.delete_yolo_day(existing.id)
            return YoloToggle(yolo_day=None, is_new=False)
        created = self.repository.create_yolo_day(
            user_id, day, reason or DEFAULT_REASON
        )
        return YoloToggle(yolo_day=created, is_new=True)
