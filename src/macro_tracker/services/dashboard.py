"""Daily dashboard aggregation."""

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from uuid import UUID

from macro_tracker.domain.entries import FoodEntry, MacroTargets, YoloDay
from macro_tracker.domain.nutrition import round_half_up
from macro_tracker.domain.stats import (
    DailyCalories,
    DailyTotals,
    DashboardData,
    MacroSplit,
)
from macro_tracker.services.food_entries import FoodEntryRepository
from macro_tracker.services.goals import (
    CARBS_KCAL_PER_GRAM,
    FAT_KCAL_PER_GRAM,
    PROTEIN_KCAL_PER_GRAM,
    GoalRepository,
    macro_targets,
)
from macro_tracker.services.yolo_days import YoloDayRepository

WEEK_DAYS = 7

_logger = logging.getLogger(__name__)


@dataclass
class DashboardService:
    """Service that assembles goals, entries and YOLO status for a day."""

    entry_repository: FoodEntryRepository
    goal_repository: GoalRepository
    yolo_day_repository: YoloDayRepository

    def get_dashboard(self, user_id: UUID, day: date) -> DashboardData:
        """Return the dashboard for a single day."""
        goal = self.goal_repository.get_goal(user_id)
        entries = self.entry_repository.list_entries(user_id, day, day)
        yolo_day = self._find_yolo_day(user_id, day)

        totals = sum_entries(day, entries)
        targets = macro_targets(goal) if goal else None
        return DashboardData(
            day=day,
            goal=goal,
            targets=targets,
            entries=entries,
            yolo_day=yolo_day,
            totals=totals,
            remaining=_remaining(targets, totals) if targets else None,
            split=macro_split(
                totals.protein_grams, totals.carbs_grams, totals.fat_grams
            ),
        )

    def get_weekly_calories(self, user_id: UUID, today: date) -> list[DailyCalories]:
        """Return calories for the seven days ending today."""
        start = today - timedelta(days=WEEK_DAYS - 1)
        entries = self.entry_repository.list_entries(user_id, start, today)
        by_day: dict[date, int] = {}
        for entry in entries:
            by_day[entry.date] = by_day.get(entry.date, 0) + entry.calories
        return [
            DailyCalories(day=day, calories=by_day.get(day, 0))
            for day in (start + timedelta(days=offset) for offset in range(WEEK_DAYS))
        ]

    def _find_yolo_day(self, user_id: UUID, day: date) -> YoloDay | None:
        try:
            return self.yolo_day_repository.get_yolo_day(user_id, day)
        except Exception:
            _logger.exception("Failed to fetch YOLO day for %s", day)
            return None


def sum_entries(day: date, entries: list[FoodEntry]) -> DailyTotals:
    """Sum the macros of a day's entries."""
    return DailyTotals(
        day=day,
        calories=sum(entry.calories for entry in entries),
        protein_grams=round_half_up(sum(e.protein_grams for e in entries), 1),
        carbs_grams=round_half_up(sum(e.carbs_total_grams for e in entries), 1),
        fat_grams=round_half_up(sum(e.fat_total_grams for e in entries), 1),
    )


def macro_split(
    protein_grams: float, carbs_grams: float, fat_grams: float
) -> MacroSplit:
    """Return the share of macro calories from protein, carbs and fat."""
    protein_kcal = protein_grams * PROTEIN_KCAL_PER_GRAM
    carbs_kcal = carbs_grams * CARBS_KCAL_PER_GRAM
    fat_kcal = fat_grams * FAT_KCAL_PER_GRAM
    total = protein_kcal + carbs_kcal + fat_kcal
    if total <= 0:
        return MacroSplit(protein_percentage=0, carbs_percentage=0, fat_percentage=0)
    return MacroSplit(
        protein_percentage=int(round_half_up(protein_kcal / total * 100)),
        carbs_percentage=int(round_half_up(carbs_kcal / total * 100)),
        fat_percentage=int(round_half_up(fat_kcal / total * 100)),
    )


def _remaining(targets: MacroTargets, totals: DailyTotals) -> MacroTargets:
    return MacroTargets(
        calories=targets.calories - totals.calories,
        protein_grams=round_half_up(targets.protein_grams - totals.protein_grams, 1),
        carbs_grams=round_half_up(targets.carbs_grams - totals.carbs_grams, 1),
        fat_grams=round_half_up(targets.fat_grams - totals.fat_grams, 1),
    )
