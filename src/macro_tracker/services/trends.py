"""Trend statistics over a date range."""

from dataclasses import dataclass
from datetime import date, timedelta
from uuid import UUID

from macro_tracker.domain.entries import FoodEntry, MacroGoal
from macro_tracker.domain.nutrition import round_half_up
from macro_tracker.domain.stats import MacroSplit, TrendDay, TrendReport, TrendSummary
from macro_tracker.services.dashboard import macro_split
from macro_tracker.services.food_entries import FoodEntryRepository
from macro_tracker.services.goals import GoalRepository, macro_targets
from macro_tracker.services.yolo_days import YoloDayRepository

GOAL_MET_RATIO = 0.9


@dataclass
class TrendsService:
    """Service computing daily totals, averages and goal completion."""

    entry_repository: FoodEntryRepository
    goal_repository: GoalRepository
    yolo_day_repository: YoloDayRepository

    def get_trends(self, user_id: UUID, start: date, end: date) -> TrendReport:
        """Return the trend report for start..end inclusive."""
        if start > end:
            raise ValueError("start must not be after end")
        entries = self.entry_repository.list_entries(user_id, start, end)
        yolo_dates = {
            yolo.date
            for yolo in self.yolo_day_repository.list_yolo_days(user_id, start, end)
        }
        goal = self.goal_repository.get_goal(user_id)

        days = build_trend_days(start, end, entries, yolo_dates)
        return TrendReport(days=days, summary=summarize(days, goal), goal=goal)


def build_trend_days(
    start: date, end: date, entries: list[FoodEntry], yolo_dates: set[date]
) -> list[TrendDay]:
    """Sum entries per day, including empty days in the range."""
    totals: dict[date, list[float]] = {}
    for entry in entries:
        bucket = totals.setdefault(entry.date, [0, 0.0, 0.0, 0.0])
        bucket[0] += entry.calories
        bucket[1] += entry.protein_grams
        bucket[2] += entry.carbs_total_grams
        bucket[3] += entry.fat_total_grams

    days = []
    for offset in range((end - start).days + 1):
        day = start + timedelta(days=offset)
        calories, protein, carbs, fat = totals.get(day, [0, 0.0, 0.0, 0.0])
        days.append(
            TrendDay(
                day=day,
                calories=int(calories),
                protein_grams=round_half_up(protein, 1),
                carbs_grams=round_half_up(carbs, 1),
                fat_grams=round_half_up(fat, 1),
                is_yolo_day=day in yolo_dates,
            )
        )
    return days


def summarize(days: list[TrendDay], goal: MacroGoal | None) -> TrendSummary:
    """Compute averages over tracked days and goal completion rates.

    YOLO days count as tracked and as meeting every goal, but are left out
    of the averages.
    """
    tracked = [day for day in days if day.calories > 0 or day.is_yolo_day]
    total_days = len(tracked) or 1
    eaten = [day for day in tracked if not day.is_yolo_day and day.calories > 0]
    divisor = len(eaten) or 1

    avg_calories = _average([day.calories for day in eaten], divisor)
    avg_protein = _average([day.protein_grams for day in eaten], divisor)
    avg_carbs = _average([day.carbs_grams for day in eaten], divisor)
    avg_fat = _average([day.fat_grams for day in eaten], divisor)

    split = MacroSplit(protein_percentage=0, carbs_percentage=0, fat_percentage=0)
    if avg_calories > 0:
        split = macro_split(avg_protein, avg_carbs, avg_fat)

    met = {"calories": 0, "protein": 0, "carbs": 0, "fat": 0}
    if goal is not None:
        targets = macro_targets(goal)
        for day in tracked:
            if day.is_yolo_day:
                for key in met:
                    met[key] += 1
                continue
            met["calories"] += _reached(day.calories, targets.calories)
            met["protein"] += _reached(day.protein_grams, targets.protein_grams)
            met["carbs"] += _reached(day.carbs_grams, targets.carbs_grams)
            met["fat"] += _reached(day.fat_grams, targets.fat_grams)

    return TrendSummary(
        avg_calories=avg_calories,
        avg_protein=avg_protein,
        avg_carbs=avg_carbs,
        avg_fat=avg_fat,
        split=split,
        calorie_goal_met=_percent(met["calories"], total_days),
        protein_goal_met=_percent(met["protein"], total_days),
        carbs_goal_met=_percent(met["carbs"], total_days),
        fat_goal_met=_percent(met["fat"], total_days),
        total_days=total_days,
    )


def _reached(value: float, target: float) -> int:
    return int(value >= target * GOAL_MET_RATIO)


def _average(values: list[float], divisor: int) -> int:
    return int(round_half_up(sum(values) / divisor))


def _percent(count: int, total: int) -> int:
    return int(round_half_up(count / total * 100))
