"""Domain models for dashboard and trend statistics."""

from dataclasses import dataclass
from datetime import date

from macro_tracker.domain.entries import FoodEntry, MacroGoal, MacroTargets, YoloDay


@dataclass(frozen=True)
class DailyTotals:
    """Macro totals for one day."""

    day: date
    calories: int
    protein_grams: float
    carbs_grams: float
    fat_grams: float


@dataclass(frozen=True)
class MacroSplit:
    """Share of calories coming from each macro, in whole percent."""

    protein_percentage: int
    carbs_percentage: int
    fat_percentage: int


@dataclass(frozen=True)
class DashboardData:
    """Everything the daily dashboard shows."""

    day: date
    goal: MacroGoal | None
    targets: MacroTargets | None
    entries: list[FoodEntry]
    yolo_day: YoloDay | None
    totals: DailyTotals
    remaining: MacroTargets | None
    split: MacroSplit


@dataclass(frozen=True)
class DailyCalories:
    """Calories eaten on a single day."""

    day: date
    calories: int


@dataclass(frozen=True)
class TrendDay:
    """Totals for one day of a trend window."""

    day: date
    calories: int
    protein_grams: float
    carbs_grams: float
    fat_grams: float
    is_yolo_day: bool


@dataclass(frozen=True)
class TrendSummary:
    """Averages, macro split and goal completion over a trend window."""

    avg_calories: int
    avg_protein: int
    avg_carbs: int
    avg_fat: int
    split: MacroSplit
    calorie_goal_met: int
    protein_goal_met: int
    carbs_goal_met: int
    fat_goal_met: int
    total_days: int


@dataclass(frozen=True)
class TrendReport:
    """Daily totals plus their summary for a date range."""

    days: list[TrendDay]
    summary: TrendSummary
    goal: MacroGoal | None
