"""Request and response bodies for the HTTP API."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from macro_tracker.domain.entries import (
    FoodEntry,
    FoodEntryInput,
    MacroGoal,
    MacroTargets,
    YoloDay,
)
from macro_tracker.domain.nutrition import NutritionData, NutritionRecord
from macro_tracker.domain.stats import (
    DailyCalories,
    DailyTotals,
    DashboardData,
    MacroSplit,
    TrendReport,
)
from macro_tracker.services.normalization import ProductAnalysis


class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class NutritionRequest(ApiModel):
    food_name: str | None = None
    barcode: str | None = None
    search_terms: str | None = None


class BarcodeRequest(ApiModel):
    barcode: str | None = None
    serving_size: str | None = None


class EntryCreateRequest(FoodEntryInput):
    entry_date: date | None = Field(default=None, alias="date")

    def to_input(self) -> FoodEntryInput:
        """Drop the date so the remaining fields form a plain entry."""
        return FoodEntryInput.model_validate(
            self.model_dump(exclude={"entry_date"})
        )


class NutritionEntryRequest(ApiModel):
    nutrition: NutritionData
    entry_date: date | None = Field(default=None, alias="date")


class YoloToggleRequest(ApiModel):
    reason: str | None = Field(default=None, max_length=200)


class FoodEntryOut(ApiModel):
    id: UUID
    day: date = Field(alias="date")
    name: str
    description: str | None
    calories: int
    protein_grams: float
    carbs_total_grams: float
    carbs_fiber_grams: float | None
    carbs_sugar_grams: float | None
    fat_total_grams: float
    fat_saturated_grams: float | None
    created_at: datetime | None

    @classmethod
    def from_entry(cls, entry: FoodEntry) -> "FoodEntryOut":
        return cls(
            id=entry.id,
            day=entry.date,
            name=entry.name,
            description=entry.description,
            calories=entry.calories,
            protein_grams=entry.protein_grams,
            carbs_total_grams=entry.carbs_total_grams,
            carbs_fiber_grams=entry.carbs_fiber_grams,
            carbs_sugar_grams=entry.carbs_sugar_grams,
            fat_total_grams=entry.fat_total_grams,
            fat_saturated_grams=entry.fat_saturated_grams,
            created_at=entry.created_at,
        )


class MacroGoalOut(ApiModel):
    id: UUID
    daily_calorie_goal: int
    protein_percentage: float
    carbs_percentage: float
    fat_percentage: float

    @classmethod
    def from_goal(cls, goal: MacroGoal | None) -> "MacroGoalOut | None":
        if goal is None:
            return None
        return cls(
            id=goal.id,
            daily_calorie_goal=goal.daily_calorie_goal,
            protein_percentage=goal.protein_percentage,
            carbs_percentage=goal.carbs_percentage,
            fat_percentage=goal.fat_percentage,
        )


class MacroAmounts(ApiModel):
    calories: int
    protein_grams: float
    carbs_grams: float
    fat_grams: float

    @classmethod
    def from_values(
        cls, values: MacroTargets | DailyTotals | None
    ) -> "MacroAmounts | None":
        if values is None:
            return None
        return cls(
            calories=values.calories,
            protein_grams=values.protein_grams,
            carbs_grams=values.carbs_grams,
            fat_grams=values.fat_grams,
        )


class MacroSplitOut(ApiModel):
    protein_percentage: int
    carbs_percentage: int
    fat_percentage: int

    @classmethod
    def from_split(cls, split: MacroSplit) -> "MacroSplitOut":
        return cls(
            protein_percentage=split.protein_percentage,
            carbs_percentage=split.carbs_percentage,
            fat_percentage=split.fat_percentage,
        )


class YoloDayOut(ApiModel):
    id: UUID
    day: date = Field(alias="date")
    reason: str | None

    @classmethod
    def from_yolo_day(cls, yolo_day: YoloDay | None) -> "YoloDayOut | None":
        if yolo_day is None:
            return None
        return cls(id=yolo_day.id, day=yolo_day.date, reason=yolo_day.reason)


class GoalResponse(ApiModel):
    goal: MacroGoalOut | None
    targets: MacroAmounts | None


class YoloToggleResponse(ApiModel):
    yolo_day: YoloDayOut | None
    is_new: bool


class DashboardResponse(ApiModel):
    day: date = Field(alias="date")
    goal: MacroGoalOut | None
    targets: MacroAmounts | None
    entries: list[FoodEntryOut]
    yolo_day: YoloDayOut | None
    totals: MacroAmounts
    remaining: MacroAmounts | None
    macro_split: MacroSplitOut

    @classmethod
    def from_dashboard(cls, data: DashboardData) -> "DashboardResponse":
        return cls(
            day=data.day,
            goal=MacroGoalOut.from_goal(data.goal),
            targets=MacroAmounts.from_values(data.targets),
            entries=[FoodEntryOut.from_entry(entry) for entry in data.entries],
            yolo_day=YoloDayOut.from_yolo_day(data.yolo_day),
            totals=MacroAmounts.from_values(data.totals),
            remaining=MacroAmounts.from_values(data.remaining),
            macro_split=MacroSplitOut.from_split(data.split),
        )


class DailyCaloriesOut(ApiModel):
    day: date = Field(alias="date")
    calories: int


class WeeklyCaloriesResponse(ApiModel):
    days: list[DailyCaloriesOut]

    @classmethod
    def from_days(cls, days: list[DailyCalories]) -> "WeeklyCaloriesResponse":
        return cls(
            days=[DailyCaloriesOut(day=day.day, calories=day.calories) for day in days]
        )


class TrendDayOut(ApiModel):
    day: date = Field(alias="date")
    calories: int
    protein_grams: float
    carbs_grams: float
    fat_grams: float
    is_yolo_day: bool


class TrendSummaryOut(ApiModel):
    avg_calories: int
    avg_protein: int
    avg_carbs: int
    avg_fat: int
    macro_split: MacroSplitOut
    calorie_goal_met: int
    protein_goal_met: int
    carbs_goal_met: int
    fat_goal_met: int
    total_days: int


class TrendsResponse(ApiModel):
    days: list[TrendDayOut]
    summary: TrendSummaryOut
    goal: MacroGoalOut | None

    @classmethod
    def from_report(cls, report: TrendReport) -> "TrendsResponse":
        summary = report.summary
        return cls(
            days=[
                TrendDayOut(
                    day=day.day,
                    calories=day.calories,
                    protein_grams=day.protein_grams,
                    carbs_grams=day.carbs_grams,
                    fat_grams=day.fat_grams,
                    is_yolo_day=day.is_yolo_day,
                )
                for day in report.days
            ],
            summary=TrendSummaryOut(
                avg_calories=summary.avg_calories,
                avg_protein=summary.avg_protein,
                avg_carbs=summary.avg_carbs,
                avg_fat=summary.avg_fat,
                macro_split=MacroSplitOut.from_split(summary.split),
                calorie_goal_met=summary.calorie_goal_met,
                protein_goal_met=summary.protein_goal_met,
                carbs_goal_met=summary.carbs_goal_met,
                fat_goal_met=summary.fat_goal_met,
                total_days=summary.total_days,
            ),
            goal=MacroGoalOut.from_goal(report.goal),
        )


class ProductInfo(ApiModel):
    brands: str | None = None
    categories: str | None = None
    ingredients: str | None = None
    nutri_score: str | None = None
    nova_group: int | None = None
    serving_size: str | None = None

    @classmethod
    def from_product(cls, product: dict[str, object]) -> "ProductInfo":
        nova_group = product.get("nova_group")
        return cls(
            brands=_optional_text(product.get("brands")),
            categories=_optional_text(product.get("categories")),
            ingredients=_optional_text(product.get("ingredients_text")),
            nutri_score=_optional_text(product.get("nutriscore_grade")),
            nova_group=nova_group if isinstance(nova_group, int) else None,
            serving_size=_optional_text(product.get("serving_size")),
        )


class BarcodeNutritionResponse(NutritionRecord):
    barcode: str
    custom_serving: str | None = None
    product_info: ProductInfo


class NutrientReadingOut(ApiModel):
    field: str
    basis: str
    value: float | None


class BarcodeDebugResponse(ApiModel):
    barcode: str
    product_name: str | None
    brands: str | None
    serving_size: str | None
    serving_quantity: float | str | None
    raw_nutriments: dict[str, object]
    serving_label: str | None
    uses_serving: bool
    readings: list[NutrientReadingOut]
    converted_result: NutritionData | None

    @classmethod
    def from_analysis(
        cls,
        barcode: str,
        product: dict[str, object],
        analysis: ProductAnalysis,
        converted: NutritionData | None,
    ) -> "BarcodeDebugResponse":
        nutriments = product.get("nutriments")
        quantity = product.get("serving_quantity")
        return cls(
            barcode=barcode,
            product_name=_optional_text(product.get("product_name")),
            brands=_optional_text(product.get("brands")),
            serving_size=_optional_text(product.get("serving_size")),
            serving_quantity=(
                quantity
                if isinstance(quantity, (int, float, str))
                and not isinstance(quantity, bool)
                else None
            ),
            raw_nutriments=nutriments if isinstance(nutriments, dict) else {},
            serving_label=analysis.serving_label,
            uses_serving=analysis.uses_serving,
            readings=[
                NutrientReadingOut(
                    field=reading.field, basis=reading.basis, value=reading.value
                )
                for reading in analysis.readings
            ],
            converted_result=converted,
        )


def _optional_text(value: object) -> str | None:
    return value if isinstance(value, str) and value else None
