"""Food log, goals, YOLO day, dashboard and trends endpoints."""

from __future__ import annotations

from datetime import UTC, date, datetime
from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from macro_tracker.api.auth import require_user
from macro_tracker.api.schemas import (
    DashboardResponse,
    EntryCreateRequest,
    FoodEntryOut,
    GoalResponse,
    MacroAmounts,
    MacroGoalOut,
    NutritionEntryRequest,
    TrendsResponse,
    WeeklyCaloriesResponse,
    YoloDayOut,
    YoloToggleRequest,
    YoloToggleResponse,
)
from macro_tracker.domain.entries import FoodEntryUpdate, MacroGoalInput
from macro_tracker.services.goals import macro_targets

if TYPE_CHECKING:
    from macro_tracker.containers import AppContainer

router = APIRouter(prefix="/api", tags=["tracking"])


def _today() -> date:
    return datetime.now(tz=UTC).date()


@router.get("/dashboard")
async def dashboard(
    request: Request,
    day: date | None = Query(default=None, alias="date"),
    user_id: UUID = Depends(require_user),
) -> DashboardResponse:
    """Return goal progress for a day, defaulting to today."""
    container: AppContainer = request.app.state.container
    data = container.dashboard_service.get_dashboard(user_id, day or _today())
    return DashboardResponse.from_dashboard(data)


@router.get("/dashboard/weekly")
async def weekly_calories(
    request: Request, user_id: UUID = Depends(require_user)
) -> WeeklyCaloriesResponse:
    """Return calories for the last seven days."""
    container: AppContainer = request.app.state.container
    days = container.dashboard_service.get_weekly_calories(user_id, _today())
    return WeeklyCaloriesResponse.from_days(days)


@router.post("/entries", status_code=status.HTTP_201_CREATED)
async def create_entry(
    payload: EntryCreateRequest,
    request: Request,
    user_id: UUID = Depends(require_user),
) -> FoodEntryOut:
    """Log a manually entered food."""
    container: AppContainer = request.app.state.container
    entry = container.food_entry_service.add_entry(
        user_id, payload.entry_date or _today(), payload.to_input()
    )
    return FoodEntryOut.from_entry(entry)


@router.post("/entries/from-nutrition", status_code=status.HTTP_201_CREATED)
async def create_entry_from_nutrition(
    payload: NutritionEntryRequest,
    request: Request,
    user_id: UUID = Depends(require_user),
) -> FoodEntryOut:
    """Log a food from a resolved nutrition record."""
    container: AppContainer = request.app.state.container
    try:
        entry = container.food_entry_service.add_from_nutrition(
            user_id, payload.entry_date or _today(), payload.nutrition
        )
    except ValueError as exc:
        raise HTTPException(
            status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
        ) from exc
    return FoodEntryOut.from_entry(entry)


@router.patch("/entries/{entry_id}")
async def update_entry(
    entry_id: UUID,
    payload: FoodEntryUpdate,
    request: Request,
    user_id: UUID = Depends(require_user),
) -> FoodEntryOut:
    """Apply a partial update to one of the caller's entries."""
    container: AppContainer = request.app.state.container
    try:
        entry = container.food_entry_service.update_entry(user_id, entry_id, payload)
    except ValueError as exc:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    if entry is None:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Food entry not found")
    return FoodEntryOut.from_entry(entry)


@router.delete("/entries/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_entry(
    entry_id: UUID, request: Request, user_id: UUID = Depends(require_user)
) -> None:
    """Delete one of the caller's entries."""
    container: AppContainer = request.app.state.container
    if not container.food_entry_service.delete_entry(user_id, entry_id):
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Food entry not found")


@router.get("/goals")
async def get_goals(
    request: Request, user_id: UUID = Depends(require_user)
) -> GoalResponse:
    """Return the caller's macro goal and gram targets."""
    container: AppContainer = request.app.state.container
    goal = container.goal_service.get_goal(user_id)
    return GoalResponse(
        goal=MacroGoalOut.from_goal(goal),
        targets=MacroAmounts.from_values(macro_targets(goal) if goal else None),
    )


@router.put("/goals")
async def save_goals(
    payload: MacroGoalInput,
    request: Request,
    user_id: UUID = Depends(require_user),
) -> GoalResponse:
    """Create or replace the caller's macro goal."""
    container: AppContainer = request.app.state.container
    goal = container.goal_service.save_goal(user_id, payload)
    return GoalResponse(
        goal=MacroGoalOut.from_goal(goal),
        targets=MacroAmounts.from_values(macro_targets(goal)),
    )


@router.post("/yolo-days/{day}/toggle")
async def toggle_yolo_day(
    day: date,
    request: Request,
    payload: YoloToggleRequest | None = None,
    user_id: UUID = Depends(require_user),
) -> YoloToggleResponse:
    """Declare or clear a YOLO day."""
    container: AppContainer = request.app.state.container
    toggle = container.yolo_day_service.toggle(
        user_id, day, payload.reason if payload else None
    )
    return YoloToggleResponse(
        yolo_day=YoloDayOut.from_yolo_day(toggle.yolo_day), is_new=toggle.is_new
    )


@router.get("/trends")
async def trends(
    start: date,
    end: date,
    request: Request,
    user_id: UUID = Depends(require_user),
) -> TrendsResponse:
    """Return daily totals, averages and goal completion for a range."""
    container: AppContainer = request.app.state.container
    try:
        report = container.trends_service.get_trends(user_id, start, end)
    except ValueError as exc:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return TrendsResponse.from_report(report)
