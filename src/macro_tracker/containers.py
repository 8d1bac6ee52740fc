"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from macro_tracker.adapters.openai_nutrition_client import OpenAINutritionClient
from macro_tracker.adapters.openfoodfacts_client import (
    FoodDatabaseClient,
    HttpxOpenFoodFactsClient,
)
from macro_tracker.adapters.supabase_auth_gateway import (
    AuthGateway,
    SupabaseAuthGateway,
)
from macro_tracker.adapters.supabase_food_entry_repository import (
    SupabaseFoodEntryRepository,
)
from macro_tracker.adapters.supabase_goal_repository import SupabaseGoalRepository
from macro_tracker.adapters.supabase_yolo_day_repository import (
    SupabaseYoloDayRepository,
)
from macro_tracker.config import Settings
from macro_tracker.services.ai_estimation import (
    AIEstimationService,
    load_estimation_config,
)
from macro_tracker.services.dashboard import DashboardService
from macro_tracker.services.food_entries import FoodEntryService
from macro_tracker.services.goals import GoalService
from macro_tracker.services.resolution import NutritionResolver
from macro_tracker.services.trends import TrendsService
from macro_tracker.services.yolo_days import YoloDayService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    auth_gateway: AuthGateway
    food_database: FoodDatabaseClient
    ai_estimator: AIEstimationService | None
    nutrition_resolver: NutritionResolver
    food_entry_service: FoodEntryService
    goal_service: GoalService
    yolo_day_service: YoloDayService
    dashboard_service: DashboardService
    trends_service: TrendsService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    entry_repository = SupabaseFoodEntryRepository(supabase_client)
    goal_repository = SupabaseGoalRepository(supabase_client)
    yolo_day_repository = SupabaseYoloDayRepository(supabase_client)

    food_database = HttpxOpenFoodFactsClient.create(
        base_url=resolved_settings.food_database_base_url,
        user_agent=resolved_settings.food_database_user_agent,
        timeout_seconds=resolved_settings.food_database_timeout_seconds,
    )
    openai_client: OpenAINutritionClient | None = None
    ai_estimator: AIEstimationService | None = None
    if resolved_settings.ai_enabled:
        openai_client = OpenAINutritionClient.create(
            api_key=str(resolved_settings.openai_api_key),
            timeout_seconds=resolved_settings.openai_timeout_seconds,
        )
        ai_estimator = AIEstimationService(
            client=openai_client,
            config=load_estimation_config(
                resolved_settings.nutrition_prompt_path,
                resolved_settings.nutrition_schema_path,
            ),
            model=resolved_settings.openai_model,
            store=resolved_settings.openai_store,
        )
    nutrition_resolver = NutritionResolver(
        food_database=food_database,
        ai_estimator=ai_estimator,
        search_limit=resolved_settings.nutrition_search_limit,
    )

    async def close_resources() -> None:
        await food_database.close()
        if openai_client is not None:
            await openai_client.close()

    return AppContainer(
        settings=resolved_settings,
        auth_gateway=SupabaseAuthGateway(supabase_client),
        food_database=food_database,
        ai_estimator=ai_estimator,
        nutrition_resolver=nutrition_resolver,
        food_entry_service=FoodEntryService(entry_repository),
        goal_service=GoalService(goal_repository),
        yolo_day_service=YoloDayService(yolo_day_repository),
        dashboard_service=DashboardService(
            entry_repository=entry_repository,
            goal_repository=goal_repository,
            yolo_day_repository=yolo_day_repository,
        ),
        trends_service=TrendsService(
            entry_repository=entry_repository,
            goal_repository=goal_repository,
            yolo_day_repository=yolo_day_repository,
        ),
        close_resources=close_resources,
    )
