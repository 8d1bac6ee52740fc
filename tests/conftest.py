"""Shared test fixtures."""

from dataclasses import dataclass, field, replace
from datetime import UTC, date, datetime
from uuid import UUID, uuid4

import pytest

from macro_tracker.adapters.openfoodfacts_client import FoodDatabaseClient
from macro_tracker.adapters.supabase_auth_gateway import AuthGateway
from macro_tracker.config import Settings
from macro_tracker.containers import AppContainer
from macro_tracker.domain.entries import FoodEntry, MacroGoal, YoloDay
from macro_tracker.domain.lookup import (
    ProductLookup,
    ProductMissing,
    ProductSearch,
    SearchHits,
)
from macro_tracker.services.ai_estimation import (
    AIEstimationService,
    NutritionModelClient,
    load_estimation_config,
)
from macro_tracker.services.dashboard import DashboardService
from macro_tracker.services.food_entries import FoodEntryRepository, FoodEntryService
from macro_tracker.services.goals import GoalRepository, GoalService
from macro_tracker.services.resolution import NutritionResolver
from macro_tracker.services.trends import TrendsService
from macro_tracker.services.yolo_days import YoloDayRepository, YoloDayService

TEST_TOKEN = "test-token"

AI_PAYLOAD: dict[str, object] = {
    "foodDetails": {"name": "Banana", "description": "One medium banana"},
    "macronutrients": {
        "calories": 105.4,
        "proteinGrams": 1.29,
        "carbohydrates": {"totalGrams": 26.95, "fiberGrams": 3.1, "sugarGrams": 14.4},
        "fat": {"totalGrams": 0.39, "saturatedGrams": 0.13},
    },
}


def make_product(
    name: str | None = "Nutella",
    brand: str | None = "Ferrero",
    serving_size: str | None = None,
    nutriments: dict[str, object] | None = None,
    **extra: object,
) -> dict[str, object]:
    """Build an Open Food Facts product payload."""
    product: dict[str, object] = {
        "product_name": name,
        "brands": brand,
        "nutriments": (
            nutriments
            if nutriments is not None
            else {
                "energy-kcal_100g": 539,
                "proteins_100g": 6.3,
                "carbohydrates_100g": 57.5,
                "fiber_100g": 3.4,
                "sugars_100g": 56.3,
                "fat_100g": 30.9,
                "saturated-fat_100g": 10.6,
            }
        ),
    }
    if serving_size is not None:
        product["serving_size"] = serving_size
    product.update(extra)
    return product


@dataclass
class FakeFoodDatabaseClient(FoodDatabaseClient):
    """Food database returning canned lookups and recording calls."""

    barcodes: dict[str, ProductLookup] = field(default_factory=dict)
    searches: dict[str, ProductSearch] = field(default_factory=dict)
    barcode_calls: list[str] = field(default_factory=list)
    search_calls: list[tuple[str, int]] = field(default_factory=list)
    closed: bool = False

    async def lookup_by_barcode(self, barcode: str) -> ProductLookup:
        self.barcode_calls.append(barcode)
        return self.barcodes.get(barcode, ProductMissing(reason="product not found"))

    async def search_by_text(self, query: str, limit: int = 10) -> ProductSearch:
        self.search_calls.append((query, limit))
        return self.searches.get(query, SearchHits(products=[]))

    async def close(self) -> None:
        self.closed = True


@dataclass
class FakeNutritionModelClient(NutritionModelClient):
    """Model client returning a fixed function call payload."""

    payload: dict[str, object] = field(default_factory=lambda: dict(AI_PAYLOAD))
    error: Exception | None = None
    calls: list[dict[str, object]] = field(default_factory=list)

    async def call_function(  # noqa: PLR0913
        self,
        *,
        model: str,
        store: bool,
        system_prompt: str,
        user_content: list[dict[str, object]],
        tool: dict[str, object],
    ) -> dict[str, object]:
        self.calls.append(
            {
                "model": model,
                "store": store,
                "system_prompt": system_prompt,
                "user_content": user_content,
                "tool": tool,
            }
        )
        if self.error is not None:
            raise self.error
        return self.payload


@dataclass
class InMemoryFoodEntryRepository(FoodEntryRepository):
    """In-memory food entry repository for tests."""

    entries: list[FoodEntry] = field(default_factory=list)

    def create_entry(
        self, user_id: UUID, day: date, payload: dict[str, object]
    ) -> FoodEntry:
        entry = FoodEntry(
            id=uuid4(),
            user_id=user_id,
            date=day,
            name=str(payload["name"]),
            description=payload.get("description"),
            calories=int(payload["calories"]),
            protein_grams=float(payload["protein_grams"]),
            carbs_total_grams=float(payload["carbs_total_grams"]),
            carbs_fiber_grams=payload.get("carbs_fiber_grams"),
            carbs_sugar_grams=payload.get("carbs_sugar_grams"),
            fat_total_grams=float(payload["fat_total_grams"]),
            fat_saturated_grams=payload.get("fat_saturated_grams"),
            created_at=datetime.now(tz=UTC),
        )
        self.entries.append(entry)
        return entry

    def list_entries(self, user_id: UUID, start: date, end: date) -> list[FoodEntry]:
        return [
            entry
            for entry in self.entries
            if entry.user_id == user_id and start <= entry.date <= end
        ]

    def update_entry(
        self, user_id: UUID, entry_id: UUID, changes: dict[str, object]
    ) -> FoodEntry | None:
        for index, entry in enumerate(self.entries):
            if entry.id == entry_id and entry.user_id == user_id:
                updated = replace(entry, **changes)
                self.entries[index] = updated
                return updated
        return None

    def delete_entry(self, user_id: UUID, entry_id: UUID) -> bool:
        for entry in self.entries:
            if entry.id == entry_id and entry.user_id == user_id:
                self.entries.remove(entry)
                return True
        return False

    def add(self, user_id: UUID, day: date, **values: object) -> FoodEntry:
        """Insert an entry with defaults for unspecified macros."""
        payload: dict[str, object] = {
            "name": "Oatmeal",
            "calories": 0,
            "protein_grams": 0.0,
            "carbs_total_grams": 0.0,
            "fat_total_grams": 0.0,
        }
        payload.update(values)
        return self.create_entry(user_id, day, payload)


@dataclass
class InMemoryGoalRepository(GoalRepository):
    """In-memory macro goal repository for tests."""

    goals: dict[UUID, MacroGoal] = field(default_factory=dict)
    creates: int = 0
    updates: int = 0

    def get_goal(self, user_id: UUID) -> MacroGoal | None:
        return self.goals.get(user_id)

    def create_goal(self, user_id: UUID, payload: dict[str, object]) -> MacroGoal:
        self.creates += 1
        return self._store(uuid4(), user_id, payload)

    def update_goal(self, user_id: UUID, payload: dict[str, object]) -> MacroGoal:
        self.updates += 1
        return self._store(self.goals[user_id].id, user_id, payload)

    def _store(
        self, goal_id: UUID, user_id: UUID, payload: dict[str, object]
    ) -> MacroGoal:
        goal = MacroGoal(
            id=goal_id,
            user_id=user_id,
            daily_calorie_goal=int(payload["daily_calorie_goal"]),
            protein_percentage=float(payload["protein_percentage"]),
            carbs_percentage=float(payload["carbs_percentage"]),
            fat_percentage=float(payload["fat_percentage"]),
        )
        self.goals[user_id] = goal
        return goal

    def set(  # noqa: PLR0913
        self,
        user_id: UUID,
        calories: int = 2000,
        protein: float = 30,
        carbs: float = 40,
        fat: float = 30,
    ) -> MacroGoal:
        """Store a goal directly."""
        return self._store(
            uuid4(),
            user_id,
            {
                "daily_calorie_goal": calories,
                "protein_percentage": protein,
                "carbs_percentage": carbs,
                "fat_percentage": fat,
            },
        )


@dataclass
class InMemoryYoloDayRepository(YoloDayRepository):
    """In-memory YOLO day repository for tests."""

    days: list[YoloDay] = field(default_factory=list)
    fail_lookups: bool = False

    def get_yolo_day(self, user_id: UUID, day: date) -> YoloDay | None:
        if self.fail_lookups:
            raise RuntimeError("yolo_days unavailable")
        for yolo_day in self.days:
            if yolo_day.user_id == user_id and yolo_day.date == day:
                return yolo_day
        return None

    def list_yolo_days(self, user_id: UUID, start: date, end: date) -> list[YoloDay]:
        return [
            yolo_day
            for yolo_day in self.days
            if yolo_day.user_id == user_id and start <= yolo_day.date <= end
        ]

    def create_yolo_day(self, user_id: UUID, day: date, reason: str | None) -> YoloDay:
        yolo_day = YoloDay(id=uuid4(), user_id=user_id, date=day, reason=reason)
        self.days.append(yolo_day)
        return yolo_day

    def delete_yolo_day(self, yolo_day_id: UUID) -> None:
        self.days = [day for day in self.days if day.id != yolo_day_id]


@dataclass
class FakeAuthGateway(AuthGateway):
    """Auth gateway accepting a fixed set of tokens."""

    tokens: dict[str, UUID] = field(default_factory=dict)

    def get_user_id(self, token: str) -> UUID | None:
        return self.tokens.get(token)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key=(
            "eyJhbGciOiJIUzI1NiJ9.eyJyb2xlIjoic2VydmljZV9yb2xlIn0.signature"
        ),
        openai_api_key="openai-key",
    )


@pytest.fixture
def user_id() -> UUID:
    return uuid4()


@pytest.fixture
def auth_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {TEST_TOKEN}"}


@pytest.fixture
def food_database() -> FakeFoodDatabaseClient:
    return FakeFoodDatabaseClient()


@pytest.fixture
def model_client() -> FakeNutritionModelClient:
    return FakeNutritionModelClient()


@pytest.fixture
def ai_estimator(
    settings: Settings, model_client: FakeNutritionModelClient
) -> AIEstimationService:
    return AIEstimationService(
        client=model_client,
        config=load_estimation_config(),
        model=settings.openai_model,
        store=settings.openai_store,
    )


@pytest.fixture
def entry_repository() -> InMemoryFoodEntryRepository:
    return InMemoryFoodEntryRepository()


@pytest.fixture
def goal_repository() -> InMemoryGoalRepository:
    return InMemoryGoalRepository()


@pytest.fixture
def yolo_day_repository() -> InMemoryYoloDayRepository:
    return InMemoryYoloDayRepository()


@pytest.fixture
def container(  # noqa: PLR0913
    settings: Settings,
    user_id: UUID,
    food_database: FakeFoodDatabaseClient,
    ai_estimator: AIEstimationService,
    entry_repository: InMemoryFoodEntryRepository,
    goal_repository: InMemoryGoalRepository,
    yolo_day_repository: InMemoryYoloDayRepository,
) -> AppContainer:
    async def close_resources() -> None:
        await food_database.close()

    return AppContainer(
        settings=settings,
        auth_gateway=FakeAuthGateway(tokens={TEST_TOKEN: user_id}),
        food_database=food_database,
        ai_estimator=ai_estimator,
        nutrition_resolver=NutritionResolver(
            food_database=food_database,
            ai_estimator=ai_estimator,
            search_limit=settings.nutrition_search_limit,
        ),
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
