"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from uuid import UUID, uuid4

import pytest

from nutrition_assistant.adapters.fdc_client import FdcClient
from nutrition_assistant.config import Settings
from nutrition_assistant.containers import AppContainer
from nutrition_assistant.domain.goals import GoalSet
from nutrition_assistant.domain.meals import FoodEntry, Meal
from nutrition_assistant.domain.nutrition import NutrientVector
from nutrition_assistant.services.aggregation import sum_nutrients
from nutrition_assistant.services.cache import InMemoryCache
from nutrition_assistant.services.goals import GoalRepository, GoalService
from nutrition_assistant.services.meals import MealRepository, MealService
from nutrition_assistant.services.nutrition import NutritionService
from nutrition_assistant.services.reports import ReportService

OWNER_ID = "user-1"


def fdc_food(  # noqa: PLR0913
    fdc_id: int,
    description: str,
    calories: float,
    protein: float,
    carbs: float,
    fat: float,
    fiber: float | None = None,
) -> dict[str, object]:
    """Return an FDC food detail payload."""
    nutrients = [
        {"nutrient": {"id": 1008}, "amount": calories},
        {"nutrient": {"id": 1003}, "amount": protein},
        {"nutrient": {"id": 1005}, "amount": carbs},
        {"nutrient": {"id": 1004}, "amount": fat},
    ]
    if fiber is not None:
        nutrients.append({"nutrient": {"id": 1079}, "amount": fiber})
    return {
        "fdcId": fdc_id,
        "description": description,
        "servingSize": 100,
        "servingSizeUnit": "g",
        "foodNutrients": nutrients,
    }


def make_meal(  # noqa: PLR0913
    day: date,
    meal_type: str = "lunch",
    calories: float = 500,
    protein: float = 30,
    carbs: float = 50,
    fat: float = 20,
    owner_id: str = OWNER_ID,
) -> Meal:
    """Build a single-food meal with the given nutrition."""
    nutrition = NutrientVector(
        calories=calories, protein=protein, carbs=carbs, fat=fat
    )
    food = FoodEntry(
        external_food_id=1,
        description="Test food",
        servings=1,
        serving_size=100,
        serving_size_unit="g",
        nutrition=nutrition,
    )
    return Meal(
        id=uuid4(),
        owner_id=owner_id,
        date=day,
        meal_type=meal_type,
        foods=(food,),
        totals=sum_nutrients([nutrition]),
        created_at=datetime.now(tz=UTC),
    )


@dataclass
class FakeFdcClient(FdcClient):
    """Fake FDC client backed by a dict of food payloads."""

    foods: dict[int, dict[str, object]] = field(
        default_factory=lambda: {
            171077: fdc_food(171077, "Chicken breast, roasted", 165, 31, 0, 3.6, 0),
            169756: fdc_food(169756, "Rice, white, cooked", 130, 2.7, 28.2, 0.3, 0.4),
        }
    )
    search_calls: int = 0
    get_foods_calls: list[list[int]] = field(default_factory=list)

    async def search_foods(self, query: str, page_size: int = 10) -> dict[str, object]:
        self.search_calls += 1
        matches = [
            food
            for food in self.foods.values()
            if query.lower() in str(food["description"]).lower()
        ]
        return {"foods": matches[:page_size]}

    async def get_food(self, fdc_id: int) -> dict[str, object] | None:
        return self.foods.get(fdc_id)

    async def get_foods(self, fdc_ids: list[int]) -> list[dict[str, object]]:
        self.get_foods_calls.append(list(fdc_ids))
        return [self.foods[fdc_id] for fdc_id in fdc_ids if fdc_id in self.foods]


@dataclass
class InMemoryMealRepository(MealRepository):
    """In-memory meal repository for tests."""

    meals: dict[UUID, Meal] = field(default_factory=dict)

    def create_meal(self, meal: Meal) -> None:
        self.meals[meal.id] = meal

    def get_meal(self, owner_id: str, meal_id: UUID) -> Meal | None:
        meal = self.meals.get(meal_id)
        if meal is None or meal.owner_id != owner_id:
            return None
        return meal

    def update_meal(self, meal: Meal) -> None:
        self.meals[meal.id] = meal

    def delete_meal(self, owner_id: str, meal_id: UUID) -> bool:
        if self.get_meal(owner_id, meal_id) is None:
            return False
        del self.meals[meal_id]
        return True

    def list_meals_for_date(self, owner_id: str, day: date) -> list[Meal]:
        return [
            meal
            for meal in self.meals.values()
            if meal.owner_id == owner_id and meal.date == day
        ]

    def list_meals_for_range(
        self, owner_id: str, start: date, end: date
    ) -> list[Meal]:
        return sorted(
            (
                meal
                for meal in self.meals.values()
                if meal.owner_id == owner_id and start <= meal.date <= end
            ),
            key=lambda meal: meal.date,
            reverse=True,
        )


@dataclass
class InMemoryGoalRepository(GoalRepository):
    """In-memory goal repository for tests."""

    goals: dict[str, GoalSet] = field(default_factory=dict)

    def get_goals(self, owner_id: str) -> GoalSet | None:
        return self.goals.get(owner_id)

    def save_goals(self, goals: GoalSet) -> None:
        self.goals[goals.owner_id] = goals


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="service-key",
        api_token="api-token",
        fdc_api_key="fdc-key",
    )


@pytest.fixture
def fdc_client() -> FakeFdcClient:
    return FakeFdcClient()


@pytest.fixture
def meal_repository() -> InMemoryMealRepository:
    return InMemoryMealRepository()


@pytest.fixture
def goal_repository() -> InMemoryGoalRepository:
    return InMemoryGoalRepository()


@pytest.fixture
def nutrition_service(fdc_client: FakeFdcClient) -> NutritionService:
    return NutritionService(fdc_client=fdc_client, cache=InMemoryCache())


@pytest.fixture
def meal_service(
    nutrition_service: NutritionService, meal_repository: InMemoryMealRepository
) -> MealService:
    return MealService(nutrition_service=nutrition_service, repository=meal_repository)


@pytest.fixture
def goal_service(
    settings: Settings, goal_repository: InMemoryGoalRepository
) -> GoalService:
    return GoalService(repository=goal_repository, defaults=settings.goal_defaults())


@pytest.fixture
def container(
    settings: Settings,
    nutrition_service: NutritionService,
    meal_service: MealService,
    goal_service: GoalService,
    meal_repository: InMemoryMealRepository,
) -> AppContainer:
    report_service = ReportService(
        meal_repository=meal_repository, goal_service=goal_service
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        nutrition_service=nutrition_service,
        meal_service=meal_service,
        goal_service=goal_service,
        report_service=report_service,
        close_resources=close_resources,
    )
