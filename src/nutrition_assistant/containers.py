"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from nutrition_assistant.adapters.fdc_client import HttpxFdcClient
from nutrition_assistant.adapters.supabase_goal_repository import (
    SupabaseGoalRepository,
)
from nutrition_assistant.adapters.supabase_meal_repository import (
    SupabaseMealRepository,
)
from nutrition_assistant.config import Settings
from nutrition_assistant.services.cache import InMemoryCache
from nutrition_assistant.services.goals import GoalService
from nutrition_assistant.services.meals import MealService
from nutrition_assistant.services.nutrition import NutritionService
from nutrition_assistant.services.reports import ReportService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    nutrition_service: NutritionService
    meal_service: MealService
    goal_service: GoalService
    report_service: ReportService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    meal_repository = SupabaseMealRepository(supabase_client)
    goal_repository = SupabaseGoalRepository(supabase_client)
    fdc_client = HttpxFdcClient.create(
        api_key=resolved_settings.fdc_api_key,
        base_url=resolved_settings.fdc_base_url,
    )
    nutrition_service = NutritionService(
        fdc_client=fdc_client,
        cache=InMemoryCache(),
        debug=resolved_settings.environment == "local",
    )
    meal_service = MealService(
        nutrition_service=nutrition_service,
        repository=meal_repository,
    )
    goal_service = GoalService(
        repository=goal_repository,
        defaults=resolved_settings.goal_defaults(),
    )
    report_service = ReportService(
        meal_repository=meal_repository,
        goal_service=goal_service,
    )

    async def close_resources() -> None:
        await fdc_client.close()

    return AppContainer(
        settings=resolved_settings,
        nutrition_service=nutrition_service,
        meal_service=meal_service,
        goal_service=goal_service,
        report_service=report_service,
        close_resources=close_resources,
    )
