"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

from nutrition_assistant.domain.goals import GoalDefaults

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    api_token: str
    fdc_api_key: str
    fdc_base_url: str = "https://api.nal.usda.gov/fdc/v1"
    timezone: str = "UTC"
    default_daily_calories: float = 2000
    default_protein_g: float | None = 50
    default_carbs_g: float | None = 250
    default_fat_g: float | None = 65
    default_fiber_g: float | None = 25
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    def goal_defaults(self) -> GoalDefaults:
        """Return the goals used for users without their own."""
        return GoalDefaults(
            daily_calories=self.default_daily_calories,
            protein=self.default_protein_g,
            carbs=self.default_carbs_g,
            fat=self.default_fat_g,
            fiber=self.default_fiber_g,
        )
