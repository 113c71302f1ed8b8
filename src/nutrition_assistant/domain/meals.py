"""Domain models for meal logging."""

from dataclasses import dataclass
from datetime import date, datetime
from uuid import UUID

from nutrition_assistant.domain.nutrition import NutrientVector


@dataclass(frozen=True)
class FoodEntry:
    """Food eaten as part of a meal.

    ``nutrition`` already reflects the servings consumed.
    """

    external_food_id: int
    description: str
    servings: float
    serving_size: float
    serving_size_unit: str
    nutrition: NutrientVector


@dataclass(frozen=True)
class Meal:
    """Logged meal with its foods and rounded totals."""

    id: UUID
    owner_id: str
    date: date
    meal_type: str
    foods: tuple[FoodEntry, ...]
    totals: NutrientVector
    created_at: datetime
    notes: str | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class FoodPortion:
    """Requested amount of a database food."""

    fdc_id: int
    servings: float = 1


@dataclass(frozen=True)
class MealUpdate:
    """Updated meal together with human readable change notes."""

    meal: Meal
    changes: list[str]
