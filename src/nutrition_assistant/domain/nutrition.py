"""Nutrition domain models."""

from dataclasses import dataclass

OPTIONAL_FIELDS = ("fiber", "sugar", "sodium")


@dataclass(frozen=True)
class NutrientVector:
    """Calories and macronutrients for an amount of food.

    Grams for protein, carbs, fat, fiber and sugar; milligrams for sodium.
    Optional fields are ``None`` when the value is unknown, which is not the
    same as zero.
    """

    calories: float
    protein: float
    carbs: float
    fat: float
    fiber: float | None = None
    sugar: float | None = None
    sodium: float | None = None


ZERO_NUTRIENTS = NutrientVector(calories=0, protein=0, carbs=0, fat=0)


@dataclass(frozen=True)
class FoodItem:
    """Food from the USDA database with per-serving nutrition."""

    fdc_id: int
    description: str
    nutrition: NutrientVector
    brand_name: str | None = None
    serving_size: float = 100
    serving_size_unit: str = "g"
