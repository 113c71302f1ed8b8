"""Nutrient arithmetic and meal aggregation.

Every value leaving this module is rounded: calories and sodium to whole
numbers, gram fields to one decimal. Rounding happens at each aggregation
step (food, meal, day, week), so totals of rounded values can drift slightly
from a single rounding of the raw sum.
"""

import math
from collections.abc import Callable, Iterable

from nutrition_assistant.domain.meals import FoodEntry, Meal
from nutrition_assistant.domain.nutrition import (
    OPTIONAL_FIELDS,
    ZERO_NUTRIENTS,
    FoodItem,
    NutrientVector,
)

_REQUIRED_FIELDS = ("calories", "protein", "carbs", "fat")
_WHOLE_FIELDS = frozenset({"calories", "sodium"})


def round_half_up(value: float, digits: int = 0) -> float:
    """Round halves upwards, e.g. 2.5 -> 3 and 0.25 -> 0.3 with one digit."""
    if digits == 0:
        return int(math.floor(value + 0.5))
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


def round_field(name: str, value: float) -> float:
    """Apply the rounding rule for a single nutrient field."""
    if name in _WHOLE_FIELDS:
        return round_half_up(value)
    return round_half_up(value, 1)


def sum_nutrients(
    vectors: Iterable[NutrientVector], fill_zero: bool = True
) -> NutrientVector:
    """Add nutrient vectors element-wise and round the result.

    Missing optional values count as zero. With ``fill_zero`` the result
    always carries fiber, sugar and sodium (zero when no input had them);
    without it an optional field is only present if some input had it.
    Summing nothing returns the zero vector without optional fields.
    """
    items = list(vectors)
    if not items:
        return ZERO_NUTRIENTS

    values: dict[str, float | None] = {}
    for name in _REQUIRED_FIELDS:
        total = 0.0
        for vector in items:
            total += getattr(vector, name)
        values[name] = round_field(name, total)

    for name in OPTIONAL_FIELDS:
        present = [
            value
            for value in (getattr(vector, name) for vector in items)
            if value is not None
        ]
        if not present and not fill_zero:
            values[name] = None
            continue
        total = 0.0
        for value in present:
            total += value
        values[name] = round_field(name, total)

    return NutrientVector(**values)


def scale_nutrients(vector: NutrientVector, factor: float) -> NutrientVector:
    """Multiply every present field by ``factor`` and round.

    Optional fields that are absent stay absent.
    """
    if factor <= 0:
        raise ValueError(f"Scale factor must be positive, got {factor}")
    return _map_present(vector, lambda value: value * factor)


def average_nutrients(total: NutrientVector, days: int) -> NutrientVector:
    """Divide every present field of ``total`` by ``days`` and round."""
    if days <= 0:
        raise ValueError(f"Cannot average over {days} days")
    return _map_present(total, lambda value: value / days)


def aggregate_meals(
    meals: Iterable[Meal], fill_zero: bool = True
) -> NutrientVector:
    """Sum the nutrition of every food across ``meals``.

    Meals are not filtered by date or type here.
    """
    foods = [food for meal in meals for food in meal.foods]
    return sum_nutrients((food.nutrition for food in foods), fill_zero=fill_zero)


def create_food_entry(food: FoodItem, servings: float) -> FoodEntry:
    """Create a meal entry for ``servings`` of a database food."""
    return FoodEntry(
        external_food_id=food.fdc_id,
        description=food.description,
        servings=servings,
        serving_size=food.serving_size,
        serving_size_unit=food.serving_size_unit,
        nutrition=scale_nutrients(food.nutrition, servings),
    )


def rescale_food_entry(entry: FoodEntry, servings: float) -> FoodEntry:
    """Return ``entry`` with nutrition rescaled to a new serving count."""
    return FoodEntry(
        external_food_id=entry.external_food_id,
        description=entry.description,
        servings=servings,
        serving_size=entry.serving_size,
        serving_size_unit=entry.serving_size_unit,
        nutrition=scale_nutrients(entry.nutrition, servings / entry.servings),
    )


def _map_present(
    vector: NutrientVector, func: Callable[[float], float]
) -> NutrientVector:
    values: dict[str, float | None] = {}
    for name in (*_REQUIRED_FIELDS, *OPTIONAL_FIELDS):
        value = getattr(vector, name)
        values[name] = None if value is None else round_field(name, func(value))
    return NutrientVector(**values)
