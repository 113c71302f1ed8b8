"""Meal logging service."""

import logging
from dataclasses import dataclass, replace
from datetime import UTC, date, datetime
from typing import Protocol
from uuid import UUID, uuid4

from nutrition_assistant.domain.errors import (
    EmptyMealError,
    FoodNotFoundError,
    InvalidDateRangeError,
    MealNotFoundError,
)
from nutrition_assistant.domain.meals import (
    FoodEntry,
    FoodPortion,
    Meal,
    MealUpdate,
)
from nutrition_assistant.domain.nutrition import NutrientVector
from nutrition_assistant.services.aggregation import (
    create_food_entry,
    rescale_food_entry,
    sum_nutrients,
)
from nutrition_assistant.services.nutrition import NutritionService

QUICK_ADD_PREFIX = "[Quick Add] "

_logger = logging.getLogger(__name__)


class MealRepository(Protocol):
    """Persistence interface for meals."""

    def create_meal(self, meal: Meal) -> None:
        """Persist a new meal."""

    def get_meal(self, owner_id: str, meal_id: UUID) -> Meal | None:
        """Return a meal owned by ``owner_id``."""

    def update_meal(self, meal: Meal) -> None:
        """Replace a stored meal."""

    def delete_meal(self, owner_id: str, meal_id: UUID) -> bool:
        """Delete a meal and return True when a row was removed."""

    def list_meals_for_date(self, owner_id: str, day: date) -> list[Meal]:
        """Return meals logged on ``day``."""

    def list_meals_for_range(
        self, owner_id: str, start: date, end: date
    ) -> list[Meal]:
        """Return meals logged between ``start`` and ``end`` inclusive."""


@dataclass
class MealService:
    """Service that builds, updates and persists meals."""

    nutrition_service: NutritionService
    repository: MealRepository

    async def log_meal(  # noqa: PLR0913
        self,
        owner_id: str,
        portions: list[FoodPortion],
        meal_type: str,
        day: date,
        notes: str | None = None,
    ) -> Meal:
        """Look up foods, scale them to the servings eaten and save the meal."""
        if not portions:
            raise EmptyMealError("A meal needs at least one food")
        foods = await self.nutrition_service.get_foods(
            [portion.fdc_id for portion in portions]
        )
        if not foods:
            raise FoodNotFoundError(
                "Could not find the specified foods. "
                "Please use search_food first to get valid food IDs."
            )
        by_id = {food.fdc_id: food for food in foods}
        entries = []
        for portion in portions:
            food = by_id.get(portion.fdc_id)
            if food is None:
                raise FoodNotFoundError(f"Food with ID {portion.fdc_id} not found")
            entries.append(create_food_entry(food, portion.servings))

        meal = _new_meal(owner_id, day, meal_type, entries, notes)
        self.repository.create_meal(meal)
        _logger.info(
            "Meal logged: owner=%s meal=%s foods=%s", owner_id, meal.id, len(entries)
        )
        return meal

    def quick_add(  # noqa: PLR0913
        self,
        owner_id: str,
        description: str,
        calories: float,
        meal_type: str,
        day: date,
        protein: float | None = None,
        carbs: float | None = None,
        fat: float | None = None,
        fiber: float | None = None,
        notes: str | None = None,
    ) -> Meal:
        """Log a single free-text food with caller supplied nutrition."""
        now = datetime.now(tz=UTC)
        entry = FoodEntry(
            external_food_id=-int(now.timestamp() * 1000),
            description=f"{QUICK_ADD_PREFIX}{description}",
            servings=1,
            serving_size=1,
            serving_size_unit="serving",
            nutrition=NutrientVector(
                calories=calories,
                protein=protein or 0,
                carbs=carbs or 0,
                fat=fat or 0,
                fiber=fiber,
            ),
        )
        meal = _new_meal(owner_id, day, meal_type, [entry], notes, created_at=now)
        self.repository.create_meal(meal)
        _logger.info("Quick add logged: owner=%s meal=%s", owner_id, meal.id)
        return meal

    async def update_meal(  # noqa: PLR0913
        self,
        owner_id: str,
        meal_id: UUID,
        add_foods: list[FoodPortion] | None = None,
        remove_food_ids: list[int] | None = None,
        update_servings: list[FoodPortion] | None = None,
        meal_type: str | None = None,
        notes: str | None = None,
    ) -> MealUpdate:
        """Apply removals, serving changes and additions, then recompute totals."""
        existing = self.repository.get_meal(owner_id, meal_id)
        if existing is None:
            raise MealNotFoundError(
                "Meal not found. Use get_meals to find valid meal IDs."
            )

        changes: list[str] = []
        foods = list(existing.foods)

        if remove_food_ids:
            before = len(foods)
            foods = [f for f in foods if f.external_food_id not in remove_food_ids]
            removed = before - len(foods)
            if removed > 0:
                changes.append(f"Removed {removed} food(s)")

        for update in update_servings or []:
            for index, food in enumerate(foods):
                if food.external_food_id == update.fdc_id:
                    foods[index] = rescale_food_entry(food, update.servings)
                    changes.append(
                        f"Updated {food.description} to {update.servings} serving(s)"
                    )
                    break

        if add_foods:
            found = await self.nutrition_service.get_foods(
                [portion.fdc_id for portion in add_foods]
            )
            by_id = {food.fdc_id: food for food in found}
            for portion in add_foods:
                item = by_id.get(portion.fdc_id)
                if item is None:
                    continue
                foods.append(create_food_entry(item, portion.servings))
                changes.append(f"Added {item.description}")

        if not foods:
            raise EmptyMealError(
                "Cannot remove all foods from a meal. Use delete_meal instead."
            )

        if meal_type and meal_type != existing.meal_type:
            changes.append(
                f"Changed meal type from {existing.meal_type} to {meal_type}"
            )
        if notes is not None and notes != existing.notes:
            changes.append("Updated notes")

        updated = replace(
            existing,
            meal_type=meal_type or existing.meal_type,
            foods=tuple(foods),
            totals=sum_nutrients(food.nutrition for food in foods),
            notes=notes if notes is not None else existing.notes,
            updated_at=datetime.now(tz=UTC),
        )
        self.repository.update_meal(updated)
        _logger.info(
            "Meal updated: owner=%s meal=%s changes=%s", owner_id, meal_id, len(changes)
        )
        return MealUpdate(meal=updated, changes=changes)

    def delete_meal(self, owner_id: str, meal_id: UUID) -> Meal:
        """Delete a meal owned by ``owner_id`` and return what was removed."""
        meal = self.repository.get_meal(owner_id, meal_id)
        if meal is None:
            raise MealNotFoundError("Meal not found or does not belong to you")
        if not self.repository.delete_meal(owner_id, meal_id):
            raise RuntimeError(f"Failed to delete meal {meal_id}")
        _logger.info("Meal deleted: owner=%s meal=%s", owner_id, meal_id)
        return meal

    def list_meals(
        self,
        owner_id: str,
        day: date | None = None,
        start: date | None = None,
        end: date | None = None,
    ) -> list[Meal]:
        """Return meals for a range when both ends are given, else for ``day``."""
        if start is not None and end is not None:
            if start > end:
                raise InvalidDateRangeError(
                    f"Start date {start.isoformat()} is after end date "
                    f"{end.isoformat()}"
                )
            return self.repository.list_meals_for_range(owner_id, start, end)
        if day is None:
            raise ValueError("Either a day or a start and end date is required")
        return self.repository.list_meals_for_date(owner_id, day)


def _new_meal(  # noqa: PLR0913
    owner_id: str,
    day: date,
    meal_type: str,
    foods: list[FoodEntry],
    notes: str | None,
    created_at: datetime | None = None,
) -> Meal:
    return Meal(
        id=uuid4(),
        owner_id=owner_id,
        date=day,
        meal_type=meal_type,
        foods=tuple(foods),
        totals=sum_nutrients(food.nutrition for food in foods),
        notes=notes,
        created_at=created_at or datetime.now(tz=UTC),
    )
