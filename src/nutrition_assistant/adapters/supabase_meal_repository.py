"""Supabase repository for meals."""

from dataclasses import dataclass
from datetime import date, datetime
from uuid import UUID

from supabase import Client

from nutrition_assistant.domain.meals import Meal
from nutrition_assistant.services.meals import MealRepository
from nutrition_assistant.services.serialization import (
    food_entry_from_wire,
    food_entry_to_wire,
    nutrients_from_wire,
    nutrients_to_wire,
)

_COLUMNS = "id, user_id, date, meal_type, foods, totals, notes, created_at, updated_at"


@dataclass
class SupabaseMealRepository(MealRepository):
    """Supabase implementation for meals.

    Foods and totals are stored as JSON columns on the meal row.
    """

    client: Client

    def create_meal(self, meal: Meal) -> None:
        """Insert a meal row."""
        response = self.client.table("meals").insert(_to_row(meal)).execute()
        if not response.data:
            raise RuntimeError("Failed to create meal")

    def get_meal(self, owner_id: str, meal_id: UUID) -> Meal | None:
        """Return a meal by id if it belongs to ``owner_id``."""
        response = (
            self.client.table("meals")
            .select(_COLUMNS)
            .eq("id", str(meal_id))
            .eq("user_id", owner_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_meal(response.data[0])

    def update_meal(self, meal: Meal) -> None:
        """Replace a meal row."""
        row = _to_row(meal)
        row.pop("id")
        self.client.table("meals").update(row).eq("id", str(meal.id)).eq(
            "user_id", meal.owner_id
        ).execute()

    def delete_meal(self, owner_id: str, meal_id: UUID) -> bool:
        """Delete a meal row and report whether one was removed."""
        response = (
            self.client.table("meals")
            .delete()
            .eq("id", str(meal_id))
            .eq("user_id", owner_id)
            .execute()
        )
        return bool(response.data)

    def list_meals_for_date(self, owner_id: str, day: date) -> list[Meal]:
        """Return meals logged on a day."""
        response = (
            self.client.table("meals")
            .select(_COLUMNS)
            .eq("user_id", owner_id)
            .eq("date", day.isoformat())
            .order("created_at", desc=False)
            .execute()
        )
        return [_parse_meal(row) for row in response.data or []]

    def list_meals_for_range(
        self, owner_id: str, start: date, end: date
    ) -> list[Meal]:
        """Return meals between two days inclusive, newest day first."""
        response = (
            self.client.table("meals")
            .select(_COLUMNS)
            .eq("user_id", owner_id)
            .gte("date", start.isoformat())
            .lte("date", end.isoformat())
            .order("date", desc=True)
            .execute()
        )
        return [_parse_meal(row) for row in response.data or []]


def _to_row(meal: Meal) -> dict[str, object]:
    return {
        "id": str(meal.id),
        "user_id": meal.owner_id,
        "date": meal.date.isoformat(),
        "meal_type": meal.meal_type,
        "foods": [food_entry_to_wire(food) for food in meal.foods],
        "totals": nutrients_to_wire(meal.totals),
        "notes": meal.notes,
        "created_at": meal.created_at.isoformat(),
        "updated_at": meal.updated_at.isoformat() if meal.updated_at else None,
    }


def _parse_meal(row: dict[str, object]) -> Meal:
    updated_at = row.get("updated_at")
    return Meal(
        id=UUID(str(row["id"])),
        owner_id=str(row["user_id"]),
        date=date.fromisoformat(str(row["date"])),
        meal_type=str(row["meal_type"]),
        foods=tuple(food_entry_from_wire(food) for food in row.get("foods") or []),
        totals=nutrients_from_wire(row.get("totals") or {}),
        notes=row.get("notes"),
        created_at=datetime.fromisoformat(str(row["created_at"])),
        updated_at=datetime.fromisoformat(str(updated_at)) if updated_at else None,
    )
