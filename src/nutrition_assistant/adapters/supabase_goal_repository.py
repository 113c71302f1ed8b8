"""Supabase repository for user goals."""

from dataclasses import dataclass
from datetime import datetime

from supabase import Client

from nutrition_assistant.domain.goals import GoalSet
from nutrition_assistant.services.goals import GoalRepository


@dataclass
class SupabaseGoalRepository(GoalRepository):
    """Supabase implementation for user goals, one row per user."""

    client: Client

    def get_goals(self, owner_id: str) -> GoalSet | None:
        """Return the stored goals for a user."""
        response = (
            self.client.table("user_goals")
            .select(
                "user_id, daily_calories, protein_g, carbs_g, fat_g, fiber_g, "
                "created_at, updated_at"
            )
            .eq("user_id", owner_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]
        return GoalSet(
            owner_id=str(row["user_id"]),
            daily_calories=float(row["daily_calories"]),
            protein=_optional_float(row.get("protein_g")),
            carbs=_optional_float(row.get("carbs_g")),
            fat=_optional_float(row.get("fat_g")),
            fiber=_optional_float(row.get("fiber_g")),
            created_at=_optional_datetime(row.get("created_at")),
            updated_at=_optional_datetime(row.get("updated_at")),
        )

    def save_goals(self, goals: GoalSet) -> None:
        """Insert or replace the goals row for a user."""
        self.client.table("user_goals").upsert(
            {
                "user_id": goals.owner_id,
                "daily_calories": goals.daily_calories,
                "protein_g": goals.protein,
                "carbs_g": goals.carbs,
                "fat_g": goals.fat,
                "fiber_g": goals.fiber,
                "created_at": goals.created_at.isoformat()
                if goals.created_at
                else None,
                "updated_at": goals.updated_at.isoformat()
                if goals.updated_at
                else None,
            },
            on_conflict="user_id",
        ).execute()


def _optional_float(value: object) -> float | None:
    if value is None:
        return None
    return float(value)


def _optional_datetime(value: object) -> datetime | None:
    if not value:
        return None
    return datetime.fromisoformat(str(value))
