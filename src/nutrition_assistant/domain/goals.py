"""Domain models for daily nutrition goals."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class GoalSet:
    """User's daily targets. A macro set to ``None`` has no target."""

    owner_id: str
    daily_calories: float
    protein: float | None = None
    carbs: float | None = None
    fat: float | None = None
    fiber: float | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class GoalDefaults:
    """Goal values used for users who never configured their own."""

    daily_calories: float = 2000
    protein: float | None = 50
    carbs: float | None = 250
    fat: float | None = 65
    fiber: float | None = 25

    def for_owner(self, owner_id: str) -> GoalSet:
        """Return the default goals as a goal set for ``owner_id``."""
        return GoalSet(
            owner_id=owner_id,
            daily_calories=self.daily_calories,
            protein=self.protein,
            carbs=self.carbs,
            fat=self.fat,
            fiber=self.fiber,
        )
