"""Goal management service."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol

from nutrition_assistant.domain.errors import InvalidGoalError
from nutrition_assistant.domain.goals import GoalDefaults, GoalSet
from nutrition_assistant.services.aggregation import round_half_up

_CALORIES_PER_GRAM = {"protein": 4, "carbs": 4, "fat": 9}

_logger = logging.getLogger(__name__)


class GoalRepository(Protocol):
    """Persistence interface for user goals."""

    def get_goals(self, owner_id: str) -> GoalSet | None:
        """Return the user's goals if any were saved."""

    def save_goals(self, goals: GoalSet) -> None:
        """Insert or replace the user's goals."""


@dataclass(frozen=True)
class MacroBreakdown:
    """Share of goal calories coming from each macro, in percent."""

    protein_percent: int
    carbs_percent: int
    fat_percent: int
    macro_calories: float


@dataclass
class GoalService:
    """Service for reading and updating daily goals."""

    repository: GoalRepository
    defaults: GoalDefaults

    def get_goals(self, owner_id: str) -> tuple[GoalSet, bool]:
        """Return the user's goals and whether they are the defaults."""
        goals = self.repository.get_goals(owner_id)
        if goals is None:
            return self.defaults.for_owner(owner_id), True
        return goals, False

    def resolve(self, owner_id: str) -> GoalSet:
        """Return the goals reports should be computed against."""
        goals, _ = self.get_goals(owner_id)
        return goals

    def set_goals(  # noqa: PLR0913
        self,
        owner_id: str,
        daily_calories: float,
        protein: float | None = None,
        carbs: float | None = None,
        fat: float | None = None,
        fiber: float | None = None,
    ) -> tuple[GoalSet, bool]:
        """Replace the user's goals; return them and whether they are new.

        Macros left out are cleared rather than kept from the previous goals.
        """
        for name, value in (
            ("daily_calories", daily_calories),
            ("protein", protein),
            ("carbs", carbs),
            ("fat", fat),
            ("fiber", fiber),
        ):
            if value is not None and value <= 0:
                raise InvalidGoalError(f"Goal {name} must be positive, got {value}")

        existing = self.repository.get_goals(owner_id)
        now = datetime.now(tz=UTC)
        goals = GoalSet(
            owner_id=owner_id,
            daily_calories=daily_calories,
            protein=protein,
            carbs=carbs,
            fat=fat,
            fiber=fiber,
            created_at=existing.created_at if existing and existing.created_at else now,
            updated_at=now,
        )
        self.repository.save_goals(goals)
        _logger.info(
            "Goals %s for owner=%s", "updated" if existing else "created", owner_id
        )
        return goals, existing is None


def macro_breakdown(goals: GoalSet) -> MacroBreakdown | None:
    """Return the calorie split of the macro goals when all three are set."""
    if goals.protein is None or goals.carbs is None or goals.fat is None:
        return None
    protein_calories = goals.protein * _CALORIES_PER_GRAM["protein"]
    carbs_calories = goals.carbs * _CALORIES_PER_GRAM["carbs"]
    fat_calories = goals.fat * _CALORIES_PER_GRAM["fat"]
    total = protein_calories + carbs_calories + fat_calories
    return MacroBreakdown(
        protein_percent=round_half_up(protein_calories / total * 100),
        carbs_percent=round_half_up(carbs_calories / total * 100),
        fat_percent=round_half_up(fat_calories / total * 100),
        macro_calories=total,
    )
