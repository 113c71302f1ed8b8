"""Derived report models for daily and weekly summaries."""

from dataclasses import dataclass
from datetime import date

from nutrition_assistant.domain.nutrition import NutrientVector


@dataclass(frozen=True)
class Progress:
    """Intake compared to a goal."""

    current: float
    goal: float
    percentage: int


@dataclass(frozen=True)
class GoalProgress:
    """Progress per goal; macros without a target are ``None``."""

    calories: Progress
    protein: Progress | None = None
    carbs: Progress | None = None
    fat: Progress | None = None


@dataclass(frozen=True)
class MealTypeTotals:
    """Calories and meal count for one meal type within a day."""

    meal_type: str
    calories: float
    meal_count: int


@dataclass(frozen=True)
class DailySummary:
    """Totals, meal-type breakdown and goal progress for one day."""

    date: date
    totals: NutrientVector
    per_meal_type: tuple[MealTypeTotals, ...]
    goal_progress: GoalProgress | None = None

    @property
    def meal_count(self) -> int:
        """Return the number of meals logged on this day."""
        return sum(entry.meal_count for entry in self.per_meal_type)

    @property
    def has_meals(self) -> bool:
        """Return True when at least one meal was logged."""
        return bool(self.per_meal_type)


@dataclass(frozen=True)
class WeeklyReport:
    """Daily summaries for a date range with per-active-day averages."""

    start_date: date
    end_date: date
    daily_summaries: tuple[DailySummary, ...]
    averages: NutrientVector
    total_meal_count: int

    @property
    def days_with_meals(self) -> int:
        """Return the number of days with at least one meal."""
        return sum(1 for day in self.daily_summaries if day.has_meals)
