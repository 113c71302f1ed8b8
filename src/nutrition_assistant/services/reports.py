"""Daily summaries, weekly reports and goal progress."""

from collections import OrderedDict
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date, timedelta

from nutrition_assistant.domain.errors import InvalidDateRangeError, InvalidGoalError
from nutrition_assistant.domain.goals import GoalSet
from nutrition_assistant.domain.meals import Meal
from nutrition_assistant.domain.nutrition import ZERO_NUTRIENTS
from nutrition_assistant.domain.reports import (
    DailySummary,
    GoalProgress,
    MealTypeTotals,
    Progress,
    WeeklyReport,
)
from nutrition_assistant.services.aggregation import (
    aggregate_meals,
    average_nutrients,
    round_half_up,
)
from nutrition_assistant.services.goals import GoalService
from nutrition_assistant.services.meals import MealRepository
from nutrition_assistant.services.serialization import format_number

UNDER_TARGET_PERCENT = 80
OVER_TARGET_PERCENT = 120
CONSISTENCY_MIN_DAYS = 3
CONSISTENCY_MAX_SPREAD = 1000
DAYS_PER_WEEK = 7


def progress(current: float, goal: float) -> Progress:
    """Compare ``current`` intake with a positive ``goal``.

    The percentage is not clamped and can exceed 100.
    """
    if goal <= 0:
        raise InvalidGoalError(
            f"Goal must be positive to compute progress, got {goal}"
        )
    return Progress(
        current=current,
        goal=goal,
        percentage=round_half_up(current / goal * 100),
    )


def build_daily_summary(
    meals: Sequence[Meal], day: date, goals: GoalSet | None = None
) -> DailySummary:
    """Summarize the meals of a single day.

    Meal types are listed in the order they first appear in ``meals``.
    """
    totals = aggregate_meals(meals)

    by_type: OrderedDict[str, list[Meal]] = OrderedDict()
    for meal in meals:
        by_type.setdefault(meal.meal_type, []).append(meal)
    per_meal_type = tuple(
        MealTypeTotals(
            meal_type=meal_type,
            calories=sum(meal.totals.calories for meal in typed_meals),
            meal_count=len(typed_meals),
        )
        for meal_type, typed_meals in by_type.items()
    )

    goal_progress = None
    if goals is not None:
        goal_progress = GoalProgress(
            calories=progress(totals.calories, goals.daily_calories),
            protein=_optional_progress(totals.protein, goals.protein),
            carbs=_optional_progress(totals.carbs, goals.carbs),
            fat=_optional_progress(totals.fat, goals.fat),
        )

    return DailySummary(
        date=day,
        totals=totals,
        per_meal_type=per_meal_type,
        goal_progress=goal_progress,
    )


def build_weekly_report(
    meals: Sequence[Meal],
    start_date: date,
    end_date: date,
    goals: GoalSet | None = None,
) -> WeeklyReport:
    """Build one summary per day from ``start_date`` to ``end_date`` inclusive.

    Averages are taken over days that have meals, not over the whole range.
    ``meals`` are expected to be already restricted to the range.
    """
    if start_date > end_date:
        raise InvalidDateRangeError(
            f"Start date {start_date.isoformat()} is after end date "
            f"{end_date.isoformat()}"
        )

    by_day: dict[date, list[Meal]] = {}
    for meal in meals:
        by_day.setdefault(meal.date, []).append(meal)

    summaries = []
    day = start_date
    while day <= end_date:
        summaries.append(build_daily_summary(by_day.get(day, []), day, goals))
        day += timedelta(days=1)

    days_with_meals = sum(1 for summary in summaries if summary.has_meals)
    if days_with_meals == 0:
        averages = ZERO_NUTRIENTS
    else:
        averages = average_nutrients(aggregate_meals(meals), days_with_meals)

    return WeeklyReport(
        start_date=start_date,
        end_date=end_date,
        daily_summaries=tuple(summaries),
        averages=averages,
        total_meal_count=len(meals),
    )


def generate_insights(report: WeeklyReport, goals: GoalSet) -> list[str]:
    """Return short coaching messages about a report."""
    insights: list[str] = []
    total_days = len(report.daily_summaries)
    days_with_meals = report.days_with_meals
    if days_with_meals < total_days:
        insights.append(
            f"You logged meals on {days_with_meals} of {total_days} days. "
            "Try to log every day for better tracking."
        )

    avg_calories = report.averages.calories
    percentage = progress(avg_calories, goals.daily_calories).percentage
    if percentage < UNDER_TARGET_PERCENT:
        insights.append(
            f"Your average intake ({format_number(avg_calories)} cal) is "
            f"{100 - percentage}% below your goal."
        )
    elif percentage > OVER_TARGET_PERCENT:
        insights.append(
            f"Your average intake ({format_number(avg_calories)} cal) is "
            f"{percentage - 100}% above your goal."
        )
    else:
        insights.append(
            "Great job! Your average intake is within 20% of your "
            f"{format_number(goals.daily_calories)} cal goal."
        )

    active_calories = [
        summary.totals.calories
        for summary in report.daily_summaries
        if summary.has_meals
    ]
    if len(active_calories) >= CONSISTENCY_MIN_DAYS:
        spread = max(active_calories) - min(active_calories)
        if spread > CONSISTENCY_MAX_SPREAD:
            insights.append(
                f"Your daily calories varied by {format_number(spread)} cal "
                "this week. "
                "More consistency may help reach your goals."
            )

    return insights


def week_window(today: date, weeks_ago: int = 0) -> tuple[date, date]:
    """Return the seven-day window ending ``weeks_ago`` weeks before ``today``."""
    end = today - timedelta(days=weeks_ago * DAYS_PER_WEEK)
    start = end - timedelta(days=DAYS_PER_WEEK - 1)
    return start, end


@dataclass
class ReportService:
    """Service that loads a user's meals and goals and builds reports."""

    meal_repository: MealRepository
    goal_service: GoalService

    def get_daily_summary(
        self, owner_id: str, day: date
    ) -> tuple[DailySummary, GoalSet]:
        """Return the summary for ``day`` and the goals it was computed with."""
        meals = self.meal_repository.list_meals_for_date(owner_id, day)
        goals = self.goal_service.resolve(owner_id)
        return build_daily_summary(meals, day, goals), goals

    def get_weekly_report(
        self, owner_id: str, start_date: date, end_date: date
    ) -> tuple[WeeklyReport, GoalSet, list[str]]:
        """Return the report for a date range, its goals and insights."""
        if start_date > end_date:
            raise InvalidDateRangeError(
                f"Start date {start_date.isoformat()} is after end date "
                f"{end_date.isoformat()}"
            )
        meals = self.meal_repository.list_meals_for_range(
            owner_id, start_date, end_date
        )
        goals = self.goal_service.resolve(owner_id)
        report = build_weekly_report(meals, start_date, end_date, goals)
        return report, goals, generate_insights(report, goals)


def _optional_progress(current: float, goal: float | None) -> Progress | None:
    if goal is None:
        return None
    return progress(current, goal)
