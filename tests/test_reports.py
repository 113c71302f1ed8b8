"""Tests for daily summaries, weekly reports and insights."""

from datetime import date

import pytest

from nutrition_assistant.domain.errors import InvalidDateRangeError, InvalidGoalError
from nutrition_assistant.domain.goals import GoalDefaults, GoalSet
from nutrition_assistant.domain.nutrition import ZERO_NUTRIENTS
from nutrition_assistant.services.aggregation import aggregate_meals
from nutrition_assistant.services.goals import GoalService
from nutrition_assistant.services.reports import (
    ReportService,
    build_daily_summary,
    build_weekly_report,
    generate_insights,
    progress,
    week_window,
)
from tests.conftest import (
    OWNER_ID,
    InMemoryGoalRepository,
    InMemoryMealRepository,
    make_meal,
)

GOALS = GoalSet(owner_id=OWNER_ID, daily_calories=2000, protein=150)


def test_progress_percentage() -> None:
    result = progress(current=600, goal=2000)

    assert result.percentage == 30
    assert progress(current=2500, goal=2000).percentage == 125
    assert progress(current=0, goal=2000).percentage == 0


def test_progress_rejects_zero_goal() -> None:
    with pytest.raises(InvalidGoalError):
        progress(current=100, goal=0)


def test_aggregate_meals_of_nothing_has_no_optional_fields() -> None:
    totals = aggregate_meals([])

    assert totals == ZERO_NUTRIENTS
    assert totals.fiber is None
    assert totals.sugar is None
    assert totals.sodium is None


def test_daily_summary_without_meals_or_goals() -> None:
    summary = build_daily_summary([], date(2024, 1, 15))

    assert summary.totals == ZERO_NUTRIENTS
    assert summary.per_meal_type == ()
    assert summary.goal_progress is None
    assert not summary.has_meals


def test_daily_summary_without_meals_reports_zero_progress() -> None:
    summary = build_daily_summary([], date(2024, 1, 15), GOALS)

    assert summary.goal_progress is not None
    assert summary.goal_progress.calories.percentage == 0
    assert summary.goal_progress.calories.goal == 2000


def test_daily_summary_groups_meal_types_in_first_seen_order() -> None:
    day = date(2024, 1, 15)
    meals = [
        make_meal(day, "dinner", calories=700),
        make_meal(day, "breakfast", calories=300),
        make_meal(day, "dinner", calories=200),
    ]

    summary = build_daily_summary(meals, day, GOALS)

    assert [entry.meal_type for entry in summary.per_meal_type] == [
        "dinner",
        "breakfast",
    ]
    assert summary.per_meal_type[0].calories == 900
    assert summary.per_meal_type[0].meal_count == 2
    assert summary.meal_count == 3
    assert summary.totals.calories == 1200
    assert summary.goal_progress.calories.percentage == 60
    assert summary.goal_progress.protein.percentage == 60


def test_daily_summary_skips_macros_without_goal() -> None:
    day = date(2024, 1, 15)

    summary = build_daily_summary([make_meal(day)], day, GOALS)

    assert summary.goal_progress.protein is not None
    assert summary.goal_progress.carbs is None
    assert summary.goal_progress.fat is None


def test_weekly_report_averages_over_days_with_meals() -> None:
    meals = [
        make_meal(date(2024, 1, 15), calories=500),
        make_meal(date(2024, 1, 16), calories=700),
    ]

    report = build_weekly_report(meals, date(2024, 1, 15), date(2024, 1, 17))

    assert [summary.date for summary in report.daily_summaries] == [
        date(2024, 1, 15),
        date(2024, 1, 16),
        date(2024, 1, 17),
    ]
    assert report.averages.calories == 600
    assert report.total_meal_count == 2
    assert report.days_with_meals == 2
    assert report.averages.fiber == 0


def test_weekly_report_without_meals_has_zero_averages() -> None:
    report = build_weekly_report([], date(2024, 1, 15), date(2024, 1, 21))

    assert len(report.daily_summaries) == 7
    assert report.averages == ZERO_NUTRIENTS
    assert report.total_meal_count == 0


def test_weekly_report_rejects_inverted_range() -> None:
    with pytest.raises(InvalidDateRangeError):
        build_weekly_report([], date(2024, 1, 17), date(2024, 1, 15))


def _full_week(calories: list[float]) -> list:
    return [
        make_meal(date(2024, 1, 15 + offset), calories=value)
        for offset, value in enumerate(calories)
    ]


def test_insights_on_target_for_complete_week() -> None:
    meals = _full_week([1900, 2000, 2100, 2000, 1950, 2050, 2000])
    report = build_weekly_report(meals, date(2024, 1, 15), date(2024, 1, 21))

    insights = generate_insights(report, GOALS)

    assert insights == [
        "Great job! Your average intake is within 20% of your 2000 cal goal."
    ]


def test_insights_flag_missing_days_and_low_intake() -> None:
    meals = _full_week([1000, 1200])
    report = build_weekly_report(meals, date(2024, 1, 15), date(2024, 1, 21))

    insights = generate_insights(report, GOALS)

    assert insights == [
        "You logged meals on 2 of 7 days. Try to log every day for better tracking.",
        "Your average intake (1100 cal) is 45% below your goal.",
    ]


def test_insights_flag_high_intake_and_inconsistency() -> None:
    meals = _full_week([1500, 3000, 3500, 2600, 2400, 2500, 2300])
    report = build_weekly_report(meals, date(2024, 1, 15), date(2024, 1, 21))

    insights = generate_insights(report, GOALS)

    assert insights[0] == "Your average intake (2543 cal) is 27% above your goal."
    assert insights[1] == (
        "Your daily calories varied by 2000 cal this week. "
        "More consistency may help reach your goals."
    )


def test_insights_skip_consistency_with_few_days() -> None:
    meals = _full_week([500, 3000])
    report = build_weekly_report(meals, date(2024, 1, 15), date(2024, 1, 21))

    insights = generate_insights(report, GOALS)

    assert not any("varied" in insight for insight in insights)


def test_week_window() -> None:
    assert week_window(date(2024, 1, 21)) == (date(2024, 1, 15), date(2024, 1, 21))
    assert week_window(date(2024, 1, 21), weeks_ago=1) == (
        date(2024, 1, 8),
        date(2024, 1, 14),
    )


def test_report_service_uses_default_goals() -> None:
    meals = InMemoryMealRepository()
    meals.create_meal(make_meal(date(2024, 1, 15), calories=1000))
    service = ReportService(
        meal_repository=meals,
        goal_service=GoalService(InMemoryGoalRepository(), GoalDefaults()),
    )

    summary, goals = service.get_daily_summary(OWNER_ID, date(2024, 1, 15))

    assert goals.daily_calories == 2000
    assert summary.goal_progress.calories.percentage == 50
    assert summary.goal_progress.fat.goal == 65


def test_report_service_rejects_inverted_range() -> None:
    service = ReportService(
        meal_repository=InMemoryMealRepository(),
        goal_service=GoalService(InMemoryGoalRepository(), GoalDefaults()),
    )

    with pytest.raises(InvalidDateRangeError):
        service.get_weekly_report(OWNER_ID, date(2024, 1, 21), date(2024, 1, 15))
