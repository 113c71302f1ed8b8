"""Tests for the JSON wire format."""

import json
from datetime import date

from nutrition_assistant.domain.goals import GoalSet
from nutrition_assistant.domain.nutrition import NutrientVector
from nutrition_assistant.services.reports import (
    build_daily_summary,
    build_weekly_report,
)
from nutrition_assistant.services.serialization import (
    daily_summary_from_wire,
    daily_summary_to_wire,
    food_entry_from_wire,
    food_entry_to_wire,
    format_number,
    nutrients_to_wire,
    weekly_report_from_wire,
    weekly_report_to_wire,
)
from tests.conftest import OWNER_ID, make_meal

GOALS = GoalSet(owner_id=OWNER_ID, daily_calories=2000, protein=150, fat=65)


def test_nutrients_to_wire_leaves_out_absent_fields() -> None:
    payload = nutrients_to_wire(
        NutrientVector(calories=165, protein=31, carbs=0, fat=3.6, sodium=74)
    )

    assert payload == {
        "calories": 165,
        "protein": 31,
        "carbs": 0,
        "fat": 3.6,
        "sodium": 74,
    }


def test_daily_summary_survives_json() -> None:
    day = date(2024, 1, 15)
    summary = build_daily_summary(
        [
            make_meal(day, "breakfast", calories=412, protein=22.3),
            make_meal(day, "dinner", calories=733, fat=31.7),
        ],
        day,
        GOALS,
    )

    payload = json.loads(json.dumps(daily_summary_to_wire(summary)))

    assert payload["perMealType"][0] == {
        "mealType": "breakfast",
        "calories": 412,
        "mealCount": 1,
    }
    assert "carbs" not in payload["goalProgress"]
    assert daily_summary_from_wire(payload) == summary


def test_weekly_report_survives_json() -> None:
    report = build_weekly_report(
        [
            make_meal(date(2024, 1, 15), calories=500, protein=33.3),
            make_meal(date(2024, 1, 16), calories=701, carbs=12.7),
        ],
        date(2024, 1, 15),
        date(2024, 1, 21),
        GOALS,
    )

    payload = json.loads(json.dumps(weekly_report_to_wire(report)))

    assert payload["startDate"] == "2024-01-15"
    assert payload["totalMealCount"] == 2
    assert len(payload["dailySummaries"]) == 7
    assert weekly_report_from_wire(payload) == report


def test_food_entry_survives_json() -> None:
    entry = make_meal(date(2024, 1, 15)).foods[0]

    payload = json.loads(json.dumps(food_entry_to_wire(entry)))

    assert payload["fdcId"] == 1
    assert food_entry_from_wire(payload) == entry


def test_format_number_drops_trailing_zero() -> None:
    assert format_number(2000.0) == "2000"
    assert format_number(31) == "31"
    assert format_number(3.6) == "3.6"
