"""JSON wire format for nutrition values, meals' foods and reports.

Keys are camelCase and optional values that are absent are left out, so a
document converted back yields an equal dataclass.
"""

from datetime import date

from nutrition_assistant.domain.meals import FoodEntry
from nutrition_assistant.domain.nutrition import OPTIONAL_FIELDS, NutrientVector
from nutrition_assistant.domain.reports import (
    DailySummary,
    GoalProgress,
    MealTypeTotals,
    Progress,
    WeeklyReport,
)

_MACROS = ("protein", "carbs", "fat")


def nutrients_to_wire(vector: NutrientVector) -> dict[str, object]:
    payload: dict[str, object] = {
        "calories": vector.calories,
        "protein": vector.protein,
        "carbs": vector.carbs,
        "fat": vector.fat,
    }
    for name in OPTIONAL_FIELDS:
        value = getattr(vector, name)
        if value is not None:
            payload[name] = value
    return payload


def nutrients_from_wire(payload: dict[str, object]) -> NutrientVector:
    return NutrientVector(
        calories=payload.get("calories", 0),
        protein=payload.get("protein", 0),
        carbs=payload.get("carbs", 0),
        fat=payload.get("fat", 0),
        fiber=payload.get("fiber"),
        sugar=payload.get("sugar"),
        sodium=payload.get("sodium"),
    )


def food_entry_to_wire(entry: FoodEntry) -> dict[str, object]:
    return {
        "fdcId": entry.external_food_id,
        "description": entry.description,
        "servings": entry.servings,
        "servingSize": entry.serving_size,
        "servingSizeUnit": entry.serving_size_unit,
        "nutrition": nutrients_to_wire(entry.nutrition),
    }


def food_entry_from_wire(payload: dict[str, object]) -> FoodEntry:
    return FoodEntry(
        external_food_id=int(payload["fdcId"]),
        description=str(payload.get("description", "")),
        servings=payload.get("servings", 1),
        serving_size=payload.get("servingSize", 1),
        serving_size_unit=str(payload.get("servingSizeUnit", "g")),
        nutrition=nutrients_from_wire(payload.get("nutrition") or {}),
    )


def daily_summary_to_wire(summary: DailySummary) -> dict[str, object]:
    """Convert a daily summary to a JSON-compatible dict."""
    payload: dict[str, object] = {
        "date": summary.date.isoformat(),
        "totals": nutrients_to_wire(summary.totals),
        "perMealType": [
            {
                "mealType": entry.meal_type,
                "calories": entry.calories,
                "mealCount": entry.meal_count,
            }
            for entry in summary.per_meal_type
        ],
    }
    if summary.goal_progress is not None:
        progress = {"calories": _progress_to_wire(summary.goal_progress.calories)}
        for name in _MACROS:
            value = getattr(summary.goal_progress, name)
            if value is not None:
                progress[name] = _progress_to_wire(value)
        payload["goalProgress"] = progress
    return payload


def daily_summary_from_wire(payload: dict[str, object]) -> DailySummary:
    """Rebuild a daily summary from :func:`daily_summary_to_wire` output."""
    goal_progress = None
    raw_progress = payload.get("goalProgress")
    if raw_progress:
        goal_progress = GoalProgress(
            calories=_progress_from_wire(raw_progress["calories"]),
            **{
                name: _progress_from_wire(raw_progress[name])
                for name in _MACROS
                if name in raw_progress
            },
        )
    return DailySummary(
        date=date.fromisoformat(str(payload["date"])),
        totals=nutrients_from_wire(payload["totals"]),
        per_meal_type=tuple(
            MealTypeTotals(
                meal_type=str(entry["mealType"]),
                calories=entry["calories"],
                meal_count=int(entry["mealCount"]),
            )
            for entry in payload.get("perMealType", [])
        ),
        goal_progress=goal_progress,
    )


def weekly_report_to_wire(report: WeeklyReport) -> dict[str, object]:
    """Convert a weekly report to a JSON-compatible dict."""
    return {
        "startDate": report.start_date.isoformat(),
        "endDate": report.end_date.isoformat(),
        "dailySummaries": [
            daily_summary_to_wire(summary) for summary in report.daily_summaries
        ],
        "averages": nutrients_to_wire(report.averages),
        "totalMealCount": report.total_meal_count,
    }


def weekly_report_from_wire(payload: dict[str, object]) -> WeeklyReport:
    """Rebuild a weekly report from :func:`weekly_report_to_wire` output."""
    return WeeklyReport(
        start_date=date.fromisoformat(str(payload["startDate"])),
        end_date=date.fromisoformat(str(payload["endDate"])),
        daily_summaries=tuple(
            daily_summary_from_wire(summary)
            for summary in payload.get("dailySummaries", [])
        ),
        averages=nutrients_from_wire(payload["averages"]),
        total_meal_count=int(payload["totalMealCount"]),
    )


def _progress_to_wire(progress: Progress) -> dict[str, object]:
    return {
        "current": progress.current,
        "goal": progress.goal,
        "percentage": progress.percentage,
    }


def _progress_from_wire(payload: dict[str, object]) -> Progress:
    return Progress(
        current=payload["current"],
        goal=payload["goal"],
        percentage=int(payload["percentage"]),
    )


def format_number(value: float) -> str:
    """Render a number the way JSON would, without a trailing ``.0``."""
    if float(value).is_integer():
        return str(int(value))
    return str(value)
