"""Tool handlers exposed to the chat assistant.

Every handler returns the JSON document (or plain text) that becomes the text
content of the tool result. Validation and domain errors are turned into error
results by :func:`call_tool`.
"""

import json
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import date, datetime
from zoneinfo import ZoneInfo

from pydantic import BaseModel, ValidationError

from nutrition_assistant.api.tool_models import (
    DeleteMealInput,
    GetDailySummaryInput,
    GetGoalsInput,
    GetMealsInput,
    GetWeeklyReportInput,
    LogMealInput,
    QuickAddInput,
    SearchFoodInput,
    SetGoalsInput,
    UpdateMealInput,
)
from nutrition_assistant.containers import AppContainer
from nutrition_assistant.domain.errors import NutritionTrackerError
from nutrition_assistant.domain.goals import GoalSet
from nutrition_assistant.domain.meals import FoodPortion, Meal
from nutrition_assistant.domain.nutrition import NutrientVector
from nutrition_assistant.domain.reports import Progress
from nutrition_assistant.services.goals import macro_breakdown
from nutrition_assistant.services.reports import week_window
from nutrition_assistant.services.serialization import format_number

GOAL_MET_MIN_PERCENT = 90
GOAL_MET_MAX_PERCENT = 110

_logger = logging.getLogger(__name__)

ToolPayload = dict[str, object] | str
Handler = Callable[[AppContainer, BaseModel, str | None], Awaitable[ToolPayload]]


@dataclass(frozen=True)
class ToolDefinition:
    """Tool metadata and its handler."""

    name: str
    description: str
    input_model: type[BaseModel]
    handler: Handler
    requires_user: bool = True

    def describe(self) -> dict[str, object]:
        """Return the definition advertised to the assistant."""
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_model.model_json_schema(by_alias=True),
        }


class MissingUserError(NutritionTrackerError):
    """Tool needs a user id but none was supplied."""


async def call_tool(
    container: AppContainer,
    tool: ToolDefinition,
    arguments: dict[str, object],
    owner_id: str | None,
) -> dict[str, object]:
    """Validate arguments, run a tool and wrap its output as a tool result."""
    try:
        if tool.requires_user and not owner_id:
            raise MissingUserError("This tool requires an authenticated user")
        params = tool.input_model.model_validate(arguments)
        payload = await tool.handler(container, params, owner_id)
    except ValidationError as exc:
        _logger.warning("Invalid arguments for tool %s: %s", tool.name, exc)
        return _result(
            {"success": False, "error": "Invalid arguments", "details": _errors(exc)},
            is_error=True,
        )
    except NutritionTrackerError as exc:
        _logger.warning("Tool %s failed for owner=%s: %s", tool.name, owner_id, exc)
        return _result({"success": False, "error": str(exc)}, is_error=True)
    return _result(payload)


async def search_food(
    container: AppContainer, params: SearchFoodInput, owner_id: str | None
) -> ToolPayload:
    """Search the food database."""
    foods = await container.nutrition_service.search(params.query, params.limit)
    if not foods:
        return (
            f'No foods found matching "{params.query}". '
            "Try a different search term."
        )
    return {
        "query": params.query,
        "resultCount": len(foods),
        "foods": [
            {
                "fdcId": food.fdc_id,
                "name": food.description,
                "brand": food.brand_name,
                "servingSize": _serving(food.serving_size, food.serving_size_unit),
                "nutrition": _macro_strings(food.nutrition),
            }
            for food in foods
        ],
        "hint": "Use the fdcId when logging a meal with log_meal",
    }


async def log_meal(
    container: AppContainer, params: LogMealInput, owner_id: str
) -> ToolPayload:
    """Log a meal from database foods."""
    meal = await container.meal_service.log_meal(
        owner_id=owner_id,
        portions=[FoodPortion(food.fdc_id, food.servings) for food in params.foods],
        meal_type=params.meal_type,
        day=params.date or _today(container),
        notes=params.notes,
    )
    return {
        "success": True,
        "mealId": str(meal.id),
        "date": meal.date.isoformat(),
        "mealType": meal.meal_type,
        "foodsLogged": [
            {
                "name": food.description,
                "servings": food.servings,
                "calories": food.nutrition.calories,
            }
            for food in meal.foods
        ],
        "totals": _macro_strings(meal.totals),
    }


async def quick_add(
    container: AppContainer, params: QuickAddInput, owner_id: str
) -> ToolPayload:
    """Log calories and macros without a database lookup."""
    meal = container.meal_service.quick_add(
        owner_id=owner_id,
        description=params.description,
        calories=params.calories,
        meal_type=params.meal_type,
        day=params.date or _today(container),
        protein=params.protein,
        carbs=params.carbs,
        fat=params.fat,
        fiber=params.fiber,
        notes=params.notes,
    )
    macro_note = None
    if not params.protein and not params.carbs and not params.fat:
        macro_note = "Tip: Add protein, carbs, and fat for more accurate tracking."
    return {
        "success": True,
        "mealId": str(meal.id),
        "date": meal.date.isoformat(),
        "mealType": meal.meal_type,
        "logged": {
            "description": params.description,
            "calories": params.calories,
            "protein": _grams_or(params.protein, "not specified"),
            "carbs": _grams_or(params.carbs, "not specified"),
            "fat": _grams_or(params.fat, "not specified"),
            "fiber": _grams_or(params.fiber, "not specified"),
        },
        "macroNote": macro_note,
    }


async def update_meal(
    container: AppContainer, params: UpdateMealInput, owner_id: str
) -> ToolPayload:
    """Change the foods, servings, type or notes of a meal."""
    result = await container.meal_service.update_meal(
        owner_id=owner_id,
        meal_id=params.meal_id,
        add_foods=_portions(params.add_foods),
        remove_food_ids=params.remove_food_ids,
        update_servings=_portions(params.update_servings),
        meal_type=params.meal_type,
        notes=params.notes,
    )
    meal = result.meal
    return {
        "success": True,
        "mealId": str(meal.id),
        "changes": result.changes or ["No changes made"],
        "updatedMeal": {
            "date": meal.date.isoformat(),
            "mealType": meal.meal_type,
            "foods": [
                {
                    "fdcId": food.external_food_id,
                    "name": food.description,
                    "servings": food.servings,
                    "calories": food.nutrition.calories,
                }
                for food in meal.foods
            ],
            "totals": _macro_strings(meal.totals),
            "notes": meal.notes or None,
        },
    }


async def delete_meal(
    container: AppContainer, params: DeleteMealInput, owner_id: str
) -> ToolPayload:
    """Delete a meal."""
    meal = container.meal_service.delete_meal(owner_id, params.meal_id)
    return {
        "success": True,
        "message": "Meal deleted successfully",
        "deletedMeal": {
            "id": str(meal.id),
            "date": meal.date.isoformat(),
            "mealType": meal.meal_type,
            "calories": meal.totals.calories,
            "foods": [food.description for food in meal.foods],
        },
    }


async def get_meals(
    container: AppContainer, params: GetMealsInput, owner_id: str
) -> ToolPayload:
    """List meals for a day or a date range."""
    use_range = params.start_date is not None and params.end_date is not None
    meals = container.meal_service.list_meals(
        owner_id,
        day=params.date or _today(container),
        start=params.start_date,
        end=params.end_date,
    )
    if not meals:
        if use_range:
            date_info = (
                f"between {params.start_date.isoformat()} "
                f"and {params.end_date.isoformat()}"
            )
        else:
            date_info = f"on {params.date.isoformat() if params.date else 'today'}"
        return {
            "meals": [],
            "message": f"No meals logged {date_info}.",
            "hint": "Use log_meal or quick_add to log a meal.",
        }

    total_calories = sum(meal.totals.calories for meal in meals)
    total_protein = sum(meal.totals.protein for meal in meals)
    total_carbs = sum(meal.totals.carbs for meal in meals)
    total_fat = sum(meal.totals.fat for meal in meals)
    return {
        "mealCount": len(meals),
        "meals": [_format_meal(meal) for meal in meals],
        "dayTotals": {
            "calories": total_calories,
            "protein": _grams(round(total_protein, 1)),
            "carbs": _grams(round(total_carbs, 1)),
            "fat": _grams(round(total_fat, 1)),
        },
    }


async def get_daily_summary(
    container: AppContainer, params: GetDailySummaryInput, owner_id: str
) -> ToolPayload:
    """Summarize a day against the user's goals."""
    day = params.date or _today(container)
    summary, goals = container.report_service.get_daily_summary(owner_id, day)
    if not summary.has_meals:
        return {
            "date": day.isoformat(),
            "message": "No meals logged for this day",
            "goals": {
                "dailyCalories": goals.daily_calories,
                "protein": goals.protein,
                "carbs": goals.carbs,
                "fat": goals.fat,
            },
        }

    totals = summary.totals
    progress = summary.goal_progress
    return {
        "date": day.isoformat(),
        "mealsLogged": summary.meal_count,
        "totals": {
            **_macro_strings(totals),
            "fiber": _grams(totals.fiber) if totals.fiber else None,
        },
        "byMealType": [
            {
                "type": entry.meal_type,
                "calories": entry.calories,
                "mealsCount": entry.meal_count,
            }
            for entry in summary.per_meal_type
        ],
        "goalProgress": {
            "calories": _progress_text(progress.calories, unit=""),
            "protein": _progress_text(progress.protein),
            "carbs": _progress_text(progress.carbs),
            "fat": _progress_text(progress.fat),
        }
        if progress
        else None,
        "remaining": {
            "calories": max(0, progress.calories.goal - progress.calories.current)
        }
        if progress
        else None,
    }


async def get_weekly_report(
    container: AppContainer, params: GetWeeklyReportInput, owner_id: str
) -> ToolPayload:
    """Report on a seven-day window with averages and insights."""
    start, end = week_window(_today(container), params.weeks_ago)
    report, goals, insights = container.report_service.get_weekly_report(
        owner_id, start, end
    )
    averages = report.averages
    return {
        "period": {"start": start.isoformat(), "end": end.isoformat()},
        "totalMealsLogged": report.total_meal_count,
        "dailyAverages": {
            "calories": averages.calories,
            "protein": _grams(averages.protein),
            "carbs": _grams(averages.carbs),
            "fat": _grams(averages.fat),
        },
        "goals": {
            "dailyCalories": goals.daily_calories,
            "protein": _grams_or(goals.protein, None),
            "carbs": _grams_or(goals.carbs, None),
            "fat": _grams_or(goals.fat, None),
        },
        "dailyBreakdown": [
            {
                "date": day.date.isoformat(),
                "calories": day.totals.calories,
                "protein": day.totals.protein,
                "carbs": day.totals.carbs,
                "fat": day.totals.fat,
                "mealsLogged": day.meal_count,
                "goalMet": day.goal_progress is not None
                and GOAL_MET_MIN_PERCENT
                <= day.goal_progress.calories.percentage
                <= GOAL_MET_MAX_PERCENT,
            }
            for day in report.daily_summaries
        ],
        "insights": insights,
    }


async def get_goals(
    container: AppContainer, params: GetGoalsInput, owner_id: str
) -> ToolPayload:
    """Return the user's goals or the defaults."""
    goals, is_default = container.goal_service.get_goals(owner_id)
    if is_default:
        return {
            "isDefault": True,
            "message": "No custom goals set. Using default goals.",
            "goals": _goal_strings(goals),
            "hint": "Use set_goals to customize your nutrition targets.",
        }
    breakdown = _breakdown(goals)
    last_updated = goals.updated_at or goals.created_at
    return {
        "isDefault": False,
        "goals": _goal_strings(goals),
        "macroBreakdown": breakdown,
        "lastUpdated": last_updated.isoformat() if last_updated else None,
    }


async def set_goals(
    container: AppContainer, params: SetGoalsInput, owner_id: str
) -> ToolPayload:
    """Replace the user's goals."""
    goals, created = container.goal_service.set_goals(
        owner_id,
        daily_calories=params.daily_calories,
        protein=params.protein,
        carbs=params.carbs,
        fat=params.fat,
        fiber=params.fiber,
    )
    breakdown = _breakdown(goals)
    if breakdown is not None:
        macro_calories = macro_breakdown(goals).macro_calories
        breakdown["note"] = (
            f"Note: Macro calories ({format_number(macro_calories)}) differ from "
            f"calorie goal ({format_number(goals.daily_calories)})"
            if macro_calories != goals.daily_calories
            else None
        )
    return {
        "success": True,
        "message": "Goals created" if created else "Goals updated",
        "goals": _goal_strings(goals),
        "macroBreakdown": breakdown,
    }


TOOLS: dict[str, ToolDefinition] = {
    tool.name: tool
    for tool in (
        ToolDefinition(
            name="search_food",
            description=(
                "Search the USDA FoodData Central database for foods and their "
                "nutritional information. Use this to find foods before logging "
                "a meal."
            ),
            input_model=SearchFoodInput,
            handler=search_food,
            requires_user=False,
        ),
        ToolDefinition(
            name="log_meal",
            description=(
                "Log a meal with foods and their portions. First use search_food "
                "to find food IDs, then use this tool to record the meal."
            ),
            input_model=LogMealInput,
            handler=log_meal,
        ),
        ToolDefinition(
            name="quick_add",
            description=(
                "Quickly log calories and macros without searching the food "
                "database. Useful for restaurant meals, homemade food, or items "
                "not in the USDA database."
            ),
            input_model=QuickAddInput,
            handler=quick_add,
        ),
        ToolDefinition(
            name="update_meal",
            description=(
                "Update an existing meal. Can add/remove foods, change servings, "
                "update meal type, or modify notes. Use get_meals first to find "
                "the meal ID."
            ),
            input_model=UpdateMealInput,
            handler=update_meal,
        ),
        ToolDefinition(
            name="delete_meal",
            description=(
                "Delete a previously logged meal by its ID. Use get_meals to "
                "find meal IDs."
            ),
            input_model=DeleteMealInput,
            handler=delete_meal,
        ),
        ToolDefinition(
            name="get_meals",
            description=(
                "Get logged meals for a specific date or date range. Returns "
                "full meal details including individual foods and nutrition."
            ),
            input_model=GetMealsInput,
            handler=get_meals,
        ),
        ToolDefinition(
            name="get_daily_summary",
            description=(
                "Get a summary of calories and macros consumed for a specific "
                "day, including progress toward goals."
            ),
            input_model=GetDailySummaryInput,
            handler=get_daily_summary,
        ),
        ToolDefinition(
            name="get_weekly_report",
            description=(
                "Get a 7-day report showing daily calorie/macro trends and "
                "averages."
            ),
            input_model=GetWeeklyReportInput,
            handler=get_weekly_report,
        ),
        ToolDefinition(
            name="get_goals",
            description=(
                "Get the user's current daily nutrition goals. Returns default "
                "goals if none have been set."
            ),
            input_model=GetGoalsInput,
            handler=get_goals,
        ),
        ToolDefinition(
            name="set_goals",
            description=(
                "Set daily nutrition goals for calories and optionally macros "
                "(protein, carbs, fat, fiber)."
            ),
            input_model=SetGoalsInput,
            handler=set_goals,
        ),
    )
}


def _result(payload: ToolPayload, is_error: bool = False) -> dict[str, object]:
    text = payload if isinstance(payload, str) else json.dumps(payload, indent=2)
    return {"content": [{"type": "text", "text": text}], "isError": is_error}


def _errors(exc: ValidationError) -> list[dict[str, object]]:
    return [
        {"field": ".".join(str(part) for part in error["loc"]), "message": error["msg"]}
        for error in exc.errors()
    ]


def _today(container: AppContainer) -> date:
    return datetime.now(tz=ZoneInfo(container.settings.timezone)).date()


def _portions(values: list | None) -> list[FoodPortion] | None:
    if values is None:
        return None
    return [FoodPortion(value.fdc_id, value.servings) for value in values]


def _grams(value: float) -> str:
    return f"{format_number(value)}g"


def _grams_or(value: float | None, fallback: str | None) -> str | None:
    if not value:
        return fallback
    return _grams(value)


def _serving(size: float, unit: str) -> str:
    return f"{format_number(size)}{unit}"


def _macro_strings(vector: NutrientVector) -> dict[str, object]:
    return {
        "calories": vector.calories,
        "protein": _grams(vector.protein),
        "carbs": _grams(vector.carbs),
        "fat": _grams(vector.fat),
    }


def _progress_text(progress: Progress | None, unit: str = "g") -> str | None:
    if progress is None:
        return None
    return (
        f"{format_number(progress.current)}{unit}/"
        f"{format_number(progress.goal)}{unit} ({progress.percentage}%)"
    )


def _goal_strings(goals: GoalSet) -> dict[str, object]:
    return {
        "dailyCalories": goals.daily_calories,
        "protein": _grams_or(goals.protein, "not set"),
        "carbs": _grams_or(goals.carbs, "not set"),
        "fat": _grams_or(goals.fat, "not set"),
        "fiber": _grams_or(goals.fiber, "not set"),
    }


def _breakdown(goals: GoalSet) -> dict[str, object] | None:
    breakdown = macro_breakdown(goals)
    if breakdown is None:
        return None
    return {
        "protein": f"{breakdown.protein_percent}%",
        "carbs": f"{breakdown.carbs_percent}%",
        "fat": f"{breakdown.fat_percent}%",
    }


def _format_meal(meal: Meal) -> dict[str, object]:
    return {
        "mealId": str(meal.id),
        "date": meal.date.isoformat(),
        "mealType": meal.meal_type,
        "foods": [
            {
                "fdcId": food.external_food_id,
                "name": food.description,
                "servings": food.servings,
                "servingSize": _serving(food.serving_size, food.serving_size_unit),
                **_macro_strings(food.nutrition),
            }
            for food in meal.foods
        ],
        "totals": _macro_strings(meal.totals),
        "notes": meal.notes or None,
        "loggedAt": meal.created_at.isoformat(),
    }
