"""Pydantic models for tool call arguments."""

import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

MealType = Literal["breakfast", "lunch", "dinner", "snack"]


class ToolInput(BaseModel):
    """Base model accepting camelCase keys from the assistant."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FoodPortionInput(ToolInput):
    """Food id with a serving count."""

    fdc_id: int = Field(description="USDA FoodData Central ID from search_food")
    servings: float = Field(default=1, gt=0, description="Number of servings")


class SearchFoodInput(ToolInput):
    """Arguments for search_food."""

    query: str = Field(min_length=1, description="Food name or description")
    limit: int = Field(default=10, ge=1, le=25, description="Maximum results")


class LogMealInput(ToolInput):
    """Arguments for log_meal."""

    foods: list[FoodPortionInput] = Field(
        min_length=1, description="Foods to log with their IDs and serving counts"
    )
    meal_type: MealType
    notes: str | None = Field(default=None, description="Optional notes")
    date: datetime.date | None = Field(
        default=None, description="Date in YYYY-MM-DD format (defaults to today)"
    )


class QuickAddInput(ToolInput):
    """Arguments for quick_add."""

    description: str = Field(min_length=1, max_length=200)
    calories: float = Field(gt=0, le=10000, description="Total calories")
    protein: float | None = Field(default=None, ge=0, le=500)
    carbs: float | None = Field(default=None, ge=0, le=1000)
    fat: float | None = Field(default=None, ge=0, le=500)
    fiber: float | None = Field(default=None, ge=0, le=100)
    meal_type: MealType
    date: datetime.date | None = None
    notes: str | None = None


class UpdateMealInput(ToolInput):
    """Arguments for update_meal."""

    meal_id: UUID = Field(description="ID of the meal to update (from get_meals)")
    add_foods: list[FoodPortionInput] | None = None
    remove_food_ids: list[int] | None = None
    update_servings: list[FoodPortionInput] | None = None
    meal_type: MealType | None = None
    notes: str | None = None


class DeleteMealInput(ToolInput):
    """Arguments for delete_meal."""

    meal_id: UUID


class GetMealsInput(ToolInput):
    """Arguments for get_meals."""

    date: datetime.date | None = None
    start_date: datetime.date | None = None
    end_date: datetime.date | None = None


class GetDailySummaryInput(ToolInput):
    """Arguments for get_daily_summary."""

    date: datetime.date | None = None


class GetWeeklyReportInput(ToolInput):
    """Arguments for get_weekly_report."""

    weeks_ago: int = Field(
        default=0, ge=0, le=12, description="Number of weeks ago (0 = current week)"
    )


class GetGoalsInput(ToolInput):
    """Arguments for get_goals."""


class SetGoalsInput(ToolInput):
    """Arguments for set_goals."""

    daily_calories: float = Field(gt=0, le=10000)
    protein: float | None = Field(default=None, gt=0, le=500)
    carbs: float | None = Field(default=None, gt=0, le=1000)
    fat: float | None = Field(default=None, gt=0, le=500)
    fiber: float | None = Field(default=None, gt=0, le=100)
