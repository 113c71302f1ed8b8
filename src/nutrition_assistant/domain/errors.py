"""Domain errors raised by services."""


class NutritionTrackerError(Exception):
    """Base class for errors reported back to the tool caller."""


class InvalidDateRangeError(NutritionTrackerError, ValueError):
    """Start date is after end date."""


class InvalidGoalError(NutritionTrackerError, ValueError):
    """Goal value is not usable for progress computation."""


class MealNotFoundError(NutritionTrackerError, LookupError):
    """Meal does not exist or belongs to another user."""


class FoodNotFoundError(NutritionTrackerError, LookupError):
    """Food id is unknown to the food database."""


class EmptyMealError(NutritionTrackerError):
    """Meal would be left without any foods."""
