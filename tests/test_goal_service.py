"""Tests for goal service."""

import pytest

from nutrition_assistant.domain.errors import InvalidGoalError
from nutrition_assistant.domain.goals import GoalSet
from nutrition_assistant.services.goals import macro_breakdown
from tests.conftest import OWNER_ID


def test_get_goals_falls_back_to_defaults(goal_service) -> None:
    goals, is_default = goal_service.get_goals(OWNER_ID)

    assert is_default
    assert goals == GoalSet(
        owner_id=OWNER_ID,
        daily_calories=2000,
        protein=50,
        carbs=250,
        fat=65,
        fiber=25,
    )


def test_set_goals_creates_then_updates(goal_service, goal_repository) -> None:
    created, is_new = goal_service.set_goals(
        OWNER_ID, daily_calories=2200, protein=160, carbs=220, fat=70
    )
    updated, is_new_again = goal_service.set_goals(OWNER_ID, daily_calories=1800)

    assert is_new
    assert not is_new_again
    assert goal_repository.goals[OWNER_ID] == updated
    assert updated.protein is None
    assert updated.created_at == created.created_at
    assert updated.updated_at >= created.updated_at
    assert goal_service.get_goals(OWNER_ID) == (updated, False)


@pytest.mark.parametrize(
    ("daily_calories", "protein"),
    [(0, None), (-100, None), (2000, 0)],
)
def test_set_goals_rejects_non_positive_values(
    goal_service, daily_calories, protein
) -> None:
    with pytest.raises(InvalidGoalError):
        goal_service.set_goals(OWNER_ID, daily_calories=daily_calories, protein=protein)


def test_macro_breakdown_percentages() -> None:
    breakdown = macro_breakdown(
        GoalSet(owner_id=OWNER_ID, daily_calories=2000, protein=150, carbs=200, fat=67)
    )

    assert breakdown.protein_percent == 30
    assert breakdown.carbs_percent == 40
    assert breakdown.fat_percent == 30
    assert breakdown.macro_calories == 2003


def test_macro_breakdown_needs_all_macros() -> None:
    assert macro_breakdown(GoalSet(owner_id=OWNER_ID, daily_calories=2000)) is None
