"""Domain models for calorie summaries."""

from dataclasses import dataclass
from datetime import date

from nutritrack.domain.meals import LoggedMeal


@dataclass(frozen=True)
class DailySummary:
    """Today's intake against the goal, plus the rolling weekly total."""

    day: date
    meals: list[LoggedMeal]
    calories: float
    calorie_goal: float
    remaining_calories: float
    weekly_calories: float


@dataclass(frozen=True)
class DayGroup:
    """Meals logged on one calendar day."""

    day: date
    meals: list[LoggedMeal]
    calories: float
