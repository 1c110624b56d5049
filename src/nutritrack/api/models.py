"""Request and response models for the HTTP API."""

from datetime import date

from pydantic import BaseModel, Field

from nutritrack.domain.food import DetectedFood
from nutritrack.domain.meals import LoggedMeal
from nutritrack.domain.stats import DailySummary, DayGroup


class LogMealRequest(BaseModel):
    """Payload for logging an analyzed food."""

    food: DetectedFood
    portions: int = Field(default=1, ge=1)


class TipResponse(BaseModel):
    tip: str


class SummaryResponse(BaseModel):
    """Today's intake and the rolling weekly total."""

    day: date
    meals: list[LoggedMeal]
    calories: float
    calorie_goal: float
    remaining_calories: float
    weekly_calories: float

    @classmethod
    def from_summary(cls, summary: DailySummary) -> "SummaryResponse":
        return cls(
            day=summary.day,
            meals=summary.meals,
            calories=summary.calories,
            calorie_goal=summary.calorie_goal,
            remaining_calories=summary.remaining_calories,
            weekly_calories=summary.weekly_calories,
        )


class HistoryDay(BaseModel):
    day: date
    meals: list[LoggedMeal]
    calories: float

    @classmethod
    def from_group(cls, group: DayGroup) -> "HistoryDay":
        return cls(day=group.day, meals=group.meals, calories=group.calories)


class HistoryResponse(BaseModel):
    days: list[HistoryDay]
    weekly_calories: float
