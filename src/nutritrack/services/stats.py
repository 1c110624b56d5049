"""Calorie aggregation over the meal history.

All functions are pure: the caller passes in the meals and the reference
"now", so results depend on nothing else. Calendar days are taken in local
wall-clock time, either of ``tz`` or of the host when ``tz`` is None. Naive
datetimes are assumed to already be local.
"""

from collections.abc import Iterable
from datetime import date, datetime, time, timedelta, tzinfo

from nutritrack.domain.meals import LoggedMeal
from nutritrack.domain.stats import DailySummary, DayGroup

WEEK_LOOKBACK_DAYS = 7


def todays_meals(
    meals: Iterable[LoggedMeal], now: datetime | date, tz: tzinfo | None = None
) -> list[LoggedMeal]:
    """Return meals logged on the same local calendar day as ``now``."""
    today = _local_day(now, tz)
    return [meal for meal in meals if _local(meal.date, tz).date() == today]


def total_calories(meals: Iterable[LoggedMeal]) -> float:
    """Return portion-weighted calories for the given meals."""
    return sum((meal.calories_total for meal in meals), 0.0)


def weekly_total(
    meals: Iterable[LoggedMeal], now: datetime | date, tz: tzinfo | None = None
) -> float:
    """Return calories logged since local midnight a week before ``now``."""
    start = datetime.combine(
        _local_day(now, tz) - timedelta(days=WEEK_LOOKBACK_DAYS), time.min
    )
    return total_calories(meal for meal in meals if _local(meal.date, tz) >= start)


def group_by_day(
    meals: Iterable[LoggedMeal], tz: tzinfo | None = None
) -> list[DayGroup]:
    """Group meals by local calendar day, keeping first-seen order."""
    grouped: dict[date, list[LoggedMeal]] = {}
    for meal in meals:
        grouped.setdefault(_local(meal.date, tz).date(), []).append(meal)
    return [
        DayGroup(day=day, meals=day_meals, calories=total_calories(day_meals))
        for day, day_meals in grouped.items()
    ]


def summarize(
    meals: Iterable[LoggedMeal],
    now: datetime | date,
    calorie_goal: float,
    tz: tzinfo | None = None,
) -> DailySummary:
    """Return today's intake, progress against the goal and the weekly total."""
    all_meals = list(meals)
    today = todays_meals(all_meals, now, tz)
    calories = total_calories(today)
    return DailySummary(
        day=_local_day(now, tz),
        meals=today,
        calories=calories,
        calorie_goal=calorie_goal,
        remaining_calories=max(calorie_goal - calories, 0.0),
        weekly_calories=weekly_total(all_meals, now, tz),
    )


def _local(value: datetime, tz: tzinfo | None) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(tz).replace(tzinfo=None)


def _local_day(value: datetime | date, tz: tzinfo | None) -> date:
    if isinstance(value, datetime):
        return _local(value, tz).date()
    return value
