"""CSV export of the meal history."""

import csv
import io
from collections.abc import Iterable
from datetime import tzinfo
from decimal import ROUND_HALF_UP, Decimal

from nutritrack.domain.meals import LoggedMeal

CSV_FILENAME = "nutritrack_history.csv"
CSV_HEADER = (
    "Date",
    "Food Name",
    "Portions",
    "Portion Size",
    "Calories (total)",
    "Protein (g) (total)",
    "Carbs (g) (total)",
    "Fat (g) (total)",
)


def to_csv(meals: Iterable[LoggedMeal], tz: tzinfo | None = None) -> str:
    """Serialize meals in the given order, one row per meal.

    Text columns are quoted and numeric columns are not; totals are the
    per-serving values multiplied by the portions eaten, with ties rounded up.
    """
    buffer = io.StringIO()
    csv.writer(buffer, lineterminator="\n").writerow(CSV_HEADER)
    writer = csv.writer(buffer, quoting=csv.QUOTE_NONNUMERIC, lineterminator="\n")
    for meal in meals:
        writer.writerow(_row(meal, tz))
    return buffer.getvalue().removesuffix("\n")


def _row(meal: LoggedMeal, tz: tzinfo | None) -> list[object]:
    logged_at = meal.date
    if logged_at.tzinfo is not None:
        logged_at = logged_at.astimezone(tz)
    return [
        logged_at.strftime("%Y-%m-%d %H:%M:%S"),
        meal.food.name,
        meal.portions,
        meal.food.portion_size,
        int(_round_half_up(meal.calories_total, 0)),
        float(_round_half_up(meal.protein_total, 1)),
        float(_round_half_up(meal.carbs_total, 1)),
        float(_round_half_up(meal.fat_total, 1)),
    ]


def _round_half_up(value: float, places: int) -> Decimal:
    # Decimal(float) keeps the exact binary value, so 1.005 still rounds down.
    quantum = Decimal(1).scaleb(-places)
    return Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP)
