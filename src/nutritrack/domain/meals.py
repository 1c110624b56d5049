"""Domain models for meal logging."""

from datetime import datetime
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from nutritrack.domain.food import DetectedFood


class LoggedMeal(BaseModel):
    """A detected food the user logged, with the number of portions eaten."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    food: DetectedFood
    portions: int = Field(ge=1)
    date: datetime

    @classmethod
    def create(
        cls, food: DetectedFood, portions: int, now: datetime | None = None
    ) -> "LoggedMeal":
        """Build a new meal with a fresh id, timestamped now."""
        logged_at = now or datetime.now().astimezone()
        return cls(id=str(uuid4()), food=food, portions=portions, date=logged_at)

    @property
    def calories_total(self) -> float:
        return self.food.nutrition.calories * self.portions

    @property
    def protein_total(self) -> float:
        return self.food.nutrition.protein * self.portions

    @property
    def carbs_total(self) -> float:
        return self.food.nutrition.carbs * self.portions

    @property
    def fat_total(self) -> float:
        return self.food.nutrition.fat * self.portions
