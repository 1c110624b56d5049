"""Meal store backed by a key-value storage port."""

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Protocol

from pydantic import TypeAdapter, ValidationError

from nutritrack.domain.errors import PersistenceReadFailure
from nutritrack.domain.food import DetectedFood
from nutritrack.domain.meals import LoggedMeal

logger = logging.getLogger(__name__)

MEALS_KEY = "loggedMeals"

_MEAL_LIST = TypeAdapter(list[LoggedMeal])


class KeyValueStorage(Protocol):
    """Persistence interface for string values stored under a key."""

    def load(self, key: str) -> str | None:
        """Return the stored value, or None when the key is absent."""

    def save(self, key: str, value: str) -> None:
        """Store a value under a key, replacing any previous value."""


@dataclass
class MealStore:
    """Ordered meal history, newest first, written through to storage."""

    storage: KeyValueStorage
    _meals: list[LoggedMeal] = field(default_factory=list, init=False)

    @property
    def meals(self) -> tuple[LoggedMeal, ...]:
        """Current meals in display order."""
        return tuple(self._meals)

    def load(self) -> list[LoggedMeal]:
        """Rehydrate the in-memory list from storage.

        Missing or unreadable data yields an empty history instead of an error.
        """
        try:
            self._meals = _decode_meals(self._read())
        except PersistenceReadFailure as exc:
            logger.warning("Starting with an empty meal history: %s", exc)
            self._meals = []
        return list(self._meals)

    def get(self, meal_id: str) -> LoggedMeal | None:
        """Return a meal by id."""
        for meal in self._meals:
            if meal.id == meal_id:
                return meal
        return None

    def append(self, meal: LoggedMeal) -> None:
        """Prepend a meal and persist the full history."""
        if self.get(meal.id) is not None:
            raise ValueError(f"Meal {meal.id} is already logged")
        self._persist([meal, *self._meals])

    def log_meal(
        self, food: DetectedFood, portions: int, now: datetime | None = None
    ) -> LoggedMeal:
        """Create a meal for a detected food and append it."""
        if portions < 1:
            raise ValueError("portions must be at least 1")
        meal = LoggedMeal.create(food, portions, now=now)
        self.append(meal)
        return meal

    def remove(self, meal_id: str) -> bool:
        """Remove a meal by id; return whether anything was removed."""
        remaining = [meal for meal in self._meals if meal.id != meal_id]
        removed = len(remaining) != len(self._meals)
        self._persist(remaining)
        return removed

    def _read(self) -> str | None:
        try:
            return self.storage.load(MEALS_KEY)
        except Exception as exc:
            raise PersistenceReadFailure("Meal storage could not be read") from exc

    def _persist(self, meals: list[LoggedMeal]) -> None:
        self.storage.save(MEALS_KEY, _encode_meals(meals))
        self._meals = meals


def _encode_meals(meals: list[LoggedMeal]) -> str:
    return _MEAL_LIST.dump_json(meals, by_alias=True).decode("utf-8")


def _decode_meals(raw: str | None) -> list[LoggedMeal]:
    if raw is None or not raw.strip():
        return []
    try:
        payload = json.loads(raw)
    except (ValueError, RecursionError) as exc:
        raise PersistenceReadFailure("Stored meals are not valid JSON") from exc
    if not isinstance(payload, list):
        raise PersistenceReadFailure("Stored meals are not a list")
    try:
        meals = _MEAL_LIST.validate_python(payload)
    except ValidationError as exc:
        raise PersistenceReadFailure("Stored meals failed validation") from exc
    return _drop_repeated_ids(meals)


def _drop_repeated_ids(meals: list[LoggedMeal]) -> list[LoggedMeal]:
    """Keep the first meal seen for each id."""
    seen: set[str] = set()
    unique: list[LoggedMeal] = []
    for meal in meals:
        if meal.id in seen:
            logger.warning("Dropping stored meal with repeated id %s", meal.id)
            continue
        seen.add(meal.id)
        unique.append(meal)
    return unique
