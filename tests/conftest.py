"""Shared test fixtures."""

import asyncio
from dataclasses import dataclass, field
from datetime import datetime

import pytest

from nutritrack.adapters.memory_storage import InMemoryStorage
from nutritrack.config import Settings
from nutritrack.containers import AppContainer
from nutritrack.domain.food import DetectedFood, NutritionInfo
from nutritrack.domain.meals import LoggedMeal
from nutritrack.services.estimation import EstimationService, GenerativeClient
from nutritrack.services.meals import MealStore
from nutritrack.services.tips import TipService


@dataclass
class FakeGenerativeClient(GenerativeClient):
    """Fake generative client returning fixed payloads."""

    payload: object = field(
        default_factory=lambda: {
            "error": None,
            "name": "Empanada",
            "portionSize": "1 unit",
            "nutrition": {"calories": 250, "protein": 8, "carbs": 25, "fat": 12},
        }
    )
    text: str = "A walk after asado aids digestion."
    error: Exception | None = None
    delay_seconds: float = 0.0
    prompts: list[str] = field(default_factory=list)
    image_urls: list[str] = field(default_factory=list)

    async def extract(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        image_data_url: str,
        schema: dict[str, object],
        prompt: str,
    ) -> dict[str, object]:
        self.prompts.append(prompt)
        self.image_urls.append(image_data_url)
        await self._maybe_fail()
        return self.payload

    async def generate_text(
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        prompt: str,
    ) -> str:
        self.prompts.append(prompt)
        await self._maybe_fail()
        return self.text

    async def _maybe_fail(self) -> None:
        if self.delay_seconds:
            await asyncio.sleep(self.delay_seconds)
        if self.error is not None:
            raise self.error


@dataclass
class FailingStorage:
    """Storage whose reads or writes raise."""

    fail_reads: bool = True
    fail_writes: bool = False

    def load(self, key: str) -> str | None:
        if self.fail_reads:
            raise OSError("disk unavailable")
        return None

    def save(self, key: str, value: str) -> None:
        if self.fail_writes:
            raise OSError("disk full")


def make_food(
    name: str = "Empanada",
    calories: float = 250,
    protein: float = 8,
    carbs: float = 25,
    fat: float = 12,
    portion_size: str = "1 unit",
) -> DetectedFood:
    return DetectedFood(
        name=name,
        portion_size=portion_size,
        nutrition=NutritionInfo(
            calories=calories, protein=protein, carbs=carbs, fat=fat
        ),
    )


def make_meal(
    meal_id: str,
    date: datetime,
    portions: int = 1,
    food: DetectedFood | None = None,
) -> LoggedMeal:
    return LoggedMeal(
        id=meal_id, food=food or make_food(), portions=portions, date=date
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(
        openai_api_key="openai-key",
        storage_backend="memory",
        daily_calorie_goal=2000,
        environment="test",
    )


@pytest.fixture
def generative_client() -> FakeGenerativeClient:
    return FakeGenerativeClient()


@pytest.fixture
def storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture
def container(
    settings: Settings,
    generative_client: FakeGenerativeClient,
    storage: InMemoryStorage,
) -> AppContainer:
    estimation_service = EstimationService(
        client=generative_client,
        model=settings.openai_model,
        timeout_seconds=1.0,
    )
    tip_service = TipService(
        client=generative_client,
        model=settings.openai_model,
        timeout_seconds=1.0,
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        timezone=None,
        meal_store=MealStore(storage),
        estimation_service=estimation_service,
        tip_service=tip_service,
        close_resources=close_resources,
    )
