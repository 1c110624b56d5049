"""Domain models for detected foods."""

from pydantic import BaseModel, ConfigDict, Field


class NutritionInfo(BaseModel):
    """Per-serving nutrition values (kcal and grams)."""

    model_config = ConfigDict(frozen=True)

    calories: float = Field(ge=0.0)
    protein: float = Field(ge=0.0)
    carbs: float = Field(ge=0.0)
    fat: float = Field(ge=0.0)


class DetectedFood(BaseModel):
    """A dish recognized from a photo, with its single-serving estimate."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = Field(min_length=1)
    portion_size: str = Field(alias="portionSize")
    nutrition: NutritionInfo
