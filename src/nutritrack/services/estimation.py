"""Nutrition estimation from meal photos using a generative model."""

import asyncio
import base64
import logging
from dataclasses import dataclass
from typing import Protocol

from pydantic import ValidationError

from nutritrack.domain.errors import AnalysisFailure, RecognitionError
from nutritrack.domain.food import DetectedFood

logger = logging.getLogger(__name__)

SUPPORTED_DISHES: tuple[str, ...] = (
    "Empanada",
    "Milanesa",
    "Asado",
    "Pizza",
    "Medialuna",
    "Choripán",
    "Locro",
)

ANALYSIS_FAILURE_MESSAGE = (
    "Failed to analyze image. The food might not be recognized "
    "or there was a network issue."
)
UNIDENTIFIED_FOOD_MESSAGE = "Could not identify the food. Please try another photo."

_NULLABLE_NUMBER = {"anyOf": [{"type": "number", "minimum": 0}, {"type": "null"}]}

FOOD_DETECTION_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "error": {
            "anyOf": [{"type": "string"}, {"type": "null"}],
            "description": "An error message if the food is not recognized.",
        },
        "name": {
            "anyOf": [{"type": "string"}, {"type": "null"}],
            "description": "The name of the detected Argentine dish.",
        },
        "portionSize": {
            "anyOf": [{"type": "string"}, {"type": "null"}],
            "description": 'A typical serving size, e.g., "1 unit" or "100g".',
        },
        "nutrition": {
            "anyOf": [
                {
                    "type": "object",
                    "properties": {
                        "calories": _NULLABLE_NUMBER,
                        "protein": _NULLABLE_NUMBER,
                        "carbs": _NULLABLE_NUMBER,
                        "fat": _NULLABLE_NUMBER,
                    },
                    "required": ["calories", "protein", "carbs", "fat"],
                    "additionalProperties": False,
                },
                {"type": "null"},
            ]
        },
    },
    "required": ["error", "name", "portionSize", "nutrition"],
    "additionalProperties": False,
}


def build_estimation_prompt(dishes: tuple[str, ...] = SUPPORTED_DISHES) -> str:
    """Return the instruction prompt restricting recognition to known dishes."""
    return (
        "You are a nutritional expert specializing in Argentine cuisine. "
        "Analyze the attached image. Your task is to identify if the primary "
        "food item is one of the following common Argentine dishes: "
        f"{', '.join(dishes)}.\n\n"
        "If it is one of these dishes, provide your best estimation for its "
        "nutritional values for a standard single serving.\n\n"
        "If the food is not one of these, or if you cannot identify it clearly, "
        "set the error field to a short explanation and leave the other "
        "fields null.\n\n"
        "Strictly adhere to the JSON schema provided."
    )


class GenerativeClient(Protocol):
    """Interface for the external generative model."""

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
        """Return structured data for an image prompt."""

    async def generate_text(
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        prompt: str,
    ) -> str:
        """Return free text for a prompt."""


@dataclass
class EstimationService:
    """Service that sends meal photos out for a nutrition estimate."""

    client: GenerativeClient
    model: str
    reasoning_effort: str | None = None
    store: bool = False
    timeout_seconds: float = 30.0

    async def estimate(self, image_bytes: bytes) -> DetectedFood:
        """Estimate per-serving nutrition for the dish in the image.

        Raises RecognitionError when the model reports an unsupported or
        unidentifiable dish, and AnalysisFailure for transport, timeout or
        parse problems.
        """
        if not image_bytes:
            raise AnalysisFailure(ANALYSIS_FAILURE_MESSAGE)
        try:
            raw = await asyncio.wait_for(
                self.client.extract(
                    model=self.model,
                    reasoning_effort=self.reasoning_effort,
                    store=self.store,
                    image_data_url=_to_data_url(image_bytes),
                    schema=FOOD_DETECTION_SCHEMA,
                    prompt=build_estimation_prompt(),
                ),
                timeout=self.timeout_seconds,
            )
        except Exception as exc:
            logger.exception("Nutrition estimation request failed")
            raise AnalysisFailure(ANALYSIS_FAILURE_MESSAGE) from exc
        return parse_detected_food(raw)


def parse_detected_food(raw: object) -> DetectedFood:
    """Validate a structured model response into a DetectedFood."""
    if not isinstance(raw, dict):
        logger.error("Unexpected estimation payload type: %s", type(raw).__name__)
        raise AnalysisFailure(ANALYSIS_FAILURE_MESSAGE)
    error = raw.get("error")
    if error:
        raise RecognitionError(str(error))
    if not raw.get("name") or not raw.get("nutrition"):
        raise RecognitionError(UNIDENTIFIED_FOOD_MESSAGE)
    payload = dict(raw)
    payload.pop("error", None)
    if payload.get("portionSize") is None:
        payload["portionSize"] = "1 serving"
    try:
        return DetectedFood.model_validate(payload)
    except ValidationError as exc:
        logger.exception("Estimation payload failed validation")
        raise AnalysisFailure(ANALYSIS_FAILURE_MESSAGE) from exc


def _to_data_url(image_bytes: bytes) -> str:
    """Convert bytes to a base64 data URL for image input."""
    mime_type = _detect_mime_type(image_bytes)
    encoded = base64.b64encode(image_bytes).decode("utf-8")
    return f"data:{mime_type};base64,{encoded}"


def _detect_mime_type(image_bytes: bytes) -> str:
    """Infer a basic image MIME type from file signatures."""
    if image_bytes.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    if image_bytes[:6] in {b"GIF87a", b"GIF89a"}:
        return "image/gif"
    return "image/jpeg"
