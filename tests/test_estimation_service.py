"""Tests for the nutrition estimation service."""

import asyncio

import pytest

from nutritrack.domain.errors import AnalysisFailure, RecognitionError
from nutritrack.services.estimation import (
    ANALYSIS_FAILURE_MESSAGE,
    SUPPORTED_DISHES,
    UNIDENTIFIED_FOOD_MESSAGE,
    EstimationService,
    _to_data_url,
    build_estimation_prompt,
)
from tests.conftest import FakeGenerativeClient


def _service(client: FakeGenerativeClient) -> EstimationService:
    return EstimationService(client=client, model="gpt-5.2", timeout_seconds=1.0)


def test_estimate_returns_detected_food() -> None:
    client = FakeGenerativeClient(
        payload={
            "name": "Empanada",
            "portionSize": "1 unit",
            "nutrition": {"calories": 250, "protein": 8, "carbs": 25, "fat": 12},
        }
    )

    food = asyncio.run(_service(client).estimate(b"\xff\xd8\xffjpeg"))

    assert food.name == "Empanada"
    assert food.portion_size == "1 unit"
    assert food.nutrition.calories == 250
    assert food.nutrition.protein == 8
    assert food.nutrition.carbs == 25
    assert food.nutrition.fat == 12
    assert client.image_urls[0].startswith("data:image/jpeg;base64,")


def test_estimate_prompt_names_supported_dishes() -> None:
    client = FakeGenerativeClient()

    asyncio.run(_service(client).estimate(b"image-bytes"))

    for dish in SUPPORTED_DISHES:
        assert dish in client.prompts[0]
    assert client.prompts[0] == build_estimation_prompt()


def test_estimate_raises_recognition_error_with_model_message() -> None:
    client = FakeGenerativeClient(payload={"error": "not recognized"})

    with pytest.raises(RecognitionError) as exc_info:
        asyncio.run(_service(client).estimate(b"image-bytes"))

    assert exc_info.value.message == "not recognized"
    assert str(exc_info.value) == "not recognized"


@pytest.mark.parametrize(
    "payload",
    [
        {"error": None, "name": None, "portionSize": None, "nutrition": None},
        {"name": "Milanesa", "portionSize": "1 unit"},
        {"nutrition": {"calories": 1, "protein": 1, "carbs": 1, "fat": 1}},
        {"error": "", "name": "", "nutrition": {}},
    ],
)
def test_estimate_missing_fields_is_recognition_error(payload) -> None:
    client = FakeGenerativeClient(payload=payload)

    with pytest.raises(RecognitionError) as exc_info:
        asyncio.run(_service(client).estimate(b"image-bytes"))

    assert exc_info.value.message == UNIDENTIFIED_FOOD_MESSAGE


def test_estimate_wraps_transport_errors() -> None:
    client = FakeGenerativeClient(error=ConnectionError("network down"))

    with pytest.raises(AnalysisFailure) as exc_info:
        asyncio.run(_service(client).estimate(b"image-bytes"))

    assert exc_info.value.message == ANALYSIS_FAILURE_MESSAGE
    assert isinstance(exc_info.value.__cause__, ConnectionError)


def test_estimate_wraps_malformed_json() -> None:
    client = FakeGenerativeClient(error=ValueError("Expecting value"))

    with pytest.raises(AnalysisFailure):
        asyncio.run(_service(client).estimate(b"image-bytes"))


def test_estimate_times_out() -> None:
    client = FakeGenerativeClient(delay_seconds=0.5)
    service = EstimationService(client=client, model="gpt-5.2", timeout_seconds=0.01)

    with pytest.raises(AnalysisFailure):
        asyncio.run(service.estimate(b"image-bytes"))


def test_estimate_invalid_nutrition_is_analysis_failure() -> None:
    client = FakeGenerativeClient(
        payload={
            "name": "Asado",
            "portionSize": "200g",
            "nutrition": {"calories": "lots", "protein": 1, "carbs": 1, "fat": 1},
        }
    )

    with pytest.raises(AnalysisFailure):
        asyncio.run(_service(client).estimate(b"image-bytes"))


def test_estimate_non_object_payload_is_analysis_failure() -> None:
    client = FakeGenerativeClient(payload=["Empanada"])

    with pytest.raises(AnalysisFailure):
        asyncio.run(_service(client).estimate(b"image-bytes"))


def test_estimate_rejects_empty_image_without_calling_model() -> None:
    client = FakeGenerativeClient()

    with pytest.raises(AnalysisFailure):
        asyncio.run(_service(client).estimate(b""))

    assert client.prompts == []


def test_to_data_url_uses_png_header() -> None:
    data = b"\x89PNG\r\n\x1a\n" + b"rest"
    url = _to_data_url(data)

    assert url.startswith("data:image/png;base64,")


def test_to_data_url_detects_webp() -> None:
    data = b"RIFF\x00\x00\x00\x00WEBPVP8 "
    url = _to_data_url(data)

    assert url.startswith("data:image/webp;base64,")


def test_to_data_url_defaults_to_jpeg() -> None:
    data = b"unknown"
    url = _to_data_url(data)

    assert url.startswith("data:image/jpeg;base64,")


def test_to_data_url_detects_gif() -> None:
    url = _to_data_url(b"GIF89a" + b"rest")

    assert url.startswith("data:image/gif;base64,")
