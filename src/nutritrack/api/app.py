"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI, File, HTTPException, Request, UploadFile, status
from fastapi.responses import Response

from nutritrack.api.models import (
    HistoryDay,
    HistoryResponse,
    LogMealRequest,
    SummaryResponse,
    TipResponse,
)
from nutritrack.app_logging import configure_logging
from nutritrack.containers import AppContainer
from nutritrack.domain.errors import AnalysisFailure, NutriTrackError, RecognitionError
from nutritrack.domain.food import DetectedFood
from nutritrack.domain.meals import LoggedMeal
from nutritrack.services.export import CSV_FILENAME, to_csv
from nutritrack.services.stats import group_by_day, summarize, weekly_total


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        meals = app.state.container.meal_store.load()
        logger.info("Loaded %d logged meals", len(meals))
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/analysis")
    async def analyze_photo(
        request: Request, file: UploadFile = File(...)
    ) -> DetectedFood:
        """Estimate nutrition for an uploaded meal photo."""
        state_container: AppContainer = request.app.state.container
        image_bytes = await file.read()
        if not image_bytes:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Could not read the image file.",
            )
        try:
            return await state_container.estimation_service.estimate(image_bytes)
        except RecognitionError as exc:
            raise HTTPException(
                status_code=422,
                detail=exc.message,
            ) from exc
        except AnalysisFailure as exc:
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail=_format_analysis_error(state_container, exc),
            ) from exc

    @app.get("/tip")
    async def daily_tip(request: Request) -> TipResponse:
        """Return the tip of the day."""
        state_container: AppContainer = request.app.state.container
        return TipResponse(tip=await state_container.tip_service.daily_tip())

    @app.get("/meals")
    async def list_meals(request: Request) -> list[LoggedMeal]:
        """Return logged meals, newest first."""
        state_container: AppContainer = request.app.state.container
        return list(state_container.meal_store.meals)

    @app.post("/meals", status_code=status.HTTP_201_CREATED)
    async def log_meal(payload: LogMealRequest, request: Request) -> LoggedMeal:
        """Log an analyzed food with the chosen number of portions."""
        state_container: AppContainer = request.app.state.container
        meal = state_container.meal_store.log_meal(payload.food, payload.portions)
        logger.info("Logged %s x%d", meal.food.name, meal.portions)
        return meal

    @app.delete("/meals/{meal_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def delete_meal(meal_id: str, request: Request) -> Response:
        """Delete a meal; unknown ids are ignored."""
        state_container: AppContainer = request.app.state.container
        state_container.meal_store.remove(meal_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    @app.get("/meals/export.csv")
    async def export_meals(request: Request) -> Response:
        """Download the full meal history as CSV."""
        state_container: AppContainer = request.app.state.container
        content = to_csv(state_container.meal_store.meals, state_container.timezone)
        return Response(
            content=content,
            media_type="text/csv; charset=utf-8",
            headers={"Content-Disposition": f"attachment; filename={CSV_FILENAME}"},
        )

    @app.get("/summary")
    async def summary(request: Request) -> SummaryResponse:
        """Return today's calories against the goal and the weekly total."""
        state_container: AppContainer = request.app.state.container
        result = summarize(
            state_container.meal_store.meals,
            _now(state_container),
            state_container.settings.daily_calorie_goal,
            state_container.timezone,
        )
        return SummaryResponse.from_summary(result)

    @app.get("/history")
    async def history(request: Request) -> HistoryResponse:
        """Return meals grouped by day with the weekly total."""
        state_container: AppContainer = request.app.state.container
        meals = state_container.meal_store.meals
        tz = state_container.timezone
        return HistoryResponse(
            days=[HistoryDay.from_group(group) for group in group_by_day(meals, tz)],
            weekly_calories=weekly_total(meals, _now(state_container), tz),
        )

    return app


def _now(state_container: AppContainer) -> datetime:
    return datetime.now().astimezone(state_container.timezone)


def _format_analysis_error(state_container: AppContainer, exc: NutriTrackError) -> str:
    """Return a user-facing analysis error with local debug info."""
    cause = exc.__cause__
    if state_container.settings.environment == "local" and cause is not None:
        detail = f"{type(cause).__name__}: {cause}".strip()
        if detail:
            return f"{exc.message} (debug: {detail})"
    return exc.message
