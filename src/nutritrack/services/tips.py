"""Daily nutrition tip service."""

import asyncio
import logging
from dataclasses import dataclass

from nutritrack.domain.errors import TipFailure
from nutritrack.services.estimation import GenerativeClient

logger = logging.getLogger(__name__)

TIP_PROMPT = (
    "Generate a single, concise, and encouraging nutritional tip for the day, "
    "relevant to Argentine culture. Keep it under 25 words. For example: "
    "'Enjoy a glass of Malbec, but in moderation!' or "
    "'A walk after asado aids digestion.'"
)
FALLBACK_TIP = "Stay hydrated by drinking plenty of water throughout the day!"


@dataclass
class TipService:
    """Service that fetches a short tip of the day."""

    client: GenerativeClient
    model: str
    reasoning_effort: str | None = None
    store: bool = False
    timeout_seconds: float = 30.0
    fallback: str = FALLBACK_TIP

    async def daily_tip(self) -> str:
        """Return a tip, or the fallback when the model can't provide one."""
        try:
            return await self._fetch_tip()
        except Exception as exc:
            logger.warning("Falling back to static tip: %s", exc)
            return self.fallback

    async def _fetch_tip(self) -> str:
        text = await asyncio.wait_for(
            self.client.generate_text(
                model=self.model,
                reasoning_effort=self.reasoning_effort,
                store=self.store,
                prompt=TIP_PROMPT,
            ),
            timeout=self.timeout_seconds,
        )
        tip = (text or "").strip()
        if not tip:
            raise TipFailure("Tip response was empty")
        return tip
