"""
Price Prediction Service

Feeds the most recent closes to the LLM and stores its next-day guess.
The LLM does NO math on our side; we only parse and persist its answer.
"""

import json
import logging
import re
from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from stockdash.db import database as db
from stockdash.schemas.prediction import NO_RATIONALE, PredictionResponse, PredictionResult
from stockdash.services.base import BaseService, NotFoundError
from stockdash.services.llm.client import BaseLLMClient
from stockdash.services.llm.prompts import PREDICTION_SYSTEM_PROMPT, build_prediction_prompt

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"```json|```")


def _as_price(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _as_confidence(value: Any):
    if value is None or isinstance(value, (int, float, str)):
        return value
    return str(value)


def parse_prediction(content: str) -> PredictionResult:
    """
    Parse the model reply into a PredictionResult.

    Code fences are stripped. A reply that is not a JSON object is kept as
    {"raw": content}, which yields no price and the default rationale.
    """
    cleaned = _FENCE_RE.sub("", content or "").strip()

    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError:
        logger.warning(f"AI did not return valid JSON: {cleaned!r}")
        parsed = {"raw": cleaned}

    if not isinstance(parsed, dict):
        logger.warning(f"AI returned JSON that is not an object: {cleaned!r}")
        parsed = {"raw": cleaned}

    rationale = parsed.get("rationale")
    return PredictionResult(
        predicted_price=_as_price(parsed.get("predicted_price")),
        confidence=_as_confidence(parsed.get("confidence")),
        rationale=str(rationale) if rationale else NO_RATIONALE,
    )


class PredictionService(BaseService[str, PredictionResponse]):
    """Next-day close prediction for one ticker."""

    def __init__(self, session: AsyncSession, llm: BaseLLMClient, history_days: int = 14):
        self.session = session
        self.llm = llm
        self.history_days = history_days

    @property
    def name(self) -> str:
        return "PredictionService"

    async def execute(self, input_data: str) -> PredictionResponse:
        ticker = input_data.strip().upper()

        rows = await db.get_recent_closes(self.session, ticker, self.history_days)
        if not rows:
            raise NotFoundError(self.name, "No historical data found for ticker", {"ticker": ticker})

        # Stored newest first; the prompt reads oldest first
        prompt = build_prediction_prompt(ticker, reversed(rows))
        response = await self.llm.generate(
            system_prompt=PREDICTION_SYSTEM_PROMPT,
            user_prompt=prompt,
        )

        result = parse_prediction(response.content)
        await db.add_prediction(
            self.session,
            ticker=ticker,
            predicted_price=result.predicted_price,
            confidence=str(result.confidence) if result.confidence is not None else None,
            rationale=result.rationale,
        )
        await self.session.commit()
        logger.info(f"Stored prediction for {ticker}: {result.predicted_price}")

        return PredictionResponse(prediction=result)
