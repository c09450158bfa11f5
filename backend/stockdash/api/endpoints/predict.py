"""
Prediction API Endpoints

AI next-day close price prediction.
"""

from fastapi import APIRouter, Depends

from stockdash.api.deps import get_prediction_service
from stockdash.schemas.prediction import PredictionResponse
from stockdash.services.llm import PredictionService

router = APIRouter()


@router.get("/predict/{ticker}", response_model=PredictionResponse)
async def predict(
    ticker: str,
    service: PredictionService = Depends(get_prediction_service),
):
    """
    Ask the LLM for a next-day close from the last 14 stored closes.

    The result is stored and returned; it is speculative, not advice.
    """
    return await service.execute(ticker)
