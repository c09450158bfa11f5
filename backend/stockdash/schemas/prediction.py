"""
CONTRACT 3: Price Prediction

Input: ticker (recent closes are read from the store)
Output: PredictionResponse

The LLM only guesses; nothing here is financial advice.
"""

from typing import Optional, Union

from pydantic import BaseModel


NO_RATIONALE = "No rationale provided"


class PredictionResult(BaseModel):
    predicted_price: Optional[float] = None
    confidence: Optional[Union[float, str]] = None
    rationale: str = NO_RATIONALE


class PredictionResponse(BaseModel):
    prediction: PredictionResult
