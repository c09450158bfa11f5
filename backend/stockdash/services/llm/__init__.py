"""
LLM Prediction Service

CONTRACT:
    Input:  ticker (last 14 stored closes)
    Output: PredictionResponse (predicted_price, confidence, rationale)

LLM USAGE:
    - Any OpenAI-compatible chat-completions endpoint (Groq by default)

CRITICAL RULES:
    - The prediction is speculative and is presented as such
    - Replies that are not valid JSON are kept, never fatal
"""

from stockdash.services.llm.client import (
    BaseLLMClient,
    LLMConfig,
    LLMResponse,
    OpenAICompatibleClient,
    build_llm_client,
)
from stockdash.services.llm.prediction import PredictionService, parse_prediction

__all__ = [
    "BaseLLMClient",
    "LLMConfig",
    "LLMResponse",
    "OpenAICompatibleClient",
    "build_llm_client",
    "PredictionService",
    "parse_prediction",
]
