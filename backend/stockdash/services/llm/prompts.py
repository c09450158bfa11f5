"""
LLM Prompt Templates

The model is asked for a bare JSON object; parsing tolerates code fences.
"""

from typing import Iterable


PREDICTION_SYSTEM_PROMPT = "Output only JSON."

PREDICTION_USER_TEMPLATE = (
    "Historical prices for {ticker}:\n"
    "{series}\n"
    "Predict next-day close price in JSON with keys predicted_price, confidence, rationale."
)


def format_price_series(rows: Iterable) -> str:
    """One `date:close` line per bar, in the order given."""
    return "\n".join(f"{row.date}:{row.close}" for row in rows)


def build_prediction_prompt(ticker: str, rows: Iterable) -> str:
    """User prompt for a next-day close prediction from chronological bars."""
    return PREDICTION_USER_TEMPLATE.format(ticker=ticker, series=format_price_series(rows))
