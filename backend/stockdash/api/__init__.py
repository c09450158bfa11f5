"""
API Router

All API endpoints for the frontend, mounted under /api.
"""

from fastapi import APIRouter

from stockdash.api.endpoints import debug, indicators, market, predict


def build_router(include_debug: bool = False) -> APIRouter:
    """Router with every endpoint; debug routes only outside production."""
    router = APIRouter()

    # Include all endpoint routers
    router.include_router(market.router, tags=["Market Data"])
    router.include_router(indicators.router, prefix="/indicators", tags=["Indicators"])
    router.include_router(predict.router, tags=["Prediction"])
    if include_debug:
        router.include_router(debug.router, prefix="/debug", tags=["Debug"])

    return router
