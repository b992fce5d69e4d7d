"""
Signal API Endpoints

Endpoints for confluence signals and strategy script export.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, Field

from smartsignal.schemas.market import Candle, Timeframe
from smartsignal.schemas.signals import AnalysisResult, StrategyConfig, StrategyPreset
from smartsignal.services.base import DataProviderError, ServiceError, ValidationError
from smartsignal.services.export import render_strategy_script
from smartsignal.services.strategy import StrategyRequest, StrategyService, get_strategy_service

logger = logging.getLogger(__name__)

router = APIRouter()


class AnalyzeRequest(BaseModel):
    """Request body for analyzing caller-supplied candles."""

    candles: list[Candle] = Field(..., description="Candles, oldest first")
    preset: Optional[StrategyPreset] = Field(
        default=None, description="Rule table (server default when omitted)"
    )
    config: Optional[StrategyConfig] = Field(
        default=None, description="Thresholds (preset defaults when omitted)"
    )


def _raise_http(e: ServiceError) -> None:
    """Map service errors onto HTTP status codes."""
    if isinstance(e, ValidationError):
        raise HTTPException(status_code=422, detail=e.to_detail())
    if isinstance(e, DataProviderError):
        raise HTTPException(status_code=502, detail=e.to_detail())
    raise HTTPException(status_code=500, detail=f"Analysis failed: {e.message}")


@router.post("/analyze", response_model=AnalysisResult)
async def analyze_candles(
    request: AnalyzeRequest,
    service: StrategyService = Depends(get_strategy_service),
):
    """
    Analyze a candle sequence.

    Runs the full pipeline:
    1. Calculate indicators and market context
    2. Detect FVGs, order blocks and liquidity zones
    3. Score confluence with the selected preset
    4. Classify the signal and place exit levels
    """
    try:
        return await service.analyze_candles(request.candles, request.preset, request.config)
    except ServiceError as e:
        logger.warning(f"Analyze request rejected: {e}")
        _raise_http(e)


@router.get("/presets/{preset}/config", response_model=StrategyConfig)
async def get_preset_config(preset: StrategyPreset):
    """Get the default thresholds of a preset."""
    return StrategyConfig.for_preset(preset)


@router.get("/presets/{preset}/script", response_class=PlainTextResponse)
async def get_preset_script(preset: StrategyPreset):
    """Export a preset as a TradingView Pine Script v5 strategy."""
    return render_strategy_script(preset)


@router.get("/{symbol}", response_model=AnalysisResult)
async def get_signal(
    symbol: str,
    timeframe: Timeframe = Query(default=Timeframe.M15),
    lookback: Optional[int] = Query(default=None, ge=1, le=1000),
    preset: Optional[StrategyPreset] = Query(default=None),
    service: StrategyService = Depends(get_strategy_service),
):
    """Get the current signal for a symbol from the configured data provider."""
    try:
        return await service.execute(
            StrategyRequest(symbol=symbol, timeframe=timeframe, lookback=lookback, preset=preset)
        )
    except ServiceError as e:
        logger.warning(f"Signal request for {symbol} failed: {e}")
        _raise_http(e)
