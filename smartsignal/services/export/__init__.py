"""
Strategy Script Export

Renders TradingView Pine Script v5 strategies from preset + config.
"""

from smartsignal.services.export.pine import render_strategy_script

__all__ = [
    "render_strategy_script",
]
