"""
Pine Script Templates

TradingView Pine Script v5 renditions of the two presets, parameterised
with the active StrategyConfig so the chart strategy matches the engine.

The scripts approximate the engine with Pine built-ins (ta.rsi uses
Wilder smoothing); they are a charting aid, not a bit-exact port.
"""

from typing import Optional

from smartsignal.schemas.signals import StrategyConfig, StrategyPreset


# =============================================================================
# BASIC PRESET
# =============================================================================

BASIC_SCRIPT_TEMPLATE = """//@version=5
strategy("SmartSignal Basic Confluence", overlay=true, initial_capital=10000, default_qty_type=strategy.percent_of_equity, default_qty_value={risk_percentage})

// Inputs
sma_fast_length = input.int(20, title="SMA Fast Length")
sma_slow_length = input.int(50, title="SMA Slow Length")
ema_fast_length = input.int(12, title="EMA Fast Length")
ema_slow_length = input.int(26, title="EMA Slow Length")
rsi_length = input.int(14, title="RSI Length")
bb_length = input.int(20, title="Bollinger Bands Length")
bb_mult = input.float(2.0, title="Bollinger Bands Multiplier")
stop_loss_pips = input.float({stop_loss_pips}, title="Stop Loss (Pips)")
take_profit_ratio = input.float({take_profit_ratio}, title="Take Profit Ratio")
min_confidence = input.float({min_confidence}, title="Minimum Confidence %")

// Indicators
sma_fast = ta.sma(close, sma_fast_length)
sma_slow = ta.sma(close, sma_slow_length)
ema_fast = ta.ema(close, ema_fast_length)
ema_slow = ta.ema(close, ema_slow_length)
rsi = ta.rsi(close, rsi_length)
[bb_middle, bb_upper, bb_lower] = ta.bb(close, bb_length, bb_mult)
[macd_line, signal_line, macd_hist] = ta.macd(close, 12, 26, 9)

// Confluence tally
bull = 0
bear = 0
reasons = 0

if sma_fast > sma_slow and close > sma_fast
    bull += 2
    reasons += 1
else if sma_fast < sma_slow and close < sma_fast
    bear += 2
    reasons += 1

if ema_fast > ema_slow
    bull += 1
    reasons += 1
else if ema_fast < ema_slow
    bear += 1
    reasons += 1

if rsi < 30
    bull += 2
    reasons += 1
else if rsi > 70
    bear += 2
    reasons += 1
else if rsi < 45
    bull += 1
    reasons += 1
else if rsi > 55
    bear += 1
    reasons += 1

if macd_line > signal_line and macd_hist > 0
    bull += 1
    reasons += 1
else if macd_line < signal_line and macd_hist < 0
    bear += 1
    reasons += 1

if bb_upper > bb_lower
    reasons += 1
    if close <= bb_lower
        bull += 2
    else if close >= bb_upper
        bear += 2
    else if close > bb_middle
        bull += 1
    else
        bear += 1

total = bull + bear
confidence = total > 0 ? math.min(math.max(bull, bear) / total * 100 + math.min(reasons * 5, 20), 100) : 0

long_condition = confidence >= min_confidence and bull > bear
short_condition = confidence >= min_confidence and bear > bull

plotshape(long_condition, title="Buy Signal", location=location.belowbar, color=color.green, style=shape.labelup, text="BUY")
plotshape(short_condition, title="Sell Signal", location=location.abovebar, color=color.red, style=shape.labeldown, text="SELL")

stop_distance = stop_loss_pips * {pip}

if long_condition
    strategy.entry("Long", strategy.long)
    strategy.exit("Long Exit", "Long", stop=close - stop_distance, limit=close + stop_distance * take_profit_ratio)

if short_condition
    strategy.entry("Short", strategy.short)
    strategy.exit("Short Exit", "Short", stop=close + stop_distance, limit=close - stop_distance * take_profit_ratio)

plot(sma_fast, color=color.blue, title="SMA 20")
plot(sma_slow, color=color.red, title="SMA 50")
plot(ema_fast, color=color.green, title="EMA 12")
plot(ema_slow, color=color.orange, title="EMA 26")
"""


# =============================================================================
# ENHANCED PRESET
# =============================================================================

ENHANCED_SCRIPT_TEMPLATE = """//@version=5
strategy("SmartSignal Smart Money Confluence", overlay=true, initial_capital=10000, default_qty_type=strategy.percent_of_equity, default_qty_value={risk_percentage}, commission_type=strategy.commission.percent, commission_value=0.1)

// Thresholds
min_confidence = input.float({min_confidence}, title="Minimum Confidence %")
min_confluence = input.float({min_confluence}, title="Minimum Confluence Score")
min_adx = input.float({min_adx}, title="Minimum ADX")
max_spread = input.float({max_spread}, title="Maximum Spread (Pips)")
atr_sl_mult = input.float({atr_multiplier_sl}, title="ATR Stop Loss Multiplier")
atr_tp_mult = input.float({atr_multiplier_tp}, title="ATR Take Profit Multiplier")
use_trailing = input.bool({use_trailing_stop}, title="Use Trailing Stop")

// Structure
fvg_min_size = input.float({fvg_min_size}, title="FVG Minimum Size")
ob_min_volume = input.float({order_block_min_volume}, title="Order Block Volume Multiplier")
liquidity_threshold = input.float({liquidity_threshold}, title="Liquidity Strength Threshold")

// Sessions (UTC): Tokyo 00-09, London 08-17, New York 13-22
utc_hour = hour(time, "UTC")
session_active = utc_hour <= 9 or (utc_hour >= 8 and utc_hour <= 17) or (utc_hour >= 13 and utc_hour <= 22)

// Indicators
ema_fast = ta.ema(close, 12)
ema_slow = ta.ema(close, 26)
rsi = ta.rsi(close, 14)
[macd_line, signal_line, macd_hist] = ta.macd(close, 12, 26, 9)
atr_value = ta.atr(14)
[di_plus, di_minus, adx_value] = ta.dmi(14, 14)

// Fair value gaps on the last closed triple
bull_fvg = low[2] > high and (low[2] - high) >= fvg_min_size
bear_fvg = high[2] < low and (low - high[2]) >= fvg_min_size
var float bull_fvg_top = na
var float bull_fvg_bottom = na
var float bear_fvg_top = na
var float bear_fvg_bottom = na
if bull_fvg
    bull_fvg_top := low[2]
    bull_fvg_bottom := high
if bear_fvg
    bear_fvg_top := low
    bear_fvg_bottom := high[2]
if not na(bull_fvg_bottom) and low <= bull_fvg_bottom and not bull_fvg
    bull_fvg_top := na
    bull_fvg_bottom := na
if not na(bear_fvg_top) and high >= bear_fvg_top and not bear_fvg
    bear_fvg_top := na
    bear_fvg_bottom := na

// Order blocks: high-volume candles with a dominant body
avg_volume = math.sum(volume[1], 5) / 5
body_fraction = high > low ? math.abs(close - open) / (high - low) : 0
is_order_block = volume > avg_volume * ob_min_volume and body_fraction >= 0.5
var float demand_top = na
var float demand_bottom = na
var float supply_top = na
var float supply_bottom = na
if is_order_block[3] and close[3] > open[3]
    demand_top := high[3]
    demand_bottom := low[3]
if is_order_block[3] and close[3] < open[3]
    supply_top := high[3]
    supply_bottom := low[3]

near(lower, upper) => not na(lower) and close >= lower * 0.998 and close <= upper * 1.002

// Confluence tally
bull = 0
bear = 0
score = 0

if rsi < 30
    bull += 4
    score += 4
else if rsi > 70
    bear += 4
    score += 4
else if rsi < 40
    bull += 2
    score += 2
else if rsi > 60
    bear += 2
    score += 2

if macd_hist[1] <= 0 and macd_hist > 0
    bull += 5
    score += 5
else if macd_hist[1] >= 0 and macd_hist < 0
    bear += 5
    score += 5
else if macd_hist > 0
    bull += 2
    score += 2
else if macd_hist < 0
    bear += 2
    score += 2

if ema_fast > ema_slow and close > ema_fast
    bull += 3
    score += 3
else if ema_fast < ema_slow and close < ema_fast
    bear += 3
    score += 3

if near(bull_fvg_bottom, bull_fvg_top)
    bull += 3
    score += 3
if near(bear_fvg_bottom, bear_fvg_top)
    bear += 3
    score += 3
if near(demand_bottom, demand_top)
    bull += 3
    score += 3
if near(supply_bottom, supply_top)
    bear += 3
    score += 3

higher_highs = (high > high[1] ? 1 : 0) + (high[1] > high[2] ? 1 : 0) + (high[2] > high[3] ? 1 : 0) + (high[3] > high[4] ? 1 : 0)
lower_lows = (low < low[1] ? 1 : 0) + (low[1] < low[2] ? 1 : 0) + (low[2] < low[3] ? 1 : 0) + (low[3] < low[4] ? 1 : 0)
if higher_highs > lower_lows
    bull += 2
    score += 2
else if lower_lows > higher_highs
    bear += 2
    score += 2

if volume > ta.sma(volume, 10) * 1.3
    score += 2

score += session_active ? 1 : -1

total = bull + bear
raw_confidence = total > 0 ? math.max(bull, bear) / total * 100 : 50
confidence = math.min(raw_confidence + math.min(score * 2, 25), 95)
confidence := score >= 5 ? math.max(confidence, 60) : confidence

qualified = confidence >= min_confidence and score >= min_confluence
long_condition = qualified and bull > bear
short_condition = qualified and bear > bull
strong = score >= 12 and math.abs(bull - bear) >= 6 and confidence >= 85

plotshape(long_condition, title="Buy Signal", location=location.belowbar, color=strong ? color.lime : color.green, style=shape.labelup, text="BUY")
plotshape(short_condition, title="Sell Signal", location=location.abovebar, color=strong ? color.maroon : color.red, style=shape.labeldown, text="SELL")

tp_mult = strong ? atr_tp_mult * 1.25 : atr_tp_mult
long_stop = not na(demand_top) and demand_top < close ? demand_bottom - atr_value * 0.3 : close - atr_value * atr_sl_mult
short_stop = not na(supply_bottom) and supply_bottom > close ? supply_top + atr_value * 0.3 : close + atr_value * atr_sl_mult
trail_points = use_trailing ? atr_value * 0.6 / syminfo.mintick : na

if long_condition
    strategy.entry("Long", strategy.long)
    strategy.exit("Long Exit", "Long", stop=long_stop, limit=close + atr_value * tp_mult, trail_points=trail_points, trail_offset=trail_points)

if short_condition
    strategy.entry("Short", strategy.short)
    strategy.exit("Short Exit", "Short", stop=short_stop, limit=close - atr_value * tp_mult, trail_points=trail_points, trail_offset=trail_points)

plot(ema_fast, color=color.green, title="EMA 12")
plot(ema_slow, color=color.orange, title="EMA 26")
plot(bull_fvg_top, color=color.new(color.green, 60), style=plot.style_linebr, title="Bullish FVG")
plot(bear_fvg_bottom, color=color.new(color.red, 60), style=plot.style_linebr, title="Bearish FVG")
"""


def _pine_bool(value: bool) -> str:
    return "true" if value else "false"


def render_strategy_script(
    preset: StrategyPreset, config: Optional[StrategyConfig] = None
) -> str:
    """Render the Pine Script v5 strategy for a preset and its thresholds."""
    if config is None:
        config = StrategyConfig.for_preset(preset)

    if preset == StrategyPreset.BASIC:
        return BASIC_SCRIPT_TEMPLATE.format(
            risk_percentage=config.risk_percentage,
            stop_loss_pips=config.stop_loss_pips,
            take_profit_ratio=config.take_profit_ratio,
            min_confidence=config.min_confidence,
            pip=0.0001,
        )

    return ENHANCED_SCRIPT_TEMPLATE.format(
        risk_percentage=config.risk_percentage,
        min_confidence=config.min_confidence,
        min_confluence=config.min_confluence,
        min_adx=config.min_adx,
        max_spread=config.max_spread,
        atr_multiplier_sl=config.atr_multiplier_sl,
        atr_multiplier_tp=config.atr_multiplier_tp,
        use_trailing_stop=_pine_bool(config.use_trailing_stop),
        fvg_min_size=config.fvg_min_size,
        order_block_min_volume=config.order_block_min_volume,
        liquidity_threshold=config.liquidity_threshold,
    )
