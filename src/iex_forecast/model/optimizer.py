"""
Procurement strategy derived from a forward price path.
"""

import logging
from typing import Sequence

import numpy as np

from ..features.signal_stats import coefficient_of_variation, sequential_mean
from ..models.data_models import ForecastPoint, PriceWindow, Strategy
from ..utils.exceptions import DataValidationError

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

WINDOW_COUNT = 8
LOAD_SHIFT_PERCENT = 30  # share of demand assumed movable to the cheapest slot
HIGH_RISK_CV = 0.25
MODERATE_RISK_CV = 0.12


def classify_risk(cv: float) -> str:
    """Volatility risk class of a forecast coefficient of variation."""
    if cv > HIGH_RISK_CV:
        return 'High'
    if cv > MODERATE_RISK_CV:
        return 'Moderate'
    return 'Low'


def build_strategy(forecasts: Sequence[ForecastPoint]) -> Strategy:
    """
    Derive buy windows, peak-avoidance alerts and savings from a forecast.

    Args:
        forecasts: Forecast points in any order

    Returns:
        Strategy with the cheapest slots ascending and the dearest descending
    """
    if len(forecasts) == 0:
        raise DataValidationError("Cannot build a strategy from an empty forecast")

    ranked = sorted(forecasts, key=lambda point: point.price)

    buy_windows = tuple(
        PriceWindow(time=point.label, price=point.price) for point in ranked[:WINDOW_COUNT]
    )
    peak_alerts = tuple(
        PriceWindow(time=point.label, price=point.price)
        for point in reversed(ranked[-WINDOW_COUNT:])
    )

    prices = np.array([point.price for point in forecasts], dtype=float)
    average_price = sequential_mean(prices)
    min_price = ranked[0].price

    if average_price == 0:
        savings = 0.0
    else:
        savings = max(0.0, (average_price - min_price) / average_price * LOAD_SHIFT_PERCENT)

    risk = classify_risk(coefficient_of_variation(prices))

    logger.info(
        f"Strategy: average {average_price:.4f}, savings {savings:.2f}%, risk {risk}"
    )

    return Strategy(
        optimal_buy_windows=buy_windows,
        peak_shaving_alerts=peak_alerts,
        average_forecasted_price=average_price,
        projected_savings_percent=savings,
        volatility_risk=risk,
    )
