"""
Historical signal statistics used as read-only context for scoring and forecasting.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

TREND_STRENGTH_SCALE = 1000.0


@dataclass(frozen=True)
class SignalStatistics:
    """Summary of the historical price vector."""
    mean: float
    std_dev: float
    volatility: float  # coefficient of variation
    slope: float
    trend_strength: float
    data_length: int


def running_sum(values: Sequence[float]) -> float:
    """
    Sum added strictly left to right.
    numpy's `sum` and `mean` sum pairwise, which rounds differently from a
    sequential fold; every reported statistic goes through this instead.
    """
    values = np.asarray(values, dtype=float)
    if len(values) == 0:
        return 0.0
    return float(np.add.accumulate(values)[-1])


def sequential_mean(values: Sequence[float]) -> float:
    """Mean from `running_sum`, 0 for an empty vector."""
    if len(values) == 0:
        return 0.0
    return running_sum(values) / len(values)


def population_std(values: Sequence[float], mean: Optional[float] = None) -> float:
    """Population standard deviation, 0 for an empty vector."""
    if len(values) == 0:
        return 0.0
    values = np.asarray(values, dtype=float)
    if mean is None:
        mean = sequential_mean(values)
    variance = running_sum((values - mean) ** 2) / len(values)
    return float(np.sqrt(variance))


def coefficient_of_variation(values: Sequence[float]) -> float:
    """Standard deviation over mean, defined as 0 when the mean is 0."""
    if len(values) == 0:
        return 0.0
    mean = sequential_mean(values)
    if mean == 0:
        return 0.0
    return population_std(values, mean) / mean


def linear_trend_slope(prices: Sequence[float]) -> float:
    """
    Ordinary least-squares slope of price against integer index.

    Uses the closed-form sums over x = 0..n-1; a zero denominator (n <= 1)
    is replaced by 1 so a single point yields a slope of 0.
    """
    y = np.asarray(prices, dtype=float)
    n = len(y)
    x = np.arange(n, dtype=float)

    x_sum = n * (n - 1) / 2
    y_sum = running_sum(y)
    xy_sum = running_sum(x * y)
    x_squared_sum = n * (n - 1) * (2 * n - 1) / 6

    denominator = n * x_squared_sum - x_sum * x_sum
    if denominator == 0:
        denominator = 1
    return (n * xy_sum - x_sum * y_sum) / denominator


def compute_signal_statistics(prices: Sequence[float]) -> SignalStatistics:
    """
    Compute the statistics of a historical price vector.

    Args:
        prices: Per-kWh market clearing prices in chronological order

    Returns:
        SignalStatistics for the full vector
    """
    values = np.asarray(prices, dtype=float)
    n = len(values)
    mean = sequential_mean(values)
    std_dev = population_std(values, mean)
    volatility = 0.0 if mean == 0 else std_dev / mean
    slope = linear_trend_slope(values)

    stats = SignalStatistics(
        mean=mean,
        std_dev=std_dev,
        volatility=volatility,
        slope=slope,
        trend_strength=abs(slope) * TREND_STRENGTH_SCALE,
        data_length=n,
    )
    logger.info(
        f"Signal statistics: n={n}, mean={mean:.4f}, volatility={volatility:.4f}, slope={slope:.6g}"
    )
    return stats
