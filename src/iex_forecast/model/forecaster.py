"""
Forward price path generation.
Extrapolates a 15-minute-resolution price path with time-of-day shape, trend
continuation, weekend dampening and confidence bounds that widen with horizon.
"""

import logging
from datetime import date, timedelta
from typing import List, Sequence

from ..features.signal_stats import SignalStatistics, sequential_mean
from ..models.data_models import ForecastPoint
from ..utils.rng import DeterministicRNG

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

FORECAST_SEED_OFFSET = 888
BLOCK_MINUTES = 15
BLOCKS_PER_DAY = 24 * 60 // BLOCK_MINUTES

MORNING_RAMP_HOURS = range(6, 10)
EVENING_PEAK_HOURS = range(18, 22)
OVERNIGHT_HOURS = range(0, 6)
MORNING_RAMP_MULTIPLIER = 1.3
EVENING_PEAK_MULTIPLIER = 1.5
OVERNIGHT_MULTIPLIER = 0.7
WEEKEND_MULTIPLIER = 0.9

UNCERTAINTY_GROWTH_RATE = 0.07
PERTURBATION_SCALE = 0.12

Z_SCORES = {90: 1.645, 95: 1.96, 99: 2.576}
DEFAULT_Z_SCORE = 1.96


def z_score_for(confidence_level: int) -> float:
    """z-score of a two-sided confidence level; unsupported levels fall back to 95%."""
    if confidence_level not in Z_SCORES:
        logger.warning(f"Unsupported confidence level {confidence_level}, using 95%")
    return Z_SCORES.get(confidence_level, DEFAULT_Z_SCORE)


def time_of_day_multiplier(hour: int) -> float:
    """Daily price shape applied to the historical mean."""
    if hour in MORNING_RAMP_HOURS:
        return MORNING_RAMP_MULTIPLIER
    if hour in EVENING_PEAK_HOURS:
        return EVENING_PEAK_MULTIPLIER
    if hour in OVERNIGHT_HOURS:
        return OVERNIGHT_MULTIPLIER
    return 1.0


def uncertainty_growth(day_offset: int) -> float:
    return 1 + day_offset * UNCERTAINTY_GROWTH_RATE


def format_date(value: date) -> str:
    return value.strftime('%d-%m-%Y')


class ForwardForecastGenerator:
    """
    Generates the forward price path for a configured horizon.
    """

    def __init__(self, stats: SignalStatistics, seed: int, winner_rmse: float):
        """
        Initialize the generator.

        Args:
            stats: Statistics of the historical series
            seed: Dataset fingerprint
            winner_rmse: Backtest RMSE of the selected model
        """
        self.stats = stats
        self.seed = seed
        self.winner_rmse = winner_rmse

    def generate(self,
                 last_date: date,
                 forecast_days: int,
                 confidence_level: int = 95) -> List[ForecastPoint]:
        """
        Generate one ForecastPoint per 15-minute block.

        Args:
            last_date: Calendar date of the last historical observation
            forecast_days: Number of days to forecast, starting the day after ``last_date``
            confidence_level: 90, 95 or 99

        Returns:
            Chronologically ordered forecast points
        """
        rng = DeterministicRNG(self.seed + FORECAST_SEED_OFFSET)
        uniforms = rng.draw(forecast_days * BLOCKS_PER_DAY)
        z_score = z_score_for(confidence_level)
        forecasts: List[ForecastPoint] = []

        for day_offset in range(1, forecast_days + 1):
            current_date = last_date + timedelta(days=day_offset)
            is_weekend = current_date.weekday() >= 5
            date_str = format_date(current_date)
            growth = uncertainty_growth(day_offset)
            interval = self.winner_rmse * z_score * growth

            for block in range(BLOCKS_PER_DAY):
                hour, minute = divmod(block * BLOCK_MINUTES, 60)

                base_price = self.stats.mean * time_of_day_multiplier(hour)
                # continue the fitted trend at this point's regression index
                base_price += self.stats.slope * (self.stats.data_length + len(forecasts))
                if is_weekend:
                    base_price *= WEEKEND_MULTIPLIER

                perturbation = (float(uniforms[len(forecasts)]) - 0.5) * PERTURBATION_SCALE * growth
                price = max(0.0, base_price * (1 + perturbation))

                forecasts.append(ForecastPoint(
                    date=current_date,
                    date_str=date_str,
                    time_block=f"{hour:02d}:{minute:02d}",
                    price=price,
                    upper_bound=price + interval,
                    lower_bound=max(0.0, price - interval),
                ))

        logger.info(
            f"Generated {len(forecasts)} forecast points over {forecast_days} days "
            f"at {confidence_level}% confidence, mean band width "
            f"{average_interval_width(forecasts):.4f}"
        )
        return forecasts


def average_interval_width(forecasts: Sequence[ForecastPoint]) -> float:
    """Mean half-width of the confidence band, measured above the point price."""
    if not forecasts:
        return 0.0
    return sequential_mean([point.upper_bound - point.price for point in forecasts])
