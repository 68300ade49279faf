"""
Shared sample data builders for the test suite.
"""

import math
import os
import sys
from datetime import datetime, timedelta
from typing import List, Sequence

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from iex_forecast.models.data_models import Observation


def make_observations(prices: Sequence[float],
                      start: datetime = datetime(2024, 4, 1),
                      step_minutes: int = 15) -> List[Observation]:
    """Build observations at a fixed step from a list of per-kWh prices."""
    observations = []
    for i, price in enumerate(prices):
        ts = start + timedelta(minutes=step_minutes * i)
        end = ts + timedelta(minutes=step_minutes)
        observations.append(Observation(
            date_label=ts.strftime('%d-%m-%Y'),
            timestamp=ts,
            time_block=f"{ts:%H:%M} - {end:%H:%M}",
            hour=ts.hour,
            minute=ts.minute,
            day_of_week=ts.weekday(),
            is_weekend=ts.weekday() >= 5,
            season='summer',
            time_of_day='night',
            mcp_kwh=float(price),
            mcp_mwh=float(price) * 1000,
        ))
    return observations


def daily_shape_prices(n: int = 192) -> List[float]:
    """Deterministic 15-minute price curve with a daily cycle and mild drift."""
    prices = []
    for i in range(n):
        hour = (i // 4) % 24
        cycle = 2.0 * math.sin(2 * math.pi * (hour - 6) / 24)
        wobble = 0.3 * math.sin(i * 0.7)
        prices.append(round(5.0 + cycle + wobble + 0.002 * i, 4))
    return prices
