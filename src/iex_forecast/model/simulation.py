"""
Simulation pipeline entry points.
Runs fingerprint, statistics, penalty scoring, backtest, winner selection,
forward forecast and strategy as one pure computation.
"""

import asyncio
import logging
import math
import numbers
from typing import Iterable, Optional, Sequence

from ..features.fingerprint import dataset_fingerprint
from ..features.signal_stats import compute_signal_statistics
from ..models.data_models import (
    MODEL_CATALOG, DataCharacteristics, ModelCandidate, Observation, RunResult
)
from ..utils.config import Config
from ..utils.exceptions import DataValidationError, SimulationError
from .backtest import BacktestSimulator, select_best_model
from .forecaster import ForwardForecastGenerator
from .optimizer import build_strategy, classify_risk
from .penalties import PenaltyScorer

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def validate_history(history: Sequence[Observation]) -> None:
    """Reject empty, unordered or non-numeric observation sequences."""
    if len(history) == 0:
        raise DataValidationError("Historical data is empty")

    previous = None
    for i, obs in enumerate(history):
        if not isinstance(obs.mcp_kwh, numbers.Real) or not math.isfinite(obs.mcp_kwh):
            raise DataValidationError(f"Row {i}: price is not a finite number ({obs.mcp_kwh!r})")
        if previous is not None and obs.timestamp < previous:
            raise DataValidationError(
                f"Row {i}: timestamp {obs.timestamp} is earlier than {previous}"
            )
        previous = obs.timestamp


def validate_run_parameters(forecast_days: int, confidence_level: int) -> None:
    if (isinstance(forecast_days, bool) or not isinstance(forecast_days, numbers.Integral)
            or forecast_days < 1):
        raise DataValidationError(f"forecast_days must be a positive integer, got {forecast_days!r}")
    if isinstance(confidence_level, bool) or not isinstance(confidence_level, numbers.Real):
        raise DataValidationError(f"confidence_level must be numeric, got {confidence_level!r}")


def _check_finite(values: Iterable[float], what: str) -> None:
    for value in values:
        if not math.isfinite(value):
            raise SimulationError(f"Non-finite {what} produced: {value}")


class PriceSimulationEngine:
    """
    Deterministic simulation-and-scoring engine.
    Identical inputs always produce identical RunResults.
    """

    def __init__(self, catalog: Sequence[ModelCandidate] = MODEL_CATALOG):
        self.catalog = tuple(catalog)
        self.scorer = PenaltyScorer(self.catalog)
        self.simulator = BacktestSimulator(self.catalog)

    def run(self,
            history: Sequence[Observation],
            forecast_days: int = 7,
            confidence_level: int = 95) -> RunResult:
        """
        Run the full pipeline.

        Args:
            history: Validated, chronologically ordered observations
            forecast_days: Days to forecast, at least 1
            confidence_level: 90, 95 or 99; anything else uses the 95% z-score

        Returns:
            RunResult with backtests, winner, forecast and strategy

        Raises:
            DataValidationError: If the history or parameters are invalid
            SimulationError: If the computation yields non-finite values
        """
        history = tuple(history)
        validate_history(history)
        validate_run_parameters(forecast_days, confidence_level)

        seed = dataset_fingerprint(history)
        logger.info(f"Running simulation on {len(history)} observations (seed {seed})")

        stats = compute_signal_statistics([obs.mcp_kwh for obs in history])
        _check_finite([stats.mean, stats.std_dev, stats.volatility, stats.slope], "statistic")

        penalties = self.scorer.score(stats, seed)

        model_results = self.simulator.run(history, penalties, seed, stats.mean)
        for name, result in model_results.items():
            _check_finite(result.metrics.to_dict().values(), f"{name} metric")

        best_model = select_best_model(model_results)

        generator = ForwardForecastGenerator(stats, seed, model_results[best_model].metrics.rmse)
        forecasts = generator.generate(
            history[-1].timestamp.date(), forecast_days, confidence_level
        )
        _check_finite(
            (v for point in forecasts for v in (point.price, point.upper_bound, point.lower_bound)),
            "forecast value",
        )

        strategy = build_strategy(forecasts)

        return RunResult(
            processed_data=history,
            model_results=model_results,
            best_model=best_model,
            forecasts=tuple(forecasts),
            data_characteristics=DataCharacteristics(
                volatility=stats.volatility,
                trend=stats.slope,
                data_length=stats.data_length,
                regime_risk=classify_risk(stats.volatility),
            ),
            optimization=strategy,
            seed=seed,
            penalties=penalties,
        )


def run_simulation(history: Sequence[Observation],
                   forecast_days: int = 7,
                   confidence_level: int = 95) -> RunResult:
    """Convenience function running the default engine."""
    return PriceSimulationEngine().run(history, forecast_days, confidence_level)


async def run_simulation_async(history: Sequence[Observation],
                               forecast_days: int = 7,
                               confidence_level: int = 95,
                               processing_delay: Optional[float] = None) -> RunResult:
    """
    Awaitable variant of :func:`run_simulation`.

    The only suspension point is the artificial processing delay before the
    computation, taken from ``Config.PROCESSING_DELAY`` when not given.
    """
    if processing_delay is None:
        processing_delay = Config.PROCESSING_DELAY
    if processing_delay > 0:
        await asyncio.sleep(processing_delay)
    return run_simulation(history, forecast_days, confidence_level)
