"""
Backtest simulation for model candidates.
Synthesizes a prediction for every historical observation from a candidate's
penalty and a candidate-specific noise stream, then evaluates accuracy.
"""

import logging
from typing import Dict, Mapping, Sequence

import numpy as np

from ..features.fingerprint import name_code_sum
from ..features.signal_stats import running_sum
from ..models.data_models import (
    MODEL_CATALOG, ModelCandidate, ModelMetrics, Observation, PredictionResult
)
from ..utils.rng import DeterministicRNG

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

EVENING_PEAK_HOURS = range(18, 23)  # 18:00 to 22:59
MORNING_RAMP_HOURS = range(8, 12)  # 08:00 to 11:59
EVENING_PEAK_DIFFICULTY = 1.4
MORNING_RAMP_DIFFICULTY = 1.2
BASELINE_DIFFICULTY = 1.0


def difficulty_multiplier(hour: int) -> float:
    """How much harder a time of day is to predict."""
    if hour in EVENING_PEAK_HOURS:
        return EVENING_PEAK_DIFFICULTY
    if hour in MORNING_RAMP_HOURS:
        return MORNING_RAMP_DIFFICULTY
    return BASELINE_DIFFICULTY


def model_seed(seed: int, model_name: str) -> int:
    """Seed of a candidate's own noise stream."""
    return seed + name_code_sum(model_name)


class BacktestEvaluator:
    """
    Accuracy metrics for synthesized backtest predictions.
    """

    def evaluate(self, actual: np.ndarray, predictions: np.ndarray,
                 historical_mean: float) -> ModelMetrics:
        """
        Evaluate predictions against the historical series.

        Args:
            actual: Historical prices
            predictions: Synthesized predictions, same length as ``actual``
            historical_mean: Mean of the historical prices

        Returns:
            Immutable ModelMetrics record
        """
        errors = np.abs(actual - predictions)
        n = len(errors)

        mse = running_sum(errors * errors) / n
        mae = running_sum(errors) / n

        return ModelMetrics(
            rmse=float(np.sqrt(mse)),
            mae=mae,
            mape=self._mean_absolute_percentage_error(actual, errors),
            r2=self._r_squared(actual, errors, historical_mean),
            directional_accuracy=self._directional_accuracy(actual, predictions),
        )

    def _mean_absolute_percentage_error(self, actual: np.ndarray, errors: np.ndarray) -> float:
        """MAPE where zero actual prices contribute nothing."""
        ratios = np.divide(errors, np.abs(actual), out=np.zeros_like(errors), where=actual != 0)
        return running_sum(ratios) / len(ratios) * 100

    def _r_squared(self, actual: np.ndarray, errors: np.ndarray, historical_mean: float) -> float:
        """R-squared against the historical mean, 0 for a constant series."""
        ss_res = running_sum(errors * errors)
        ss_tot = running_sum((actual - historical_mean) ** 2)
        if ss_tot == 0:
            return 0.0
        return 1 - ss_res / ss_tot

    def _directional_accuracy(self, actual: np.ndarray, predictions: np.ndarray) -> float:
        """
        Percentage of steps where the predicted move from the previous actual
        price has the same sign as the actual move. Flat/flat counts as a match.
        """
        if len(actual) < 2:
            return 0.0

        previous = actual[:-1]
        actual_direction = np.sign(actual[1:] - previous)
        predicted_direction = np.sign(predictions[1:] - previous)

        correct = int(np.sum(actual_direction == predicted_direction))
        return correct / len(previous) * 100


class BacktestSimulator:
    """
    Applies each candidate's penalty to the historical series.
    """

    def __init__(self, catalog: Sequence[ModelCandidate] = MODEL_CATALOG):
        self.catalog = tuple(catalog)
        self.evaluator = BacktestEvaluator()

    def simulate_model(self,
                       candidate: ModelCandidate,
                       penalty: float,
                       observations: Sequence[Observation],
                       seed: int,
                       historical_mean: float) -> PredictionResult:
        """
        Synthesize predictions for one candidate.

        Args:
            candidate: Model catalog entry
            penalty: Resolved error penalty for the candidate
            observations: Historical observations
            seed: Dataset fingerprint
            historical_mean: Mean historical price

        Returns:
            PredictionResult with predictions, absolute errors and metrics
        """
        rng = DeterministicRNG(model_seed(seed, candidate.name))

        actual = np.array([obs.mcp_kwh for obs in observations], dtype=float)
        difficulty = np.array([difficulty_multiplier(obs.hour) for obs in observations], dtype=float)
        noise = np.array([rng.centered() for _ in observations], dtype=float)

        relative_error = penalty * difficulty * noise
        predictions = np.maximum(0.0, actual + actual * relative_error)
        errors = np.abs(actual - predictions)

        metrics = self.evaluator.evaluate(actual, predictions, historical_mean)

        return PredictionResult(
            model_name=candidate.name,
            color=candidate.color,
            predictions=tuple(predictions.tolist()),
            errors=tuple(errors.tolist()),
            metrics=metrics,
        )

    def run(self,
            observations: Sequence[Observation],
            penalties: Mapping[str, float],
            seed: int,
            historical_mean: float) -> Dict[str, PredictionResult]:
        """
        Backtest every candidate in catalog order.

        Returns:
            Mapping of model name to PredictionResult
        """
        results = {}
        for candidate in self.catalog:
            result = self.simulate_model(
                candidate, penalties[candidate.name], observations, seed, historical_mean
            )
            results[candidate.name] = result
            logger.info(
                f"Backtested {candidate.name}: RMSE={result.metrics.rmse:.5f}, "
                f"MAPE={result.metrics.mape:.2f}%"
            )
        return results


def select_best_model(model_results: Mapping[str, PredictionResult]) -> str:
    """
    Name of the model with the lowest RMSE.
    Only a strictly lower RMSE replaces the current best, so the first model
    in iteration order wins ties.
    """
    if not model_results:
        raise ValueError("No model results to select from")

    best_model = next(iter(model_results))
    min_rmse = np.inf
    for name, result in model_results.items():
        if result.metrics.rmse < min_rmse:
            min_rmse = result.metrics.rmse
            best_model = name

    logger.info(f"Selected {best_model} with RMSE {min_rmse:.5f}")
    return best_model
