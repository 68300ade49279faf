"""
Heuristic model penalty scoring.
Maps dataset statistics to a per-candidate error penalty through a rule table
plus seeded jitter. The rules are tuning constants, not learned parameters.
"""

import logging
from typing import Callable, Dict, Sequence

from ..features.signal_stats import SignalStatistics
from ..models.data_models import MODEL_CATALOG, ModelCandidate
from ..utils.rng import DeterministicRNG

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

BASE_PENALTY = 0.04
PENALTY_FLOOR = 0.002
JITTER_SCALE = 0.025

# SARIMAX
SARIMAX_LOW_VOLATILITY = 0.15
SARIMAX_LOW_VOLATILITY_BONUS = 0.01
SARIMAX_SMALL_DATASET = 500
SARIMAX_SMALL_DATASET_BONUS = 0.005

# Random Forest
RF_HIGH_VOLATILITY = 0.25
RF_HIGH_VOLATILITY_BONUS = 0.012
RF_TREND_STRENGTH = 0.1
RF_TREND_PENALTY = 0.01

# XGBoost
XGB_TREND_STRENGTH = 0.05
XGB_TREND_BONUS = 0.015
XGB_GENERAL_BONUS = 0.002

# LightGBM
LGBM_LARGE_DATASET = 2000
LGBM_LARGE_DATASET_BONUS = 0.018
LGBM_SMALL_DATASET = 400
LGBM_SMALL_DATASET_PENALTY = 0.015

# CatBoost
CATBOOST_MID_DATASET = 600
CATBOOST_MID_DATASET_BONUS = 0.01

# LSTM
LSTM_SMALL_DATASET = 1000
LSTM_SMALL_DATASET_PENALTY = 0.03
LSTM_LARGE_DATASET = 5000
LSTM_LARGE_DATASET_BONUS = 0.025
LSTM_HIGH_VOLATILITY = 0.4
LSTM_HIGH_VOLATILITY_BONUS = 0.01


def _sarimax_rules(penalty: float, stats: SignalStatistics) -> float:
    if stats.volatility < SARIMAX_LOW_VOLATILITY:
        penalty -= SARIMAX_LOW_VOLATILITY_BONUS
    if stats.data_length < SARIMAX_SMALL_DATASET:
        penalty -= SARIMAX_SMALL_DATASET_BONUS
    return penalty


def _random_forest_rules(penalty: float, stats: SignalStatistics) -> float:
    if stats.volatility > RF_HIGH_VOLATILITY:
        penalty -= RF_HIGH_VOLATILITY_BONUS
    if stats.trend_strength > RF_TREND_STRENGTH:
        penalty += RF_TREND_PENALTY  # poor at extrapolating trends
    return penalty


def _xgboost_rules(penalty: float, stats: SignalStatistics) -> float:
    if stats.trend_strength > XGB_TREND_STRENGTH:
        penalty -= XGB_TREND_BONUS
    return penalty - XGB_GENERAL_BONUS


def _lightgbm_rules(penalty: float, stats: SignalStatistics) -> float:
    if stats.data_length > LGBM_LARGE_DATASET:
        penalty -= LGBM_LARGE_DATASET_BONUS
    if stats.data_length < LGBM_SMALL_DATASET:
        penalty += LGBM_SMALL_DATASET_PENALTY
    return penalty


def _catboost_rules(penalty: float, stats: SignalStatistics) -> float:
    if stats.data_length > CATBOOST_MID_DATASET:
        penalty -= CATBOOST_MID_DATASET_BONUS
    return penalty


def _lstm_rules(penalty: float, stats: SignalStatistics) -> float:
    if stats.data_length < LSTM_SMALL_DATASET:
        penalty += LSTM_SMALL_DATASET_PENALTY
    if stats.data_length > LSTM_LARGE_DATASET:
        penalty -= LSTM_LARGE_DATASET_BONUS
    if stats.volatility > LSTM_HIGH_VOLATILITY:
        penalty -= LSTM_HIGH_VOLATILITY_BONUS
    return penalty


# Each rule takes the running penalty and returns it adjusted
RULE_TABLE: Dict[str, Callable[[float, SignalStatistics], float]] = {
    'SARIMAX': _sarimax_rules,
    'Random Forest': _random_forest_rules,
    'XGBoost': _xgboost_rules,
    'LightGBM': _lightgbm_rules,
    'CatBoost': _catboost_rules,
    'LSTM': _lstm_rules,
}


def apply_rules(model_name: str, penalty: float, stats: SignalStatistics) -> float:
    """Apply a candidate's rule adjustments; unknown names are left unchanged."""
    rule = RULE_TABLE.get(model_name)
    return rule(penalty, stats) if rule is not None else penalty


class PenaltyScorer:
    """
    Resolves the error penalty of every model candidate for one dataset.
    """

    def __init__(self,
                 catalog: Sequence[ModelCandidate] = MODEL_CATALOG,
                 base_penalty: float = BASE_PENALTY,
                 floor: float = PENALTY_FLOOR,
                 jitter_scale: float = JITTER_SCALE):
        """
        Initialize the scorer.

        Args:
            catalog: Ordered model candidates; jitter is drawn in this order
            base_penalty: Starting penalty before rule adjustments
            floor: Smallest penalty any candidate may receive
            jitter_scale: Width of the seeded jitter band
        """
        if floor <= 0:
            raise ValueError("Penalty floor must be positive")
        self.catalog = tuple(catalog)
        self.base_penalty = base_penalty
        self.floor = floor
        self.jitter_scale = jitter_scale

    def score(self, stats: SignalStatistics, seed: int) -> Dict[str, float]:
        """
        Compute penalties for all candidates.

        Args:
            stats: Statistics of the historical series
            seed: Dataset fingerprint

        Returns:
            Mapping of model name to penalty, in catalog order
        """
        rng = DeterministicRNG(seed)

        penalties = {}
        for candidate in self.catalog:
            penalty = apply_rules(candidate.name, self.base_penalty, stats)
            jitter = (rng.next() - 0.5) * self.jitter_scale
            penalties[candidate.name] = max(self.floor, penalty + jitter)
            logger.debug(f"Penalty for {candidate.name}: {penalties[candidate.name]:.5f}")

        return penalties


def score_models(stats: SignalStatistics, seed: int) -> Dict[str, float]:
    """Convenience function scoring the default catalog."""
    return PenaltyScorer().score(stats, seed)
