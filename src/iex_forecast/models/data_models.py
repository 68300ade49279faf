"""
Data models for the IEX DAM price simulation engine.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple

import pandas as pd


@dataclass(frozen=True)
class Observation:
    """One historical market clearing price record."""
    date_label: str  # dd-mm-yyyy
    timestamp: datetime
    time_block: str  # e.g. "00:00 - 00:15"
    hour: int
    minute: int
    day_of_week: int  # Monday=0
    is_weekend: bool
    season: str  # "winter", "spring", "summer", "monsoon"
    time_of_day: str  # "morning", "afternoon", "evening", "night"
    mcp_kwh: float
    mcp_mwh: float = 0.0
    purchase_bid: float = 0.0
    sell_bid: float = 0.0
    mcv: float = 0.0


@dataclass(frozen=True)
class ModelCandidate:
    """Catalog entry for a simulated model."""
    name: str
    color: str
    category: str  # "statistical", "ensemble", "boosting", "deep_learning"


MODEL_CATALOG: Tuple[ModelCandidate, ...] = (
    ModelCandidate('SARIMAX', '#3b82f6', 'statistical'),
    ModelCandidate('Random Forest', '#10b981', 'ensemble'),
    ModelCandidate('XGBoost', '#f59e0b', 'boosting'),
    ModelCandidate('LightGBM', '#8b5cf6', 'boosting'),
    ModelCandidate('CatBoost', '#ec4899', 'boosting'),
    ModelCandidate('LSTM', '#ef4444', 'deep_learning'),
)


@dataclass(frozen=True)
class ModelMetrics:
    """Backtest accuracy metrics for one model."""
    rmse: float
    mae: float
    mape: float
    r2: float
    directional_accuracy: float

    def to_dict(self) -> Dict[str, float]:
        return {
            'rmse': self.rmse,
            'mae': self.mae,
            'mape': self.mape,
            'r2': self.r2,
            'directional_accuracy': self.directional_accuracy,
        }


@dataclass(frozen=True)
class PredictionResult:
    """Synthesized backtest predictions and their accuracy for one model."""
    model_name: str
    color: str
    predictions: Tuple[float, ...]
    errors: Tuple[float, ...]
    metrics: ModelMetrics


@dataclass(frozen=True)
class ForecastPoint:
    """One 15-minute forward price estimate with its confidence bounds."""
    date: date
    date_str: str  # dd-mm-yyyy
    time_block: str  # HH:MM
    price: float
    upper_bound: float
    lower_bound: float

    @property
    def label(self) -> str:
        return f"{self.date_str} {self.time_block}"


@dataclass(frozen=True)
class PriceWindow:
    """A forecast slot recommended for buying or for load avoidance."""
    time: str
    price: float


@dataclass(frozen=True)
class Strategy:
    """Procurement and peak-avoidance recommendation derived from a forecast."""
    optimal_buy_windows: Tuple[PriceWindow, ...]
    peak_shaving_alerts: Tuple[PriceWindow, ...]
    average_forecasted_price: float
    projected_savings_percent: float
    volatility_risk: str  # "Low", "Moderate", "High"

    def windows_frame(self) -> pd.DataFrame:
        """Flatten buy windows and peak alerts into one table."""
        rows = []
        for rank, window in enumerate(self.optimal_buy_windows, start=1):
            rows.append({'kind': 'buy', 'rank': rank, 'time': window.time, 'price': window.price})
        for rank, window in enumerate(self.peak_shaving_alerts, start=1):
            rows.append({'kind': 'avoid', 'rank': rank, 'time': window.time, 'price': window.price})
        return pd.DataFrame(rows, columns=['kind', 'rank', 'time', 'price'])


@dataclass(frozen=True)
class DataCharacteristics:
    """Summary statistics of the historical series reported with a run."""
    volatility: float
    trend: float
    data_length: int
    regime_risk: str = 'Low'  # risk class of the historical volatility


@dataclass(frozen=True)
class RunResult:
    """
    Complete output of one simulation run.
    Sequences are tuples and model results a read-only mapping so that several
    consumers can render the same result without interfering.
    """
    processed_data: Tuple[Observation, ...]
    model_results: Mapping[str, PredictionResult]
    best_model: str
    forecasts: Tuple[ForecastPoint, ...]
    data_characteristics: DataCharacteristics
    optimization: Optional[Strategy] = None
    seed: int = 0
    penalties: Mapping[str, float] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, 'model_results', MappingProxyType(dict(self.model_results)))
        object.__setattr__(self, 'penalties', MappingProxyType(dict(self.penalties)))

    @property
    def best_result(self) -> PredictionResult:
        return self.model_results[self.best_model]

    def metrics_frame(self) -> pd.DataFrame:
        """Per-model metrics table in catalog order."""
        rows = []
        for name, result in self.model_results.items():
            row = {'model': name}
            row.update(result.metrics.to_dict())
            row['penalty'] = self.penalties.get(name)
            row['is_best'] = name == self.best_model
            rows.append(row)
        return pd.DataFrame(rows)

    def to_dataframe(self) -> pd.DataFrame:
        """Convert the forecast path to a DataFrame."""
        df = pd.DataFrame({
            'timestamp': [
                pd.Timestamp(f"{point.date.isoformat()} {point.time_block}")
                for point in self.forecasts
            ],
            'date': [point.date_str for point in self.forecasts],
            'time_block': [point.time_block for point in self.forecasts],
            'price': [point.price for point in self.forecasts],
            'lower_bound': [point.lower_bound for point in self.forecasts],
            'upper_bound': [point.upper_bound for point in self.forecasts],
        })
        return df

    def history_frame(self) -> pd.DataFrame:
        """Historical prices alongside every model's backtest predictions."""
        df = pd.DataFrame({
            'timestamp': [obs.timestamp for obs in self.processed_data],
            'actual': [obs.mcp_kwh for obs in self.processed_data],
        })
        for name, result in self.model_results.items():
            df[name] = list(result.predictions)
        return df
