"""
Loader for IEX day-ahead market price exports.
Reads CSV or Excel files, validates and normalizes rows into Observations.
Malformed rows are rejected here so that the simulation engine only ever
sees clean, chronologically ordered data.
"""

import logging
import re
from pathlib import Path
from typing import Dict, List, Optional, Union

import numpy as np
import pandas as pd

from ..models.data_models import Observation
from ..utils.exceptions import DataValidationError

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

COLUMN_ALIASES = {
    'date': 'date',
    'delivery date': 'date',
    'hour': 'hour',
    'time block': 'time_block',
    'timeblock': 'time_block',
    'purchase bid (mw)': 'purchase_bid',
    'purchase bid': 'purchase_bid',
    'sell bid (mw)': 'sell_bid',
    'sell bid': 'sell_bid',
    'mcv (mw)': 'mcv',
    'mcv': 'mcv',
    'mcp (rs/mwh)': 'mcp_mwh',
    'mcp (rs/mwh) *': 'mcp_mwh',
    'mcp': 'mcp_mwh',
}

SEASON_BY_MONTH = {
    11: 'winter', 12: 'winter', 1: 'winter',
    2: 'spring', 3: 'spring',
    4: 'summer', 5: 'summer', 6: 'summer',
    7: 'monsoon', 8: 'monsoon', 9: 'monsoon', 10: 'monsoon',
}

TIME_BLOCK_PATTERN = re.compile(r'^\s*(\d{1,2}):(\d{2})')


def _normalize_header(name: str) -> str:
    return re.sub(r'\s+', ' ', str(name).strip().lower())


def season_for_month(month: int) -> str:
    return SEASON_BY_MONTH[month]


def time_of_day_for_hour(hour: int) -> str:
    if 6 <= hour < 12:
        return 'morning'
    if 12 <= hour < 17:
        return 'afternoon'
    if 17 <= hour < 21:
        return 'evening'
    return 'night'


def _to_number(series: pd.Series) -> pd.Series:
    """Coerce a column to float, tolerating thousands separators."""
    if pd.api.types.is_numeric_dtype(series):
        return series.astype(float)
    cleaned = series.astype(str).str.replace(',', '', regex=False).str.strip()
    return pd.to_numeric(cleaned, errors='coerce')


def _parse_dates(series: pd.Series) -> pd.Series:
    """Parse IEX dd-mm-yyyy dates, falling back to pandas inference for other layouts."""
    if pd.api.types.is_datetime64_any_dtype(series):
        return series
    text = series.astype(str).str.strip().str.replace('/', '-', regex=False)
    parsed = pd.to_datetime(text, format='%d-%m-%Y', errors='coerce')
    fallback = parsed.isna() & series.notna()
    if fallback.any():
        parsed[fallback] = pd.to_datetime(text[fallback], errors='coerce')
    return parsed


def _block_start(series: pd.Series) -> pd.DataFrame:
    """Parse 'HH:MM - HH:MM' time blocks into start hour and minute."""
    parts = series.astype(str).str.extract(TIME_BLOCK_PATTERN)
    return pd.DataFrame({
        'hour': pd.to_numeric(parts[0], errors='coerce'),
        'minute': pd.to_numeric(parts[1], errors='coerce'),
    })


def observations_from_frame(data: pd.DataFrame) -> List[Observation]:
    """
    Validate and normalize a raw IEX DAM table.

    Args:
        data: DataFrame with at least a date column and an MCP (Rs/MWh) column

    Returns:
        Observations sorted chronologically

    Raises:
        DataValidationError: If required columns are missing or no valid rows remain
    """
    df = data.rename(columns=lambda c: COLUMN_ALIASES.get(_normalize_header(c), _normalize_header(c)))

    missing = [col for col in ('date', 'mcp_mwh') if col not in df.columns]
    if missing:
        raise DataValidationError(f"Missing required columns: {missing}")

    df = df.copy()
    # exports only fill the date on the first block of each day
    df['date'] = df['date'].replace(r'^\s*$', np.nan, regex=True).ffill()
    df['date'] = _parse_dates(df['date'])
    df['mcp_mwh'] = _to_number(df['mcp_mwh'])

    if 'time_block' in df.columns:
        start = _block_start(df['time_block'])
        df['hour'] = start['hour'].values
        df['minute'] = start['minute'].values
    elif 'hour' in df.columns:
        hours = _to_number(df['hour'])
        if hours.max() == 24:
            hours = hours - 1  # hour-ending convention
        df['hour'] = hours
        df['minute'] = 0
        df['time_block'] = [
            f"{int(h):02d}:00 - {int(h) + 1:02d}:00" if pd.notna(h) else ''
            for h in hours
        ]
    else:
        df['hour'] = 0
        df['minute'] = 0
        df['time_block'] = '00:00 - 24:00'

    for col in ('purchase_bid', 'sell_bid', 'mcv'):
        df[col] = _to_number(df[col]).fillna(0.0) if col in df.columns else 0.0

    valid = (
        df['date'].notna()
        & df['mcp_mwh'].notna()
        & np.isfinite(df['mcp_mwh'])
        & df['hour'].between(0, 23)
        & df['minute'].between(0, 59)
    )
    dropped = int((~valid).sum())
    if dropped:
        logger.warning(f"Dropped {dropped} malformed rows out of {len(df)}")
    df = df[valid].copy()

    if df.empty:
        raise DataValidationError("No valid price rows found")

    df['timestamp'] = (
        df['date']
        + pd.to_timedelta(df['hour'].astype(int), unit='h')
        + pd.to_timedelta(df['minute'].astype(int), unit='m')
    )
    df = df.sort_values('timestamp', kind='mergesort')

    observations = []
    for row in df.itertuples(index=False):
        timestamp = row.timestamp.to_pydatetime()
        hour = int(row.hour)
        observations.append(Observation(
            date_label=timestamp.strftime('%d-%m-%Y'),
            timestamp=timestamp,
            time_block=str(row.time_block).strip(),
            hour=hour,
            minute=int(row.minute),
            day_of_week=timestamp.weekday(),
            is_weekend=timestamp.weekday() >= 5,
            season=season_for_month(timestamp.month),
            time_of_day=time_of_day_for_hour(hour),
            mcp_kwh=float(row.mcp_mwh) / 1000,
            mcp_mwh=float(row.mcp_mwh),
            purchase_bid=float(row.purchase_bid),
            sell_bid=float(row.sell_bid),
            mcv=float(row.mcv),
        ))

    logger.info(
        f"Loaded {len(observations)} observations from "
        f"{observations[0].date_label} to {observations[-1].date_label}"
    )
    return observations


def read_price_table(path: Union[str, Path], sheet_name: Optional[Union[str, int]] = 0) -> pd.DataFrame:
    """Read a raw CSV or Excel export into a DataFrame."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Price file not found: {path}")

    suffix = path.suffix.lower()
    if suffix not in ('.csv', '.xlsx', '.xls'):
        raise DataValidationError(f"Unsupported file type: {suffix}")

    try:
        if suffix == '.csv':
            return pd.read_csv(path)
        return pd.read_excel(path, sheet_name=sheet_name)
    except (pd.errors.EmptyDataError, pd.errors.ParserError, ValueError) as e:
        raise DataValidationError(f"Could not read {path.name}: {e}") from e


def load_observations(path: Union[str, Path]) -> List[Observation]:
    """
    Load and validate an IEX DAM price export.

    Args:
        path: Path to a .csv, .xlsx or .xls file

    Returns:
        Chronologically ordered observations
    """
    return observations_from_frame(read_price_table(path))


def summarize_observations(observations: List[Observation]) -> Dict[str, object]:
    """Dataset volume and span, as shown before a run."""
    if not observations:
        return {'count': 0, 'start': None, 'end': None}
    return {
        'count': len(observations),
        'start': observations[0].date_label,
        'end': observations[-1].date_label,
    }
