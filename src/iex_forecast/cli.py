"""
Command line entry point: load an IEX DAM export, run the simulation and
write the report tables.
"""

import argparse
import logging
import os
import sys
from typing import List, Optional

from iex_forecast.data.loader import load_observations, summarize_observations
from iex_forecast.model.forecaster import average_interval_width
from iex_forecast.model.simulation import run_simulation
from iex_forecast.models.data_models import RunResult
from iex_forecast.utils.config import SUPPORTED_CONFIDENCE_LEVELS, Config
from iex_forecast.utils.exceptions import PriceForecastingError

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def write_reports(result: RunResult, output_dir: str) -> List[str]:
    """Write metrics, forecast and strategy tables as CSV files."""
    os.makedirs(output_dir, exist_ok=True)

    paths = {
        'model_metrics.csv': result.metrics_frame(),
        'forecast.csv': result.to_dataframe(),
        'strategy_windows.csv': result.optimization.windows_frame(),
    }
    written = []
    for name, frame in paths.items():
        path = os.path.join(output_dir, name)
        frame.to_csv(path, index=False)
        written.append(path)
    return written


def print_summary(result: RunResult) -> None:
    best = result.best_result.metrics
    strategy = result.optimization
    print("\n=== SIMULATION SUMMARY ===")
    print(f"Observations:      {result.data_characteristics.data_length}")
    print(f"Volatility (CV):   {result.data_characteristics.volatility:.4f}")
    print(f"Trend (slope):     {result.data_characteristics.trend:.6g}")
    print(f"Best model:        {result.best_model} "
          f"(RMSE {best.rmse:.4f}, MAPE {best.mape:.2f}%, R2 {best.r2:.3f})")
    print(f"Forecast points:   {len(result.forecasts)}")
    print(f"Mean band width:   {average_interval_width(result.forecasts):.4f} Rs/kWh")
    print(f"Average price:     {strategy.average_forecasted_price:.4f} Rs/kWh")
    print(f"Projected savings: {strategy.projected_savings_percent:.1f}%")
    print(f"Volatility risk:   {strategy.volatility_risk}")
    print("Best buy windows:")
    for window in strategy.optimal_buy_windows:
        print(f"  {window.time}  {window.price:.4f}")
    print("Peak avoidance:")
    for window in strategy.peak_shaving_alerts:
        print(f"  {window.time}  {window.price:.4f}")


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="IEX DAM price simulation and procurement strategy")
    ap.add_argument("data_file", help="IEX DAM export (.csv, .xlsx or .xls)")
    ap.add_argument("--days", type=int, default=Config.FORECAST_DAYS, help="Forecast horizon in days")
    ap.add_argument("--confidence", type=int, default=Config.CONFIDENCE_LEVEL,
                    choices=SUPPORTED_CONFIDENCE_LEVELS, help="Confidence level in percent")
    ap.add_argument("--output-dir", default=Config.OUTPUT_DIR, help="Directory for CSV reports")
    ap.add_argument("--quiet", action="store_true", help="Skip the console summary")
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        Config.validate()
        observations = load_observations(args.data_file)
        span = summarize_observations(observations)
        logger.info(f"Dataset volume {span['count']}, span {span['start']} to {span['end']}")

        result = run_simulation(observations, args.days, args.confidence)
    except (PriceForecastingError, OSError) as e:
        logger.error(f"Simulation failed: {e}")
        return 1

    try:
        written = write_reports(result, args.output_dir)
    except OSError as e:
        logger.error(f"Could not write reports to {args.output_dir}: {e}")
        return 1

    for path in written:
        logger.info(f"Wrote {path}")
    if not args.quiet:
        print_summary(result)
    return 0


if __name__ == "__main__":
    sys.exit(main())
