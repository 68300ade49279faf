"""
Unit tests for loading and validating IEX DAM exports.
"""

import unittest
from datetime import datetime
import pandas as pd
import sys
import os
import tempfile
import shutil

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from iex_forecast.data.loader import (
    load_observations, observations_from_frame, season_for_month,
    summarize_observations, time_of_day_for_hour
)
from iex_forecast.utils.exceptions import DataValidationError


def iex_frame():
    """Four blocks across two days in the exchange's export layout."""
    return pd.DataFrame({
        'Date': ['06-04-2024', '', '07-04-2024', ''],
        'Hour': [1, 1, 19, 19],
        'Time Block': ['00:00 - 00:15', '00:15 - 00:30', '18:00 - 18:15', '18:15 - 18:30'],
        'Purchase Bid (MW)': ['12,345.6', '12,000.0', '15,000.5', '14,800.0'],
        'Sell Bid (MW)': [20000.0, 21000.0, 9000.0, 9500.0],
        'MCV (MW)': [8000.0, 8100.0, 7000.0, 7100.0],
        'MCP (Rs/MWh) *': ['3,120.50', '2,980.00', '10,000.00', '9,850.25'],
    })


class TestObservationsFromFrame(unittest.TestCase):
    """Test cases for observations_from_frame."""

    def test_exchange_layout(self):
        observations = observations_from_frame(iex_frame())

        self.assertEqual(len(observations), 4)
        first = observations[0]
        self.assertEqual(first.timestamp, datetime(2024, 4, 6, 0, 0))
        self.assertEqual(first.date_label, '06-04-2024')
        self.assertEqual(first.time_block, '00:00 - 00:15')
        self.assertAlmostEqual(first.mcp_mwh, 3120.5)
        self.assertAlmostEqual(first.mcp_kwh, 3.1205)
        self.assertAlmostEqual(first.purchase_bid, 12345.6)
        self.assertEqual(first.day_of_week, 5)
        self.assertTrue(first.is_weekend)
        self.assertEqual(first.season, 'summer')
        self.assertEqual(first.time_of_day, 'night')

        # date carried forward from the first block of the day
        self.assertEqual(observations[1].timestamp, datetime(2024, 4, 6, 0, 15))
        self.assertEqual(observations[3].timestamp, datetime(2024, 4, 7, 18, 15))
        self.assertEqual(observations[3].hour, 18)
        self.assertEqual(observations[3].minute, 15)
        self.assertEqual(observations[3].time_of_day, 'evening')

    def test_sorted_chronologically(self):
        shuffled = iex_frame().iloc[[2, 3, 0, 1]].reset_index(drop=True)
        shuffled['Date'] = ['07-04-2024', '07-04-2024', '06-04-2024', '06-04-2024']
        observations = observations_from_frame(shuffled)
        timestamps = [obs.timestamp for obs in observations]
        self.assertEqual(timestamps, sorted(timestamps))

    def test_malformed_rows_dropped(self):
        frame = iex_frame()
        frame.loc[1, 'MCP (Rs/MWh) *'] = 'n/a'
        frame.loc[2, 'Date'] = 'not a date'
        frame.loc[3, 'Date'] = 'not a date'

        with self.assertLogs('iex_forecast.data.loader', level='WARNING'):
            observations = observations_from_frame(frame)

        self.assertEqual(len(observations), 1)
        self.assertAlmostEqual(observations[0].mcp_kwh, 3.1205)

    def test_missing_price_column(self):
        frame = iex_frame().drop(columns=['MCP (Rs/MWh) *'])
        with self.assertRaises(DataValidationError):
            observations_from_frame(frame)

    def test_no_valid_rows(self):
        frame = iex_frame()
        frame['MCP (Rs/MWh) *'] = 'n/a'
        with self.assertRaises(DataValidationError):
            observations_from_frame(frame)

    def test_hourly_export_uses_hour_ending(self):
        frame = pd.DataFrame({
            'date': ['01-01-2024'] * 24,
            'hour': list(range(1, 25)),
            'mcp': [4000.0] * 24,
        })
        observations = observations_from_frame(frame)

        self.assertEqual(observations[0].hour, 0)
        self.assertEqual(observations[-1].hour, 23)
        self.assertEqual(observations[0].time_block, '00:00 - 01:00')
        self.assertEqual(observations[0].season, 'winter')
        self.assertEqual(observations[0].purchase_bid, 0.0)

    def test_iso_dates(self):
        frame = pd.DataFrame({
            'Date': ['2024-08-15', '2024-08-15'],
            'Time Block': ['09:00 - 09:15', '09:15 - 09:30'],
            'MCP (Rs/MWh)': [5000.0, 5100.0],
        })
        observations = observations_from_frame(frame)
        self.assertEqual(observations[0].timestamp, datetime(2024, 8, 15, 9, 0))
        self.assertEqual(observations[0].season, 'monsoon')
        self.assertEqual(observations[0].time_of_day, 'morning')


class TestDerivedFields(unittest.TestCase):
    """Test cases for calendar and time-of-day labels."""

    def test_seasons(self):
        self.assertEqual(season_for_month(12), 'winter')
        self.assertEqual(season_for_month(3), 'spring')
        self.assertEqual(season_for_month(5), 'summer')
        self.assertEqual(season_for_month(9), 'monsoon')

    def test_time_of_day(self):
        self.assertEqual(time_of_day_for_hour(6), 'morning')
        self.assertEqual(time_of_day_for_hour(13), 'afternoon')
        self.assertEqual(time_of_day_for_hour(20), 'evening')
        self.assertEqual(time_of_day_for_hour(23), 'night')
        self.assertEqual(time_of_day_for_hour(3), 'night')


class TestLoadObservations(unittest.TestCase):
    """Test cases for reading files from disk."""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.temp_dir)

    def test_load_csv(self):
        path = os.path.join(self.temp_dir, 'dam.csv')
        iex_frame().to_csv(path, index=False)

        observations = load_observations(path)
        self.assertEqual(len(observations), 4)
        self.assertEqual(summarize_observations(observations), {
            'count': 4, 'start': '06-04-2024', 'end': '07-04-2024'
        })

    def test_missing_file(self):
        with self.assertRaises(FileNotFoundError):
            load_observations(os.path.join(self.temp_dir, 'missing.csv'))

    def test_unsupported_suffix(self):
        path = os.path.join(self.temp_dir, 'dam.json')
        with open(path, 'w') as f:
            f.write('{}')
        with self.assertRaises(DataValidationError):
            load_observations(path)

    def test_empty_csv(self):
        path = os.path.join(self.temp_dir, 'dam.csv')
        open(path, 'w').close()
        with self.assertRaises(DataValidationError):
            load_observations(path)

    def test_corrupt_excel(self):
        path = os.path.join(self.temp_dir, 'dam.xlsx')
        with open(path, 'w') as f:
            f.write('this is not a workbook')
        with self.assertRaises(DataValidationError):
            load_observations(path)

    def test_summarize_empty(self):
        self.assertEqual(summarize_observations([])['count'], 0)


if __name__ == '__main__':
    unittest.main()
