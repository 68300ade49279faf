"""
Unit tests for environment-derived settings.
"""

import unittest
from unittest.mock import patch
import sys
import os

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from iex_forecast.utils.config import SUPPORTED_CONFIDENCE_LEVELS, Config
from iex_forecast.utils.exceptions import ConfigurationError, PriceForecastingError


class TestConfig(unittest.TestCase):
    """Test cases for Config.validate."""

    def test_valid_settings(self):
        with patch.object(Config, 'FORECAST_DAYS', 7), \
                patch.object(Config, 'CONFIDENCE_LEVEL', 95), \
                patch.object(Config, 'PROCESSING_DELAY', 1.2):
            Config.validate()

    def test_supported_levels(self):
        self.assertEqual(SUPPORTED_CONFIDENCE_LEVELS, (90, 95, 99))

    def test_invalid_forecast_days(self):
        with patch.object(Config, 'FORECAST_DAYS', 0):
            with self.assertRaises(ConfigurationError):
                Config.validate()

    def test_invalid_confidence_level(self):
        with patch.object(Config, 'FORECAST_DAYS', 7), \
                patch.object(Config, 'CONFIDENCE_LEVEL', 80):
            with self.assertRaises(ConfigurationError):
                Config.validate()

    def test_negative_delay(self):
        with patch.object(Config, 'FORECAST_DAYS', 7), \
                patch.object(Config, 'CONFIDENCE_LEVEL', 95), \
                patch.object(Config, 'PROCESSING_DELAY', -1.0):
            with self.assertRaises(ConfigurationError):
                Config.validate()

    def test_error_hierarchy(self):
        self.assertTrue(issubclass(ConfigurationError, PriceForecastingError))


if __name__ == '__main__':
    unittest.main()
