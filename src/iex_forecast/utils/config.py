import os
from dotenv import load_dotenv

from .exceptions import ConfigurationError

load_dotenv()

SUPPORTED_CONFIDENCE_LEVELS = (90, 95, 99)


class Config:
    FORECAST_DAYS = int(os.getenv('IEX_FORECAST_DAYS', 7))
    CONFIDENCE_LEVEL = int(os.getenv('IEX_CONFIDENCE_LEVEL', 95))
    PROCESSING_DELAY = float(os.getenv('IEX_PROCESSING_DELAY', 0.0))
    OUTPUT_DIR = os.getenv('IEX_OUTPUT_DIR', 'outputs/')

    @classmethod
    def validate(cls):
        """Validate environment-derived settings"""
        if cls.FORECAST_DAYS < 1:
            raise ConfigurationError("IEX_FORECAST_DAYS must be at least 1")
        if cls.CONFIDENCE_LEVEL not in SUPPORTED_CONFIDENCE_LEVELS:
            raise ConfigurationError(
                f"IEX_CONFIDENCE_LEVEL must be one of {SUPPORTED_CONFIDENCE_LEVELS}"
            )
        if cls.PROCESSING_DELAY < 0:
            raise ConfigurationError("IEX_PROCESSING_DELAY cannot be negative")
