"""
Custom exceptions for the IEX DAM price simulation engine.
"""


class PriceForecastingError(Exception):
    """Base exception for the price simulation engine."""
    pass


class DataValidationError(PriceForecastingError):
    """Exception raised when input observations or run parameters are invalid."""
    pass


class ConfigurationError(PriceForecastingError):
    """Exception raised when environment configuration is invalid."""
    pass


class SimulationError(PriceForecastingError):
    """Exception raised when the simulation pipeline produces an unusable result."""
    pass
