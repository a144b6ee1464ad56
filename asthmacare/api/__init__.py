"""
API connectors for external lookups
"""
from .base_connector import BaseAPIConnector, APIConfig
from .air_quality_connector import AirQualityConnector, MockAirQualityConnector
from .config_manager import APIConfigManager

__all__ = [
    "BaseAPIConnector",
    "APIConfig",
    "AirQualityConnector",
    "MockAirQualityConnector",
    "APIConfigManager",
]
