"""
API Configuration Manager
Centralized management of API configurations and connector instances
"""
from typing import Dict, Any, Optional

from asthmacare.settings import AppSettings, load_settings
from .base_connector import BaseAPIConnector, APIConfig
from .air_quality_connector import AirQualityConnector, MockAirQualityConnector


class APIConfigManager:
    """
    Manages API configurations and creates connector instances

    Usage:
        config_manager = APIConfigManager()
        connector = config_manager.get_air_quality_connector("mock")
        payload = connector.fetch_current("Madrid")
    """

    # Registry of available connectors
    AIR_QUALITY_CONNECTORS = {
        "mock": MockAirQualityConnector,
        "weatherapi": AirQualityConnector,
    }

    def __init__(self, settings: Optional[AppSettings] = None):
        """Initialize from resolved settings (Streamlit secrets / environment)"""
        self.settings = settings or load_settings()

    def get_air_quality_connector(self, provider: Optional[str] = None, **kwargs) -> BaseAPIConnector:
        """
        Get air quality connector

        Args:
            provider: Connector type ('mock', 'weatherapi')
            **kwargs: Override configuration parameters

        Returns:
            Configured air quality connector instance
        """
        provider = provider or self.settings.air_quality_provider
        connector_class = self.AIR_QUALITY_CONNECTORS.get(provider)
        if not connector_class:
            raise ValueError(f"Unknown air quality connector: {provider}")

        return connector_class(self._build_config(provider, kwargs))

    def _build_config(self, provider: str, overrides: Dict[str, Any]) -> APIConfig:
        """Settings first, then explicit overrides (unknown keys raise TypeError)"""
        values = {
            "api_name": f"air_quality_{provider}",
            "base_url": self.settings.air_quality_base_url,
            "api_key": self.settings.air_quality_api_key,
        }
        values.update(overrides)
        return APIConfig(**values)

    def get_available_providers(self) -> list:
        return list(self.AIR_QUALITY_CONNECTORS.keys())
