"""
Air Quality API Connectors
WeatherAPI.com current conditions (with the air quality block) and a mock
"""
import zlib
from typing import Any, Dict

from .base_connector import BaseAPIConnector


class AirQualityConnector(BaseAPIConnector):
    """
    Connector for WeatherAPI.com current.json with aqi=yes

    Returns the provider payload unchanged: {"location": {...},
    "current": {..., "air_quality": {"us-epa-index": 1..6, "pm2_5": ...}}}
    """

    def fetch_current(self, location: str) -> Dict[str, Any]:
        if not location or not location.strip():
            raise ValueError("Location required for air quality lookup (e.g., 'Madrid')")

        return self._get_json(
            "v1/current.json",
            params={"key": self.config.api_key, "q": location, "aqi": "yes"},
        )

    def validate_response(self, payload: Dict[str, Any]) -> bool:
        return isinstance(payload, dict) and "air_quality" in payload.get("current", {})


class MockAirQualityConnector(BaseAPIConnector):
    """Deterministic air quality per location, for development and tests"""

    def fetch_current(self, location: str) -> Dict[str, Any]:
        seed = zlib.crc32(location.strip().casefold().encode("utf-8"))
        epa_index = seed % 6 + 1

        return {
            "location": {"name": location.strip()},
            "current": {
                "temp_c": 10 + seed % 20,
                "humidity": 30 + seed % 60,
                "condition": {"text": "Partly cloudy"},
                "air_quality": {
                    "us-epa-index": epa_index,
                    "pm2_5": round(5.0 + epa_index * 9.5, 1),
                    "pm10": round(10.0 + epa_index * 15.0, 1),
                    "o3": round(40.0 + seed % 80, 1),
                    "no2": round(5.0 + seed % 40, 1),
                },
            },
        }

    def validate_response(self, payload: Dict[str, Any]) -> bool:
        return True
