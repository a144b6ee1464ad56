# =============================================================================
# asthmacare/services/air_quality_service.py
# Air quality lookups through the freshness cache
# =============================================================================

from __future__ import annotations
from typing import Any, Dict, Optional

from asthmacare.api import BaseAPIConnector
from asthmacare.cache import DEFAULT_WINDOW_MINUTES, FreshnessCache, SupabaseCacheStore
from asthmacare.errors import TransportError
from asthmacare.logging import get_logger
from .base_service import ServiceResult

logger = get_logger(__name__)

AIR_QUALITY_LEVELS = (
    (1, {"color": "green", "status": "Good", "description": "Air quality is satisfactory"}),
    (2, {"color": "yellow", "status": "Moderate", "description": "Acceptable for most people"}),
    (3, {"color": "orange", "status": "Unhealthy for Sensitive Groups",
         "description": "May cause issues for sensitive individuals"}),
    (4, {"color": "red", "status": "Unhealthy", "description": "Health warnings for everyone"}),
)
WORST_LEVEL = {"color": "purple", "status": "Very Unhealthy", "description": "Emergency conditions"}


def get_air_quality_color(aqi: float) -> Dict[str, str]:
    """Colour band for a US-EPA index (1 = good ... 6 = hazardous)."""
    for upper, level in AIR_QUALITY_LEVELS:
        if aqi <= upper:
            return dict(level)
    return dict(WORST_LEVEL)


def extract_epa_index(payload: Dict[str, Any]) -> Optional[int]:
    air_quality = (payload or {}).get("current", {}).get("air_quality", {})
    index = air_quality.get("us-epa-index")
    return int(index) if index is not None else None


class AirQualityService:
    """
    check_air_quality() with a 30 minute cache shared by every user.

    Usage:
        service = AirQualityService(connector, FreshnessCache(SupabaseCacheStore(client)))
        result = service.check_air_quality("Madrid")
    """

    def __init__(self, connector: BaseAPIConnector, cache: FreshnessCache):
        self.connector = connector
        self.cache = cache

    @classmethod
    def from_client(
        cls,
        client,
        connector: BaseAPIConnector,
        window_minutes: int = DEFAULT_WINDOW_MINUTES,
    ) -> AirQualityService:
        return cls(connector, FreshnessCache(SupabaseCacheStore(client), window_minutes))

    def check_air_quality(self, location: str) -> ServiceResult:
        """
        Current air quality for a location, served from cache while fresh.

        A provider outage with nothing cached yields a failed result instead
        of an exception.
        """
        if not location or not location.strip():
            return ServiceResult.fail("Location is required", error_code="DATA_001")

        try:
            payload = self.cache.lookup_or_fetch(
                location, lambda: self.connector.fetch_current(location)
            )
        except TransportError as e:
            logger.error(f"Air quality fetch failed for '{location}': {e}")
            return ServiceResult.from_exception(e)

        index = extract_epa_index(payload)
        metadata = {"level": get_air_quality_color(index)} if index is not None else None
        return ServiceResult.ok(payload, metadata=metadata)
