"""
Base API Connector for location lookups (air quality and the like)

Subclasses name the endpoint and query parameters; the base class owns the
HTTP session and the request -> JSON -> validation round trip, and turns every
failure along the way into a TransportError.
"""
from abc import ABC, abstractmethod
from typing import Optional, Dict, Any
import requests
from dataclasses import dataclass

from asthmacare.errors import TransportError


@dataclass
class APIConfig:
    """Connection settings for one provider"""
    api_name: str
    base_url: str
    api_key: Optional[str] = None
    headers: Optional[Dict[str, str]] = None
    timeout: int = 30


class BaseAPIConnector(ABC):
    """Abstract base class for all API connectors"""

    def __init__(self, config: APIConfig):
        self.config = config
        self.session = requests.Session()

        if config.headers:
            self.session.headers.update(config.headers)

    @abstractmethod
    def fetch_current(self, location: str) -> Dict[str, Any]:
        """
        Fetch current conditions for a location

        Args:
            location: Location name or "lat,lon"

        Returns:
            Provider payload as a dict

        Raises:
            TransportError: If the provider cannot be reached or answers badly
        """

    @abstractmethod
    def validate_response(self, payload: Dict[str, Any]) -> bool:
        """Check that a decoded payload has the shape callers rely on"""

    def _get_json(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """GET an endpoint (relative to base_url) and return its validated JSON body."""
        url = f"{self.config.base_url.rstrip('/')}/{endpoint}"
        name = self.config.api_name

        try:
            response = self.session.request(
                method="GET",
                url=url,
                params=params,
                timeout=self.config.timeout,
            )
            response.raise_for_status()
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            raise TransportError(
                f"{name} answered HTTP {status}", service=name, status_code=status
            ) from e
        except requests.exceptions.RequestException as e:
            raise TransportError(f"{name} unreachable: {e}", service=name) from e

        try:
            payload = response.json()
        except ValueError as e:
            raise TransportError(f"Invalid JSON from {name}", service=name) from e

        if not self.validate_response(payload):
            raise TransportError(f"Unexpected response from {name}", service=name)
        return payload

    def test_connection(self, location: str = "London") -> Dict[str, Any]:
        """Try one lookup; returns {"status": "success"|"error", "message": ...}"""
        try:
            payload = self.fetch_current(location)
        except TransportError as e:
            return {"status": "error", "message": f"Connection failed: {e.message}"}

        return {
            "status": "success",
            "message": f"Successfully connected to {self.config.api_name}",
            "keys": sorted(payload.keys()),
        }
