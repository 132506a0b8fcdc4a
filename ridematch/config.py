"""
Configuration parameters for the ride dispatch engine.

Algorithm constants live here as typed module-level values. Host settings
(bind address, secret key, log level, demo city shape) are read from the
environment so the Flask app can be configured without code changes.
"""

import os
from typing import Final, Optional

# =============================================================================
# ROUTING
# =============================================================================

AVERAGE_SPEED_KMH: float = 40.0
"""Assumed average vehicle speed. ETA minutes = distance / speed * 60."""

# =============================================================================
# DISPATCH AND DEMAND ANALYTICS
# =============================================================================

SLIDING_WINDOW_SIZE: Final[int] = 20
"""Number of most recent enqueued requests kept for demand analysis."""

HOTSPOT_COUNT: Final[int] = 3
"""Maximum number of hotspot pickup locations reported by analyze_demand."""

# =============================================================================
# DRIVER DEFAULTS
# =============================================================================

DEFAULT_VEHICLE_TYPE: str = "Sedan"
DEFAULT_DRIVER_RATING: float = 5.0

# =============================================================================
# CITY GENERATOR
# =============================================================================

DEFAULT_CITY_SIZE: int = 50
"""Number of locations in the generated demo city."""

CITY_ORIGIN: Final[tuple] = (40.7128, -74.0060)
"""(latitude, longitude) of the first sector of the generated city."""

SECTOR_SPACING_DEG: float = 0.04
"""Distance between sector origins in degrees."""

# Weight multipliers applied to haversine kilometres, per road class.
# Lower multiplier = faster road.
HIGHWAY_WEIGHT: float = 80.0
ARTERIAL_WEIGHT: float = 100.0
LOCAL_STREET_WEIGHT: float = 120.0
RING_ROAD_WEIGHT: float = 90.0
SHORTCUT_WEIGHT: float = 85.0
CONNECTOR_WEIGHT: float = 100.0

ARTERIAL_PROBABILITY: float = 0.3
LOCAL_STREET_PROBABILITY: float = 0.5
MAX_SHORTCUTS: int = 10

# =============================================================================
# HOST (Flask / SocketIO)
# =============================================================================

HOST: str = os.environ.get("HOST", "0.0.0.0")
PORT: int = int(os.environ.get("PORT", 5000))
SECRET_KEY: str = os.environ.get("SECRET_KEY", "ride-dispatch-secret-key")
LOG_LEVEL: str = os.environ.get("LOG_LEVEL", "INFO")
SOCKETIO_ASYNC_MODE: str = os.environ.get("SOCKETIO_ASYNC_MODE", "threading")

CITY_SIZE: int = int(os.environ.get("CITY_SIZE", DEFAULT_CITY_SIZE))


def _optional_int(name: str) -> Optional[int]:
    value = os.environ.get(name)
    if value is None or value == "":
        return None
    return int(value)


CITY_SEED: Optional[int] = _optional_int("CITY_SEED")
"""Seed for the demo city generator. Unset means a fresh random city per reset."""
