"""Hub constants and runtime configuration for BusTrack."""

from dataclasses import dataclass, field
from datetime import timedelta, timezone
from pathlib import Path
from typing import FrozenSet

# Route long names containing this token serve the hub
HUB_ROUTE_TOKEN = "uq "

# Stop names containing this token are hub arrival points
HUB_STOP_TOKEN = "uq lakes"

# Parent station id for the hub; not a physical arrival point
EXCLUDED_STOP_ID = "place_uqlksa"

# Realtime route ids serving the hub (route_short_name-feed_version)
HUB_ROUTE_IDS = frozenset(
    {
        "28-3195",
        "29-3195",
        "66-3136",
        "66-3195",
        "139-3195",
        "169-3136",
        "169-3195",
        "192-3195",
        "209-3136",
        "209-3195",
        "P332-3195",
    }
)

# Platform stop ids at the hub
HUB_STOP_IDS = frozenset({"1853", "1878", "1882", "1947"})

TRIP_UPDATES_FEED = "trip_updates.json"
VEHICLE_POSITIONS_FEED = "vehicle_positions.json"

# Local GTFS-realtime proxy for South East Queensland
FEED_BASE_URL = "http://127.0.0.1:5343/gtfs/seq"

STATIC_DATA_DIR = Path("static-data")
CACHE_DIR = Path("cached-data")

# The feed publishes a new snapshot every five minutes
FRESHNESS_INTERVAL_SECONDS = 5 * 60

ARRIVAL_WINDOW_MINUTES = 10

# calendar_dates.txt only covers this year
SUPPORTED_YEAR = 2023

REQUEST_TIMEOUT_SECONDS = 10

# Brisbane does not observe daylight saving
HUB_TIMEZONE = timezone(timedelta(hours=10), "AEST")


@dataclass
class HubConfig:
    """Settings for a single hub; defaults describe UQ Lakes station."""
    static_dir: Path = STATIC_DATA_DIR
    cache_dir: Path = CACHE_DIR
    feed_base_url: str = FEED_BASE_URL
    route_token: str = HUB_ROUTE_TOKEN
    stop_token: str = HUB_STOP_TOKEN
    excluded_stop_id: str = EXCLUDED_STOP_ID
    route_ids: FrozenSet[str] = field(default_factory=lambda: HUB_ROUTE_IDS)
    stop_ids: FrozenSet[str] = field(default_factory=lambda: HUB_STOP_IDS)
    freshness_seconds: int = FRESHNESS_INTERVAL_SECONDS
    window_minutes: int = ARRIVAL_WINDOW_MINUTES
    supported_year: int = SUPPORTED_YEAR
    request_timeout: float = REQUEST_TIMEOUT_SECONDS
    honor_added_exceptions: bool = False
    tz: timezone = HUB_TIMEZONE

    def __post_init__(self):
        self.static_dir = Path(self.static_dir)
        self.cache_dir = Path(self.cache_dir)
