"""BusTrack - Scheduled and live bus arrivals at UQ Lakes station."""

__version__ = "0.1.0"

from .config import HubConfig
from .models import (
    Route,
    Trip,
    StopTime,
    Stop,
    CalendarEntry,
    CalendarException,
    ExceptionType,
    Position,
    ResultRow,
)
from .gtfs_loader import GTFSLoader
from .static_index import ScopedStaticIndex, build_index
from .service_calendar import ServiceCalendar
from .trip_matcher import TripMatcher
from .live_feed import FeedCache, FeedState, LiveFeedManager
from .composer import compose
from .hub_tracker import HubArrivalTracker

__all__ = [
    "HubArrivalTracker",
    "HubConfig",
    "GTFSLoader",
    "ScopedStaticIndex",
    "build_index",
    "ServiceCalendar",
    "TripMatcher",
    "FeedCache",
    "FeedState",
    "LiveFeedManager",
    "compose",
    "Route",
    "Trip",
    "StopTime",
    "Stop",
    "CalendarEntry",
    "CalendarException",
    "ExceptionType",
    "Position",
    "ResultRow",
]
