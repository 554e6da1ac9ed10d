"""Main hub arrival tracker class."""

import logging
from datetime import date
from typing import Iterable, List, Optional

from .composer import compose
from .config import HubConfig
from .gtfs_loader import GTFSLoader
from .live_feed import LiveFeedManager
from .models import ResultRow
from .service_calendar import ServiceCalendar
from .static_index import ScopedStaticIndex, build_index
from .trip_matcher import TripMatcher

logger = logging.getLogger(__name__)


class HubArrivalTracker:
    """
    Predicts bus arrivals at a single hub.

    This class owns the whole pipeline:
    - Scoped static GTFS index, built once
    - Service calendar and time-window matching
    - Trip update and vehicle position caches
    """

    def __init__(
        self,
        config: Optional[HubConfig] = None,
        load_static: bool = True,
        load_live: bool = True,
    ):
        """
        Initialize the tracker.

        Args:
            config: Hub settings; defaults to UQ Lakes station.
            load_static: If True, build the static index on init. If False,
                call load_static() before querying.
            load_live: If True, load the live caches on init.
        """
        self.config = config or HubConfig()
        self.gtfs_loader = GTFSLoader(self.config.static_dir)
        self.live = LiveFeedManager(self.config)

        self.index: Optional[ScopedStaticIndex] = None
        self.calendar: Optional[ServiceCalendar] = None
        self.matcher: Optional[TripMatcher] = None

        if load_static:
            self.load_static()
        if load_live:
            self.live.load()

    def load_static(self) -> ScopedStaticIndex:
        """Build the scoped index; later calls return the existing one."""
        if self.index is None:
            self.use_index(build_index(self.gtfs_loader, self.config))
        return self.index

    def use_index(self, index: ScopedStaticIndex) -> None:
        """Install a prebuilt index and the stages that depend on it."""
        self.index = index
        self.calendar = ServiceCalendar(index, self.config.honor_added_exceptions)
        self.matcher = TripMatcher(index, self.calendar, self.config.window_minutes)

    def route_short_names(self) -> List[str]:
        """Short names of every route serving the hub."""
        return self.load_static().route_short_names()

    def refresh_live(self) -> None:
        """Refresh both realtime feeds, keeping cached data on failure."""
        adopted = self.live.refresh()
        logger.debug(f"Live refresh: {adopted}")

    def get_arrivals(
        self,
        travel_date: date,
        departure_time: str,
        short_names: Iterable[str],
        refresh: bool = True,
    ) -> List[ResultRow]:
        """
        Get scheduled and live arrivals at the hub.

        Args:
            travel_date: Date of travel.
            departure_time: HH:MM the rider leaves the hub.
            short_names: Route short names to include.
            refresh: If True, refresh the live feeds first.

        Returns:
            ResultRow list; empty when no trip arrives in the window.
        """
        index = self.load_static()
        if refresh:
            self.refresh_live()

        route_ids = index.route_ids_for_short_names(short_names)
        matches = self.matcher.find_arrivals(route_ids, travel_date, departure_time)
        rows = compose(matches, index, self.live)
        logger.info(f"Found {len(rows)} arrivals for {travel_date} {departure_time}")
        return rows

    def cleanup(self) -> None:
        """Release live snapshots."""
        self.live.clear()
        logger.info("Cleaned up tracker resources")
