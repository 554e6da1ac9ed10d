"""Scheduled arrivals at the hub within a window after the requested time."""

import logging
from datetime import date
from typing import Iterable, List, Tuple

from .config import ARRIVAL_WINDOW_MINUTES
from .models import StopTime, Trip, time_to_minutes
from .service_calendar import ServiceCalendar
from .static_index import ScopedStaticIndex

logger = logging.getLogger(__name__)


class TripMatcher:
    """Matches scheduled stop times at hub stops against a departure time."""

    def __init__(
        self,
        index: ScopedStaticIndex,
        calendar: ServiceCalendar,
        window_minutes: int = ARRIVAL_WINDOW_MINUTES,
    ):
        self.index = index
        self.calendar = calendar
        self.window_minutes = window_minutes

    def in_window(self, arrival_minutes: int, departure_minutes: int) -> bool:
        return 0 <= arrival_minutes - departure_minutes <= self.window_minutes

    def find_arrivals(
        self,
        route_ids: Iterable[str],
        travel_date: date,
        departure_time: str,
    ) -> List[Tuple[StopTime, Trip]]:
        """
        Find hub arrivals on the given routes.

        Args:
            route_ids: Route ids to search.
            travel_date: Date of travel; trips whose service does not run
                that day are skipped.
            departure_time: HH:MM the rider leaves the hub.

        Returns:
            (StopTime, Trip) pairs arriving at a hub stop between the
            departure time and window_minutes later, both ends inclusive.
            A trip calling more than once in the window appears once per call.
        """
        departure_minutes = time_to_minutes(departure_time)
        hub_stop_ids = self.index.hub_stop_ids()
        matches: List[Tuple[StopTime, Trip]] = []

        for trip in self.index.trips_by_route_ids(route_ids):
            if not self.calendar.is_service_active(trip.service_id, travel_date):
                continue
            for stop_time in self.index.stop_times_by_trip(trip.trip_id):
                if stop_time.stop_id not in hub_stop_ids:
                    continue
                if self.in_window(stop_time.arrival_minutes, departure_minutes):
                    matches.append((stop_time, trip))

        logger.debug(f"Matched {len(matches)} stop times after {departure_time} on {travel_date}")
        return matches
