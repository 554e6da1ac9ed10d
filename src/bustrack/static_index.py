"""Scoped static index: GTFS tables narrowed to the hub's routes, trips and stops."""

import concurrent.futures
import logging
from typing import Dict, Iterable, List, Optional

from .config import HubConfig
from .gtfs_loader import GTFS_TABLES, GTFSLoader
from .models import CalendarEntry, CalendarException, Route, Stop, StopTime, Trip

logger = logging.getLogger(__name__)


class ScopedStaticIndex:
    """
    In-memory GTFS tables restricted to the hub.

    Each table is narrowed by the keys of its parent table, so the
    derivation runs routes -> trips -> stop_times -> stops. calendar and
    calendar_dates are kept whole.
    """

    def __init__(
        self,
        routes: List[Route],
        trips: List[Trip],
        stop_times: List[StopTime],
        stops: List[Stop],
        calendar: List[CalendarEntry],
        calendar_dates: List[CalendarException],
    ):
        self.routes = routes
        self.trips = trips
        self.stop_times = stop_times
        self.stops = stops
        self.calendar = calendar
        self.calendar_dates = calendar_dates

        self._trips_by_id: Dict[str, List[Trip]] = {}
        for trip in trips:
            self._trips_by_id.setdefault(trip.trip_id, []).append(trip)

        self._stop_times_by_trip: Dict[str, List[StopTime]] = {}
        for stop_time in stop_times:
            self._stop_times_by_trip.setdefault(stop_time.trip_id, []).append(stop_time)

        self._routes_by_id: Dict[str, Route] = {}
        for route in routes:
            self._routes_by_id.setdefault(route.route_id, route)

        self._calendar_by_service: Dict[str, List[CalendarEntry]] = {}
        for entry in calendar:
            self._calendar_by_service.setdefault(entry.service_id, []).append(entry)

        self._exceptions_by_service: Dict[str, List[CalendarException]] = {}
        for exception in calendar_dates:
            self._exceptions_by_service.setdefault(exception.service_id, []).append(exception)

    @classmethod
    def build(cls, loader: GTFSLoader, config: HubConfig) -> "ScopedStaticIndex":
        """
        Load all tables and derive the scoped index.

        The raw reads have no dependency on each other and run concurrently;
        the narrowing steps run afterwards, each waiting on its parent.
        """
        with concurrent.futures.ThreadPoolExecutor(max_workers=len(GTFS_TABLES)) as executor:
            futures = {name: executor.submit(loader.load, name) for name in GTFS_TABLES}
            raw = {name: future.result() for name, future in futures.items()}

        route_token = config.route_token.lower()
        routes = [
            Route.from_row(row)
            for row in raw["routes"]
            if route_token in row["route_long_name"].lower()
        ]

        route_ids = {route.route_id for route in routes}
        trips = [Trip.from_row(row) for row in raw["trips"] if row["route_id"] in route_ids]

        trip_ids = {trip.trip_id for trip in trips}
        stop_times = [
            StopTime.from_row(row) for row in raw["stop_times"] if row["trip_id"] in trip_ids
        ]

        stop_ids = {stop_time.stop_id for stop_time in stop_times}
        stop_token = config.stop_token.lower()
        stops = [
            Stop.from_row(row)
            for row in raw["stops"]
            if row["stop_id"] in stop_ids
            and stop_token in row["stop_name"].lower()
            and row["stop_id"] != config.excluded_stop_id
        ]

        calendar = [CalendarEntry.from_row(row) for row in raw["calendar"]]
        calendar_dates = [CalendarException.from_row(row) for row in raw["calendar_dates"]]

        logger.info(
            f"Indexed {len(routes)} routes, {len(trips)} trips, "
            f"{len(stop_times)} stop times and {len(stops)} hub stops"
        )
        return cls(routes, trips, stop_times, stops, calendar, calendar_dates)

    def route_short_names(self) -> List[str]:
        """Unique route short names in table order."""
        return list(dict.fromkeys(route.route_short_name for route in self.routes))

    def routes_by_short_name(self, short_name: str) -> List[Route]:
        return [route for route in self.routes if route.route_short_name == short_name]

    def route_ids_for_short_names(self, short_names: Iterable[str]) -> List[str]:
        """Route ids of every route whose short name is in short_names."""
        wanted = set(short_names)
        return [route.route_id for route in self.routes if route.route_short_name in wanted]

    def long_names_for_short_name(self, short_name: str) -> List[str]:
        """Unique long names sharing a short name."""
        return list(
            dict.fromkeys(route.route_long_name for route in self.routes_by_short_name(short_name))
        )

    def route_for_trip(self, trip_id: str) -> Optional[Route]:
        trips = self._trips_by_id.get(trip_id)
        if not trips:
            return None
        return self._routes_by_id.get(trips[0].route_id)

    def trips_by_route_ids(self, route_ids: Iterable[str]) -> List[Trip]:
        wanted = set(route_ids)
        return [trip for trip in self.trips if trip.route_id in wanted]

    def trips_by_id(self, trip_id: str) -> List[Trip]:
        return list(self._trips_by_id.get(trip_id, []))

    def stop_times_by_trip(self, trip_id: str) -> List[StopTime]:
        return list(self._stop_times_by_trip.get(trip_id, []))

    def stops_matching(self, name_token: str) -> List[Stop]:
        """Hub stops whose name contains name_token (case-insensitive)."""
        token = name_token.lower()
        return [stop for stop in self.stops if token in stop.stop_name.lower()]

    def hub_stop_ids(self) -> set:
        return {stop.stop_id for stop in self.stops}

    def calendar_for_service(self, service_id: str) -> List[CalendarEntry]:
        return list(self._calendar_by_service.get(service_id, []))

    def exceptions_for_service(self, service_id: str) -> List[CalendarException]:
        return list(self._exceptions_by_service.get(service_id, []))


def build_index(loader: GTFSLoader, config: HubConfig) -> ScopedStaticIndex:
    """Build the scoped index for a hub."""
    return ScopedStaticIndex.build(loader, config)
