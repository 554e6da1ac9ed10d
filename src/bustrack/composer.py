"""Joins matched scheduled arrivals with live feed data into result rows."""

import logging
from typing import Iterable, List, Tuple

from .live_feed import LiveFeedManager
from .models import ResultRow, StopTime, Trip
from .static_index import ScopedStaticIndex

logger = logging.getLogger(__name__)


def compose(
    matches: Iterable[Tuple[StopTime, Trip]],
    index: ScopedStaticIndex,
    live: LiveFeedManager,
) -> List[ResultRow]:
    """
    Build result rows for matched stop times.

    One row is produced per matched stop time, trip with that id, and long
    name of the trip's route short name. Missing live data is left as None.

    Args:
        matches: (StopTime, Trip) pairs from the trip matcher.
        index: Scoped static index used for route names.
        live: Live feed caches, looked up by trip id.

    Returns:
        ResultRow list in match order.
    """
    rows: List[ResultRow] = []

    for stop_time, matched_trip in matches:
        route = index.route_for_trip(matched_trip.trip_id)
        if route is None:
            logger.warning(f"No route for trip {matched_trip.trip_id}")
            continue

        long_names = index.long_names_for_short_name(route.route_short_name)
        live_arrival = live.live_arrival_time(matched_trip.trip_id)
        live_position = live.live_position(matched_trip.trip_id)

        for trip in index.trips_by_id(matched_trip.trip_id):
            for long_name in long_names:
                rows.append(
                    ResultRow(
                        short_name=route.route_short_name,
                        long_name=long_name,
                        service_id=trip.service_id,
                        heading_sign=trip.trip_headsign,
                        scheduled_arrival_time=stop_time.arrival_time,
                        live_arrival_time=live_arrival,
                        live_position=live_position,
                    )
                )

    return rows
