"""GTFS-Realtime feed fetcher and on-disk cache for the hub."""

import concurrent.futures
import json
import logging
import time
from enum import Enum
from functools import partial
from typing import Callable, Dict, Iterable, Optional

import requests
from google.protobuf import json_format
from google.transit import gtfs_realtime_pb2

from .config import TRIP_UPDATES_FEED, VEHICLE_POSITIONS_FEED, HubConfig
from .exceptions import CacheReadFailure, FeedFetchFailure
from .models import Position

logger = logging.getLogger(__name__)


class FeedState(Enum):
    NO_CACHE = "no_cache"
    FETCHING = "fetching"
    CACHED = "cached"
    STALE = "stale"


def parse_feed(payload: dict) -> gtfs_realtime_pb2.FeedMessage:
    """
    Parse a GTFS-Realtime JSON document into a FeedMessage.

    Raises:
        ValueError: If the document is not a feed or has no header timestamp.
    """
    if not isinstance(payload, dict):
        raise ValueError(f"Expected a JSON object, got {type(payload).__name__}")
    feed = json_format.ParseDict(payload, gtfs_realtime_pb2.FeedMessage(), ignore_unknown_fields=True)
    if not feed.header.HasField("timestamp"):
        raise ValueError("Feed header has no timestamp")
    return feed


def filter_trip_updates(
    feed: gtfs_realtime_pb2.FeedMessage,
    route_ids: Iterable[str],
    stop_ids: Iterable[str],
) -> gtfs_realtime_pb2.FeedMessage:
    """
    Keep only trip updates for hub routes, trimmed to hub stops.

    Entities left without any stop time update are dropped.
    """
    route_ids = set(route_ids)
    stop_ids = set(stop_ids)

    filtered = gtfs_realtime_pb2.FeedMessage()
    filtered.header.CopyFrom(feed.header)

    for entity in feed.entity:
        if not entity.HasField("trip_update"):
            continue
        if entity.trip_update.trip.route_id not in route_ids:
            continue

        kept = [
            stop_time_update
            for stop_time_update in entity.trip_update.stop_time_update
            if stop_time_update.stop_id in stop_ids
        ]
        if not kept:
            continue

        new_entity = filtered.entity.add()
        new_entity.CopyFrom(entity)
        del new_entity.trip_update.stop_time_update[:]
        new_entity.trip_update.stop_time_update.extend(kept)

    logger.debug(f"Kept {len(filtered.entity)} of {len(feed.entity)} trip update entities")
    return filtered


class FeedCache:
    """
    One realtime feed with its adopted snapshot.

    A fetched snapshot replaces the adopted one only when its header
    timestamp is at least freshness_seconds newer, which follows the
    feed's own publication cadence rather than how often we poll.
    """

    def __init__(
        self,
        feed_name: str,
        config: HubConfig,
        entity_filter: Optional[Callable[[gtfs_realtime_pb2.FeedMessage], gtfs_realtime_pb2.FeedMessage]] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.feed_name = feed_name
        self.url = f"{config.feed_base_url.rstrip('/')}/{feed_name}"
        self.path = config.cache_dir / feed_name
        self.freshness_seconds = config.freshness_seconds
        self.timeout = config.request_timeout
        self.entity_filter = entity_filter
        self._clock = clock

        self.snapshot: Optional[gtfs_realtime_pb2.FeedMessage] = None
        self.adopted_timestamp: Optional[int] = None
        self._fetching = False

    @property
    def state(self) -> FeedState:
        if self._fetching:
            return FeedState.FETCHING
        if self.snapshot is None:
            return FeedState.NO_CACHE
        if self._clock() - self.adopted_timestamp >= self.freshness_seconds:
            return FeedState.STALE
        return FeedState.CACHED

    @property
    def entities(self) -> list:
        if self.snapshot is None:
            return []
        return list(self.snapshot.entity)

    def load(self) -> None:
        """Load the persisted snapshot, fetching the feed if none exists."""
        try:
            feed = self.read_cache()
        except FileNotFoundError:
            logger.info(f"No cached {self.feed_name}, fetching")
            self.refresh()
            return
        except CacheReadFailure as e:
            logger.error(f"Ignoring unreadable cache: {e}")
            return

        self.snapshot = feed
        self.adopted_timestamp = feed.header.timestamp
        logger.info(f"Loaded cached {self.feed_name} from {self.adopted_timestamp}")

    def read_cache(self) -> gtfs_realtime_pb2.FeedMessage:
        """
        Read the persisted snapshot.

        Raises:
            FileNotFoundError: If no cache file exists.
            CacheReadFailure: If the file exists but cannot be read or parsed.
        """
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                payload = json.load(f)
            return parse_feed(payload)
        except FileNotFoundError:
            raise
        except (OSError, ValueError, json_format.ParseError) as e:
            raise CacheReadFailure(f"{self.path}: {e}") from e

    def fetch(self) -> gtfs_realtime_pb2.FeedMessage:
        """
        Fetch the full feed.

        Raises:
            FeedFetchFailure: On network, HTTP or parse errors.
        """
        logger.debug(f"Fetching {self.url}")
        try:
            response = requests.get(self.url, timeout=self.timeout)
            response.raise_for_status()
            return parse_feed(response.json())
        except (requests.RequestException, ValueError, json_format.ParseError) as e:
            raise FeedFetchFailure(f"Failed to fetch {self.url}: {e}") from e

    def refresh(self) -> bool:
        """
        Fetch the feed and adopt it if it is fresh enough.

        Returns:
            True if a new snapshot was adopted.
        """
        self._fetching = True
        try:
            feed = self.fetch()
        except FeedFetchFailure as e:
            logger.warning(f"Keeping cached {self.feed_name}: {e}")
            return False
        finally:
            self._fetching = False

        fetched_timestamp = feed.header.timestamp
        if (
            self.adopted_timestamp is not None
            and fetched_timestamp - self.adopted_timestamp < self.freshness_seconds
        ):
            logger.debug(
                f"Discarding {self.feed_name} from {fetched_timestamp}, "
                f"adopted snapshot is from {self.adopted_timestamp}"
            )
            return False

        self.adopt(feed)
        return True

    def adopt(self, feed: gtfs_realtime_pb2.FeedMessage) -> None:
        """Filter, persist and install a fetched snapshot."""
        if self.entity_filter is not None:
            feed = self.entity_filter(feed)

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(json_format.MessageToDict(feed), f, indent=4)
        except OSError as e:
            logger.error(f"Failed to write {self.path}: {e}")

        self.snapshot = feed
        self.adopted_timestamp = feed.header.timestamp
        logger.info(f"Adopted {self.feed_name} from {self.adopted_timestamp} ({len(feed.entity)} entities)")

    def clear(self) -> None:
        self.snapshot = None
        self.adopted_timestamp = None


class LiveFeedManager:
    """Owns the trip update and vehicle position caches for the hub."""

    def __init__(self, config: HubConfig, clock: Callable[[], float] = time.time):
        self.trip_updates = FeedCache(
            TRIP_UPDATES_FEED,
            config,
            entity_filter=partial(
                filter_trip_updates,
                route_ids=config.route_ids,
                stop_ids=config.stop_ids,
            ),
            clock=clock,
        )
        self.vehicle_positions = FeedCache(VEHICLE_POSITIONS_FEED, config, clock=clock)

    @property
    def feeds(self):
        return (self.trip_updates, self.vehicle_positions)

    def _run_concurrently(self, method_name: str) -> Dict[str, object]:
        with concurrent.futures.ThreadPoolExecutor(max_workers=len(self.feeds)) as executor:
            futures = {
                feed.feed_name: executor.submit(getattr(feed, method_name))
                for feed in self.feeds
            }
            return {name: future.result() for name, future in futures.items()}

    def load(self) -> None:
        """Load both caches from disk, fetching any that are missing."""
        self._run_concurrently("load")

    def refresh(self) -> Dict[str, bool]:
        """
        Refresh both feeds.

        Returns:
            Feed name -> whether a new snapshot was adopted.
        """
        return self._run_concurrently("refresh")

    def trip_update_for(self, trip_id: str) -> Optional[gtfs_realtime_pb2.TripUpdate]:
        """First trip update for a trip id, in feed order."""
        matches = [
            entity.trip_update
            for entity in self.trip_updates.entities
            if entity.HasField("trip_update") and entity.trip_update.trip.trip_id == trip_id
        ]
        if len(matches) > 1:
            logger.debug(f"{len(matches)} trip updates for trip {trip_id}, using the first")
        return matches[0] if matches else None

    def vehicle_position_for(self, trip_id: str) -> Optional[gtfs_realtime_pb2.VehiclePosition]:
        """First vehicle position for a trip id, in feed order."""
        matches = [
            entity.vehicle
            for entity in self.vehicle_positions.entities
            if entity.HasField("vehicle") and entity.vehicle.trip.trip_id == trip_id
        ]
        if len(matches) > 1:
            logger.debug(f"{len(matches)} vehicle positions for trip {trip_id}, using the first")
        return matches[0] if matches else None

    def live_arrival_time(self, trip_id: str) -> Optional[int]:
        """
        Predicted arrival for a trip as a Unix timestamp.

        Uses the first stop time update's arrival time, falling back to its
        departure time.
        """
        trip_update = self.trip_update_for(trip_id)
        if trip_update is None or not trip_update.stop_time_update:
            return None

        stop_time_update = trip_update.stop_time_update[0]
        if stop_time_update.HasField("arrival") and stop_time_update.arrival.HasField("time"):
            return stop_time_update.arrival.time
        if stop_time_update.HasField("departure") and stop_time_update.departure.HasField("time"):
            return stop_time_update.departure.time
        return None

    def live_position(self, trip_id: str) -> Optional[Position]:
        vehicle = self.vehicle_position_for(trip_id)
        if vehicle is None or not vehicle.HasField("position"):
            return None
        # Coordinates are float32; the JSON form keeps their shortest repr
        coords = json_format.MessageToDict(vehicle.position)
        return Position(
            latitude=coords.get("latitude", 0.0),
            longitude=coords.get("longitude", 0.0),
        )

    def clear(self) -> None:
        for feed in self.feeds:
            feed.clear()
