"""Data models for the BusTrack hub arrival pipeline."""

from dataclasses import dataclass
from datetime import date, datetime, timezone
from enum import IntEnum
from typing import Dict, Optional, Tuple

NO_LIVE_DATA = "no live data"

# calendar.txt column order mapped to Sunday=0 .. Saturday=6
WEEKDAY_COLUMNS = (
    "sunday",
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
)

DISPLAY_COLUMNS = (
    "Short Name",
    "Long Name",
    "Service Id",
    "Heading Sign",
    "Scheduled Arrival Time",
    "Live Arrival Time",
    "Live Position",
)


def parse_gtfs_date(value: str) -> date:
    """Parse a GTFS YYYYMMDD date."""
    try:
        return datetime.strptime(value, "%Y%m%d").date()
    except (TypeError, ValueError):
        raise ValueError(f"Invalid GTFS date {value!r}")


def parse_flag(value: str) -> bool:
    """Parse a GTFS 0/1 flag."""
    if value == "1":
        return True
    if value == "0":
        return False
    raise ValueError(f"Invalid GTFS flag {value!r}")


def time_to_minutes(value: str) -> int:
    """
    Convert an H:MM, HH:MM or HH:MM:SS string to minutes since midnight.

    Hours past 23 describe service after midnight and are kept as-is,
    so "25:10" is 1510 minutes. Seconds are ignored.
    """
    parts = value.split(":")
    if len(parts) not in (2, 3):
        raise ValueError(f"Invalid GTFS time {value!r}")
    try:
        return int(parts[0]) * 60 + int(parts[1])
    except ValueError:
        raise ValueError(f"Invalid GTFS time {value!r}") from None


def weekday_index(day: date) -> int:
    """Weekday with Sunday=0 .. Saturday=6."""
    return day.isoweekday() % 7


class ExceptionType(IntEnum):
    """calendar_dates.txt exception_type."""
    ADDED = 1
    REMOVED = 2


@dataclass(frozen=True)
class Route:
    """A bus route serving the hub."""
    route_id: str
    route_short_name: str
    route_long_name: str

    @classmethod
    def from_row(cls, row: Dict[str, str]) -> "Route":
        return cls(
            route_id=row["route_id"],
            route_short_name=row["route_short_name"],
            route_long_name=row["route_long_name"],
        )


@dataclass(frozen=True)
class Trip:
    """A scheduled trip on a route."""
    trip_id: str
    route_id: str
    service_id: str
    trip_headsign: str

    @classmethod
    def from_row(cls, row: Dict[str, str]) -> "Trip":
        return cls(
            trip_id=row["trip_id"],
            route_id=row["route_id"],
            service_id=row["service_id"],
            trip_headsign=row.get("trip_headsign", ""),
        )


@dataclass(frozen=True)
class StopTime:
    """A scheduled arrival of a trip at a stop."""
    trip_id: str
    stop_id: str
    arrival_time: str  # HH:MM:SS, hours may exceed 24
    stop_sequence: int

    @classmethod
    def from_row(cls, row: Dict[str, str]) -> "StopTime":
        try:
            stop_sequence = int(row["stop_sequence"])
        except ValueError:
            raise ValueError(f"Invalid stop_sequence {row['stop_sequence']!r}")
        time_to_minutes(row["arrival_time"])
        return cls(
            trip_id=row["trip_id"],
            stop_id=row["stop_id"],
            arrival_time=row["arrival_time"],
            stop_sequence=stop_sequence,
        )

    @property
    def arrival_minutes(self) -> int:
        return time_to_minutes(self.arrival_time)


@dataclass(frozen=True)
class Stop:
    """A physical stop."""
    stop_id: str
    stop_name: str

    @classmethod
    def from_row(cls, row: Dict[str, str]) -> "Stop":
        return cls(stop_id=row["stop_id"], stop_name=row["stop_name"])


@dataclass(frozen=True)
class CalendarEntry:
    """Base weekly service pattern for a service id."""
    service_id: str
    weekdays: Tuple[bool, ...]  # Sunday=0 .. Saturday=6
    start_date: date
    end_date: date

    @classmethod
    def from_row(cls, row: Dict[str, str]) -> "CalendarEntry":
        return cls(
            service_id=row["service_id"],
            weekdays=tuple(parse_flag(row[column]) for column in WEEKDAY_COLUMNS),
            start_date=parse_gtfs_date(row["start_date"]),
            end_date=parse_gtfs_date(row["end_date"]),
        )

    def runs_on(self, day: date) -> bool:
        """True if the pattern covers the date and its weekday."""
        return self.start_date <= day <= self.end_date and self.weekdays[weekday_index(day)]


@dataclass(frozen=True)
class CalendarException:
    """A dated override adding or removing service."""
    service_id: str
    date: date
    exception_type: ExceptionType

    @classmethod
    def from_row(cls, row: Dict[str, str]) -> "CalendarException":
        try:
            exception_type = ExceptionType(int(row["exception_type"]))
        except ValueError:
            raise ValueError(f"Invalid exception_type {row['exception_type']!r}")
        return cls(
            service_id=row["service_id"],
            date=parse_gtfs_date(row["date"]),
            exception_type=exception_type,
        )


@dataclass(frozen=True)
class Position:
    """Live vehicle coordinates."""
    latitude: float
    longitude: float

    def __str__(self) -> str:
        return f"(latitude: {self.latitude}, longitude: {self.longitude})"


@dataclass
class ResultRow:
    """One displayable arrival at the hub."""
    short_name: str
    long_name: str
    service_id: str
    heading_sign: str
    scheduled_arrival_time: str
    live_arrival_time: Optional[int] = None  # Unix timestamp
    live_position: Optional[Position] = None

    def as_display(self, tz: timezone) -> Dict[str, str]:
        """Render the row with display headings and text values."""
        if self.live_arrival_time is None:
            live_arrival = NO_LIVE_DATA
        else:
            live_arrival = datetime.fromtimestamp(self.live_arrival_time, tz).strftime("%H:%M:%S")
        live_position = NO_LIVE_DATA if self.live_position is None else str(self.live_position)

        values = (
            self.short_name,
            self.long_name,
            self.service_id,
            self.heading_sign,
            self.scheduled_arrival_time,
            live_arrival,
            live_position,
        )
        return dict(zip(DISPLAY_COLUMNS, values))
