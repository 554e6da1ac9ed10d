"""Shared GTFS and GTFS-Realtime fixtures for the test suite."""

import json
from pathlib import Path
from unittest.mock import MagicMock

import requests

from bustrack.config import TRIP_UPDATES_FEED, VEHICLE_POSITIONS_FEED

ROUTES_CSV = """route_id,route_short_name,route_long_name,route_type
66-3136,66,RBWH station - UQ Lakes station,3
66-3195,66,RBWH station - UQ Lakes station,3
169-3136,169,Eight Mile Plains - UQ Lakes station,3
169-3195,169,Eight Mile Plains station - UQ Lakes station,3
209-3195,209,UQ Lakes station - Carindale,3
111-3195,111,Eight Mile Plains - City,3
"""

TRIPS_CSV = """route_id,service_id,trip_id,trip_headsign,direction_id
66-3195,WKDAY,T66A,RBWH station,0
66-3195,WKDAY,T66B,RBWH station,0
169-3195,WKDAY,T169A,Eight Mile Plains station,1
209-3195,WKEND,T209A,Carindale,1
111-3195,WKDAY,T111A,City,0
"""

STOP_TIMES_CSV = """trip_id,arrival_time,departure_time,stop_id,stop_sequence
T66A,08:07:00,08:07:00,1853,1
T66A,08:30:00,08:30:00,9999,2
T66B,08:02:00,08:02:00,place_uqlksa,0
T66B,08:11:00,08:11:00,1853,1
T169A,07:59:00,07:59:00,1878,1
T169A,08:10:00,08:10:00,1878,5
T209A,08:05:00,08:05:00,1882,1
T111A,08:05:00,08:05:00,2000,1
"""

STOPS_CSV = """stop_id,stop_name,stop_lat,stop_lon
1853,UQ Lakes station stop A,-27.4977,153.0170
1878,UQ Lakes station stop B,-27.4979,153.0172
1882,UQ Lakes station stop C,-27.4981,153.0174
9999,Coronation Drive,-27.4800,153.0000
place_uqlksa,UQ Lakes station,-27.4978,153.0171
2000,King George Square station,-27.4680,153.0240
"""

CALENDAR_CSV = """service_id,monday,tuesday,wednesday,thursday,friday,saturday,sunday,start_date,end_date
WKDAY,1,1,1,1,1,0,0,20230101,20231231
WKEND,0,0,0,0,0,1,1,20230101,20231231
"""

CALENDAR_DATES_CSV = """service_id,date,exception_type
WKDAY,20230815,2
WKEND,20230814,1
"""

TABLES = {
    "routes": ROUTES_CSV,
    "trips": TRIPS_CSV,
    "stop_times": STOP_TIMES_CSV,
    "stops": STOPS_CSV,
    "calendar": CALENDAR_CSV,
    "calendar_dates": CALENDAR_DATES_CSV,
}

# 2023-08-14 08:00:00 in Brisbane
BASE_TIMESTAMP = 1691964000

TRIP_UPDATES_PAYLOAD = {
    "header": {
        "gtfsRealtimeVersion": "2.0",
        "incrementality": "FULL_DATASET",
        "timestamp": str(BASE_TIMESTAMP),
    },
    "entity": [
        {
            "id": "1",
            "tripUpdate": {
                "trip": {"tripId": "T66A", "routeId": "66-3195"},
                "stopTimeUpdate": [
                    {"stopSequence": 1, "stopId": "1853", "arrival": {"time": str(BASE_TIMESTAMP + 420)}},
                    {"stopSequence": 2, "stopId": "9999", "arrival": {"time": str(BASE_TIMESTAMP + 1800)}},
                ],
            },
        },
        {
            "id": "2",
            "tripUpdate": {
                "trip": {"tripId": "T169A", "routeId": "169-3195"},
                "stopTimeUpdate": [
                    {"stopSequence": 5, "stopId": "1878", "departure": {"time": str(BASE_TIMESTAMP + 600)}},
                ],
            },
        },
        {
            "id": "3",
            "tripUpdate": {
                "trip": {"tripId": "T111A", "routeId": "111-3195"},
                "stopTimeUpdate": [
                    {"stopSequence": 1, "stopId": "2000", "arrival": {"time": str(BASE_TIMESTAMP + 300)}},
                ],
            },
        },
        {
            "id": "4",
            "tripUpdate": {
                "trip": {"tripId": "T66X", "routeId": "66-3195"},
                "stopTimeUpdate": [
                    {"stopSequence": 3, "stopId": "9999", "arrival": {"time": str(BASE_TIMESTAMP + 300)}},
                ],
            },
        },
    ],
}

VEHICLE_POSITIONS_PAYLOAD = {
    "header": {
        "gtfsRealtimeVersion": "2.0",
        "incrementality": "FULL_DATASET",
        "timestamp": str(BASE_TIMESTAMP),
    },
    "entity": [
        {
            "id": "v1",
            "vehicle": {
                "trip": {"tripId": "T66A", "routeId": "66-3195"},
                "position": {"latitude": -27.4975, "longitude": 153.0137},
                "vehicle": {"id": "V100"},
            },
        },
        {
            "id": "v2",
            "vehicle": {
                "trip": {"tripId": "T111A", "routeId": "111-3195"},
                "position": {"latitude": -27.468, "longitude": 153.024},
                "vehicle": {"id": "V200"},
            },
        },
    ],
}


def write_static_tables(directory, tables=None):
    """Write GTFS static tables into directory."""
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    for name, content in (tables or TABLES).items():
        (directory / f"{name}.txt").write_text(content, encoding="utf-8")
    return directory


def with_timestamp(payload, timestamp):
    """Copy of a feed payload with a different header timestamp."""
    copied = json.loads(json.dumps(payload))
    copied["header"]["timestamp"] = str(timestamp)
    return copied


def mock_response(payload):
    """Stand-in for a requests.Response carrying a JSON payload."""
    response = MagicMock()
    response.json.return_value = payload
    return response


def feed_server(trip_updates=TRIP_UPDATES_PAYLOAD, vehicle_positions=VEHICLE_POSITIONS_PAYLOAD):
    """side_effect for requests.get serving both feeds by URL."""

    def fake_get(url, timeout=None):
        if url.endswith(TRIP_UPDATES_FEED):
            return mock_response(trip_updates)
        if url.endswith(VEHICLE_POSITIONS_FEED):
            return mock_response(vehicle_positions)
        raise requests.ConnectionError(url)

    return fake_get
