"""Example usage of HubArrivalTracker."""

import logging
import sys
from pathlib import Path

# Add src to path so we can import bustrack
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from bustrack.exceptions import InvalidInput
from bustrack.hub_tracker import HubArrivalTracker
from bustrack.query_input import parse_query

# Set up logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger(__name__)


def print_arrivals(date_text: str, time_text: str, route_option: str = "1"):
    """
    Fetch and display arrivals at UQ Lakes station.

    Args:
        date_text: Travel date, YYYY-MM-DD.
        time_text: Departure time, HH:MM.
        route_option: "1" for every route, "2".. for a single route.
    """
    print(f"\n{'='*70}")
    print(f"Arrivals at UQ Lakes station: {date_text} {time_text}")
    print(f"{'='*70}\n")

    tracker = HubArrivalTracker()
    try:
        travel_date, departure_time, short_names = parse_query(
            date_text,
            time_text,
            route_option,
            tracker.route_short_names(),
            tracker.config.supported_year,
        )
    except InvalidInput as e:
        print(f"Invalid query: {e}")
        return

    rows = tracker.get_arrivals(travel_date, departure_time, short_names)
    if not rows:
        print("  No arrivals found")
    for row in rows:
        display = row.as_display(tracker.config.tz)
        print(
            f"  {display['Short Name']:>5}  {display['Scheduled Arrival Time']}  "
            f"live {display['Live Arrival Time']}  -> {display['Heading Sign']}"
        )

    tracker.cleanup()


if __name__ == "__main__":
    if len(sys.argv) < 3:
        print("Usage: python example.py YYYY-MM-DD HH:MM [route option]")
        sys.exit(1)
    print_arrivals(*sys.argv[1:4])
