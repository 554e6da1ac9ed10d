"""Interactive console front end for the UQ Lakes bus tracker."""

import argparse
import logging
from functools import partial
from typing import Callable, List, Optional, Sequence

import pandas as pd

from .config import HubConfig
from .hub_tracker import HubArrivalTracker
from .models import DISPLAY_COLUMNS, ResultRow
from .query_input import (
    prompt_until_valid,
    route_menu,
    validate_date,
    validate_route_option,
    validate_time,
)

logger = logging.getLogger(__name__)

NO_TRIPS_MESSAGE = "No trip found for the given information :("
GOODBYE_MESSAGE = "Thanks for using the UQ Lakes station bus tracker!"


def results_table(rows: Sequence[ResultRow], config: HubConfig) -> pd.DataFrame:
    """Result rows as a display DataFrame."""
    return pd.DataFrame([row.as_display(config.tz) for row in rows], columns=list(DISPLAY_COLUMNS))


def render_results(rows: Sequence[ResultRow], config: HubConfig) -> str:
    if not rows:
        return NO_TRIPS_MESSAGE
    return results_table(rows, config).to_string(index=False)


def want_search_again(
    input_fn: Callable[[str], str] = input,
    output_fn: Callable[[str], None] = print,
) -> bool:
    """Ask whether to run another search."""
    while True:
        answer = input_fn("Would you like to search again? ").strip().lower()
        if answer in ("y", "yes"):
            return True
        if answer in ("n", "no"):
            output_fn(GOODBYE_MESSAGE)
            return False
        output_fn("Please enter a valid option.")


def run_query(
    tracker: HubArrivalTracker,
    input_fn: Callable[[str], str] = input,
    output_fn: Callable[[str], None] = print,
) -> List[ResultRow]:
    """Prompt for one query, print the results and return them."""
    year = tracker.config.supported_year
    short_names = tracker.route_short_names()
    prompt = partial(prompt_until_valid, input_fn=input_fn, output_fn=output_fn, supported_year=year)

    travel_date = prompt(
        "What date will you depart UQ Lakes station by bus? ",
        partial(validate_date, supported_year=year),
    )
    departure_time = prompt("What time will you depart UQ Lakes station by bus? ", validate_time)
    selected = prompt(
        route_menu(short_names) + "\n",
        partial(validate_route_option, short_names=short_names),
    )

    rows = tracker.get_arrivals(travel_date, departure_time, selected)
    output_fn(render_results(rows, tracker.config))
    return rows


def build_parser() -> argparse.ArgumentParser:
    defaults = HubConfig()
    parser = argparse.ArgumentParser(description="UQ Lakes station bus arrival tracker")
    parser.add_argument("--static-dir", default=str(defaults.static_dir), help="GTFS static tables directory")
    parser.add_argument("--cache-dir", default=str(defaults.cache_dir), help="Realtime cache directory")
    parser.add_argument("--feed-url", default=defaults.feed_base_url, help="GTFS-Realtime JSON base URL")
    parser.add_argument("--verbose", action="store_true", help="Show informational logging")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    config = HubConfig(
        static_dir=args.static_dir,
        cache_dir=args.cache_dir,
        feed_base_url=args.feed_url,
    )
    tracker = HubArrivalTracker(config)

    try:
        while True:
            print("Welcome to the UQ Lakes station bus tracker!")
            run_query(tracker)
            if not want_search_again():
                break
    except (KeyboardInterrupt, EOFError):
        print()
    finally:
        tracker.cleanup()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
