"""Validation of the rider's date, time and route choices."""

import re
from datetime import date
from enum import Enum
from typing import Any, Callable, List, NamedTuple, Optional, Sequence

from .config import SUPPORTED_YEAR
from .exceptions import InvalidInput

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
TIME_PATTERN = re.compile(r"^([01][0-9]|2[0-3]):[0-5][0-9]$")


class InputError(Enum):
    MALFORMED_DATE = "Incorrect date format. Please use YYYY-MM-DD"
    DATE_OUT_OF_RANGE = "Only supports data within year {year}. Please try again."
    MALFORMED_TIME = "Incorrect time format. Please use HH:mm"
    INVALID_ROUTE_OPTION = "Please enter a valid option for a bus route."

    @property
    def message(self) -> str:
        return self.value


class Validated(NamedTuple):
    value: Any = None
    error: Optional[InputError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def validate_date(text: str, supported_year: int = SUPPORTED_YEAR) -> Validated:
    """
    Validate a YYYY-MM-DD travel date.

    A well-formed date outside the supported year is reported as
    DATE_OUT_OF_RANGE, distinct from MALFORMED_DATE.
    """
    text = text.strip()
    if not DATE_PATTERN.match(text):
        return Validated(error=InputError.MALFORMED_DATE)

    year, month, day = (int(part) for part in text.split("-"))
    if year != supported_year:
        return Validated(error=InputError.DATE_OUT_OF_RANGE)

    try:
        return Validated(value=date(year, month, day))
    except ValueError:
        return Validated(error=InputError.MALFORMED_DATE)


def validate_time(text: str) -> Validated:
    """Validate a 24-hour HH:MM departure time."""
    text = text.strip()
    if not TIME_PATTERN.match(text):
        return Validated(error=InputError.MALFORMED_TIME)
    return Validated(value=text)


def validate_route_option(text: str, short_names: Sequence[str]) -> Validated:
    """
    Validate a route menu option.

    Option 1 selects every route; option n >= 2 selects short_names[n - 2].
    The value is the list of selected short names.
    """
    text = text.strip()
    try:
        option = int(text)
    except ValueError:
        return Validated(error=InputError.INVALID_ROUTE_OPTION)

    if str(option) != text or option < 1 or option > len(short_names) + 1:
        return Validated(error=InputError.INVALID_ROUTE_OPTION)
    if option == 1:
        return Validated(value=list(short_names))
    return Validated(value=[short_names[option - 2]])


def route_menu(short_names: Sequence[str]) -> str:
    """Menu text listing the route options."""
    lines = ["What Bus Route would you like to take?", "1 - Show All Routes"]
    for option, short_name in enumerate(short_names, start=2):
        lines.append(f"{option} - {short_name}")
    return "\n".join(lines)


def error_message(error: InputError, supported_year: int = SUPPORTED_YEAR) -> str:
    return error.message.format(year=supported_year)


def prompt_until_valid(
    prompt: str,
    validator: Callable[[str], Validated],
    input_fn: Callable[[str], str] = input,
    output_fn: Callable[[str], None] = print,
    supported_year: int = SUPPORTED_YEAR,
) -> Any:
    """Ask until the validator accepts the answer, then return its value."""
    while True:
        result = validator(input_fn(prompt))
        if result.ok:
            return result.value
        output_fn(error_message(result.error, supported_year))


def parse_query(
    date_text: str,
    time_text: str,
    route_option: str,
    short_names: Sequence[str],
    supported_year: int = SUPPORTED_YEAR,
) -> tuple:
    """
    Validate a complete query.

    Returns:
        (travel_date, departure_time, selected_short_names)

    Raises:
        InvalidInput: On the first rejected field.
    """
    results: List[tuple] = [
        (validate_date(date_text, supported_year), date_text),
        (validate_time(time_text), time_text),
        (validate_route_option(route_option, short_names), route_option),
    ]
    for result, text in results:
        if not result.ok:
            raise InvalidInput(result.error, text)
    return tuple(result.value for result, _ in results)
