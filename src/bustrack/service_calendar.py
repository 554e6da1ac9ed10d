"""Service calendar resolution from calendar.txt and calendar_dates.txt."""

import logging
from datetime import date

from .models import ExceptionType
from .static_index import ScopedStaticIndex

logger = logging.getLogger(__name__)


class ServiceCalendar:
    """Decides whether a service id operates on a given date."""

    def __init__(self, index: ScopedStaticIndex, honor_added_exceptions: bool = False):
        """
        Initialize the resolver.

        Args:
            index: Scoped static index holding calendar and calendar_dates.
            honor_added_exceptions: If True, an ADDED exception makes the
                service active on that date even outside its base calendar.
                Off by default; the published timetable has only ever been
                read with removals applied.
        """
        self.index = index
        self.honor_added_exceptions = honor_added_exceptions

    def exception_on(self, service_id: str, day: date, exception_type: ExceptionType) -> bool:
        return any(
            exception.date == day and exception.exception_type == exception_type
            for exception in self.index.exceptions_for_service(service_id)
        )

    def is_service_active(self, service_id: str, day: date) -> bool:
        """
        Check whether a service runs on a date.

        A REMOVED exception on the date always wins. Otherwise the service
        runs if a calendar row covers the date and has its weekday flag set.
        """
        if self.exception_on(service_id, day, ExceptionType.REMOVED):
            logger.debug(f"Service {service_id} removed on {day}")
            return False

        if self.honor_added_exceptions and self.exception_on(service_id, day, ExceptionType.ADDED):
            return True

        return any(entry.runs_on(day) for entry in self.index.calendar_for_service(service_id))
