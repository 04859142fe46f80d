"""
Entry timestamp parsing.

One structured parser per delimiter pair. The same compiled pattern both
validates date filters and extracts the timestamp embedded at the start of
an entry, so the two can never disagree about what a date looks like.

Accepted shape (time portion optional, optional leading '['):
    DD<d>MM<d>YYYY[ HH<t>MM<t>SS.mmm]

Day, month and time fields take one or two digits; milliseconds one to
three digits and are read as a plain millisecond count ("5" is 5 ms),
matching what formatEntry() writes.
"""

import re
from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class TimestampParts:
    """Components of a parsed timestamp. Time fields are None for date-only input."""
    day: int
    month: int
    year: int
    hour: Optional[int] = None
    minute: Optional[int] = None
    second: Optional[int] = None
    millisecond: Optional[int] = None

    @property
    def hasTime(self) -> bool:
        return self.hour is not None

    def toDatetime(self) -> datetime:
        """
        Build a naive local datetime (midnight when no time was given).

        Raises:
            ValueError: If the components are not a real calendar instant
        """
        return datetime(
            self.year, self.month, self.day,
            self.hour or 0, self.minute or 0, self.second or 0,
            (self.millisecond or 0) * 1000
        )


class TimestampParser:
    """
    Parses entry timestamps written with the given delimiters.

    Example:
        >>> parser = TimestampParser("/", ":")
        >>> parser.isValidFilter("24/12/2024 08:05:09.7")
        True
        >>> parser.extract("[24/12/2024 08:05:09.7] - boot")
        datetime.datetime(2024, 12, 24, 8, 5, 9, 7000)
    """

    def __init__(self, dateDelimiter: str = "/", timeDelimiter: str = ":"):
        self.dateDelimiter = dateDelimiter
        self.timeDelimiter = timeDelimiter

        d = re.escape(dateDelimiter)
        t = re.escape(timeDelimiter)
        self._pattern = re.compile(
            rf"\[?(?P<day>\d{{1,2}}){d}(?P<month>\d{{1,2}}){d}(?P<year>\d{{4}})"
            rf"(?: (?P<hour>\d{{1,2}}){t}(?P<minute>\d{{1,2}}){t}(?P<second>\d{{1,2}})"
            rf"\.(?P<millisecond>\d{{1,3}}))?"
        )

    def parse(self, text: str, prefix: bool = False) -> Optional[TimestampParts]:
        """
        Parse a timestamp.

        Args:
            text: Text to parse
            prefix: If True, only the start of text must be a timestamp
                    (entry extraction); otherwise the whole text must be one
                    (filter validation)

        Returns:
            TimestampParts, or None if text does not have the timestamp shape
        """
        match = self._pattern.match(text) if prefix else self._pattern.fullmatch(text)
        if not match:
            return None

        groups = {key: int(value) for key, value in match.groupdict().items() if value is not None}
        return TimestampParts(**groups)

    def isValidFilter(self, text: str) -> bool:
        """True if text is a well-formed date filter naming a real calendar date."""
        parts = self.parse(text)
        if parts is None:
            return False
        try:
            parts.toDatetime()
        except ValueError:
            return False
        return True

    def extract(self, entry: str) -> Optional[datetime]:
        """
        Return the timestamp at the start of entry, or None if it has none
        or names an impossible date.
        """
        parts = self.parse(entry, prefix=True)
        if parts is None:
            return None
        try:
            return parts.toDatetime()
        except ValueError:
            return None
