"""
Entry formatting.

Pure function, no state. Produces the on-disk form of one timestamped entry:

    "\n[DD/MM/YYYY HH:MM:SS.mmm] - message\n"

The surrounding newlines make consecutive appends blank-line separated.
"""

from datetime import datetime


def formatTimestamp(timestamp: datetime, dateDelimiter: str = "/", timeDelimiter: str = ":") -> str:
    """
    Render timestamp as DD<d>MM<d>YYYY HH<t>MM<t>SS.mmm.

    Day, month, hour, minute and second are zero-padded to two digits, the
    year to four; milliseconds are not padded.
    """
    date = dateDelimiter.join([f"{timestamp.day:02d}", f"{timestamp.month:02d}", f"{timestamp.year:04d}"])
    time = timeDelimiter.join([f"{timestamp.hour:02d}", f"{timestamp.minute:02d}", f"{timestamp.second:02d}"])
    return f"{date} {time}.{timestamp.microsecond // 1000}"


def formatEntry(message: str, timestamp: datetime, dateDelimiter: str = "/", timeDelimiter: str = ":") -> str:
    """Wrap message in a timestamped, blank-line delimited entry."""
    return f"\n[{formatTimestamp(timestamp, dateDelimiter, timeDelimiter)}] - {message}\n"
