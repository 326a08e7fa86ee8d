# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Date formatting utilities

Converts Mac epoch timestamps (seconds since 1904-01-01 00:00:00 UTC)
used by DS_Store fields to readable dates.

Copyright 2025 DNAi inc.
"""

from datetime import datetime, timedelta, timezone

from dnstore.exceptions import FieldFormatError


class DateFormatter:
    """
    Mac epoch date conversion.

    Finder stores modification dates as 1/65536 second ticks since the
    Mac epoch. Fractions of a second are dropped.
    """

    MAC_EPOCH = datetime(1904, 1, 1, tzinfo=timezone.utc)
    TICKS_PER_SECOND = 65536

    @staticmethod
    def from_mac_seconds(seconds: int) -> datetime:
        """
        Convert whole seconds since the Mac epoch to a datetime.

        Raises:
            FieldFormatError: If the timestamp is outside the datetime range
        """
        try:
            return DateFormatter.MAC_EPOCH + timedelta(seconds=seconds)
        except OverflowError as exc:
            raise FieldFormatError(f"Timestamp {seconds} out of range") from exc

    @staticmethod
    def from_mac_ticks(ticks: int) -> datetime:
        """
        Convert 1/65536 second ticks since the Mac epoch to a datetime.
        """
        seconds = abs(ticks) // DateFormatter.TICKS_PER_SECOND
        return DateFormatter.from_mac_seconds(seconds if ticks >= 0 else -seconds)

    @staticmethod
    def format_finder_date(dt: datetime) -> str:
        """
        Format a datetime the way Finder shows it, e.g.
        'January 2, 1904 at 12:00 AM'.
        """
        # Finder drops the leading zero of the 12-hour clock
        hour = dt.strftime('%I').lstrip('0')
        return f"{dt.strftime('%B')} {dt.day}, {dt.year} at {hour}:{dt.strftime('%M %p')}"
