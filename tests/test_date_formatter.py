from datetime import datetime, timezone

import pytest

from dnstore.date_formatter import DateFormatter
from dnstore.exceptions import FieldFormatError


def test_epoch():
    date = DateFormatter.from_mac_ticks(0)
    assert date == datetime(1904, 1, 1, tzinfo=timezone.utc)
    assert DateFormatter.format_finder_date(date) == "January 1, 1904 at 12:00 AM"


def test_noon_and_midnight():
    noon = datetime(2021, 6, 30, 12, 0, tzinfo=timezone.utc)
    midnight = datetime(2021, 12, 31, 0, 0, tzinfo=timezone.utc)
    assert DateFormatter.format_finder_date(noon) == "June 30, 2021 at 12:00 PM"
    assert DateFormatter.format_finder_date(midnight) == "December 31, 2021 at 12:00 AM"


def test_single_digit_hour_has_no_leading_zero():
    date = datetime(1999, 3, 7, 13, 5, tzinfo=timezone.utc)
    assert DateFormatter.format_finder_date(date) == "March 7, 1999 at 1:05 PM"


def test_negative_ticks_round_toward_epoch():
    date = DateFormatter.from_mac_ticks(-65536 * 86400 - 1)
    assert date == datetime(1903, 12, 31, tzinfo=timezone.utc)


def test_out_of_range_seconds():
    with pytest.raises(FieldFormatError):
        DateFormatter.from_mac_seconds(2 ** 62)
