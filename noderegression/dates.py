"""
Date utilities functions.
"""

import datetime
import re

from noderegression.errors import DateFormatError, DateRangeError

# nightly builds before this date are all 0.10/0.12 builds, which are ignored
MIN_BUILD_DATE = datetime.date(2016, 1, 28)


def parse_date(date_string):
    """
    Returns a date from a YYYY-MM-DD string.

    Times are refused: the build time of a nightly is unknown, so anything
    finer than a day would be misleading.
    """
    matched = re.match(r"^(\d{4})-(\d{1,2})-(\d{1,2})$", date_string)
    if not matched:
        if re.match(r"^\d{4}-\d{1,2}-\d{1,2}[T ]", date_string):
            raise DateFormatError(date_string, "Date with time not supported: `%s`")
        raise DateFormatError(date_string)
    try:
        return datetime.date(int(matched.group(1)), int(matched.group(2)), int(matched.group(3)))
    except ValueError as exc:
        raise DateFormatError(date_string, "Not a valid date: `%%s` (%s)" % exc)


def to_utc_date(value, name):
    """
    Check that *value* is a usable bisection bound and return it as a date.

    *value* may be None, a date, or a datetime at midnight UTC (naive
    datetimes are taken as UTC).
    """
    if value is None:
        return None
    if isinstance(value, datetime.datetime):
        offset = value.utcoffset()
        if offset:
            value = (value - offset).replace(tzinfo=None)
        if value.time() != datetime.time():
            raise DateRangeError("%s must be midnight UTC, got %s" % (name, value.isoformat()))
        return value.date()
    if isinstance(value, datetime.date):
        return value
    raise TypeError("%s must be a date, got %s" % (name, type(value).__name__))


def check_date_range(good, bad):
    """
    Validate and normalize a (good, bad) couple of bounds.
    """
    good = to_utc_date(good, "good")
    bad = to_utc_date(bad, "bad")
    if good is not None and bad is not None and good >= bad:
        raise DateRangeError("Good date %s is not before bad date %s." % (good, bad))
    return good, bad
