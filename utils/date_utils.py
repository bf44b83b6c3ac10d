import re
from datetime import date, datetime
from typing import Union

from dateutil.relativedelta import relativedelta

from core.errors import InvalidArgument

_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

DateLike = Union[str, date]


def parse_iso_date(value: DateLike) -> date:
    """Strengt yyyy-mm-dd -> date, ellers InvalidArgument"""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not _ISO_DATE_RE.match(value):
        raise InvalidArgument(f"Ugyldig dato (forventet åååå-mm-dd): {value!r}")
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise InvalidArgument(f"Ugyldig dato: {value!r}") from exc


def month_index(d: date) -> int:
    """Absolutt månedsindeks: år * 12 + måned (0-basert)"""
    return d.year * 12 + d.month - 1


def add_months(d: date, months: int) -> date:
    """Dato pluss N måneder"""
    return d + relativedelta(months=months)


def months_between(start: date, end: date) -> int:
    """Antall månedsskifter fra start til end; dag i måneden ignoreres"""
    return month_index(end) - month_index(start)
