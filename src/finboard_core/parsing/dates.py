"""Date parsing for Brazilian sales spreadsheets.

Dates arrive in several shapes: split across ``Ano`` / ``Mês`` / ``Dia``
columns (month written as a Portuguese name), as ``DD/MM/YYYY`` text, as
ISO text, or as a spreadsheet serial number. :func:`parse_date` tries each
shape in a fixed order and returns an ISO-8601 UTC timestamp string.

Date-only inputs resolve to midnight UTC.

Examples:
    >>> parse_date("15/03/2024")
    '2024-03-15T00:00:00.000Z'
    >>> parse_date("", DateParts("2025", "Janeiro", "1"))
    '2025-01-01T00:00:00.000Z'
"""

from __future__ import annotations

import logging
import re
import warnings
from datetime import date, datetime, timedelta, timezone
from typing import Any, Callable, NamedTuple, Optional

import pandas as pd

from finboard_core.exceptions import DateParseError
from finboard_core.parsing.cleaning import remove_accents, strip_invisibles
from finboard_core.parsing.values import parse_int

logger = logging.getLogger(__name__)

MONTHS: dict[str, int] = {
    "janeiro": 1,
    "fevereiro": 2,
    "março": 3,
    "abril": 4,
    "maio": 5,
    "junho": 6,
    "julho": 7,
    "agosto": 8,
    "setembro": 9,
    "outubro": 10,
    "novembro": 11,
    "dezembro": 12,
}
_MONTHS_PLAIN = {remove_accents(k): v for k, v in MONTHS.items()}

# (pattern, order of the captured groups)
DATE_PATTERNS: tuple[tuple[re.Pattern[str], tuple[str, str, str]], ...] = (
    (re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$"), ("day", "month", "year")),
    (re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})$"), ("year", "month", "day")),
    (re.compile(r"^(\d{1,2})-(\d{1,2})-(\d{4})$"), ("day", "month", "year")),
)

# Spreadsheet serial day 0
SERIAL_EPOCH = datetime(1899, 12, 30, tzinfo=timezone.utc)
SERIAL_DATE_FLOOR = 25000.0

Clock = Callable[[], datetime]


class DateParts(NamedTuple):
    """Raw cell text of split year / month / day columns."""

    year: Any
    month: Any
    day: Any


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_iso(ts: datetime) -> str:
    """Format a datetime as ``YYYY-MM-DDTHH:MM:SS.mmmZ`` in UTC.

    Naive datetimes are taken to be UTC already.
    """
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    ts = ts.astimezone(timezone.utc)
    return ts.strftime("%Y-%m-%dT%H:%M:%S") + f".{ts.microsecond // 1000:03d}Z"


def month_number(value: Any) -> Optional[int]:
    """Resolve a Portuguese month name or a numeric month.

    Examples:
        >>> month_number("Março")
        3
        >>> month_number("marco")
        3
        >>> month_number("12")
        12
    """
    s = strip_invisibles(value)
    if not s:
        return None
    key = s.lower()
    if key in MONTHS:
        return MONTHS[key]
    plain = remove_accents(key)
    if plain in _MONTHS_PLAIN:
        return _MONTHS_PLAIN[plain]
    return parse_int(s)


def resolve_date_parts(parts: DateParts) -> date:
    """Build a calendar date from split columns.

    Raises:
        ValueError: If a part is missing or the date does not exist
            (month 13, 31 February, ...).
    """
    year = parse_int(strip_invisibles(parts.year))
    month = month_number(parts.month)
    day = parse_int(strip_invisibles(parts.day))
    if not year or not month or not day:
        raise ValueError(f"Data inválida: {parts.day}/{parts.month}/{parts.year}")
    try:
        return date(year, month, day)
    except OverflowError as exc:
        # integers too large for the C date fields
        raise ValueError(f"Data inválida: {parts.day}/{parts.month}/{parts.year}") from exc


def format_br_date(year: Any, month: Any, day: Any) -> str:
    """Format split columns as ``DD/MM/YYYY``.

    Examples:
        >>> format_br_date("2025", "Janeiro", "1")
        '01/01/2025'
    """
    d = resolve_date_parts(DateParts(year, month, day))
    return d.strftime("%d/%m/%Y")


def _midnight_utc(d: date) -> datetime:
    return datetime(d.year, d.month, d.day, tzinfo=timezone.utc)


def _from_patterns(s: str) -> Optional[datetime]:
    for pattern, order in DATE_PATTERNS:
        m = pattern.match(s)
        if not m:
            continue
        fields = dict(zip(order, (int(g) for g in m.groups())))
        try:
            return _midnight_utc(date(fields["year"], fields["month"], fields["day"]))
        except ValueError:
            logger.debug("Pattern %s matched %r but the date is invalid", pattern.pattern, s)
    return None


def _from_serial(s: str, floor: float) -> Optional[datetime]:
    try:
        serial = float(s.replace(",", "."))
    except ValueError:
        return None
    if not serial > floor:
        return None
    try:
        return SERIAL_EPOCH + timedelta(days=serial)
    except OverflowError:
        return None


def _from_generic(s: str) -> Optional[datetime]:
    with warnings.catch_warnings():
        # pandas warns when it has to guess the format element by element
        warnings.simplefilter("ignore", UserWarning)
        try:
            ts = pd.to_datetime(s, errors="coerce", utc=True)
        except (ValueError, TypeError, OverflowError):
            return None
    if ts is None or pd.isna(ts):
        return None
    return ts.to_pydatetime()


def parse_date(
    text: Any,
    parts: Optional[DateParts] = None,
    *,
    strict: bool = False,
    clock: Optional[Clock] = None,
    serial_floor: float = SERIAL_DATE_FLOOR,
) -> str:
    """Parse a date cell into an ISO-8601 UTC timestamp.

    Resolution order, first success wins:
    1. ``parts`` (split year / month / day columns)
    2. ``DD/MM/YYYY``, ``YYYY-MM-DD``, ``DD-MM-YYYY``
    3. Spreadsheet serial number above ``serial_floor``
    4. Generic parsing via ``pandas.to_datetime``
    5. The current time from ``clock``

    Every strategy rejects impossible calendar dates and lets the next one
    try.

    Args:
        text: Date cell text.
        parts: Split date columns of the same row, if the sheet has them.
        strict: Raise instead of falling back to the current time.
        clock: Returns "now" for the fallback; defaults to UTC wall time.
        serial_floor: Serial numbers at or below this are not dates.

    Returns:
        Timestamp string like ``2024-03-15T00:00:00.000Z``.

    Raises:
        DateParseError: Only in strict mode, when no strategy succeeds.
    """
    if parts is not None:
        try:
            return to_iso(_midnight_utc(resolve_date_parts(parts)))
        except ValueError as exc:
            logger.debug("Split date columns rejected: %s", exc)

    s = strip_invisibles(text) or ""
    if s:
        for strategy in (
            _from_patterns,
            lambda v: _from_serial(v, serial_floor),
            _from_generic,
        ):
            found = strategy(s)
            if found is not None:
                return to_iso(found)

    if strict:
        raise DateParseError(f"Data inválida: {text!r}")
    logger.debug("Unparsable date %r, using current time", text)
    return to_iso((clock or utc_now)())
