"""Date helpers for the YYMMDD component of standardized filenames."""

import calendar
import re
from datetime import date, timedelta

from sangerrename.exceptions import ValidationError


YYMMDD_PATTERN = re.compile(r"^\d{6}$")
ISO_PATTERN = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")

# "+1d", "-2w", "+3m": shift relative to the currently offered date
RELATIVE_PATTERN = re.compile(r"^([+-])(\d+)([dwm])$", re.IGNORECASE)

# Two-digit years are always read as 20YY
CENTURY = 2000


def format_yymmdd(value: date) -> str:
    """Format a date as YYMMDD (2025-06-01 -> "250601")."""
    return f"{value.year % 100:02d}{value.month:02d}{value.day:02d}"


def parse_yymmdd(text: str) -> date:
    """Parse a YYMMDD string into a date.

    Raises:
        ValidationError: If the text is not six digits or not a real calendar date.
    """
    text = text.strip()
    if not YYMMDD_PATTERN.match(text):
        raise ValidationError(f"Date must be exactly 6 digits (YYMMDD), got '{text}'")

    year, month, day = CENTURY + int(text[:2]), int(text[2:4]), int(text[4:])
    try:
        return date(year, month, day)
    except ValueError as e:
        raise ValidationError(f"'{text}' is not a valid calendar date: {e}") from e


def is_valid_yymmdd(text: str) -> bool:
    try:
        parse_yymmdd(text)
    except ValidationError:
        return False
    return True


def shift_months(value: date, months: int) -> date:
    """Move a date by whole months, clamping the day to the target month's length."""
    index = value.year * 12 + (value.month - 1) + months
    year, month = divmod(index, 12)
    month += 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def resolve_date_input(text: str, base: date, today: date) -> date:
    """Interpret what the user typed at the date prompt.

    Accepted forms:
        - ``YYMMDD``: an absolute date.
        - ``YYYY-MM-DD``: an absolute ISO date.
        - ``today``: the configured current date.
        - ``+Nd`` / ``-Nw`` / ``+Nm``: ``base`` shifted by days, weeks or months.

    An empty string returns ``base`` unchanged.

    Raises:
        ValidationError: If the input matches none of the forms or is not a real date.
    """
    text = text.strip()
    if not text:
        return base
    if text.lower() == "today":
        return today

    relative = RELATIVE_PATTERN.match(text)
    if relative:
        sign, amount, unit = relative.groups()
        count = int(amount) * (1 if sign == "+" else -1)
        unit = unit.lower()
        try:
            if unit == "d":
                return base + timedelta(days=count)
            if unit == "w":
                return base + timedelta(weeks=count)
            return shift_months(base, count)
        except (OverflowError, ValueError) as e:
            raise ValidationError(f"Date shift '{text}' is out of range") from e

    iso = ISO_PATTERN.match(text)
    if iso:
        try:
            return date(*(int(part) for part in iso.groups()))
        except ValueError as e:
            raise ValidationError(f"'{text}' is not a valid calendar date: {e}") from e

    return parse_yymmdd(text)
