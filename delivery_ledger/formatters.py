"""
Parsing and display helpers for receipt dates and amounts.

Receipt dates arrive as YYYY-MM-DD, DD/MM/YYYY, a bare year used
as a placeholder row, or nothing at all. normalize_date() turns
any of them into one tagged value that sorting, validation,
storage and display all share.
"""

import re
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation

ISO_DATE = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})$")
FRENCH_DATE = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")
YEAR_ONLY = re.compile(r"^(\d{4})$")


@dataclass(frozen=True)
class FullDate:
    year: int
    month: int
    day: int

    @property
    def canonical(self) -> str:
        return f"{self.year:04d}-{self.month:02d}-{self.day:02d}"

    @property
    def sort_key(self) -> tuple:
        return (0, self.year, self.month, self.day)


@dataclass(frozen=True)
class YearOnly:
    year: int

    @property
    def canonical(self) -> str:
        return f"{self.year:04d}"

    @property
    def sort_key(self) -> tuple:
        # Placeholder rows open the year, before any dated row.
        return (0, self.year, 0, 0)


@dataclass(frozen=True)
class Unparseable:
    raw: str

    @property
    def canonical(self) -> str:
        return self.raw

    @property
    def sort_key(self) -> tuple:
        return (1, 0, 0, 0)


NormalizedDate = FullDate | YearOnly | Unparseable


def _full_date(year: int, month: int, day: int, raw: str) -> NormalizedDate:
    try:
        date(year, month, day)
    except ValueError:
        return Unparseable(raw)
    return FullDate(year, month, day)


def normalize_date(value) -> NormalizedDate:
    """
    Classify a receipt date.

    Never raises. Empty values, impossible calendar dates and
    anything that is not one of the accepted formats come back
    as Unparseable carrying the original text.
    """
    if isinstance(value, datetime):
        return FullDate(value.year, value.month, value.day)
    if isinstance(value, date):
        return FullDate(value.year, value.month, value.day)
    if value is None:
        return Unparseable("")

    raw = str(value).strip()

    match = ISO_DATE.match(raw)
    if match:
        year, month, day = (int(g) for g in match.groups())
        return _full_date(year, month, day, raw)

    match = FRENCH_DATE.match(raw)
    if match:
        day, month, year = (int(g) for g in match.groups())
        return _full_date(year, month, day, raw)

    match = YEAR_ONLY.match(raw)
    if match:
        return YearOnly(int(match.group(1)))

    return Unparseable(raw)


def canonical_date(value) -> str:
    """
    Return the storage form of a date, or raise ValueError.

    Empty input is allowed and stored as an empty string.
    """
    if value is None or str(value).strip() == "":
        return ""
    normalized = normalize_date(value)
    if isinstance(normalized, Unparseable):
        raise ValueError(
            f"Invalid date '{normalized.raw}': expected YYYY-MM-DD, "
            f"DD/MM/YYYY or a 4-digit year"
        )
    return normalized.canonical


def format_display_date(value) -> str:
    """DD/MM/YYYY for full dates, the year for placeholders."""
    normalized = normalize_date(value)
    if isinstance(normalized, FullDate):
        return f"{normalized.day:02d}/{normalized.month:02d}/{normalized.year:04d}"
    return normalized.canonical


def format_amount(value) -> str:
    """French-style amount with two decimals: 6662 -> '6 662,00'."""
    if value is None:
        return ""
    formatted = f"{Decimal(str(value)):,.2f}"
    return formatted.replace(",", " ").replace(".", ",")


def parse_amount(value) -> Decimal | None:
    """
    Read an amount typed by a user or found in a spreadsheet cell.

    Accepts numbers, '1 870,50', '1.870,50', '1870.50 DA' and similar;
    the separator written last is taken as the decimal point. Returns
    None for empty or non-numeric input.
    """
    if value is None:
        return None
    if isinstance(value, Decimal):
        return value
    if isinstance(value, (int, float)):
        return Decimal(str(value))

    text = re.sub(r"[^\d.,-]", "", str(value))
    if "," in text and "." in text:
        # The separator written last is the decimal point.
        if text.rfind(",") > text.rfind("."):
            text = text.replace(".", "").replace(",", ".")
        else:
            text = text.replace(",", "")
    else:
        text = text.replace(",", ".")
    if text in ("", "-", "."):
        return None
    try:
        return Decimal(text)
    except InvalidOperation:
        return None
