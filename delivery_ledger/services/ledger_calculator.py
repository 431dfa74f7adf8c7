"""
Ledger calculator: the running total of a company's receipts.

Rules:
1. A receipt contributes billed_amount - advance_amount, with
   missing amounts counted as zero.
2. total[i] is the sum of contributions of receipts 0..i in
   ledger order. The accumulator starts at zero; the first
   receipt gets no special treatment.
3. Ledger order is chronological (normalized dates, stable on
   ties, unparseable dates last) unless the caller asks to keep
   a manual order.
4. Totals are always re-derived from amounts and order. A
   previous total is never read, so recalculating twice gives
   the same result.

Everything here is a pure function of its input. Persistence is
the receipt service's job.
"""

from decimal import Decimal
from typing import Iterable

from delivery_ledger.formatters import (
    FullDate,
    YearOnly,
    normalize_date,
)
from delivery_ledger.models.enums import PeriodGranularity
from delivery_ledger.schemas.receipt import ReceiptLine, PeriodBalance

ZERO = Decimal("0")


def _to_decimal(value) -> Decimal:
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def compute_contribution(billed_amount, advance_amount) -> Decimal:
    """A receipt's own effect on the balance: billed minus advance."""
    return _to_decimal(billed_amount) - _to_decimal(advance_amount)


def _as_line(entry) -> ReceiptLine:
    if isinstance(entry, ReceiptLine):
        line = entry
    else:
        line = ReceiptLine.model_validate(entry)
    if line.id is None:
        raise ValueError(f"Cannot recalculate a receipt without an id: {entry!r}")
    return line


def chronological_order(entries: Iterable) -> list:
    """
    Sort receipts by normalized date.

    Year placeholder rows come before the dated rows of their
    year; unparseable and empty dates come after every parseable
    one. sorted() is stable, so ties keep their input order.
    """
    return sorted(entries, key=lambda e: normalize_date(e.date).sort_key)


def recalculate_ledger(
    entries: Iterable, preserve_order: bool = False
) -> list[ReceiptLine]:
    """
    Return the receipts in ledger order with fresh running totals.

    Accepts ORM receipts, ReceiptLine objects or dicts. The input
    is not modified; each returned line is a copy whose total and
    position reflect its place in the ledger.

    With preserve_order=True the input order is the ledger order
    (manual reorder); otherwise the receipts are sorted
    chronologically first.

    Raises ValueError if a receipt has no id.
    """
    lines = [_as_line(e) for e in entries]
    if not preserve_order:
        lines = chronological_order(lines)

    running = ZERO
    result = []
    for position, line in enumerate(lines):
        running += compute_contribution(line.billed_amount, line.advance_amount)
        result.append(line.model_copy(update={
            "total": running,
            "position": position,
        }))
    return result


def _period_key(date_value, granularity: PeriodGranularity):
    normalized = normalize_date(date_value)
    if granularity == PeriodGranularity.MONTH:
        if isinstance(normalized, FullDate):
            return (normalized.year, normalized.month)
        return None
    if isinstance(normalized, (FullDate, YearOnly)):
        return (normalized.year, None)
    return None


def period_balances(
    lines: Iterable[ReceiptLine],
    granularity: PeriodGranularity = PeriodGranularity.MONTH,
) -> list[PeriodBalance]:
    """
    Group recalculated lines by year or by (year, month).

    The balance of a period is the running total of its last
    receipt in ledger order, not the sum of the period's own
    contributions. Monthly grouping skips year placeholder rows;
    receipts without a usable date are never grouped. Periods are
    returned in the order they first appear in the ledger.
    """
    granularity = PeriodGranularity(granularity)
    buckets: dict[tuple, dict] = {}

    for line in lines:
        key = _period_key(line.date, granularity)
        if key is None:
            continue
        bucket = buckets.setdefault(key, {
            "entry_count": 0,
            "billed": ZERO,
            "advance": ZERO,
            "balance": ZERO,
        })
        bucket["entry_count"] += 1
        bucket["billed"] += _to_decimal(line.billed_amount)
        bucket["advance"] += _to_decimal(line.advance_amount)
        bucket["balance"] = line.total

    return [
        PeriodBalance(year=year, month=month, **values)
        for (year, month), values in buckets.items()
    ]


def lines_in_period(
    lines: Iterable[ReceiptLine], year: int, month: int | None = None
) -> list[ReceiptLine]:
    """Lines of one year (placeholder rows included) or one month."""
    if month is None:
        return [
            line for line in lines
            if _period_key(line.date, PeriodGranularity.YEAR) == (year, None)
        ]
    return [
        line for line in lines
        if _period_key(line.date, PeriodGranularity.MONTH) == (year, month)
    ]
