"""
Spreadsheet import and export of receipts.

Import reads the first sheet of an XLSX file, or a CSV file, and
maps columns by header name. The headers accepted are the ones
users' existing sheets carry: Date, NB / N°, Montant BL / Amount,
Avance / Advance (case-insensitive).

Export writes a company's recalculated ledger to an XLSX workbook.
"""

import csv
import io
import logging
import re
import zipfile
from datetime import date, datetime

import openpyxl
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter
from openpyxl.utils.exceptions import InvalidFileException

from delivery_ledger.formatters import format_display_date, parse_amount
from delivery_ledger.schemas.receipt import ReceiptImportRow, ReceiptLine

logger = logging.getLogger(__name__)

XLSX_MEDIA_TYPE = (
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
)

HEADER_ALIASES = {
    "date": "date",
    "nb": "reference",
    "n°": "reference",
    "reference": "reference",
    "montant bl": "billed_amount",
    "montantbl": "billed_amount",
    "montant": "billed_amount",
    "amount": "billed_amount",
    "billed_amount": "billed_amount",
    "avance": "advance_amount",
    "advance": "advance_amount",
    "advance_amount": "advance_amount",
}

# Characters Excel refuses in a sheet title
SHEET_TITLE_FORBIDDEN = re.compile(r"[\\/?*\[\]:]")
DEFAULT_SHEET_TITLE = "Bon de Livraison"

EXPORT_HEADERS = ["Date", "NB", "Montant BL", "Avance", "Total"]
AMOUNT_FORMAT = "#,##0.00"


def _cell_to_date_text(value) -> str:
    if value is None:
        return ""
    if isinstance(value, (datetime, date)):
        return value.strftime("%Y-%m-%d")
    if isinstance(value, float) and value.is_integer():
        # A year typed into a numeric cell
        return str(int(value))
    return str(value).strip()


def rows_from_records(records) -> list[ReceiptImportRow]:
    """
    Turn header->value mappings into import rows.

    Unknown columns are ignored. Rows where every mapped cell is
    empty are skipped.
    """
    rows = []
    for record in records:
        fields = {}
        for header, value in record.items():
            if header is None:
                continue
            target = HEADER_ALIASES.get(str(header).strip().lower())
            if target:
                fields[target] = value

        if all(v in (None, "") for v in fields.values()):
            continue

        rows.append(ReceiptImportRow(
            date=_cell_to_date_text(fields.get("date")),
            reference=fields.get("reference"),
            billed_amount=parse_amount(fields.get("billed_amount")),
            advance_amount=parse_amount(fields.get("advance_amount")),
        ))
    return rows


def rows_from_csv(content: bytes | str) -> list[ReceiptImportRow]:
    """Parse CSV text; the delimiter (comma or semicolon) is sniffed."""
    if isinstance(content, bytes):
        content = content.decode("utf-8-sig")
    try:
        dialect = csv.Sniffer().sniff(content.splitlines()[0], delimiters=",;")
    except (csv.Error, IndexError):
        dialect = csv.excel
    reader = csv.DictReader(io.StringIO(content), dialect=dialect)
    return rows_from_records(reader)


def rows_from_xlsx(content: bytes) -> list[ReceiptImportRow]:
    """Parse the first sheet of a workbook; row 1 holds the headers."""
    wb = openpyxl.load_workbook(io.BytesIO(content), data_only=True)
    sheet = wb.active

    rows_iter = sheet.iter_rows(values_only=True)
    headers = next(rows_iter, None)
    if headers is None:
        return []

    records = [dict(zip(headers, values)) for values in rows_iter]
    return rows_from_records(records)


def rows_from_file(filename: str, content: bytes) -> list[ReceiptImportRow]:
    """Pick the parser from the file extension."""
    name = filename.lower()
    if name.endswith(".csv"):
        rows = rows_from_csv(content)
    elif name.endswith(".xlsx"):
        try:
            rows = rows_from_xlsx(content)
        except (zipfile.BadZipFile, InvalidFileException) as e:
            raise ValueError(f"'{filename}' is not a valid workbook") from e
    else:
        raise ValueError(
            f"Unsupported file '{filename}': use .xlsx or .csv"
        )
    logger.info("Parsed %s rows from %s", len(rows), filename)
    return rows


def sheet_title(company_name: str) -> str:
    """A valid sheet title (at most 31 characters) for a company name."""
    title = SHEET_TITLE_FORBIDDEN.sub(" ", company_name or "")
    title = " ".join(title.split())[:31].strip()
    return title or DEFAULT_SHEET_TITLE


def export_ledger_xlsx(company_name: str, lines: list[ReceiptLine]) -> bytes:
    """
    Write the ledger to a workbook and return the file content.

    Amount columns stay numeric (formatted with two decimals) so
    the sheet can still be summed.
    """
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = sheet_title(company_name)

    ws.append(EXPORT_HEADERS)
    bold_font = Font(bold=True)
    for cell in ws[1]:
        cell.font = bold_font

    for line in lines:
        ws.append([
            format_display_date(line.date),
            line.reference,
            line.billed_amount,
            line.advance_amount,
            line.total,
        ])

    for row in ws.iter_rows(min_row=2, min_col=3, max_col=5):
        for cell in row:
            cell.number_format = AMOUNT_FORMAT

    for col_idx, col in enumerate(ws.columns, start=1):
        max_length = max(len(str(cell.value)) if cell.value else 0 for cell in col)
        ws.column_dimensions[get_column_letter(col_idx)].width = max_length + 2

    buffer = io.BytesIO()
    wb.save(buffer)
    return buffer.getvalue()
