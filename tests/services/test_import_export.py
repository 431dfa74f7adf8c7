"""
Tests for spreadsheet import and export.
"""

import io
from datetime import datetime
from decimal import Decimal

import openpyxl
import pytest

from delivery_ledger.schemas.receipt import ReceiptLine
from delivery_ledger.services.import_export import (
    rows_from_csv,
    rows_from_xlsx,
    rows_from_file,
    export_ledger_xlsx,
    sheet_title,
)
from delivery_ledger.services.ledger_calculator import recalculate_ledger


def make_workbook(rows) -> bytes:
    wb = openpyxl.Workbook()
    ws = wb.active
    for row in rows:
        ws.append(row)
    buffer = io.BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


class TestImportCsv:

    def test_header_aliases(self):
        rows = rows_from_csv(
            "Date,N°,Montant BL,Avance\n"
            "16/01/2025,2702,1870,\n"
            "2025,,6662.00,\n"
        )
        assert len(rows) == 2
        assert rows[0].date == "16/01/2025"
        assert rows[0].reference == "2702"
        assert rows[0].billed_amount == Decimal("1870")
        assert rows[0].advance_amount is None
        assert rows[1].billed_amount == Decimal("6662.00")

    def test_semicolon_and_french_amounts(self):
        rows = rows_from_csv(
            "DATE;NB;MONTANT;AVANCE\n"
            "2025-02-01;BL1001;\"1 250,50\";250\n"
        )
        assert rows[0].reference == "BL1001"
        assert rows[0].billed_amount == Decimal("1250.50")
        assert rows[0].advance_amount == Decimal("250")

    def test_blank_rows_and_unknown_columns_ignored(self):
        rows = rows_from_csv(
            "date,amount,advance,comment\n"
            ",,,just a note\n"
            "2025-01-01,10,,ok\n"
        )
        assert [r.date for r in rows] == ["2025-01-01"]


class TestImportXlsx:

    def test_reads_first_sheet(self):
        content = make_workbook([
            ["Date", "NB", "Montant BL", "Avance"],
            [datetime(2025, 1, 16), 2702, 1870, None],
            [2025, None, 6662, None],
            [None, None, None, None],
        ])
        rows = rows_from_xlsx(content)

        assert len(rows) == 2
        assert rows[0].date == "2025-01-16"
        assert rows[0].reference == "2702"
        assert rows[1].date == "2025"
        assert rows[1].billed_amount == Decimal("6662")

    def test_empty_workbook(self):
        assert rows_from_xlsx(make_workbook([])) == []

    def test_file_type_by_extension(self):
        assert len(rows_from_file("ledger.CSV", b"Date,Amount\n2025,5\n")) == 1
        with pytest.raises(ValueError, match="Unsupported"):
            rows_from_file("ledger.pdf", b"%PDF")
        with pytest.raises(ValueError, match="not a valid workbook"):
            rows_from_file("ledger.xlsx", b"not a zip")


class TestExport:

    def test_export_contains_recalculated_ledger(self):
        lines = recalculate_ledger([
            ReceiptLine(id=2, date="2025-01-16", reference="2702", billed_amount=Decimal("1870")),
            ReceiptLine(id=1, date="2025", billed_amount=Decimal("6662")),
        ])
        content = export_ledger_xlsx("Sarl Benali", lines)

        ws = openpyxl.load_workbook(io.BytesIO(content)).active
        assert ws.title == "Sarl Benali"
        values = list(ws.iter_rows(values_only=True))
        assert values[0] == ("Date", "NB", "Montant BL", "Avance", "Total")
        assert values[1][0] == "2025"
        assert values[1][4] == 6662
        assert values[2][:2] == ("16/01/2025", "2702")
        assert values[2][4] == 8532

    def test_long_company_name_is_truncated(self):
        content = export_ledger_xlsx("A" * 40, [])
        ws = openpyxl.load_workbook(io.BytesIO(content)).active
        assert ws.title == "A" * 31

    @pytest.mark.parametrize("name,expected", [
        ("Sarl A/B", "Sarl A B"),
        ("Ets [Nord]: *dépôt*?", "Ets Nord dépôt"),
        ("C:\\", "C"),
        ("///", "Bon de Livraison"),
        ("", "Bon de Livraison"),
    ])
    def test_sheet_title_drops_forbidden_characters(self, name, expected):
        assert sheet_title(name) == expected

    def test_export_with_slash_in_company_name(self):
        content = export_ledger_xlsx("Sarl A/B", [])
        ws = openpyxl.load_workbook(io.BytesIO(content)).active
        assert ws.title == "Sarl A B"
