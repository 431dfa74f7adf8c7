"""
Tests for history API endpoints.
"""

import pytest
from sqlalchemy.exc import OperationalError


@pytest.fixture
def company_id(client):
    return client.post("/companies", json={"name": "Sarl Benali"}).json()["id"]


def add(client, company_id, **fields):
    return client.post(f"/companies/{company_id}/receipts", json=fields).json()


class TestListHistory:

    def test_mutations_are_logged_newest_first(self, client, company_id):
        receipt = add(client, company_id, date="2025-01-16", billed_amount=1870)
        client.patch(
            f"/companies/{company_id}/receipts/{receipt['id']}",
            json={"reference": "2702"},
        )
        client.delete(f"/companies/{company_id}/receipts/{receipt['id']}")

        response = client.get(f"/companies/{company_id}/history")
        assert response.status_code == 200
        entries = response.json()
        assert [e["action"] for e in entries] == ["delete", "update", "add"]
        assert all(e["receipt_id"] == receipt["id"] for e in entries)
        assert entries[0]["details"]["reference"] == "2702"

    def test_unknown_company_returns_404(self, client):
        assert client.get("/companies/999/history").status_code == 404


class TestEditHistory:

    def test_patch_details(self, client, company_id):
        add(client, company_id, date="2025-01-16", billed_amount=1870)
        entry = client.get(f"/companies/{company_id}/history").json()[0]

        response = client.patch(
            f"/history/{entry['id']}",
            json={"details": {"reference": "BL-9"}},
        )
        assert response.status_code == 200
        details = response.json()["details"]
        assert details["reference"] == "BL-9"
        assert details["date"] == "2025-01-16"

    def test_patch_unknown_entry_returns_404(self, client):
        response = client.patch("/history/999", json={"details": {}})
        assert response.status_code == 404

    def test_delete_entries_of_receipts(self, client, company_id):
        first = add(client, company_id, billed_amount=1)
        add(client, company_id, billed_amount=2)

        response = client.post(
            f"/companies/{company_id}/history/delete",
            json={"receipt_ids": [first["id"]]},
        )
        assert response.status_code == 200
        assert response.json() == {"deleted": 1}
        assert len(client.get(f"/companies/{company_id}/history").json()) == 1

    def test_clear_history_keeps_receipts(self, client, company_id):
        add(client, company_id, billed_amount=1)
        add(client, company_id, billed_amount=2)

        response = client.delete(f"/companies/{company_id}/history")
        assert response.json() == {"deleted": 2}
        assert client.get(f"/companies/{company_id}/history").json() == []
        assert len(client.get(f"/companies/{company_id}/receipts").json()) == 2

    def test_failed_clear_returns_503(self, client, db_session, company_id, monkeypatch):
        add(client, company_id, billed_amount=1)
        real_execute = db_session.execute

        def execute(statement, *args, **kwargs):
            if statement.is_delete:
                raise OperationalError("DELETE", {}, Exception("database is locked"))
            return real_execute(statement, *args, **kwargs)

        monkeypatch.setattr(db_session, "execute", execute)
        response = client.delete(f"/companies/{company_id}/history")
        assert response.status_code == 503
        assert "Nothing was saved" in response.json()["detail"]

        monkeypatch.undo()
        assert len(client.get(f"/companies/{company_id}/history").json()) == 1


class TestRestore:

    def test_restore_deleted_receipt(self, client, company_id):
        add(client, company_id, date="2025", billed_amount=6662)
        receipt = add(client, company_id, date="2025-01-16", billed_amount=1870)
        client.delete(f"/companies/{company_id}/receipts/{receipt['id']}")

        response = client.post(
            f"/companies/{company_id}/history/{receipt['id']}/restore"
        )
        assert response.status_code == 200
        restored = response.json()
        assert restored["id"] != receipt["id"]
        assert restored["date"] == "2025-01-16"
        assert float(restored["total"]) == 8532.0

    def test_restore_without_history_returns_404(self, client, company_id):
        response = client.post(f"/companies/{company_id}/history/42/restore")
        assert response.status_code == 404
