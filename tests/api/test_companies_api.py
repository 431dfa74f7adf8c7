"""
Tests for company API endpoints.

These test the HTTP layer: status codes, response format and
error mapping. Business rules are tested in
tests/services/test_company_service.py.
"""


class TestCreateCompany:

    def test_create_company_returns_201(self, client):
        response = client.post("/companies", json={"name": "Sarl Benali"})
        assert response.status_code == 201
        data = response.json()
        assert data["name"] == "Sarl Benali"
        assert data["manual_order"] is False
        assert data["column_colors"]["total"] == "#22c55e"

    def test_duplicate_name_returns_400(self, client):
        client.post("/companies", json={"name": "Sarl Benali"})
        response = client.post("/companies", json={"name": "Sarl Benali"})
        assert response.status_code == 400

    def test_bad_color_returns_422(self, client):
        response = client.post("/companies", json={
            "name": "Colors",
            "row_colors": {"even": "red"},
        })
        assert response.status_code == 422


class TestReadUpdateDelete:

    def test_list_and_get(self, client):
        created = client.post("/companies", json={"name": "Alpha"}).json()
        client.post("/companies", json={"name": "Beta"})

        names = [c["name"] for c in client.get("/companies").json()]
        assert names == ["Alpha", "Beta"]

        response = client.get(f"/companies/{created['id']}")
        assert response.status_code == 200
        assert response.json()["name"] == "Alpha"

    def test_get_unknown_returns_404(self, client):
        assert client.get("/companies/999").status_code == 404

    def test_patch_company(self, client):
        created = client.post("/companies", json={"name": "Alpha"}).json()
        response = client.patch(f"/companies/{created['id']}", json={
            "logo_url": "https://example.com/alpha.png",
            "row_colors": {"header": "#123456"},
        })
        assert response.status_code == 200
        data = response.json()
        assert data["logo_url"] == "https://example.com/alpha.png"
        assert data["row_colors"]["header"] == "#123456"
        assert data["row_colors"]["even"] == "#ffffff"

    def test_delete_company_removes_its_receipts(self, client):
        created = client.post("/companies", json={"name": "Alpha"}).json()
        client.post(f"/companies/{created['id']}/receipts", json={
            "date": "2025-01-01", "billed_amount": 10,
        })

        response = client.delete(f"/companies/{created['id']}")
        assert response.status_code == 204
        assert client.get(f"/companies/{created['id']}").status_code == 404
        assert client.get(f"/companies/{created['id']}/receipts").status_code == 404

    def test_delete_unknown_returns_404(self, client):
        assert client.delete("/companies/999").status_code == 404
