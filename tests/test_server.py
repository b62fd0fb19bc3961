"""
Integration tests for the ClaimGuard API.
"""

import pytest
from fastapi.testclient import TestClient

from claimguard.categories import RENT_DEMO, UTILITY_DEMO
from claimguard.server import app


@pytest.fixture
def client():
    return TestClient(app)


class TestHealthAndCatalogue:

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert "X-Process-Time" in response.headers

    def test_categories(self, client):
        data = client.get("/categories").json()
        assert [c["id"] for c in data] == ["medical", "auto", "rent", "utility"]
        assert "scanDescription" in data[0]

    def test_demo(self, client):
        data = client.get("/demo/utility").json()
        assert data["text"] == UTILITY_DEMO

    def test_unknown_demo(self, client):
        assert client.get("/demo/dental").status_code == 404


class TestAnalyze:

    def test_rent_analysis(self, client):
        response = client.post("/analyze", json={"text": RENT_DEMO, "category": "rent"})
        assert response.status_code == 200
        data = response.json()
        assert data["analysis"]["category"] == "rent"
        assert data["analysis"]["potentialSavings"] == 492.5
        assert data["fee"]["feeType"] == "success_fee"
        assert data["fee"]["fee"] == 98.5
        assert data["explanationMarkdown"].startswith("**Result:**")

    def test_unknown_category(self, client):
        response = client.post("/analyze", json={"text": RENT_DEMO, "category": "dental"})
        assert response.status_code == 400
        assert response.json()["detail"] == "Unknown category: dental"

    def test_blank_text(self, client):
        response = client.post("/analyze", json={"text": "   ", "category": "rent"})
        assert response.status_code == 422


class TestStatementAndFee:

    def test_statement(self, client):
        csv_text = (
            "Date,Description,Amount\n"
            "2024-01-05,NETFLIX.COM,15.49\n"
            "2024-02-05,NETFLIX.COM,22.99\n"
        )
        data = client.post("/analyze-statement", json={"csv_text": csv_text}).json()
        assert data["totalTransactions"] == 2
        assert data["flaggedCount"] == 1

    def test_fee(self, client):
        data = client.post("/fee", json={"grossSavings": 1000}).json()
        assert data["fee"] == 200
        assert data["netSavings"] == 800


def test_appeal_round_trip(client):
    analysis = client.post("/analyze", json={"text": UTILITY_DEMO, "category": "utility"}).json()["analysis"]
    response = client.post("/appeal", json={"analysis": analysis})
    assert response.status_code == 200
    data = response.json()
    assert data["letter"].startswith("# Formal Dispute: Utility Billing Errors")
    assert "Public Utility Commission" in data["instructions"]
