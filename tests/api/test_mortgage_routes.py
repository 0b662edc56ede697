import importlib
import logging
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from src.api.app import app
from src.config import settings
from src.models.mortgage import AmortizationSystem


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


def _money(value) -> Decimal:
    return Decimal(str(value))


class TestHealth:
    def test_ok(self, client):
        assert client.get("/health").json() == {"status": "ok"}


class TestAppModule:
    def test_import_leaves_logging_alone(self, monkeypatch):
        import src.api.app as app_module

        calls = []
        monkeypatch.setattr(logging, "basicConfig", lambda **kw: calls.append(kw))
        importlib.reload(app_module)
        assert calls == []


class TestSchedule:
    def test_sac_schedule(self, client):
        resp = client.post("/api/v1/mortgages/schedule", json={
            "financed_amount": "300000",
            "total_installments": 360,
            "annual_rate": "10",
            "amortization_system": "SAC",
            "first_installment_date": "2025-01-10",
        })
        assert resp.status_code == 200
        body = resp.json()
        assert len(body["installments"]) == 360
        first = body["installments"][0]
        assert first["due_date"] == "2025-01-10"
        assert _money(first["amortization_amount"]) == Decimal("833.33")
        assert _money(first["interest_amount"]) == Decimal("2392.24")
        assert _money(first["balance_after"]) == Decimal("299166.67")

    def test_system_defaults_to_setting(self, client, monkeypatch):
        payload = {
            "financed_amount": "300000",
            "total_installments": 360,
            "annual_rate": "10",
            "first_installment_date": "2025-01-10",
        }
        sac = client.post("/api/v1/mortgages/schedule", json=payload).json()
        assert _money(sac["installments"][0]["amortization_amount"]) == Decimal("833.33")

        monkeypatch.setattr(settings, "default_amortization_system", AmortizationSystem.PRICE)
        price = client.post("/api/v1/mortgages/schedule", json=payload).json()
        assert _money(price["installments"][0]["amortization_amount"]) == Decimal("145.43")
        assert _money(price["installments"][0]["total_amount"]) == Decimal("2537.67")

    def test_resumed_schedule(self, client):
        resp = client.post("/api/v1/mortgages/schedule", json={
            "financed_amount": "300000",
            "total_installments": 360,
            "annual_rate": "10",
            "amortization_system": "PRICE",
            "first_installment_date": "2025-11-10",
            "starting_installment": 11,
            "starting_balance": "298531.11",
        })
        assert resp.status_code == 200
        body = resp.json()
        assert len(body["installments"]) == 350
        assert body["installments"][0]["installment_number"] == 11

    def test_rejects_non_positive_amount(self, client):
        resp = client.post("/api/v1/mortgages/schedule", json={
            "financed_amount": "0",
            "total_installments": 360,
            "annual_rate": "10",
            "first_installment_date": "2025-01-10",
        })
        assert resp.status_code == 422

    def test_rejects_unknown_system(self, client):
        resp = client.post("/api/v1/mortgages/schedule", json={
            "financed_amount": "1000",
            "total_installments": 10,
            "annual_rate": "10",
            "amortization_system": "GERMAN",
            "first_installment_date": "2025-01-10",
        })
        assert resp.status_code == 422

    def test_rejects_start_past_term(self, client):
        resp = client.post("/api/v1/mortgages/schedule", json={
            "financed_amount": "1000",
            "total_installments": 10,
            "annual_rate": "10",
            "first_installment_date": "2025-01-10",
            "starting_installment": 11,
        })
        assert resp.status_code == 422


class TestExtraPayment:
    def test_reduce_term(self, client):
        resp = client.post("/api/v1/mortgages/simulations/extra-payment", json={
            "current_balance": "120000",
            "remaining_installments": 120,
            "amount": "30000",
            "payment_type": "REDUCE_TERM",
            "annual_rate": "8",
        })
        assert resp.status_code == 200
        body = resp.json()
        assert body["payment_type"] == "REDUCE_TERM"
        assert body["new_remaining_installments"] == 90
        assert body["months_reduced"] == 30
        assert _money(body["new_installment_value"]) == Decimal("1579.06")

    def test_payment_type_required(self, client):
        resp = client.post("/api/v1/mortgages/simulations/extra-payment", json={
            "current_balance": "120000",
            "remaining_installments": 120,
            "amount": "30000",
            "annual_rate": "8",
        })
        assert resp.status_code == 422

    def test_amount_above_balance_rejected(self, client):
        resp = client.post("/api/v1/mortgages/simulations/extra-payment", json={
            "current_balance": "1000",
            "remaining_installments": 12,
            "amount": "5000",
            "payment_type": "REDUCE_INSTALLMENT",
            "annual_rate": "8",
        })
        assert resp.status_code == 422


class TestEarlyPayoff:
    def test_payoff(self, client):
        resp = client.post("/api/v1/mortgages/simulations/early-payoff", json={
            "current_balance": "120000",
            "remaining_installments": 120,
            "annual_rate": "0",
        })
        assert resp.status_code == 200
        body = resp.json()
        assert _money(body["payoff_amount"]) == Decimal("120000")
        assert _money(body["total_savings"]) == Decimal("0")


class TestAmortizationSimulation:
    def test_without_extra_payments(self, client):
        resp = client.post("/api/v1/mortgages/simulations/amortization", json={
            "current_balance": "10000",
            "remaining_installments": 12,
            "annual_rate": "12",
            "first_installment_date": "2025-03-15",
        })
        assert resp.status_code == 200
        body = resp.json()
        assert [s["name"] for s in body["scenarios"]] == ["Original"]
        assert "comparison" not in body

    def test_recurring_extra_payment(self, client):
        resp = client.post("/api/v1/mortgages/simulations/amortization", json={
            "current_balance": "10000",
            "remaining_installments": 12,
            "annual_rate": "12",
            "first_installment_date": "2025-03-15",
            "extra_payments": [{"type": "RECURRING", "amount": "900"}],
        })
        assert resp.status_code == 200
        body = resp.json()
        assert [s["name"] for s in body["scenarios"]] == ["Original", "Com Aportes"]
        assert body["scenarios"][1]["summary"]["final_installment_number"] == 6
        assert body["comparison"]["months_reduced"] == 6

    def test_rejects_inverted_window(self, client):
        resp = client.post("/api/v1/mortgages/simulations/amortization", json={
            "current_balance": "10000",
            "remaining_installments": 12,
            "annual_rate": "12",
            "first_installment_date": "2025-03-15",
            "extra_payments": [
                {"type": "RECURRING", "amount": "900", "start_month": 6, "end_month": 2},
            ],
        })
        assert resp.status_code == 422


class TestRateConversion:
    def test_annual_to_monthly(self, client):
        resp = client.post("/api/v1/mortgages/rates/convert", json={"annual_rate": "12"})
        assert resp.status_code == 200
        monthly = _money(resp.json()["monthly_rate"])
        assert abs(monthly - Decimal("0.009488792935")) < Decimal("1e-11")

    def test_monthly_to_annual(self, client):
        resp = client.post("/api/v1/mortgages/rates/convert", json={"monthly_rate": "0.01"})
        assert resp.status_code == 200
        annual = _money(resp.json()["annual_rate"])
        assert annual.quantize(Decimal("0.0001")) == Decimal("12.6825")

    def test_requires_exactly_one_rate(self, client):
        resp = client.post(
            "/api/v1/mortgages/rates/convert", json={"annual_rate": "12", "monthly_rate": "0.01"}
        )
        assert resp.status_code == 422
