import pytest
from fastapi.testclient import TestClient

from app.api.deps import get_daily_generation_runner
from app.config import settings
from app.core.care_events.batch import BatchGenerationReport, PetFailure
from app.main import app

client = TestClient(app)


def _override_report(report: BatchGenerationReport):
    async def run():
        return report

    app.dependency_overrides[get_daily_generation_runner] = lambda: run


@pytest.fixture(autouse=True)
def clear_overrides(monkeypatch):
    monkeypatch.setattr(settings, "CRON_SECRET", "s3cret")
    yield
    app.dependency_overrides.clear()


AUTH = {"Authorization": "Bearer s3cret"}


def test_daily_generation_ok():
    _override_report(BatchGenerationReport(success=True, total_pets=2, processed_pets=2, total_events_created=5))
    response = client.post("/v1/cron/daily-event-generation", headers=AUTH)
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["total_events_created"] == 5


def test_daily_generation_partial_failure():
    _override_report(BatchGenerationReport(
        success=True, total_pets=2, processed_pets=2, failed_pets=1,
        errors=[PetFailure(pet_id="p2", error="Pet not found")],
    ))
    response = client.post("/v1/cron/daily-event-generation", headers=AUTH)
    assert response.status_code == 207
    assert response.json()["errors"] == [{"pet_id": "p2", "error": "Pet not found"}]


def test_daily_generation_failure():
    _override_report(BatchGenerationReport(success=False, total_pets=1, failed_pets=1))
    response = client.post("/v1/cron/daily-event-generation", headers=AUTH)
    assert response.status_code == 500


@pytest.mark.parametrize("headers", [{}, {"Authorization": "Bearer wrong"}, {"Authorization": "s3cret"}])
def test_rejects_bad_secret(headers):
    _override_report(BatchGenerationReport(success=True))
    response = client.post("/v1/cron/daily-event-generation", headers=headers)
    assert response.status_code == 401


def test_open_when_no_secret_configured(monkeypatch):
    monkeypatch.setattr(settings, "CRON_SECRET", None)
    _override_report(BatchGenerationReport(success=True))
    response = client.post("/v1/cron/daily-event-generation")
    assert response.status_code == 200
