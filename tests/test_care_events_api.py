from datetime import date

import pytest
from fastapi.testclient import TestClient

from app.api.deps import get_generation_service
from app.config import DEFAULT_CAT_BREED_KEYWORDS
from app.core.auth.security import create_access_token, get_current_user_id
from app.core.care_events.schemas import PetFacts
from app.core.care_events.service import CareEventGenerationService
from app.core.care_events.store import InMemoryEventStore
from app.core.care_schedules.catalog import CareScheduleCatalog
from app.core.pets.classifier import PetTypeClassifier
from app.core.pets.store import InMemoryPetStore
from app.main import app

from .conftest import make_rule

client = TestClient(app)

PETS = [
    PetFacts(id="pet-1", owner_id="owner-1", breed="Labrador", date_of_birth=date(2024, 1, 1)),
    PetFacts(id="pet-2", owner_id="owner-1", breed="Labrador", date_of_birth=None),
    PetFacts(id="pet-3", owner_id="owner-2", breed="Siamese", date_of_birth=date(2024, 1, 1)),
]


@pytest.fixture
def events():
    store = InMemoryEventStore()
    service = CareEventGenerationService(
        catalog=CareScheduleCatalog([make_rule()]),
        pet_store=InMemoryPetStore(PETS),
        event_store=store,
        classifier=PetTypeClassifier(DEFAULT_CAT_BREED_KEYWORDS),
        clock=lambda: date(2024, 6, 1),
    )
    app.dependency_overrides[get_generation_service] = lambda: service
    app.dependency_overrides[get_current_user_id] = lambda: "owner-1"
    yield store
    app.dependency_overrides.clear()


def test_generate_events(events):
    response = client.post("/v1/pets/pet-1/events/generate")
    assert response.status_code == 201
    assert response.json() == {"success": True, "created": 1, "skipped": 0, "errors": []}
    assert events.events["pet-1"][0][1].due_date == date(2024, 7, 1)


def test_generate_events_with_errors(events):
    response = client.post("/v1/pets/pet-2/events/generate")
    assert response.status_code == 207
    body = response.json()
    assert body["success"] is False
    assert body["errors"] == ["Unable to determine pet age"]


def test_unknown_pet(events):
    response = client.post("/v1/pets/nope/events/generate")
    assert response.status_code == 404
    assert response.json()["detail"] == "Pet not found or access denied"


def test_foreign_pet(events):
    response = client.post("/v1/pets/pet-3/events/generate")
    assert response.status_code == 404
    assert events.insert_calls == 0


def test_requires_token(events):
    del app.dependency_overrides[get_current_user_id]
    response = client.post("/v1/pets/pet-1/events/generate")
    assert response.status_code == 401


def test_accepts_bearer_token(events):
    del app.dependency_overrides[get_current_user_id]
    token = create_access_token("owner-1")
    response = client.post("/v1/pets/pet-1/events/generate", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 201

    response = client.post("/v1/pets/pet-1/events/generate", headers={"Authorization": "Bearer garbage"})
    assert response.status_code == 401
