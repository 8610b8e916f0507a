import os
import sys
import tempfile
from datetime import date, datetime, timezone

# Ensure Python path includes project root for `import app`
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

# Test environment: file-backed SQLite (aiosqlite) and a fixed JWT secret.
_db_dir = tempfile.mkdtemp(prefix="petcare-tests-")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DATABASE_URL", f"sqlite+aiosqlite:///{os.path.join(_db_dir, 'test.db')}")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")

import pytest  # noqa: E402

from app.core.care_events.schemas import PetFacts  # noqa: E402
from app.core.care_schedules.catalog import CareScheduleCatalog  # noqa: E402
from app.core.care_schedules.models import CareScheduleRule  # noqa: E402
from app.workers.tasks import celery_app  # noqa: E402

celery_app.conf.task_always_eager = True
celery_app.conf.task_eager_propagates = True

RULE_TIMESTAMP = datetime(2024, 6, 1, tzinfo=timezone.utc)


def make_rule(**overrides) -> CareScheduleRule:
    """Build a valid dog rule; keyword overrides replace top-level fields."""
    data = {
        "id": "test-rule",
        "name": "Test Rule",
        "description": "A rule used in tests",
        "pet_type": "dog",
        "event_type": "vaccination",
        "start_condition": {"age_months": 2},
        "recurrence": {"interval": 1, "unit": "months"},
        "priority": "high",
        "source": "Test Guidelines",
        "created_at": RULE_TIMESTAMP,
        "updated_at": RULE_TIMESTAMP,
    }
    data.update(overrides)
    return CareScheduleRule.model_validate(data)


def raw_rule(**overrides) -> dict:
    """Raw catalog-file mapping for a valid rule."""
    data = make_rule().model_dump(mode="json", exclude_none=True)
    data.update(overrides)
    return data


@pytest.fixture
def dog() -> PetFacts:
    return PetFacts(id="pet-1", owner_id="owner-1", breed="Labrador Retriever", date_of_birth=date(2024, 1, 1))


@pytest.fixture
def single_rule_catalog() -> CareScheduleCatalog:
    return CareScheduleCatalog([make_rule()])
