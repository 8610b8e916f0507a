import json

import pytest

from app.core.care_events.errors import CatalogValidationError
from app.core.care_schedules.catalog import (
    CareScheduleCatalog,
    build_catalog,
    get_catalog,
    load_catalog,
    validate_catalog,
)
from app.core.care_schedules.models import CareEventType, PetType
from app.core.care_schedules.validator import validate_rule

from .conftest import make_rule, raw_rule


@pytest.fixture(scope="module")
def catalog() -> CareScheduleCatalog:
    return load_catalog()


def test_default_catalog_loads(catalog):
    assert catalog.version == "2024.06.1"
    assert len(catalog) == 12
    assert len(catalog.rules_for_pet_type(PetType.DOG)) == 6
    assert len(catalog.rules_for_pet_type(PetType.CAT)) == 6


def test_default_catalog_rule_ids(catalog):
    assert {rule.id for rule in catalog.all_rules()} == {
        "dog-dhpp-puppy", "dog-dhpp-annual", "dog-rabies-initial",
        "dog-wellness-annual", "dog-heartworm-monthly", "dog-dental-annual",
        "cat-fvrcp-kitten", "cat-fvrcp-annual", "cat-rabies-initial",
        "cat-wellness-annual", "cat-parasite-monthly", "cat-dental-annual",
    }
    assert catalog.rules_for_event_type(PetType.DOG, CareEventType.GROOMING) == ()


def test_default_catalog_is_valid(catalog):
    result = validate_catalog(catalog)
    assert result.valid, result.errors
    assert all(validate_rule(rule) == [] for rule in catalog.all_rules())


def test_rule_ids_are_unique(catalog):
    ids = [rule.id for rule in catalog.all_rules()]
    assert len(ids) == len(set(ids))


def test_rules_keep_file_order(catalog):
    dog_ids = [rule.id for rule in catalog.rules_for_pet_type("dog")]
    assert dog_ids[0] == "dog-dhpp-puppy"
    assert dog_ids[-1] == "dog-dental-annual"


def test_rules_for_event_type(catalog):
    ids = {r.id for r in catalog.rules_for_event_type(PetType.CAT, CareEventType.VACCINATION)}
    assert ids == {"cat-fvrcp-kitten", "cat-fvrcp-annual", "cat-rabies-initial"}


def test_get_rule(catalog):
    rule = catalog.get_rule("dog-heartworm-monthly")
    assert rule is not None and rule.recurrence.interval == 1
    assert catalog.get_rule("missing") is None


def test_applicable_rules_for_five_month_old_dog(catalog):
    ids = {r.id for r in catalog.applicable_rules(PetType.DOG, 5)}
    assert ids == {"dog-rabies-initial", "dog-heartworm-monthly"}


def test_stats(catalog):
    stats = catalog.stats()
    assert stats["total_rules"] == 12
    assert stats["by_pet_type"] == {"dog": 6, "cat": 6}
    assert stats["by_event_type"]["vaccination"] == 6
    assert stats["by_priority"] == {"high": 9, "medium": 3}
    assert stats["sources"] == sorted(stats["sources"])


def test_get_catalog_is_cached():
    assert get_catalog() is get_catalog()


# --- validation ---

def test_validate_rule_accepts_valid_mapping():
    assert validate_rule(raw_rule()) == []


def test_validate_rule_reports_every_problem():
    errors = validate_rule(
        raw_rule(id="  ", pet_type="bird", recurrence={"interval": 0, "unit": "fortnights"}, priority="urgent")
    )
    assert "Care schedule rule must have a valid ID" in errors
    assert "Care schedule rule must have a valid pet_type (dog or cat)" in errors
    assert "Recurrence interval must be a positive number" in errors
    assert "Recurrence unit must be days, weeks, months, or years" in errors
    assert "Priority must be high, medium, or low" in errors


def test_validate_rule_rejects_negative_ages_and_bad_timestamps():
    errors = validate_rule(
        raw_rule(start_condition={"age_months": -1}, end_condition={"age_months": "x"}, created_at="yesterday")
    )
    assert "Start condition age_months must be a non-negative integer" in errors
    assert "End condition age_months must be a non-negative integer" in errors
    assert "Care schedule rule must have a parseable created_at timestamp" in errors


def test_validate_rule_missing_recurrence():
    data = raw_rule()
    del data["recurrence"]
    assert "Care schedule rule must have recurrence configuration" in validate_rule(data)


def test_catalog_validate_reports_duplicate_ids():
    catalog = CareScheduleCatalog([make_rule(), make_rule()])
    result = catalog.validate()
    assert not result.valid
    assert result.errors == ["Duplicate rule id: test-rule"]


def test_build_catalog_rejects_duplicates():
    with pytest.raises(CatalogValidationError) as exc_info:
        build_catalog([raw_rule(), raw_rule()])
    assert exc_info.value.errors == ["Duplicate rule id: test-rule"]


def test_build_catalog_rejects_invalid_rule():
    with pytest.raises(CatalogValidationError) as exc_info:
        build_catalog([raw_rule(id="broken", recurrence={"interval": -2, "unit": "months"})])
    assert exc_info.value.errors == ["Rule broken: Recurrence interval must be a positive number"]


def test_build_catalog_rejects_unknown_fields():
    with pytest.raises(CatalogValidationError) as exc_info:
        build_catalog([raw_rule(colour="blue")])
    assert exc_info.value.errors[0].startswith("Rule test-rule: colour")


def test_load_catalog_from_file(tmp_path):
    path = tmp_path / "rules.json"
    path.write_text(json.dumps({"version": "t1", "rules": [raw_rule()]}), encoding="utf-8")
    catalog = load_catalog(path)
    assert catalog.version == "t1"
    assert [r.id for r in catalog.all_rules()] == ["test-rule"]


@pytest.mark.parametrize("content", ["{not json", json.dumps({"version": "x"}), json.dumps([1, 2])])
def test_load_catalog_rejects_malformed_file(tmp_path, content):
    path = tmp_path / "rules.json"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(CatalogValidationError):
        load_catalog(path)


def test_load_catalog_missing_file(tmp_path):
    with pytest.raises(CatalogValidationError) as exc_info:
        load_catalog(tmp_path / "nope.json")
    assert "Failed to read care schedule catalog" in exc_info.value.errors[0]
