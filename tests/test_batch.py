import pytest

from app.core.care_events.batch import BatchGenerationReport, PetFailure, run_daily_generation
from app.core.care_events.schemas import GenerationResult


def _generator(results):
    calls = []

    async def generate(pet_id):
        calls.append(pet_id)
        outcome = results[pet_id]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    generate.calls = calls
    return generate


@pytest.mark.asyncio
async def test_all_pets_succeed():
    generate = _generator({
        "a": GenerationResult(created=2, skipped=1),
        "b": GenerationResult(created=0, skipped=0),
    })
    report = await run_daily_generation(["a", "b"], generate)

    assert generate.calls == ["a", "b"]
    assert report.success is True
    assert (report.total_pets, report.processed_pets, report.failed_pets) == (2, 2, 0)
    assert (report.total_events_created, report.total_events_skipped) == (2, 1)
    assert report.errors == []
    assert report.status_code == 200


@pytest.mark.asyncio
async def test_one_failure_does_not_stop_the_batch():
    generate = _generator({
        "a": GenerationResult(errors=["Unable to determine pet age"]),
        "b": RuntimeError("lost connection"),
        "c": GenerationResult(created=1),
    })
    report = await run_daily_generation(["a", "b", "c"], generate)

    assert generate.calls == ["a", "b", "c"]
    assert report.success is True
    assert report.processed_pets == 2
    assert report.failed_pets == 2
    assert report.total_events_created == 1
    assert report.errors == [
        PetFailure(pet_id="a", error="Unable to determine pet age"),
        PetFailure(pet_id="b", error="lost connection"),
    ]
    assert report.status_code == 207


@pytest.mark.asyncio
async def test_every_pet_failing_is_a_failed_run():
    generate = _generator({"a": GenerationResult(errors=["Pet not found"]), "b": ValueError()})
    report = await run_daily_generation(["a", "b"], generate)

    assert report.success is False
    assert report.failed_pets == 2
    assert report.errors[1].error == "ValueError"
    assert report.status_code == 500


@pytest.mark.asyncio
async def test_empty_batch():
    report = await run_daily_generation([], _generator({}))
    assert report.success is True
    assert report.total_pets == 0
    assert report.status_code == 200


def test_report_serializes_timestamp():
    data = BatchGenerationReport(success=True).model_dump(mode="json")
    assert isinstance(data["timestamp"], str)
    assert data["errors"] == []
