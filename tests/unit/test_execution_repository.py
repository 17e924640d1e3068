from datetime import datetime

from marketplace_engine.models.enums import ExecutionStatus
from marketplace_engine.repositories.execution_repository import ExecutionRepository
from marketplace_engine.services.execution_engine import ExecutionEngine


def test_find_model_by_slug_loads_chain(session, published_model):
    repo = ExecutionRepository(session)

    model = repo.find_model_by_slug("my-tts-model")

    assert model.id == "model-1"
    assert model.base_capability.slug == "chatterbox-tts"
    assert model.base_capability.endpoint.remote_endpoint_id == "remote-endpoint-id"
    assert model.endpoint.is_active is True


def test_find_model_by_slug_missing(session):
    assert ExecutionRepository(session).find_model_by_slug("nope") is None


def test_create_execution_starts_pending(session, published_model):
    repo = ExecutionRepository(session)

    execution = repo.create_execution("consumer-1", "model-1", "endpoint-1", {"text": "hi"})

    assert execution.id
    assert execution.status == ExecutionStatus.PENDING
    assert execution.input_payload == {"text": "hi"}
    assert execution.external_job_id is None
    assert execution.created_at is not None


def test_update_and_reload_execution(session, published_model):
    repo = ExecutionRepository(session)
    execution = repo.create_execution("consumer-1", "model-1", "endpoint-1", {"text": "hi"})

    repo.update_execution(execution, {"status": ExecutionStatus.QUEUED, "external_job_id": "job-1"})
    loaded = repo.find_execution_by_id(execution.id)

    assert loaded.status == ExecutionStatus.QUEUED
    assert loaded.external_job_id == "job-1"
    assert loaded.endpoint.remote_endpoint_id == "remote-endpoint-id"
    assert loaded.input_payload == {"text": "hi"}


def test_find_execution_missing(session):
    assert ExecutionRepository(session).find_execution_by_id("missing") is None


def _seed_history(repo, consumer_id, count, start_day=1):
    created = []
    for i in range(count):
        execution = repo.create_execution(consumer_id, "model-1", "endpoint-1", {"n": i})
        repo.update_execution(execution, {"created_at": datetime(2026, 1, start_day + i)})
        created.append(execution.id)
    return created


def test_list_executions_newest_first_with_total(session, published_model):
    repo = ExecutionRepository(session)
    ids = _seed_history(repo, "consumer-1", 5)
    _seed_history(repo, "consumer-2", 2)

    items, total = repo.list_executions("consumer-1", page=1, limit=2)
    second_page, _ = repo.list_executions("consumer-1", page=2, limit=2)
    last_page, _ = repo.list_executions("consumer-1", page=3, limit=2)

    assert total == 5
    assert [e.id for e in items] == [ids[4], ids[3]]
    assert [e.id for e in second_page] == [ids[2], ids[1]]
    assert [e.id for e in last_page] == [ids[0]]


def test_list_executions_filters_by_status(session, published_model):
    repo = ExecutionRepository(session)
    ids = _seed_history(repo, "consumer-1", 3)
    repo.update_execution(repo.find_execution_by_id(ids[1]), {"status": ExecutionStatus.FAILED})

    items, total = repo.list_executions("consumer-1", status=ExecutionStatus.FAILED)

    assert total == 1
    assert [e.id for e in items] == [ids[1]]


def test_list_executions_caps_limit(session, published_model):
    repo = ExecutionRepository(session)
    _seed_history(repo, "consumer-1", 3)

    items, total = repo.list_executions("consumer-1", page=1, limit=1000)

    assert len(items) == 3
    assert total == 3


def test_list_executions_for_unknown_consumer(session, published_model):
    assert ExecutionRepository(session).list_executions("nobody") == ([], 0)


def test_late_queue_report_does_not_regress_stored_record(session, published_model, remote_client, requests_mock):
    repo = ExecutionRepository(session)
    execution = repo.create_execution("consumer-1", "model-1", "endpoint-1", {"text": "hi"})
    repo.update_execution(execution, {"status": ExecutionStatus.RUNNING, "external_job_id": "job-1"})
    requests_mock.get("https://remote.test/v2/remote-endpoint-id/status/job-1",
                      json={"id": "job-1", "status": "IN_QUEUE"})

    result = ExecutionEngine(repo, remote_client).get_job_status(execution.id, "consumer-1")

    assert result.status == ExecutionStatus.RUNNING
    assert repo.find_execution_by_id(execution.id).status == ExecutionStatus.RUNNING
