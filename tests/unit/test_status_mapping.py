import pytest
from marketplace_engine.models.enums import ExecutionStatus, RemoteJobStatus
from marketplace_engine.services.status_mapping import map_remote_status, is_terminal, status_rank, advances


@pytest.mark.parametrize("remote,expected", [
    ("IN_QUEUE", ExecutionStatus.QUEUED),
    ("IN_PROGRESS", ExecutionStatus.RUNNING),
    ("COMPLETED", ExecutionStatus.COMPLETED),
    ("FAILED", ExecutionStatus.FAILED),
    ("CANCELLED", ExecutionStatus.CANCELLED),
    ("TIMED_OUT", ExecutionStatus.TIMED_OUT),
    (RemoteJobStatus.IN_PROGRESS, ExecutionStatus.RUNNING),
])
def test_map_known_statuses(remote, expected):
    assert map_remote_status(remote) == expected


@pytest.mark.parametrize("remote", ["SOMETHING_NEW", "", None, "completed"])
def test_unknown_status_maps_to_pending(remote):
    assert map_remote_status(remote) == ExecutionStatus.PENDING


def test_terminal_statuses():
    assert {s for s in ExecutionStatus if is_terminal(s)} == {
        ExecutionStatus.COMPLETED, ExecutionStatus.FAILED,
        ExecutionStatus.CANCELLED, ExecutionStatus.TIMED_OUT,
    }
    assert is_terminal("COMPLETED")
    assert not is_terminal("bogus")


def test_status_rank_orders_lifecycle():
    assert status_rank(ExecutionStatus.PENDING) < status_rank(ExecutionStatus.QUEUED) \
        < status_rank(ExecutionStatus.RUNNING) < status_rank(ExecutionStatus.COMPLETED)
    assert len({status_rank(s) for s in (ExecutionStatus.COMPLETED, ExecutionStatus.FAILED,
                                          ExecutionStatus.CANCELLED, ExecutionStatus.TIMED_OUT)}) == 1


@pytest.mark.parametrize("current,observed,expected", [
    (ExecutionStatus.PENDING, ExecutionStatus.QUEUED, True),
    (ExecutionStatus.QUEUED, ExecutionStatus.RUNNING, True),
    (ExecutionStatus.QUEUED, ExecutionStatus.COMPLETED, True),
    (ExecutionStatus.RUNNING, ExecutionStatus.FAILED, True),
    (ExecutionStatus.RUNNING, ExecutionStatus.RUNNING, False),
    (ExecutionStatus.RUNNING, ExecutionStatus.QUEUED, False),
    (ExecutionStatus.RUNNING, ExecutionStatus.PENDING, False),
    (ExecutionStatus.QUEUED, ExecutionStatus.PENDING, False),
    (ExecutionStatus.COMPLETED, ExecutionStatus.FAILED, False),
    ("RUNNING", "QUEUED", False),
])
def test_advances(current, observed, expected):
    assert advances(current, observed) is expected
