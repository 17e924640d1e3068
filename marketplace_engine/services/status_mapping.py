from typing import Union
from marketplace_engine.models.enums import ExecutionStatus, RemoteJobStatus, TERMINAL_STATUSES

_REMOTE_TO_INTERNAL = {
    RemoteJobStatus.IN_QUEUE: ExecutionStatus.QUEUED,
    RemoteJobStatus.IN_PROGRESS: ExecutionStatus.RUNNING,
    RemoteJobStatus.COMPLETED: ExecutionStatus.COMPLETED,
    RemoteJobStatus.FAILED: ExecutionStatus.FAILED,
    RemoteJobStatus.CANCELLED: ExecutionStatus.CANCELLED,
    RemoteJobStatus.TIMED_OUT: ExecutionStatus.TIMED_OUT,
}

def map_remote_status(status: Union[RemoteJobStatus, str, None]) -> ExecutionStatus:
    """Translate the provider's status vocabulary; unknown values fall back to PENDING."""
    try:
        remote = RemoteJobStatus(status)
    except ValueError:
        return ExecutionStatus.PENDING
    return _REMOTE_TO_INTERNAL.get(remote, ExecutionStatus.PENDING)

def is_terminal(status: Union[ExecutionStatus, str]) -> bool:
    try:
        return ExecutionStatus(status) in TERMINAL_STATUSES
    except ValueError:
        return False

_RANK = {
    ExecutionStatus.PENDING: 0,
    ExecutionStatus.QUEUED: 1,
    ExecutionStatus.RUNNING: 2,
}
_TERMINAL_RANK = 3

def status_rank(status: Union[ExecutionStatus, str]) -> int:
    """Lifecycle position: PENDING < QUEUED < RUNNING < any terminal status."""
    if is_terminal(status):
        return _TERMINAL_RANK
    try:
        return _RANK[ExecutionStatus(status)]
    except ValueError:
        return 0

def advances(current: Union[ExecutionStatus, str], observed: Union[ExecutionStatus, str]) -> bool:
    """True when `observed` moves a record forward from `current`; terminal records never move."""
    if is_terminal(current):
        return False
    return status_rank(observed) > status_rank(current)
