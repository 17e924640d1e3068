from enum import Enum
from typing import Any, Dict, Optional


class ErrorKind(str, Enum):
    MODEL_NOT_FOUND = "MODEL_NOT_FOUND"
    MODEL_NOT_PUBLISHED = "MODEL_NOT_PUBLISHED"
    ENDPOINT_NOT_ACTIVE = "ENDPOINT_NOT_ACTIVE"
    EXECUTION_NOT_FOUND = "EXECUTION_NOT_FOUND"
    EXECUTION_NOT_OWNED = "EXECUTION_NOT_OWNED"
    EXECUTION_NOT_CANCELLABLE = "EXECUTION_NOT_CANCELLABLE"
    REMOTE_REQUEST_FAILED = "REMOTE_REQUEST_FAILED"
    REMOTE_RATE_LIMITED = "REMOTE_RATE_LIMITED"
    REMOTE_INVALID_RESPONSE = "REMOTE_INVALID_RESPONSE"


# kind -> (stable code, default http status)
_KIND_META = {
    ErrorKind.MODEL_NOT_FOUND: ("ERR_6100", 404),
    ErrorKind.MODEL_NOT_PUBLISHED: ("ERR_6101", 400),
    ErrorKind.ENDPOINT_NOT_ACTIVE: ("ERR_6102", 503),
    ErrorKind.EXECUTION_NOT_FOUND: ("ERR_6000", 404),
    ErrorKind.EXECUTION_NOT_OWNED: ("ERR_6004", 403),
    ErrorKind.EXECUTION_NOT_CANCELLABLE: ("ERR_6005", 400),
    ErrorKind.REMOTE_REQUEST_FAILED: ("ERR_6200", 502),
    ErrorKind.REMOTE_RATE_LIMITED: ("ERR_6201", 429),
    ErrorKind.REMOTE_INVALID_RESPONSE: ("ERR_6202", 502),
}


class EngineError(RuntimeError):
    """Every failure the engine raises on purpose.

    Callers switch on ``kind``; ``code`` and ``status_code`` are stable and safe
    to render without looking at ``message``.
    """

    def __init__(self, kind: ErrorKind, message: str, details: Optional[Dict[str, Any]] = None,
                 status_code: Optional[int] = None):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.code, default_status = _KIND_META[kind]
        self.status_code = status_code if status_code is not None else default_status
        self.details = details

    @property
    def is_remote(self) -> bool:
        return self.kind in (ErrorKind.REMOTE_REQUEST_FAILED, ErrorKind.REMOTE_RATE_LIMITED,
                             ErrorKind.REMOTE_INVALID_RESPONSE)

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            out["details"] = self.details
        return out

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.kind.value}, {self.message!r})"


class RemoteError(EngineError):
    def __init__(self, kind: ErrorKind, message: str, remote_status: Optional[int] = None,
                 remote_body: Optional[str] = None, status_code: Optional[int] = None):
        details = {"remote_status": remote_status, "remote_body": remote_body}
        super().__init__(kind, message, details, status_code)
        self.remote_status = remote_status
        self.remote_body = remote_body


def model_not_found(slug: str) -> EngineError:
    return EngineError(ErrorKind.MODEL_NOT_FOUND, f"Model not found: {slug}")


def model_not_published(slug: str) -> EngineError:
    return EngineError(ErrorKind.MODEL_NOT_PUBLISHED, f"Model is not published: {slug}")


def endpoint_not_active(remote_endpoint_id: str) -> EngineError:
    return EngineError(ErrorKind.ENDPOINT_NOT_ACTIVE,
                       f"Remote endpoint is not active: {remote_endpoint_id}",
                       {"endpoint_id": remote_endpoint_id})


def execution_not_found(execution_id: str) -> EngineError:
    return EngineError(ErrorKind.EXECUTION_NOT_FOUND, f"Execution not found: {execution_id}")


def execution_not_owned() -> EngineError:
    return EngineError(ErrorKind.EXECUTION_NOT_OWNED, "You do not have access to this execution")


def execution_not_cancellable(status: str) -> EngineError:
    return EngineError(ErrorKind.EXECUTION_NOT_CANCELLABLE,
                       f"Cannot cancel execution with status: {status}",
                       {"status": status})
