import logging
import math
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from marketplace_engine.config import (
    SUBMIT_FAILED_ERROR_CODE, REMOTE_JOB_ERROR_CODE, DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT,
)
from marketplace_engine import errors
from marketplace_engine.models.enums import ExecutionStatus, ModelStatus
from marketplace_engine.models.execution import Execution
from marketplace_engine.repositories.job_store import JobStore, ExecutionHistory
from marketplace_engine.schemas.jobs import JobHandle, JobResult, ExecutionPage, ExecutionSummary
from marketplace_engine.schemas.overrides import ConfigOverrides
from marketplace_engine.services.config_merger import merge_inputs, transform_schema
from marketplace_engine.services.remote_client import RemoteExecutionClient
from marketplace_engine.services.status_mapping import map_remote_status, is_terminal, advances

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


class ExecutionEngine:
    """
    Drives one execution through its lifecycle against the remote GPU API.

    Holds no state of its own between calls: everything lives in the store,
    so one instance can serve any number of requests.
    """

    def __init__(self, store: JobStore, client: RemoteExecutionClient,
                 history: Optional[ExecutionHistory] = None):
        self.store = store
        self.client = client
        self.history = history

    def submit_job(self, consumer_id: str, model_slug: str, user_input: Dict[str, Any]) -> JobHandle:
        model = self.store.find_model_by_slug(model_slug)
        if not model:
            raise errors.model_not_found(model_slug)
        if model.status != ModelStatus.PUBLISHED:
            raise errors.model_not_published(model_slug)

        endpoint = model.base_capability.endpoint
        if not endpoint.is_active:
            raise errors.endpoint_not_active(endpoint.remote_endpoint_id)

        overrides = ConfigOverrides.from_stored(model.config_overrides)
        payload = merge_inputs(user_input, overrides)

        execution = self.store.create_execution(
            consumer_id=consumer_id,
            published_model_id=model.id,
            endpoint_id=endpoint.id,
            input_payload=payload,
        )
        logger.info(f"Submitting execution {execution.id} for {model_slug} to {endpoint.remote_endpoint_id}")

        try:
            remote = self.client.submit(endpoint.remote_endpoint_id, payload)
        except Exception as e:
            # compensating write; the caller still gets the original error
            self.store.update_execution(execution, {
                "status": ExecutionStatus.FAILED,
                "error_code": SUBMIT_FAILED_ERROR_CODE,
                "error_message": str(e) or type(e).__name__,
                "completed_at": _now(),
            })
            raise

        status = map_remote_status(remote.status)
        self.store.update_execution(execution, {"external_job_id": remote.id, "status": status})

        return JobHandle(
            execution_id=execution.id,
            external_job_id=remote.id,
            status=status,
            created_at=execution.created_at,
        )

    def get_job_status(self, execution_id: str, consumer_id: str) -> JobResult:
        execution = self._load_owned(execution_id, consumer_id)

        if is_terminal(execution.status):
            return self._stored_result(execution)

        if not execution.external_job_id:
            return JobResult(execution_id=execution.id, status=ExecutionStatus.PENDING)

        remote = self.client.get_status(execution.endpoint.remote_endpoint_id, execution.external_job_id)
        status = map_remote_status(remote.status)

        # records only move forward; a late or unrecognised remote status keeps what is stored
        if not advances(execution.status, status):
            if status != execution.status:
                logger.debug(f"Execution {execution.id} stays {ExecutionStatus(execution.status).value}, "
                             f"remote reported {remote.status}")
            return self._stored_result(execution)

        terminal = is_terminal(status)
        execution_time_ms = round(remote.execution_time * 1000) if remote.execution_time is not None else None
        completed_at = _now() if terminal else None

        changes: Dict[str, Any] = {"status": status}
        if remote.output is not None:
            changes["output_payload"] = remote.output
        if remote.error:
            changes["error_message"] = remote.error
            changes["error_code"] = REMOTE_JOB_ERROR_CODE
        if execution_time_ms is not None:
            changes["execution_time_ms"] = execution_time_ms
        if terminal:
            changes["completed_at"] = completed_at
        self.store.update_execution(execution, changes)
        if terminal:
            logger.info(f"Execution {execution.id} reached {status.value}")

        return JobResult(
            execution_id=execution_id,
            status=status,
            output=remote.output,
            error=remote.error,
            error_code=REMOTE_JOB_ERROR_CODE if remote.error else None,
            execution_time_ms=execution_time_ms,
            completed_at=completed_at,
        )

    def get_execution(self, execution_id: str, consumer_id: str, sync: bool = False) -> JobResult:
        """Stored view of an execution. Only polls the remote API when `sync` is set."""
        if sync:
            return self.get_job_status(execution_id, consumer_id)
        return self._stored_result(self._load_owned(execution_id, consumer_id))

    def list_executions(self, consumer_id: str, page: int = 1, limit: int = DEFAULT_PAGE_LIMIT,
                        status: Optional[ExecutionStatus] = None) -> ExecutionPage:
        if self.history is None:
            raise RuntimeError("ExecutionEngine was built without an execution history")
        page = max(page, 1)
        limit = min(max(limit, 1), MAX_PAGE_LIMIT)

        executions, total = self.history.list_executions(consumer_id, page=page, limit=limit, status=status)
        return ExecutionPage(
            items=[
                ExecutionSummary(
                    execution_id=e.id,
                    published_model_id=e.published_model_id,
                    status=e.status,
                    external_job_id=e.external_job_id,
                    error_code=e.error_code,
                    execution_time_ms=e.execution_time_ms,
                    created_at=e.created_at,
                    completed_at=e.completed_at,
                )
                for e in executions
            ],
            page=page,
            limit=limit,
            total=total,
            total_pages=math.ceil(total / limit),
        )

    def cancel_job(self, execution_id: str, consumer_id: str) -> None:
        execution = self._load_owned(execution_id, consumer_id)

        if is_terminal(execution.status):
            raise errors.execution_not_cancellable(ExecutionStatus(execution.status).value)

        if execution.external_job_id:
            # best-effort: the provider may keep running the job for a while
            self.client.cancel(execution.endpoint.remote_endpoint_id, execution.external_job_id)

        self.store.update_execution(execution, {
            "status": ExecutionStatus.CANCELLED,
            "completed_at": _now(),
        })
        logger.info(f"Execution {execution.id} cancelled (remote job {execution.external_job_id})")

    def get_input_schema(self, model_slug: str) -> Dict[str, Any]:
        """Input form for a model as consumers should see it."""
        model = self.store.find_model_by_slug(model_slug)
        if not model:
            raise errors.model_not_found(model_slug)
        overrides = ConfigOverrides.from_stored(model.config_overrides)
        return transform_schema(model.base_capability.input_schema or {}, overrides)

    def _load_owned(self, execution_id: str, consumer_id: str) -> Execution:
        execution = self.store.find_execution_by_id(execution_id)
        if not execution:
            raise errors.execution_not_found(execution_id)
        if execution.consumer_id != consumer_id:
            raise errors.execution_not_owned()
        return execution

    @staticmethod
    def _stored_result(execution: Execution) -> JobResult:
        return JobResult(
            execution_id=execution.id,
            status=execution.status,
            output=execution.output_payload,
            error=execution.error_message,
            error_code=execution.error_code,
            execution_time_ms=execution.execution_time_ms,
            completed_at=execution.completed_at,
        )
