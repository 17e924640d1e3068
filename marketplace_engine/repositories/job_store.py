from typing import Any, Dict, List, Optional, Protocol, Tuple
from marketplace_engine.models.catalog import PublishedModel
from marketplace_engine.models.enums import ExecutionStatus
from marketplace_engine.models.execution import Execution


class JobStore(Protocol):
    """The only persistence operations the execution engine relies on."""

    def find_model_by_slug(self, slug: str) -> Optional[PublishedModel]:
        ...

    def create_execution(self, consumer_id: str, published_model_id: str, endpoint_id: str,
                         input_payload: Dict[str, Any]) -> Execution:
        ...

    def find_execution_by_id(self, execution_id: str) -> Optional[Execution]:
        ...

    def update_execution(self, execution: Execution, changes: Dict[str, Any]) -> Execution:
        ...


class ExecutionHistory(Protocol):
    """Read-only listing of a consumer's past executions."""

    def list_executions(self, consumer_id: str, page: int = 1, limit: int = 20,
                        status: Optional[ExecutionStatus] = None) -> Tuple[List[Execution], int]:
        ...
