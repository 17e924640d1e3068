import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from sqlmodel import SQLModel, Field, Relationship, JSON
from marketplace_engine.models.catalog import Endpoint
from marketplace_engine.models.enums import ExecutionStatus


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Execution(SQLModel, table=True):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    consumer_id: str = Field(index=True)
    published_model_id: str = Field(foreign_key="publishedmodel.id", index=True)
    endpoint_id: str = Field(foreign_key="endpoint.id")
    status: ExecutionStatus = Field(default=ExecutionStatus.PENDING, index=True)

    # Merged payload, written once at creation
    input_payload: Dict = Field(default_factory=dict, sa_type=JSON)
    external_job_id: Optional[str] = None

    output_payload: Optional[Any] = Field(default=None, sa_type=JSON)
    error_message: Optional[str] = None
    error_code: Optional[str] = None
    execution_time_ms: Optional[int] = None
    completed_at: Optional[datetime] = None

    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    endpoint: Optional[Endpoint] = Relationship()
