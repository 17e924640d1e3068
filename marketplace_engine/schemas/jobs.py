from datetime import datetime
from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional
from marketplace_engine.models.enums import ExecutionStatus

class RunModelRequest(BaseModel):
    inputs: Dict[str, Any] = Field(default_factory=dict)

class JobHandle(BaseModel):
    execution_id: str
    external_job_id: str
    status: ExecutionStatus
    created_at: datetime

class JobResult(BaseModel):
    execution_id: str
    status: ExecutionStatus
    output: Optional[Any] = None
    error: Optional[str] = None
    error_code: Optional[str] = None
    execution_time_ms: Optional[int] = None
    completed_at: Optional[datetime] = None

class CancelResponse(BaseModel):
    success: bool
    execution_id: str
    status: ExecutionStatus

class ExecutionSummary(BaseModel):
    execution_id: str
    published_model_id: str
    status: ExecutionStatus
    external_job_id: Optional[str] = None
    error_code: Optional[str] = None
    execution_time_ms: Optional[int] = None
    created_at: datetime
    completed_at: Optional[datetime] = None

class ExecutionPage(BaseModel):
    items: List[ExecutionSummary]
    page: int
    limit: int
    total: int
    total_pages: int
