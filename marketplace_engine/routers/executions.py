from typing import Any, Dict, Optional
from fastapi import APIRouter, Depends, Query

from marketplace_engine.config import DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT
from marketplace_engine.dependencies import get_execution_engine, get_consumer_id
from marketplace_engine.models.enums import ExecutionStatus
from marketplace_engine.schemas.jobs import RunModelRequest, JobHandle, JobResult, CancelResponse, ExecutionPage
from marketplace_engine.services.execution_engine import ExecutionEngine

router = APIRouter()

@router.post("/models/{slug}/run", status_code=201, response_model=JobHandle)
def run_model(slug: str, req: RunModelRequest,
              consumer_id: str = Depends(get_consumer_id),
              engine: ExecutionEngine = Depends(get_execution_engine)):
    return engine.submit_job(consumer_id, slug, req.inputs)

@router.get("/models/{slug}/schema")
def model_input_schema(slug: str, engine: ExecutionEngine = Depends(get_execution_engine)) -> Dict[str, Any]:
    return engine.get_input_schema(slug)

@router.get("/executions", response_model=ExecutionPage)
def list_executions(page: int = Query(1, ge=1),
                    limit: int = Query(DEFAULT_PAGE_LIMIT, ge=1, le=MAX_PAGE_LIMIT),
                    status: Optional[ExecutionStatus] = None,
                    consumer_id: str = Depends(get_consumer_id),
                    engine: ExecutionEngine = Depends(get_execution_engine)):
    return engine.list_executions(consumer_id, page=page, limit=limit, status=status)

@router.get("/executions/{execution_id}", response_model=JobResult)
def get_execution(execution_id: str,
                  sync: bool = False,
                  consumer_id: str = Depends(get_consumer_id),
                  engine: ExecutionEngine = Depends(get_execution_engine)):
    return engine.get_execution(execution_id, consumer_id, sync=sync)

@router.post("/executions/{execution_id}/cancel", response_model=CancelResponse)
def cancel_execution(execution_id: str,
                     consumer_id: str = Depends(get_consumer_id),
                     engine: ExecutionEngine = Depends(get_execution_engine)):
    engine.cancel_job(execution_id, consumer_id)
    return {"success": True, "execution_id": execution_id, "status": ExecutionStatus.CANCELLED}
