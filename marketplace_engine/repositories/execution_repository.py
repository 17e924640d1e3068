from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple
from sqlalchemy.orm import selectinload
from sqlmodel import select, func
from marketplace_engine.config import DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT
from marketplace_engine.repositories.base_repository import BaseRepository
from marketplace_engine.models.catalog import PublishedModel, BaseCapability
from marketplace_engine.models.execution import Execution
from marketplace_engine.models.enums import ExecutionStatus

class ExecutionRepository(BaseRepository):
    def find_model_by_slug(self, slug: str) -> Optional[PublishedModel]:
        """Published model with its capability and endpoint loaded."""
        statement = (
            select(PublishedModel)
            .where(PublishedModel.slug == slug)
            .options(selectinload(PublishedModel.base_capability).selectinload(BaseCapability.endpoint))
        )
        return self.session.exec(statement).first()

    def create_execution(self, consumer_id: str, published_model_id: str, endpoint_id: str,
                         input_payload: Dict[str, Any]) -> Execution:
        execution = Execution(
            consumer_id=consumer_id,
            published_model_id=published_model_id,
            endpoint_id=endpoint_id,
            status=ExecutionStatus.PENDING,
            input_payload=input_payload,
        )
        self.session.add(execution)
        self.session.commit()
        self.session.refresh(execution)
        return execution

    def find_execution_by_id(self, execution_id: str) -> Optional[Execution]:
        statement = (
            select(Execution)
            .where(Execution.id == execution_id)
            .options(selectinload(Execution.endpoint))
        )
        return self.session.exec(statement).first()

    def update_execution(self, execution: Execution, changes: Dict[str, Any]) -> Execution:
        # plain assignment of every field: concurrent writers replace, never accumulate
        for field, value in changes.items():
            setattr(execution, field, value)
        execution.updated_at = datetime.now(timezone.utc)
        self.session.add(execution)
        self.session.commit()
        self.session.refresh(execution)
        return execution

    def list_executions(self, consumer_id: str, page: int = 1, limit: int = DEFAULT_PAGE_LIMIT,
                        status: Optional[ExecutionStatus] = None) -> Tuple[List[Execution], int]:
        """A page of the consumer's executions, newest first, plus the unpaged total."""
        page = max(page, 1)
        limit = min(max(limit, 1), MAX_PAGE_LIMIT)

        conditions = [Execution.consumer_id == consumer_id]
        if status is not None:
            conditions.append(Execution.status == status)

        statement = (
            select(Execution)
            .where(*conditions)
            .order_by(Execution.created_at.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        )
        total = self.session.exec(select(func.count()).select_from(Execution).where(*conditions)).one()
        return list(self.session.exec(statement).all()), total
