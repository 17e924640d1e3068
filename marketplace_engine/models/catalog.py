from datetime import datetime, timezone
from typing import Dict, List, Optional
from sqlmodel import SQLModel, Field, Relationship, JSON
from marketplace_engine.models.enums import ModelStatus


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Endpoint(SQLModel, table=True):
    id: str = Field(primary_key=True)
    remote_endpoint_id: str = Field(index=True)  # id on the provider side
    name: str
    gpu_type: Optional[str] = None
    is_active: bool = Field(default=True)

    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    capabilities: List["BaseCapability"] = Relationship(back_populates="endpoint")


class BaseCapability(SQLModel, table=True):
    id: str = Field(primary_key=True)
    endpoint_id: str = Field(foreign_key="endpoint.id")
    slug: str = Field(unique=True, index=True)
    name: str
    input_schema: Dict = Field(default_factory=dict, sa_type=JSON)
    is_active: bool = Field(default=True)

    created_at: datetime = Field(default_factory=_utcnow)

    endpoint: Optional[Endpoint] = Relationship(back_populates="capabilities")
    published_models: List["PublishedModel"] = Relationship(back_populates="base_capability")


class PublishedModel(SQLModel, table=True):
    id: str = Field(primary_key=True)
    developer_id: str
    base_capability_id: str = Field(foreign_key="basecapability.id")
    title: str
    slug: str = Field(unique=True, index=True)
    status: ModelStatus = Field(default=ModelStatus.DRAFT)

    # ConfigOverrides stored as-is; parsed by schemas.overrides.ConfigOverrides
    config_overrides: Optional[Dict] = Field(default=None, sa_type=JSON)

    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    base_capability: Optional[BaseCapability] = Relationship(back_populates="published_models")

    @property
    def endpoint(self) -> Optional[Endpoint]:
        return self.base_capability.endpoint if self.base_capability else None
