import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("REMOTE_API_KEY", "test-api-key")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine

from marketplace_engine.main import app
from marketplace_engine.dependencies import get_execution_engine
from marketplace_engine.models.catalog import Endpoint, BaseCapability, PublishedModel
from marketplace_engine.models.enums import ModelStatus
from marketplace_engine.models.execution import Execution  # noqa: F401 (registers table)
from marketplace_engine.repositories.execution_repository import ExecutionRepository
from marketplace_engine.services.execution_engine import ExecutionEngine
from marketplace_engine.services.remote_client import RemoteExecutionClient

REMOTE_BASE = "https://remote.test/v2"
REMOTE_ENDPOINT_ID = "remote-endpoint-id"


@pytest.fixture
def session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        yield session
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def remote_client():
    return RemoteExecutionClient(api_key="test-api-key", base_url=REMOTE_BASE, max_retries=2, retry_delay_ms=0)


@pytest.fixture
def published_model(session):
    endpoint = Endpoint(id="endpoint-1", remote_endpoint_id=REMOTE_ENDPOINT_ID, name="TTS", gpu_type="A40")
    capability = BaseCapability(
        id="capability-1",
        endpoint_id=endpoint.id,
        slug="chatterbox-tts",
        name="Chatterbox TTS",
        input_schema={
            "type": "object",
            "properties": {
                "text": {"type": "string"},
                "voice": {"type": "string"},
                "quality": {"type": "string"},
                "seed": {"type": "integer"},
            },
            "required": ["text", "seed"],
        },
    )
    model = PublishedModel(
        id="model-1",
        developer_id="developer-1",
        base_capability_id=capability.id,
        title="My TTS",
        slug="my-tts-model",
        status=ModelStatus.PUBLISHED,
        config_overrides={
            "defaultInputs": {"voice": "default"},
            "lockedInputs": {"quality": "high"},
            "hiddenFields": ["seed"],
        },
    )
    session.add(endpoint)
    session.add(capability)
    session.add(model)
    session.commit()
    return model


@pytest.fixture
def client(session, remote_client):
    def _engine():
        repo = ExecutionRepository(session)
        return ExecutionEngine(store=repo, client=remote_client, history=repo)

    app.dependency_overrides[get_execution_engine] = _engine
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
