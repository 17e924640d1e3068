from fastapi import Depends, Header
from sqlmodel import Session, create_engine
from marketplace_engine.config import DATABASE_URL, CONSUMER_ID_HEADER
from marketplace_engine.repositories.execution_repository import ExecutionRepository
from marketplace_engine.services.execution_engine import ExecutionEngine
from marketplace_engine.services.remote_client import RemoteExecutionClient

engine = create_engine(DATABASE_URL)

def get_session():
    with Session(engine) as session:
        yield session

def build_engine(session: Session) -> ExecutionEngine:
    repo = ExecutionRepository(session)
    return ExecutionEngine(store=repo, client=RemoteExecutionClient(), history=repo)

def get_execution_engine(session: Session = Depends(get_session)) -> ExecutionEngine:
    return build_engine(session)

def get_consumer_id(consumer_id: str = Header(..., alias=CONSUMER_ID_HEADER)) -> str:
    return consumer_id
