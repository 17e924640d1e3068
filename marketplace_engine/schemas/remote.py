from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Optional

# status is kept as a raw string: unknown provider values must not fail parsing

class RemoteRunResponse(BaseModel):
    id: str
    status: str

class RemoteStatusResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    status: str
    output: Optional[Any] = None
    error: Optional[str] = None
    execution_time: Optional[float] = Field(default=None, alias="executionTime")  # seconds
