from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, List, Optional

class ConfigOverrides(BaseModel):
    """Developer policy layered onto consumer input before submission.

    Stored as JSON on the published model; both the camelCase keys written by
    the developer dashboard and snake_case keys are accepted.
    """
    model_config = ConfigDict(populate_by_name=True)

    default_inputs: Optional[Dict[str, Any]] = Field(default=None, alias="defaultInputs")
    locked_inputs: Optional[Dict[str, Any]] = Field(default=None, alias="lockedInputs")
    hidden_fields: Optional[List[str]] = Field(default=None, alias="hiddenFields")
    prompt_prefix: Optional[str] = Field(default=None, alias="promptPrefix")
    prompt_suffix: Optional[str] = Field(default=None, alias="promptSuffix")

    @classmethod
    def from_stored(cls, raw: Optional[Dict[str, Any]]) -> Optional["ConfigOverrides"]:
        if not raw:
            return None
        return cls.model_validate(raw)
