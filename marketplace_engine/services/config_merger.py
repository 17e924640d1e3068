import copy
from typing import Any, Dict, Optional
from marketplace_engine.schemas.overrides import ConfigOverrides


def _is_blank(value: Any) -> bool:
    return value is None or value == ""


def merge_inputs(user_input: Dict[str, Any], overrides: Optional[ConfigOverrides]) -> Dict[str, Any]:
    """
    Merge consumer input with the developer's override policy.

    Applied in order: defaults fill gaps, locks overwrite, hidden fields are
    dropped, then the prompt is wrapped. The caller's dict is never mutated.

    Args:
        user_input: Inputs supplied by the consumer
        overrides: Policy from the published model, or None

    Returns:
        Payload ready to send to the remote endpoint
    """
    merged = dict(user_input)
    if overrides is None:
        return merged

    if overrides.default_inputs:
        for key, value in overrides.default_inputs.items():
            if _is_blank(merged.get(key)):
                merged[key] = value

    if overrides.locked_inputs:
        for key, value in overrides.locked_inputs.items():
            merged[key] = value

    if overrides.hidden_fields:
        for field in overrides.hidden_fields:
            merged.pop(field, None)

    prompt = merged.get("prompt")
    if isinstance(prompt, str):
        merged["prompt"] = f"{overrides.prompt_prefix or ''}{prompt}{overrides.prompt_suffix or ''}"

    return merged


def transform_schema(base_schema: Dict[str, Any], overrides: Optional[ConfigOverrides]) -> Dict[str, Any]:
    """Consumer-facing copy of an input schema: hidden fields removed, locked fields read-only."""
    processed = copy.deepcopy(base_schema)
    if overrides is None:
        return processed

    properties = processed.get("properties")
    if not isinstance(properties, dict):
        return processed

    if overrides.hidden_fields:
        hidden = set(overrides.hidden_fields)
        for field in hidden:
            properties.pop(field, None)
        if isinstance(processed.get("required"), list):
            processed["required"] = [f for f in processed["required"] if f not in hidden]

    if overrides.locked_inputs:
        for key, value in overrides.locked_inputs.items():
            prop = properties.get(key)
            if isinstance(prop, dict):
                prop["readOnly"] = True
                prop["default"] = copy.deepcopy(value)

    if overrides.default_inputs:
        for key, value in overrides.default_inputs.items():
            prop = properties.get(key)
            if isinstance(prop, dict) and "default" not in prop:
                prop["default"] = copy.deepcopy(value)

    return processed
