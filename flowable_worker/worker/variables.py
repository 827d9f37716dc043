"""
Conversion between the engine's typed-variable wire format and the flat
list of HandlerVariable that handlers work with.

The engine is not consistent about how it ships variables, so decoding
accepts both the object shape

    {"variables": {"amount": {"type": "integer", "value": 5}, "note": "hi"}}

and the array shape

    {"variables": [{"name": "amount", "type": "integer", "value": 5}]}
"""
import json
from typing import Any, Dict, List, Union

from flowable_worker.errors import DecodeError
from flowable_worker.worker.models import HandlerVariable


def decode_variables(body: Union[str, bytes]) -> List[HandlerVariable]:
    try:
        data = json.loads(body)
    except ValueError as e:
        raise DecodeError(str(e)) from e

    if not isinstance(data, dict):
        raise DecodeError(f"expected a JSON object, got {type(data).__name__}")

    if "variables" not in data:
        return []

    raw = data["variables"]
    result = []

    if isinstance(raw, dict):
        for name, v in raw.items():
            if isinstance(v, dict):
                var_type = v.get("type")
                result.append(HandlerVariable(
                    name=name,
                    type=var_type if isinstance(var_type, str) else "",
                    value=v.get("value"),
                ))
            else:
                result.append(HandlerVariable(name=name, type="", value=v))

    elif isinstance(raw, list):
        for item in raw:
            if not isinstance(item, dict):
                continue
            name = item.get("name")
            if not isinstance(name, str) or not name:
                name = item.get("id")
            if not isinstance(name, str) or not name:
                continue
            var_type = item.get("type")
            result.append(HandlerVariable(
                name=name,
                type=var_type if isinstance(var_type, str) else "",
                value=item.get("value"),
            ))

    else:
        result.append(HandlerVariable(name="variables", type="json", value=raw))

    return result


def _format_value(value: Any) -> str:
    if isinstance(value, str):
        return value
    # bool before numbers: bool is an int subclass
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if value.is_integer():
            return f"{value:.0f}"
        return repr(value)
    try:
        return json.dumps(value, separators=(",", ":"), allow_nan=False)
    except (TypeError, ValueError):
        return ""


def get_var(variables: List[HandlerVariable], name: str) -> str:
    """Display string of the first variable called `name`, or "" if there is none."""
    for v in variables:
        if v.name == name:
            return _format_value(v.value)
    return ""


def variables_to_dict(variables: List[HandlerVariable]) -> Dict[str, Any]:
    # Names are not unique on the wire; last one wins.
    return {v.name: v.value for v in variables}
