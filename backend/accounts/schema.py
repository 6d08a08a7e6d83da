# accounts/schema.py
"""
Per-group extra-field schema.

Each UserGroup carries a list of field descriptors describing additional
data collected when a user is registered into that group:

    {"name": "employee_no", "type": "Number", "required": true,
     "unique": true, "default": []}

The descriptors are evaluated at runtime: ``parse_schema`` validates the
descriptor list itself when a group is created, ``clean_extras`` validates
and coerces the submitted values when a user is created.
"""

from dataclasses import dataclass, field, asdict
import re
from datetime import date
import json
from typing import Callable, Dict, List, Optional, Tuple

FIELD_TYPES = ("String", "Number", "Date", "Boolean", "Array", "Object")

_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class SchemaError(ValueError):
    """Raised when a descriptor or a submitted value is invalid."""


@dataclass(frozen=True)
class FieldSpec:
    name: str
    type: str
    required: bool = False
    unique: bool = False
    default: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return asdict(self)


def _to_string(value):
    if isinstance(value, (dict, list)):
        raise SchemaError("expected a string")
    return str(value).strip()


def _to_number(value):
    if isinstance(value, bool):
        raise SchemaError("expected a number")
    if isinstance(value, (int, float)):
        return value
    try:
        number = float(str(value).strip())
    except ValueError:
        raise SchemaError("expected a number")
    return int(number) if number.is_integer() else number


def _to_date(value):
    try:
        return date.fromisoformat(str(value).strip()[:10]).isoformat()
    except ValueError:
        raise SchemaError("expected a date (YYYY-MM-DD)")


def _to_boolean(value):
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in ("true", "1", "yes", "on"):
        return True
    if text in ("false", "0", "no", "off"):
        return False
    raise SchemaError("expected a boolean")


def _to_array(value):
    if isinstance(value, list):
        return value
    if isinstance(value, str):
        try:
            parsed = json.loads(value)
        except ValueError:
            return [item.strip() for item in value.split(",") if item.strip()]
        if isinstance(parsed, list):
            return parsed
    raise SchemaError("expected an array")


def _to_object(value):
    if isinstance(value, dict):
        return value
    if isinstance(value, str):
        try:
            parsed = json.loads(value)
        except ValueError:
            raise SchemaError("expected an object")
        if isinstance(parsed, dict):
            return parsed
    raise SchemaError("expected an object")


COERCERS: Dict[str, Callable] = {
    "String": _to_string,
    "Number": _to_number,
    "Date": _to_date,
    "Boolean": _to_boolean,
    "Array": _to_array,
    "Object": _to_object,
}


def parse_schema(raw) -> List[FieldSpec]:
    """
    Validate a descriptor list and return FieldSpecs.

    Raises:
        SchemaError: On malformed descriptors, unknown types or duplicate names
    """
    if raw in (None, ""):
        return []
    if not isinstance(raw, list):
        raise SchemaError("Field schema must be a list of field descriptors.")

    specs = []
    seen = set()
    for index, item in enumerate(raw):
        if not isinstance(item, dict):
            raise SchemaError(f"Field {index}: descriptor must be an object.")

        name = str(item.get("name") or "").strip()
        if not name:
            raise SchemaError(f"Field {index}: name is required.")
        if not _NAME_RE.match(name) or "__" in name:
            raise SchemaError(f"Field '{name}': use letters, digits and single underscores only.")
        if name in seen:
            raise SchemaError(f"Field '{name}' is declared twice.")
        seen.add(name)

        field_type = item.get("type")
        if field_type not in FIELD_TYPES:
            raise SchemaError(
                f"Field '{name}': type must be one of {', '.join(FIELD_TYPES)}."
            )

        default = item.get("default") or []
        if not isinstance(default, list):
            default = [default]

        specs.append(FieldSpec(
            name=name,
            type=field_type,
            required=bool(item.get("required", False)),
            unique=bool(item.get("unique", False)),
            default=[str(d) for d in default],
        ))
    return specs


def clean_extras(
    specs: List[FieldSpec],
    submitted: dict,
    taken: Optional[Callable[[FieldSpec, object], bool]] = None,
) -> Tuple[dict, Dict[str, str]]:
    """
    Validate submitted values against the schema.

    Args:
        specs: Parsed field specs of the target group
        submitted: Raw request data (extra keys are ignored)
        taken: Callback answering "is this value already used?" for unique fields

    Returns:
        (values, errors) where errors maps field name -> message
    """
    values = {}
    errors = {}

    for spec in specs:
        raw = submitted.get(spec.name)
        if raw is None or raw == "":
            if spec.default:
                raw = spec.default[0]
            elif spec.required:
                errors[spec.name] = "This field is required."
                continue
            else:
                continue

        try:
            value = COERCERS[spec.type](raw)
        except SchemaError as e:
            errors[spec.name] = str(e)
            continue

        if spec.unique and taken is not None and taken(spec, value):
            errors[spec.name] = "This value is already in use."
            continue

        values[spec.name] = value

    return values, errors
