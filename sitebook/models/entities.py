# Rev 0.1.0
"""Per-kind field schema for projects, architects, supervisors and contractors.

Records are plain dicts with camelCase keys (the persisted snapshot shape).
Every write path (create, update, load, import) runs through ``coerce_fields``
so that defaults, numeric coercion and status membership hold everywhere.
"""
from __future__ import annotations
import math
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple

from sitebook.models.types import EntityKind, FieldType


# Keys owned by the store, never taken from form input
SYSTEM_KEYS: Tuple[str, ...] = ("id", "createdAt", "lastUpdated")


@dataclass(frozen=True)
class FieldSpec:
    key: str
    label: str
    type: FieldType = "text"
    default: Any = ""
    minimum: Optional[float] = None
    maximum: Optional[float] = None
    required: bool = False


@dataclass(frozen=True)
class KindSchema:
    kind: EntityKind
    collection: str
    label: str              # "Project"
    fields: Tuple[FieldSpec, ...]
    statuses: Tuple[str, ...]
    create_verb: str = "Added"
    default_status: str = field(init=False)

    def __post_init__(self):
        # first listed status is the default
        object.__setattr__(self, "default_status", self.statuses[0])

    def field_keys(self) -> Tuple[str, ...]:
        return tuple(f.key for f in self.fields)


def _common_tail(statuses: Tuple[str, ...]) -> Tuple[FieldSpec, ...]:
    return (
        FieldSpec("status", "Status", "status", statuses[0]),
        FieldSpec("notes", "Notes", "longtext"),
    )


_PROJECT_STATUSES = ("planning", "active", "pending", "completed", "overdue")
_PEOPLE_STATUSES = ("active", "inactive", "on-leave")
_CONTRACTOR_STATUSES = ("active", "inactive", "on-project")

KIND_SCHEMAS: Dict[EntityKind, KindSchema] = {
    "project": KindSchema(
        kind="project",
        collection="projects",
        label="Project",
        create_verb="Created",
        statuses=_PROJECT_STATUSES,
        fields=(
            FieldSpec("name", "Project Name", required=True),
            FieldSpec("location", "Location"),
            FieldSpec("budget", "Budget ($)", "number", 0, minimum=0),
            FieldSpec("dueDate", "Due Date", "date"),
            FieldSpec("status", "Status", "status", _PROJECT_STATUSES[0]),
            FieldSpec("progress", "Progress (%)", "int", 0, minimum=0, maximum=100),
            FieldSpec("notes", "Notes", "longtext"),
        ),
    ),
    "architect": KindSchema(
        kind="architect",
        collection="architects",
        label="Architect",
        statuses=_PEOPLE_STATUSES,
        fields=(
            FieldSpec("name", "Name", required=True),
            FieldSpec("email", "Email"),
            FieldSpec("phone", "Phone"),
            FieldSpec("specialization", "Specialization"),
            FieldSpec("license", "License Number"),
            FieldSpec("experience", "Experience (years)", "int", 0, minimum=0),
        ) + _common_tail(_PEOPLE_STATUSES),
    ),
    "supervisor": KindSchema(
        kind="supervisor",
        collection="supervisors",
        label="Supervisor",
        statuses=_PEOPLE_STATUSES,
        fields=(
            FieldSpec("name", "Name", required=True),
            FieldSpec("email", "Email"),
            FieldSpec("phone", "Phone"),
            FieldSpec("department", "Department"),
            FieldSpec("certifications", "Certifications"),
        ) + _common_tail(_PEOPLE_STATUSES),
    ),
    "contractor": KindSchema(
        kind="contractor",
        collection="contractors",
        label="Contractor",
        statuses=_CONTRACTOR_STATUSES,
        fields=(
            FieldSpec("name", "Name", required=True),
            FieldSpec("company", "Company"),
            FieldSpec("email", "Email"),
            FieldSpec("phone", "Phone"),
            FieldSpec("trade", "Trade"),
            FieldSpec("hourlyRate", "Hourly Rate ($)", "number", 0, minimum=0),
        ) + _common_tail(_CONTRACTOR_STATUSES),
    ),
}

COLLECTION_KEYS: Tuple[str, ...] = tuple(s.collection for s in KIND_SCHEMAS.values())


def schema_for(kind: str) -> KindSchema:
    try:
        return KIND_SCHEMAS[kind]  # type: ignore[index]
    except KeyError:
        raise ValueError(f"unknown record kind: {kind!r}") from None


# ---------- coercion ----------

def _to_number(value: Any) -> float:
    if isinstance(value, bool):
        return float(value)
    try:
        num = float(str(value).strip()) if not isinstance(value, (int, float)) else float(value)
    except (TypeError, ValueError, OverflowError):
        return 0.0
    if math.isnan(num) or math.isinf(num):
        return 0.0
    return num


def _clamp(num: float, spec: FieldSpec) -> float:
    if spec.minimum is not None and num < spec.minimum:
        num = spec.minimum
    if spec.maximum is not None and num > spec.maximum:
        num = spec.maximum
    return float(num)


def coerce_value(spec: FieldSpec, value: Any, statuses: Tuple[str, ...] = ()) -> Any:
    """Coerce one raw form/snapshot value according to its field spec."""
    if spec.type == "number":
        num = _clamp(_to_number(value), spec)
        return int(num) if num.is_integer() else num
    if spec.type == "int":
        return int(_clamp(float(int(_to_number(value))), spec))
    if spec.type == "status":
        text = "" if value is None else str(value).strip()
        return text if text in statuses else spec.default
    # text, longtext and date are kept as given (dates are not validated)
    return "" if value is None else str(value).strip()


def coerce_fields(kind: str, raw: Mapping[str, Any]) -> Dict[str, Any]:
    """Full field set for ``kind``: supplied values coerced, the rest defaulted.

    Keys outside the kind schema are dropped.
    """
    schema = schema_for(kind)
    out: Dict[str, Any] = {}
    for spec in schema.fields:
        if spec.key in raw:
            out[spec.key] = coerce_value(spec, raw[spec.key], schema.statuses)
        else:
            out[spec.key] = spec.default
    return out


def normalize_record(kind: str, raw: Mapping[str, Any]) -> Dict[str, Any]:
    """Normalize a persisted/imported record, keeping its system keys."""
    rec = coerce_fields(kind, raw)
    for key in SYSTEM_KEYS:
        if raw.get(key) not in (None, ""):
            rec[key] = str(raw[key])
    return rec
