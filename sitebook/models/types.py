# sitebook type definitions
# Rev 0.1.0

from __future__ import annotations
from typing import Literal

# Record kinds, one collection each
EntityKind = Literal["project", "architect", "supervisor", "contractor"]

# Field widgets/coercions understood by the schema table
FieldType = Literal["text", "longtext", "number", "int", "date", "status"]

ENTITY_KINDS: tuple[EntityKind, ...] = ("project", "architect", "supervisor", "contractor")
