"""JSON Schema validation for scope objects read from the store."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
import json

import jsonschema
from jsonschema.exceptions import best_match

from healthscope.errors import ScopeSchemaError

SCHEMA_PATH = Path(__file__).resolve().parent / "schemas" / "healthscope.schema.json"


class SchemaManager:
    """
    Validates raw HealthScope objects before they are turned into models.

    The schema mirrors the fields the controller relies on; anything else
    on the object is ignored.
    """

    def __init__(self, schema_path: str | None = None) -> None:
        """Initialize with an optional schema path override."""
        self._schema_path = SCHEMA_PATH if schema_path is None else Path(schema_path)
        self._validator = jsonschema.Draft7Validator(_load_schema(str(self._schema_path)))

    def validate(self, raw: dict) -> None:
        """Raise ScopeSchemaError if raw does not match the schema."""
        error = best_match(self._validator.iter_errors(raw))
        if error is None:
            return

        name = ""
        metadata = raw.get("metadata") if isinstance(raw, dict) else None
        if isinstance(metadata, dict):
            name = metadata.get("name", "")
        location = "/".join(str(part) for part in error.absolute_path) or "<root>"
        raise ScopeSchemaError(f"Scope {name or '<unnamed>'} failed schema validation at {location}: {error.message}")


@lru_cache(maxsize=None)
def _load_schema(path: str) -> dict:
    return json.loads(Path(path).read_text(encoding="utf-8"))


default_schema = SchemaManager()
