from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List

from jsonschema import Draft202012Validator

SCHEMA_DIR = Path(__file__).resolve().parent / "schemas"


@dataclass
class SchemaRegistry:
    base_dir: Path
    schemas: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    validators: Dict[str, Draft202012Validator] = field(default_factory=dict)

    def register(self, name: str, path: Path) -> None:
        payload = json.loads(path.read_text(encoding="utf-8"))
        Draft202012Validator.check_schema(payload)
        self.schemas[name] = payload
        self.validators[name] = Draft202012Validator(payload)

    def validator(self, name: str) -> Draft202012Validator:
        if name not in self.validators:
            raise KeyError(f"Schema not registered: {name}")
        return self.validators[name]

    def errors(self, name: str, payload: Any) -> List[str]:
        """Return one "path: message" line per violation, ordered by path."""
        found = sorted(self.validator(name).iter_errors(payload), key=lambda err: [str(part) for part in err.absolute_path])
        messages = []
        for err in found:
            where = "/".join(str(part) for part in err.absolute_path) or "<root>"
            messages.append(f"{where}: {err.message}")
        return messages


def load_default_registry() -> SchemaRegistry:
    registry = SchemaRegistry(SCHEMA_DIR)
    for name in ("layout_config", "layout_snapshot"):
        path = SCHEMA_DIR / f"{name}.schema.json"
        if not path.exists():
            raise FileNotFoundError(f"Missing schema file: {path}")
        registry.register(name, path)
    return registry


DEFAULT_REGISTRY = load_default_registry()


__all__ = ["SchemaRegistry", "DEFAULT_REGISTRY", "load_default_registry"]
