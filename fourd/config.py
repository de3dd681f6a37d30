from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from .errors import ConfigError
from .schema_registry import DEFAULT_REGISTRY

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent / "config.yml"


@dataclass(frozen=True)
class LayoutConfig:
    """Tunables for one graph and its integrator.

    repulsion, epsilon and inner_distance drive the BHN3 estimate; the rest
    feed the per-frame integration. jitter is the edge of the cube new
    vertices are scattered in, seed makes that scattering reproducible.
    max_velocity caps the per-frame speed of every vertex; None disables it.
    """

    repulsion: float = 50.0
    epsilon: float = 0.1
    inner_distance: float = 0.36
    attraction_constant: float = 0.1
    friction_coefficient: float = 0.60
    directed_gravity_constant: float = 0.05
    jitter: float = 1.0
    seed: Optional[int] = None
    allow_self_loops: bool = False
    max_velocity: Optional[float] = 50.0

    def __post_init__(self) -> None:
        problems = DEFAULT_REGISTRY.errors("layout_config", asdict(self))
        if problems:
            raise ConfigError("Invalid layout config: " + "; ".join(problems))

    @classmethod
    def from_mapping(cls, mapping: Optional[Mapping[str, Any]]) -> "LayoutConfig":
        if not mapping:
            return cls()
        known = {f.name for f in fields(cls)}
        ignored = sorted(str(key) for key in mapping if key not in known)
        if ignored:
            logger.debug("config-ignored-keys", extra={"keys": ignored})
        values: Dict[str, Any] = {}
        for key in known & set(mapping):
            value = mapping[key]
            if key == "allow_self_loops":
                values[key] = bool(value)
            elif key == "seed":
                try:
                    values[key] = None if value is None else int(value)
                except (TypeError, ValueError) as exc:
                    raise ConfigError(f"Option {key!r} must be an integer, got {value!r}") from exc
            elif key == "max_velocity" and value is None:
                values[key] = None
            else:
                try:
                    values[key] = float(value)
                except (TypeError, ValueError) as exc:
                    raise ConfigError(f"Option {key!r} must be a number, got {value!r}") from exc
        return cls(**values)

    def replace(self, **changes: Any) -> "LayoutConfig":
        merged = asdict(self)
        merged.update(changes)
        return LayoutConfig.from_mapping(merged)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def read_config_file(config_path: Path) -> Dict[str, Any]:
    """Parse and schema-check a YAML config file, returning the raw mapping."""
    try:
        text = Path(config_path).read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to read config {config_path}: {exc}") from exc
    try:
        payload = yaml.safe_load(text) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse config: {exc}") from exc
    if not isinstance(payload, dict):
        raise ConfigError(f"Config {config_path} must be a mapping, got {type(payload).__name__}")
    problems = DEFAULT_REGISTRY.errors("layout_config", payload)
    if problems:
        raise ConfigError(f"Invalid config {config_path}: " + "; ".join(problems))
    return payload


def load_config(config_path: Optional[Path] = None) -> LayoutConfig:
    return LayoutConfig.from_mapping(read_config_file(config_path or DEFAULT_CONFIG_PATH))


__all__ = ["LayoutConfig", "DEFAULT_CONFIG_PATH", "read_config_file", "load_config"]
