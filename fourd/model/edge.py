from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, NamedTuple

from .vertex import Vertex


class EdgeKey(NamedTuple):
    """Ordered (source id, target id) pair; (a, b) and (b, a) are distinct."""

    source: int
    target: int


@dataclass(eq=False)
class Edge:
    id: int
    source: Vertex
    target: Vertex
    directed: bool = False
    strength: float = 1.0
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def key(self) -> EdgeKey:
        return EdgeKey(self.source.id, self.target.id)

    @property
    def is_loop(self) -> bool:
        return self.source is self.target

    def __str__(self) -> str:
        return f"{self.source}-->{self.target}"


__all__ = ["Edge", "EdgeKey"]
