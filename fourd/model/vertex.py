from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict

import numpy as np

from ..errors import InvalidArgument

if TYPE_CHECKING:
    from .edge import Edge

STATE_VECTORS = frozenset({"position", "velocity", "acceleration", "repulsion", "attraction"})


def zero3() -> np.ndarray:
    return np.zeros(3, dtype=np.float64)


def as_vector3(value: Any) -> np.ndarray:
    """Copy value into a fresh float64 array of shape (3,)."""
    try:
        return np.array(value, dtype=np.float64).reshape(3)
    except (TypeError, ValueError) as exc:
        raise InvalidArgument(f"Expected three coordinates, got {value!r}") from exc


@dataclass(eq=False)
class Vertex:
    """A graph vertex and the physical state the layout moves around.

    Identity is the object itself; two vertices with equal ids from different
    graphs are different vertices. metadata is whatever the caller passed to
    add_vertex and is never read by the layout.
    """

    id: int
    position: np.ndarray = field(default_factory=zero3)
    metadata: Dict[str, Any] = field(default_factory=dict)
    velocity: np.ndarray = field(default_factory=zero3)
    acceleration: np.ndarray = field(default_factory=zero3)
    repulsion: np.ndarray = field(default_factory=zero3, repr=False)
    attraction: np.ndarray = field(default_factory=zero3, repr=False)
    edges: Dict[int, "Edge"] = field(default_factory=dict, repr=False)

    def __setattr__(self, name: str, value: Any) -> None:
        # in-place updates (`v.position += d`) hand back the array already stored
        if name in STATE_VECTORS and value is not self.__dict__.get(name):
            value = as_vector3(value)
        super().__setattr__(name, value)

    @property
    def edge_count(self) -> int:
        return len(self.edges)

    def reset_forces(self) -> None:
        self.acceleration.fill(0.0)
        self.repulsion.fill(0.0)
        self.attraction.fill(0.0)

    def __str__(self) -> str:
        return str(self.id)


__all__ = ["Vertex", "as_vector3", "zero3"]
