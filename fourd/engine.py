from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Mapping, Optional, Tuple

import numpy as np

from .config import LayoutConfig
from .model.edge import Edge
from .model.graph import Graph
from .model.vertex import Vertex, zero3
from .physics.integrator import Integrator

logger = logging.getLogger(__name__)

VERSION = "0.1.0"


class LayoutEngine:
    """One graph, its integrator and the lock that keeps mutation off a running step."""

    version = VERSION

    def __init__(self, config: Optional[LayoutConfig] = None) -> None:
        self.config = config or LayoutConfig()
        self.graph = Graph(self.config)
        self.integrator = Integrator(self.config)
        self.frame = 0
        self._center_of_mass = zero3()
        self._lock = threading.RLock()

    @contextmanager
    def locked(self) -> Iterator[Graph]:
        with self._lock:
            yield self.graph

    def add_vertex(self, options: Optional[Mapping[str, Any]] = None) -> Vertex:
        with self._lock:
            return self.graph.add_vertex(options)

    def add_edge(self, source: Vertex, target: Vertex, options: Optional[Mapping[str, Any]] = None) -> Edge:
        with self._lock:
            return self.graph.add_edge(source, target, options)

    def remove_edge(self, edge: Edge) -> None:
        with self._lock:
            self.graph.remove_edge(edge)

    def remove_vertex(self, vertex: Vertex) -> None:
        with self._lock:
            self.graph.remove_vertex(vertex)

    def clear(self) -> None:
        with self._lock:
            self.graph.clear()
            self.frame = 0
            self._center_of_mass = zero3()
            logger.info("layout-cleared")

    def step(self) -> np.ndarray:
        with self._lock:
            self._center_of_mass = self.integrator.step(self.graph)
            self.frame += 1
            return self._center_of_mass.copy()

    @property
    def center_of_mass(self) -> np.ndarray:
        return self._center_of_mass.copy()

    def positions(self) -> Dict[int, Tuple[float, float, float]]:
        with self._lock:
            return {
                vertex.id: (float(vertex.position[0]), float(vertex.position[1]), float(vertex.position[2]))
                for vertex in self.graph.iter_vertices()
            }

    def __str__(self) -> str:
        return str(self.graph)


__all__ = ["LayoutEngine", "VERSION"]
