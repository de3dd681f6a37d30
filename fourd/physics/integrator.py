from __future__ import annotations

import json
import logging
from typing import Any, Optional

import numpy as np

from ..config import LayoutConfig
from ..model.graph import Graph
from ..model.vertex import zero3
from .bhn3 import BHN3
from .forces import repulsion_law, spring_attraction

LOG = logging.getLogger(__name__)


def _log(event: str, **fields: Any) -> None:
    if not LOG.isEnabledFor(logging.DEBUG):
        return
    payload = {"event": event, **fields}
    LOG.debug(json.dumps(payload, sort_keys=True))


class Integrator:
    """Advances every vertex of a graph by one explicit Euler step."""

    def __init__(self, config: Optional[LayoutConfig] = None) -> None:
        self.config = config or LayoutConfig()
        self.pairwise = repulsion_law(self.config)
        self.center_of_mass = zero3()

    def step(self, graph: Graph) -> np.ndarray:
        config = self.config
        vertices = list(graph.iter_vertices())
        for vertex in vertices:
            vertex.reset_forces()

        tree = BHN3.build(vertices, config.inner_distance)
        for vertex in vertices:
            tree.estimate(vertex, vertex.repulsion, self.pairwise)

        gravity = np.array([0.0, -config.directed_gravity_constant, 0.0])
        for edge in graph.iter_edges():
            source, target = edge.source, edge.target
            attraction = spring_attraction(
                source.position, target.position, config.attraction_constant, edge.strength
            )
            source.attraction -= attraction
            target.attraction += attraction
            if edge.directed:
                target.acceleration += gravity

        cap = config.max_velocity
        for vertex in vertices:
            friction = vertex.velocity * config.friction_coefficient
            vertex.acceleration += vertex.repulsion - vertex.attraction - friction
            vertex.velocity += vertex.acceleration
            if cap is not None:
                speed = float(np.linalg.norm(vertex.velocity))
                if speed > cap:
                    vertex.velocity *= cap / speed
            vertex.position += vertex.velocity

        self.center_of_mass = tree.center_of_mass
        _log(
            "layout-step",
            vertices=len(vertices),
            edges=len(graph.edges),
            nodes=len(tree),
            center=[round(float(c), 6) for c in self.center_of_mass],
        )
        return self.center_of_mass.copy()


__all__ = ["Integrator"]
