from __future__ import annotations

import logging
from typing import Any, Dict, Iterator, Mapping, Optional

import numpy as np

from ..config import LayoutConfig
from ..errors import InvalidArgument, UseAfterRemoval
from .edge import Edge, EdgeKey
from .vertex import Vertex

logger = logging.getLogger(__name__)


class Graph:
    """Vertices, edges and the reference counts that collapse duplicate edges.

    Every add_edge request for an ordered pair that already has an Edge bumps
    edge_multiplicity for that pair and hands back the existing Edge;
    remove_edge only destroys it once the count drops to zero.
    """

    def __init__(self, config: Optional[LayoutConfig] = None) -> None:
        self.config = config or LayoutConfig()
        self._rng = np.random.default_rng(self.config.seed)
        self.vertices: Dict[int, Vertex] = {}
        self.edges: Dict[int, Edge] = {}
        self.edge_multiplicity: Dict[EdgeKey, int] = {}
        self._edge_by_key: Dict[EdgeKey, Edge] = {}
        self.vertex_id_spawn = 0
        self.edge_id_spawn = 0

    # --------------------------
    # Handle checks
    # --------------------------
    def has_vertex(self, vertex: Any) -> bool:
        return isinstance(vertex, Vertex) and self.vertices.get(vertex.id) is vertex

    def has_edge(self, edge: Any) -> bool:
        return isinstance(edge, Edge) and self.edges.get(edge.id) is edge

    def vertex(self, vertex_id: int) -> Vertex:
        try:
            return self.vertices[vertex_id]
        except KeyError:
            raise UseAfterRemoval(f"No live vertex with id {vertex_id}") from None

    def edge(self, edge_id: int) -> Edge:
        try:
            return self.edges[edge_id]
        except KeyError:
            raise UseAfterRemoval(f"No live edge with id {edge_id}") from None

    def _endpoint(self, candidate: Any, role: str) -> Vertex:
        if not isinstance(candidate, Vertex):
            raise InvalidArgument(f"{role.capitalize()} should be a Vertex instead of a {type(candidate).__name__}.")
        if not self.has_vertex(candidate):
            raise InvalidArgument(f"{role.capitalize()} vertex {candidate.id} is not part of this graph.")
        return candidate

    # --------------------------
    # Base graph ops
    # --------------------------
    def add_vertex(self, options: Optional[Mapping[str, Any]] = None) -> Vertex:
        position = self._rng.random(3) * self.config.jitter
        vertex = Vertex(self.vertex_id_spawn, position=position, metadata=dict(options or {}))
        self.vertex_id_spawn += 1
        self.vertices[vertex.id] = vertex
        logger.debug("vertex-added", extra={"vertex_id": vertex.id})
        return vertex

    def add_edge(self, source: Any, target: Any, options: Optional[Mapping[str, Any]] = None) -> Edge:
        source = self._endpoint(source, "source")
        target = self._endpoint(target, "target")
        if source is target and not self.config.allow_self_loops:
            raise InvalidArgument(f"Self-loop on vertex {source.id} is not allowed.")

        key = EdgeKey(source.id, target.id)
        existing = self._edge_by_key.get(key)
        if existing is not None:
            self.edge_multiplicity[key] += 1
            logger.debug(
                "edge-collapsed",
                extra={"edge_id": existing.id, "multiplicity": self.edge_multiplicity[key]},
            )
            return existing

        opts = dict(options or {})
        strength = opts.get("strength")
        edge = Edge(
            self.edge_id_spawn,
            source,
            target,
            directed=bool(opts.get("directed", False)),
            strength=1.0 if strength is None else float(strength),
            metadata=opts,
        )
        self.edge_id_spawn += 1
        source.edges[edge.id] = edge
        target.edges[edge.id] = edge
        self.edges[edge.id] = edge
        self._edge_by_key[key] = edge
        self.edge_multiplicity[key] = 1
        logger.debug("edge-added", extra={"edge_id": edge.id, "source": source.id, "target": target.id})
        return edge

    def remove_edge(self, edge: Any) -> None:
        if not isinstance(edge, Edge):
            raise InvalidArgument(f"Expected an Edge instead of a {type(edge).__name__}.")
        if not self.has_edge(edge):
            logger.debug("edge-already-removed", extra={"edge_id": edge.id})
            return
        key = edge.key
        remaining = self.edge_multiplicity[key] - 1
        if remaining > 0:
            self.edge_multiplicity[key] = remaining
            return
        self._destroy_edge(edge)

    def remove_vertex(self, vertex: Any) -> None:
        if not isinstance(vertex, Vertex):
            raise InvalidArgument(f"Expected a Vertex instead of a {type(vertex).__name__}.")
        if not self.has_vertex(vertex):
            raise UseAfterRemoval(f"Vertex {vertex.id} is no longer part of this graph.")
        # Incident edges go regardless of their remaining multiplicity.
        for edge in list(vertex.edges.values()):
            self._destroy_edge(edge)
        del self.vertices[vertex.id]
        logger.debug("vertex-removed", extra={"vertex_id": vertex.id})

    def _destroy_edge(self, edge: Edge) -> None:
        edge.source.edges.pop(edge.id, None)
        edge.target.edges.pop(edge.id, None)
        del self.edges[edge.id]
        self.edge_multiplicity.pop(edge.key, None)
        self._edge_by_key.pop(edge.key, None)
        logger.debug("edge-removed", extra={"edge_id": edge.id})

    def clear(self) -> None:
        for edge in list(self.edges.values()):
            self._destroy_edge(edge)
        self.vertices.clear()
        self.edges.clear()
        self.edge_multiplicity.clear()
        self._edge_by_key.clear()
        self.vertex_id_spawn = 0
        self.edge_id_spawn = 0

    # --------------------------
    # Queries
    # --------------------------
    def multiplicity(self, source: Vertex, target: Vertex) -> int:
        return self.edge_multiplicity.get(EdgeKey(source.id, target.id), 0)

    def edge_between(self, source: Vertex, target: Vertex) -> Optional[Edge]:
        return self._edge_by_key.get(EdgeKey(source.id, target.id))

    def iter_vertices(self) -> Iterator[Vertex]:
        return iter(list(self.vertices.values()))

    def iter_edges(self) -> Iterator[Edge]:
        return iter(list(self.edges.values()))

    def check_invariants(self) -> bool:
        """Raise AssertionError describing the first broken bookkeeping rule."""
        for edge in self.edges.values():
            if edge.source.edges.get(edge.id) is not edge or edge.target.edges.get(edge.id) is not edge:
                raise AssertionError(f"edge {edge.id} missing from an endpoint's incidence map")
            if not (self.has_vertex(edge.source) and self.has_vertex(edge.target)):
                raise AssertionError(f"edge {edge.id} outlived one of its endpoints")
            if self.edge_multiplicity.get(edge.key, 0) < 1:
                raise AssertionError(f"edge {edge.id} has no multiplicity entry")
            if self._edge_by_key.get(edge.key) is not edge:
                raise AssertionError(f"edge {edge.id} is not indexed under {edge.key}")
        for key, count in self.edge_multiplicity.items():
            if count < 1 or key not in self._edge_by_key:
                raise AssertionError(f"multiplicity entry {key} -> {count} has no live edge")
        for vertex in self.vertices.values():
            for edge_id, edge in vertex.edges.items():
                if self.edges.get(edge_id) is not edge:
                    raise AssertionError(f"vertex {vertex.id} references dead edge {edge_id}")
            if vertex.edge_count != len(vertex.edges):
                raise AssertionError(f"vertex {vertex.id} edge_count out of sync")
        return True

    def __len__(self) -> int:
        return len(self.vertices)

    def __str__(self) -> str:
        return f"|V|: {len(self.vertices)},  |E|: {len(self.edges)}"


__all__ = ["Graph"]
