"""
BHN3: the spatial tree used to approximate repulsion once per frame.

Each node keeps an *inner* cluster, the vertices that landed within
``inner_distance`` of the cluster's running center of mass, and up to eight
children keyed by octant code. A vertex that is too far from a node's center
is routed to the child on its side of that center along each axis:

    code = (cx < px) | (cy < py) << 1 | (cz < pz) << 2

Centers move with every fold, so the shape of the tree depends on insertion
order. Aggregate mass and center of the whole tree do not.

Estimation treats every cluster except the query vertex's own as one body of
mass ``count`` at its center, and the own cluster exactly. There is no
opening-angle test: every node contributes, which is why the estimate can
walk the arena in one vectorized pass instead of recursing.

Nodes live in a flat list (the arena) and refer to children by index; the
root is index 0 and the whole tree is dropped at once when the frame ends.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

import numpy as np

from ..errors import InvalidArgument
from ..model.vertex import Vertex, zero3
from .forces import PairwiseFn

OCTANT_X = 1
OCTANT_Y = 2
OCTANT_Z = 4


def octant_code(center: np.ndarray, position: np.ndarray) -> int:
    code = 0
    if center[0] < position[0]:
        code |= OCTANT_X
    if center[1] < position[1]:
        code |= OCTANT_Y
    if center[2] < position[2]:
        code |= OCTANT_Z
    return code


@dataclass
class BHN3Node:
    inner: List[Vertex] = field(default_factory=list)
    outer: Dict[int, int] = field(default_factory=dict)
    center_sum: np.ndarray = field(default_factory=zero3)
    count: int = 0

    @property
    def center_of_mass(self) -> np.ndarray:
        if not self.count:
            return zero3()
        return self.center_sum / self.count

    def place_inner(self, vertex: Vertex) -> None:
        self.inner.append(vertex)
        self.center_sum += vertex.position
        self.count += 1

    def holds(self, vertex: Vertex) -> bool:
        return any(member is vertex for member in self.inner)


class BHN3:
    def __init__(self, inner_distance: float) -> None:
        self.inner_distance = float(inner_distance)
        self.nodes: List[BHN3Node] = [BHN3Node()]
        self.count = 0
        self._position_sum = zero3()
        self._home: Dict[int, int] = {}
        self._aggregates: Optional[Tuple[np.ndarray, np.ndarray]] = None

    @classmethod
    def build(cls, vertices: Iterable[Vertex], inner_distance: float) -> "BHN3":
        tree = cls(inner_distance)
        for vertex in vertices:
            tree.insert(vertex)
        return tree

    @property
    def root(self) -> BHN3Node:
        return self.nodes[0]

    @property
    def center_of_mass(self) -> np.ndarray:
        """Mean position of everything inserted, zero for an empty tree."""
        if not self.count:
            return zero3()
        return self._position_sum / self.count

    def insert(self, vertex: Vertex) -> int:
        """Place vertex and return the index of the node whose cluster took it."""
        if self.home_of(vertex) is not None:
            raise InvalidArgument(f"Vertex {vertex.id} is already in the tree.")
        position = vertex.position
        index = 0
        while True:
            node = self.nodes[index]
            if not node.count:
                break
            center = node.center_of_mass
            if np.linalg.norm(center - position) <= self.inner_distance:
                break
            code = octant_code(center, position)
            child = node.outer.get(code)
            if child is None:
                child = len(self.nodes)
                self.nodes.append(BHN3Node())
                node.outer[code] = child
            index = child

        self.nodes[index].place_inner(vertex)
        self._home[id(vertex)] = index
        self._position_sum += position
        self.count += 1
        self._aggregates = None
        return index

    def home_of(self, vertex: Vertex) -> Optional[int]:
        index = self._home.get(id(vertex))
        if index is None or not self.nodes[index].holds(vertex):
            return None
        return index

    def walk(self) -> Iterator[Tuple[int, int]]:
        """Yield (node index, depth) depth-first from the root."""
        stack = [(0, 0)]
        while stack:
            index, depth = stack.pop()
            yield index, depth
            for code in sorted(self.nodes[index].outer, reverse=True):
                stack.append((self.nodes[index].outer[code], depth + 1))

    @property
    def depth(self) -> int:
        return max(depth for _, depth in self.walk())

    def _cluster_arrays(self) -> Tuple[np.ndarray, np.ndarray]:
        if self._aggregates is None:
            # only reached once something is inserted, and nodes are never created empty after that
            centers = np.array([node.center_of_mass for node in self.nodes], dtype=np.float64).reshape(-1, 3)
            counts = np.array([node.count for node in self.nodes], dtype=np.float64)
            self._aggregates = (centers, counts)
        return self._aggregates

    def estimate(self, vertex: Vertex, accumulator: np.ndarray, pairwise_fn: PairwiseFn) -> np.ndarray:
        """Add the estimated repulsion on vertex to accumulator (in place) and return it."""
        if not self.count:
            return accumulator
        position = vertex.position
        centers, counts = self._cluster_arrays()

        home = self.home_of(vertex)
        if home is not None:
            others = [member.position for member in self.nodes[home].inner if member is not vertex]
            if others:
                accumulator += pairwise_fn(position, np.asarray(others)).sum(axis=0)
            keep = np.ones(len(counts), dtype=bool)
            keep[home] = False
            centers, counts = centers[keep], counts[keep]

        if len(counts):
            accumulator += (pairwise_fn(position, centers) * counts[:, None]).sum(axis=0)
        return accumulator

    def __len__(self) -> int:
        return len(self.nodes)


__all__ = ["BHN3", "BHN3Node", "octant_code", "OCTANT_X", "OCTANT_Y", "OCTANT_Z"]
