from .edge import Edge, EdgeKey
from .graph import Graph
from .vertex import Vertex

__all__ = ["Edge", "EdgeKey", "Graph", "Vertex"]
