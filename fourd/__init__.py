"""Dynamic 3D force-directed graph layout."""
from .config import LayoutConfig, load_config
from .engine import VERSION, LayoutEngine
from .errors import ConfigError, FourDError, InvalidArgument, UseAfterRemoval
from .model import Edge, EdgeKey, Graph, Vertex
from .physics import BHN3, Integrator

__version__ = VERSION

__all__ = [
    "LayoutConfig",
    "load_config",
    "LayoutEngine",
    "ConfigError",
    "FourDError",
    "InvalidArgument",
    "UseAfterRemoval",
    "Edge",
    "EdgeKey",
    "Graph",
    "Vertex",
    "BHN3",
    "Integrator",
    "__version__",
]
