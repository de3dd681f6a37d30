from .bhn3 import BHN3, BHN3Node, octant_code
from .forces import PairwiseFn, pairwise_repulsion, repulsion_law, spring_attraction
from .integrator import Integrator

__all__ = [
    "BHN3",
    "BHN3Node",
    "octant_code",
    "PairwiseFn",
    "pairwise_repulsion",
    "repulsion_law",
    "spring_attraction",
    "Integrator",
]
