"""
KineticSIM: Discrete-Velocity BGK Gas-Kinetic Solver

One-dimensional finite-volume solver for the BGK model of the Boltzmann
equation, from free-molecular to continuum flow:
- single-f: monatomic gas
- two-f:    gas with internal degrees of freedom
- four-f:   two-species magnetized plasma (Brio-Wu type problems)

Version: 0.1.0
"""

__version__ = "0.1.0"

from .config import SolverConfig
from .errors import ConfigurationError, NumericalDivergenceError
from .mesh import PhysicalGrid
from .velocity import VelocityGrid
from .gas import GasModel, PlasmaModel
from .variants import SingleF, TwoF, FourF, get_variant
from .state import FlowField, FaceFlux
from .solver import Solver, SolveResult

__all__ = [
    "SolverConfig",
    "ConfigurationError",
    "NumericalDivergenceError",
    "PhysicalGrid",
    "VelocityGrid",
    "GasModel",
    "PlasmaModel",
    "SingleF",
    "TwoF",
    "FourF",
    "get_variant",
    "FlowField",
    "FaceFlux",
    "Solver",
    "SolveResult",
]
