"""
Discrete-Velocity BGK Kernels

Numba-parallel building blocks of one time-marching iteration:
timestep control, reconstruction, KFVS flux and the relaxation update.
"""

from .timestep import compute_timestep
from .reconstruction import reconstruct, LIMITERS
from .flux import evaluate_flux
from .relaxation import update

__all__ = [
    "compute_timestep",
    "reconstruct",
    "LIMITERS",
    "evaluate_flux",
    "update",
]
