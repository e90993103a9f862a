"""
Electromagnetic Coupling for the Two-Species Plasma Variant

Maxwell interface fluxes and the implicit Lorentz/Ampere source.
"""

from .fields import evaluate_em_flux, advance_em
from .lorentz import lorentz_source, source_energy

__all__ = [
    "evaluate_em_flux",
    "advance_em",
    "lorentz_source",
    "source_energy",
]
