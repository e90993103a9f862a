"""
Ghost-Layer Boundary Conditions

Ghost cells are refreshed before reconstruction (values) and after it
(slopes). Types:
- fixed:         ghosts keep the states they were initialized with
- extrapolation: ghosts copy the nearest interior cell (zero gradient)
- periodic:      ghosts copy the opposite end of the interior
- reflective:    specular wall, f(u) -> f(-u) and momentum reversed
"""

from abc import ABC

import numpy as np

from .errors import ConfigurationError


BOUNDARY_TYPES = ("fixed", "extrapolation", "periodic", "reflective")


class BoundaryCondition(ABC):
    """Ghost-cell treatment applied to both ends of the domain."""

    name = None

    def apply(self, field, mesh):
        """Refresh ghost values (w, prim, f, em)."""

    def apply_slopes(self, field, mesh):
        """Refresh ghost slopes after reconstruction."""

    def __repr__(self):
        return f"{type(self).__name__}()"


def _ghost_pairs(mesh):
    """(left ghost, right ghost, distance) for each ghost layer."""
    for d in range(mesh.nxg):
        yield mesh.nxg - 1 - d, mesh.nxg + mesh.nx + d, d


class FixedBC(BoundaryCondition):
    """Ghosts hold their initial (inflow/outflow) states."""

    name = "fixed"


class ExtrapolationBC(BoundaryCondition):
    """Zero-gradient outflow; ghost slopes stay zero."""

    name = "extrapolation"

    def apply(self, field, mesh):
        first = mesh.nxg
        last = mesh.nxg + mesh.nx - 1
        for left, right, _ in _ghost_pairs(mesh):
            _copy_cell(field, left, first)
            _copy_cell(field, right, last)


class PeriodicBC(BoundaryCondition):
    name = "periodic"

    def apply(self, field, mesh):
        for left, right, d in _ghost_pairs(mesh):
            _copy_cell(field, left, mesh.nxg + mesh.nx - 1 - d)
            _copy_cell(field, right, mesh.nxg + d)

    def apply_slopes(self, field, mesh):
        for left, right, d in _ghost_pairs(mesh):
            src_left = mesh.nxg + mesh.nx - 1 - d
            src_right = mesh.nxg + d
            field.sw[left] = field.sw[src_left]
            field.sf[left] = field.sf[src_left]
            field.sw[right] = field.sw[src_right]
            field.sf[right] = field.sf[src_right]


class ReflectiveBC(BoundaryCondition):
    """
    Specular wall at both ends.

    The ghost at distance d mirrors the interior cell at distance d:
    f_g(u) = f_i(-u), rho U -> -rho U. Slopes are mirrored with a sign
    flip, sf_g(u) = -sf_i(-u). Requires a velocity grid symmetric about 0.
    """

    name = "reflective"

    def __init__(self, variant):
        if variant.has_em:
            raise ConfigurationError("Reflective boundaries are not available for the plasma variant")
        # +1 for even moments (rho, rho E), -1 for momentum
        self.parity = np.ones(variant.n_w)
        self.parity[1::variant.n_cons] = -1.0

    def apply(self, field, mesh):
        for left, right, d in _ghost_pairs(mesh):
            for ghost, src in ((left, mesh.nxg + d), (right, mesh.nxg + mesh.nx - 1 - d)):
                field.w[ghost] = self.parity * field.w[src]
                field.prim[ghost] = self.parity * field.prim[src]
                field.f[ghost] = field.f[src, :, ::-1]

    def apply_slopes(self, field, mesh):
        for left, right, d in _ghost_pairs(mesh):
            for ghost, src in ((left, mesh.nxg + d), (right, mesh.nxg + mesh.nx - 1 - d)):
                field.sw[ghost] = -self.parity * field.sw[src]
                field.sf[ghost] = -field.sf[src, :, ::-1]


def _copy_cell(field, dst, src):
    field.w[dst] = field.w[src]
    field.prim[dst] = field.prim[src]
    field.f[dst] = field.f[src]
    if field.em is not None:
        field.em[dst] = field.em[src]


def make_boundary(kind: str, variant, grids=None) -> BoundaryCondition:
    """
    Build a boundary condition by name.

    Args:
        kind: One of BOUNDARY_TYPES
        variant: Kinetic model
        grids: Velocity grids per species (checked for symmetry when reflective)
    """
    if kind == "fixed":
        return FixedBC()
    if kind == "extrapolation":
        return ExtrapolationBC()
    if kind == "periodic":
        return PeriodicBC()
    if kind == "reflective":
        bc = ReflectiveBC(variant)
        if grids is not None and not all(g.is_symmetric() for g in grids):
            raise ConfigurationError("Reflective boundaries need a velocity grid symmetric about zero")
        return bc
    raise ConfigurationError(
        f"Unknown boundary type '{kind}', expected one of {BOUNDARY_TYPES}"
    )
