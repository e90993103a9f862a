"""
Cell and Interface Storage

Uses Structure-of-Arrays (SoA) layout: every cell quantity is one
contiguous numpy array indexed by the full cell index (ghosts included),
which is what the Numba kernels in kineticsim.bgk operate on.
"""

import numpy as np

from .constants import N_EM


class FlowField:
    """
    Per-cell state of the kinetic solver.

    Attributes:
        w: Conserved variables [n_total, n_w]
        prim: Primitive variables [n_total, n_w]
        f: Distribution bundle [n_total, n_f, nv]
        sw: Slopes of w [n_total, n_w]
        sf: Slopes of f [n_total, n_f, nv]
        em: Electromagnetic field (Ex, Ey, Ez, Bx, By, Bz) [n_total, 6],
            None unless the variant evolves fields
    """

    def __init__(self, variant, n_cells: int, nv: int):
        """
        Allocate zeroed storage.

        Args:
            variant: Kinetic model (fixes n_w and n_f)
            n_cells: Total number of cells, ghosts included
            nv: Velocity nodes per field
        """
        self.variant = variant
        self.n_cells = n_cells
        self.nv = nv

        self.w = np.zeros((n_cells, variant.n_w), dtype=np.float64)
        self.prim = np.zeros((n_cells, variant.n_w), dtype=np.float64)
        self.sw = np.zeros((n_cells, variant.n_w), dtype=np.float64)
        self.f = np.zeros((n_cells, variant.n_f, nv), dtype=np.float64)
        self.sf = np.zeros((n_cells, variant.n_f, nv), dtype=np.float64)
        self.em = np.zeros((n_cells, N_EM), dtype=np.float64) if variant.has_em else None

    def set_equilibrium(self, cells, prim, gamma, u_fields, K):
        """
        Put cells into the equilibrium state of a primitive vector.

        Args:
            cells: Index, slice or mask of cells to set
            prim: Primitive state, shape (n_w,) or (n_selected, n_w)
            gamma: Heat-capacity ratio
            u_fields: Field velocities, shape (n_f, nv)
            K: Internal degrees of freedom
        """
        n_selected = np.atleast_1d(np.arange(self.n_cells)[cells]).size
        prim = np.broadcast_to(np.asarray(prim, dtype=np.float64),
                               (n_selected, self.variant.n_w)).copy()
        self.prim[cells] = prim
        self.w[cells] = self.variant.primitive_to_conserved(prim, gamma)
        self.f[cells] = self.variant.equilibrium(prim, u_fields, K)

    def reset_slopes(self):
        self.sw[:] = 0.0
        self.sf[:] = 0.0

    def copy(self):
        other = FlowField(self.variant, self.n_cells, self.nv)
        other.w[:] = self.w
        other.prim[:] = self.prim
        other.sw[:] = self.sw
        other.f[:] = self.f
        other.sf[:] = self.sf
        if self.em is not None:
            other.em[:] = self.em
        return other

    def __repr__(self):
        return (f"FlowField(variant={self.variant.tag}, n_cells={self.n_cells}, "
                f"nv={self.nv})")


class FaceFlux:
    """
    Time-integrated interface fluxes (already multiplied by dt).

    Face i separates full-array cells nxg-1+i and nxg+i.

    Attributes:
        fw: Conserved flux [n_faces, n_w]
        ff: Distribution flux [n_faces, n_f, nv]
        fem: Electromagnetic flux [n_faces, 6] or None
    """

    def __init__(self, variant, n_faces: int, nv: int):
        self.n_faces = n_faces
        self.fw = np.zeros((n_faces, variant.n_w), dtype=np.float64)
        self.ff = np.zeros((n_faces, variant.n_f, nv), dtype=np.float64)
        self.fem = np.zeros((n_faces, N_EM), dtype=np.float64) if variant.has_em else None


def conserved_totals(field: FlowField, mesh) -> np.ndarray:
    """Sum of w * dx over interior cells, per conserved component."""
    interior = mesh.interior
    return np.sum(field.w[interior] * mesh.dx[interior, None], axis=0)
