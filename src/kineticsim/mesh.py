"""
1D Physical Mesh with Ghost Layers

Uniform structured mesh for the finite-volume update. Cells are stored in
one contiguous array: nxg ghost cells, nx interior cells, nxg ghost cells.
"""

import numpy as np


class PhysicalGrid:
    """
    Uniform 1D cell-centred mesh.

    Attributes:
        x0, x1: Domain bounds (interior cells only)
        nx: Number of interior cells
        nxg: Number of ghost cells on each side
        n_total: nx + 2*nxg
        dx: Cell widths, shape (n_total,)
        x: Cell centres, shape (n_total,), ghosts included
    """

    def __init__(self, x0: float, x1: float, nx: int, nxg: int = 1):
        """
        Initialize uniform mesh.

        Args:
            x0: Left domain bound
            x1: Right domain bound
            nx: Number of interior cells
            nxg: Ghost layers per side (>= 1)
        """
        if nx < 1:
            raise ValueError(f"nx must be positive, got {nx}")
        if nxg < 1:
            raise ValueError(f"nxg must be at least 1, got {nxg}")
        if not x1 > x0:
            raise ValueError(f"Invalid domain [{x0}, {x1}]")

        self.x0 = float(x0)
        self.x1 = float(x1)
        self.nx = int(nx)
        self.nxg = int(nxg)
        self.n_total = self.nx + 2 * self.nxg

        spacing = (self.x1 - self.x0) / self.nx
        self.dx = np.full(self.n_total, spacing)

        # Cell centres extend uniformly into the ghost layers
        idx = np.arange(self.n_total) - self.nxg
        self.x = self.x0 + (idx + 0.5) * spacing

        self.dx.flags.writeable = False
        self.x.flags.writeable = False

    @property
    def interior(self):
        """Slice selecting interior cells of a full-length array."""
        return slice(self.nxg, self.nxg + self.nx)

    @property
    def n_faces(self):
        return self.nx + 1

    @property
    def x_interior(self):
        return self.x[self.interior]

    def __repr__(self):
        return (f"PhysicalGrid(x0={self.x0}, x1={self.x1}, "
                f"nx={self.nx}, nxg={self.nxg})")
