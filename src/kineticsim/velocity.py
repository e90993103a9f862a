"""
Discrete Velocity Space

Velocity nodes and quadrature weights used for every moment integral
(density, momentum, energy and their fluxes).

Quadrature rules:
- rectangle: midpoint rule on nu equal sub-intervals
- newton: composite Boole (closed Newton-Cotes, degree 4) rule on nu nodes

Reference:
    Abramowitz & Stegun (1964), Section 25.4.14
"""

import numpy as np


VELOCITY_MESH_TYPES = ("rectangle", "newton")


def newton_cotes_weights(n_nodes: int) -> np.ndarray:
    """
    Composite Boole's rule weights in units of the node spacing.

    Pattern: (14, 64, 24, 64, 28, 64, 24, 64, ..., 64, 14) / 45

    Args:
        n_nodes: Number of equispaced nodes, (n_nodes - 1) divisible by 4

    Returns:
        weights: Shape (n_nodes,)
    """
    if n_nodes < 5 or (n_nodes - 1) % 4 != 0:
        raise ValueError(
            f"Newton-Cotes quadrature needs (nu - 1) % 4 == 0, got nu={n_nodes}"
        )

    weights = np.empty(n_nodes)
    for i in range(n_nodes):
        if i == 0 or i == n_nodes - 1:
            weights[i] = 14.0
        elif i % 4 == 0:
            weights[i] = 28.0  # Shared end point of two panels
        elif i % 2 == 0:
            weights[i] = 24.0
        else:
            weights[i] = 64.0

    return weights / 45.0


class VelocityGrid:
    """
    1D discrete velocity space.

    Attributes:
        u0, u1: Velocity bounds
        nu: Number of nodes
        mesh_type: 'rectangle' or 'newton'
        u: Nodes, shape (nu,)
        weights: Quadrature weights, shape (nu,)
    """

    def __init__(self, u0: float, u1: float, nu: int, mesh_type: str = "rectangle"):
        if not u1 > u0:
            raise ValueError(f"Invalid velocity bounds [{u0}, {u1}]")
        if nu < 2:
            raise ValueError(f"nu must be at least 2, got {nu}")

        self.u0 = float(u0)
        self.u1 = float(u1)
        self.nu = int(nu)
        self.mesh_type = mesh_type

        if mesh_type == "rectangle":
            du = (self.u1 - self.u0) / self.nu
            self.u = self.u0 + (np.arange(self.nu) + 0.5) * du
            self.weights = np.full(self.nu, du)
        elif mesh_type == "newton":
            du = (self.u1 - self.u0) / (self.nu - 1)
            self.u = self.u0 + np.arange(self.nu) * du
            self.weights = newton_cotes_weights(self.nu) * du
        else:
            raise ValueError(
                f"Unknown velocity mesh type '{mesh_type}', "
                f"expected one of {VELOCITY_MESH_TYPES}"
            )

        self.u.flags.writeable = False
        self.weights.flags.writeable = False

    @property
    def u_max(self) -> float:
        """Magnitude of the fastest node."""
        return float(np.max(np.abs(self.u)))

    def is_symmetric(self, rtol: float = 1e-12) -> bool:
        """True if u[k] == -u[nu-1-k] and the weights mirror as well."""
        scale = max(abs(self.u0), abs(self.u1))
        return (np.allclose(self.u, -self.u[::-1], rtol=0.0, atol=rtol * scale)
                and np.allclose(self.weights, self.weights[::-1], rtol=rtol))

    def scaled(self, factor: float) -> "VelocityGrid":
        """Same quadrature on [factor*u0, factor*u1]."""
        return VelocityGrid(self.u0 * factor, self.u1 * factor, self.nu, self.mesh_type)

    def integrate(self, values: np.ndarray) -> np.ndarray:
        """Quadrature over the last axis."""
        return np.sum(values * self.weights, axis=-1)

    def __len__(self):
        return self.nu

    def __repr__(self):
        return (f"VelocityGrid(u0={self.u0}, u1={self.u1}, nu={self.nu}, "
                f"mesh_type='{self.mesh_type}')")


if __name__ == "__main__":
    print("=" * 60)
    print("Velocity Quadrature - Self Test")
    print("=" * 60)

    for kind, n in (("rectangle", 64), ("newton", 65)):
        grid = VelocityGrid(-8.0, 8.0, n, kind)
        lam = 0.5
        maxwellian = np.sqrt(lam / np.pi) * np.exp(-lam * grid.u**2)
        mass = grid.integrate(maxwellian)
        energy = grid.integrate(0.5 * grid.u**2 * maxwellian)
        print(f"{kind:>10s}: mass = {mass:.12f}, energy = {energy:.12f} "
              f"(exact 1, {0.25 / lam:.12f})")
        assert abs(mass - 1.0) < 1e-8

    print("✅ Quadrature self-test passed!")
