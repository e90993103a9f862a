"""
Unit tests for the discrete velocity space and quadrature rules
"""

import pytest
import numpy as np
from kineticsim.velocity import VelocityGrid, newton_cotes_weights


class TestQuadratureRules:
    """Test node placement and weights."""

    def test_rectangle_midpoints(self):
        """Rectangle rule places nodes at sub-interval midpoints with equal weights."""
        grid = VelocityGrid(-1.0, 1.0, 4, "rectangle")

        np.testing.assert_allclose(grid.u, [-0.75, -0.25, 0.25, 0.75])
        np.testing.assert_allclose(grid.weights, np.full(4, 0.5))

    def test_weights_sum_to_interval_length(self):
        """Both rules integrate a constant exactly."""
        for kind, n in (("rectangle", 40), ("newton", 41)):
            grid = VelocityGrid(-3.0, 5.0, n, kind)
            assert abs(np.sum(grid.weights) - 8.0) < 1e-12

    def test_newton_cotes_exact_for_quartic(self):
        """Boole's rule is exact for polynomials up to degree 5."""
        grid = VelocityGrid(-1.0, 1.0, 9, "newton")

        assert abs(grid.integrate(grid.u**4) - 0.4) < 1e-14
        assert abs(grid.integrate(grid.u**5)) < 1e-14

    def test_newton_cotes_pattern(self):
        """Composite weights follow 14, 64, 24, 64, 28, ... / 45."""
        weights = newton_cotes_weights(9) * 45.0
        np.testing.assert_allclose(weights, [14, 64, 24, 64, 28, 64, 24, 64, 14])

    def test_newton_cotes_rejects_bad_node_count(self):
        """Node count must be 4k + 1."""
        with pytest.raises(ValueError, match="nu - 1"):
            VelocityGrid(-1.0, 1.0, 10, "newton")

    def test_unknown_mesh_type(self):
        with pytest.raises(ValueError, match="Unknown velocity mesh type"):
            VelocityGrid(-1.0, 1.0, 10, "gauss")


class TestMaxwellianMoments:
    """Quadrature reproduces Maxwellian moments to near machine precision."""

    @pytest.mark.parametrize("kind,n", [("rectangle", 64), ("newton", 65)])
    def test_maxwellian_moments(self, kind, n):
        grid = VelocityGrid(-8.0, 8.0, n, kind)
        rho, U, lam = 1.3, 0.4, 0.5
        M = rho * np.sqrt(lam / np.pi) * np.exp(-lam * (grid.u - U) ** 2)

        assert abs(grid.integrate(M) - rho) < 1e-8
        assert abs(grid.integrate(grid.u * M) - rho * U) < 1e-8
        energy = 0.5 * rho * U**2 + rho / (4.0 * lam)
        assert abs(grid.integrate(0.5 * grid.u**2 * M) - energy) < 1e-8


class TestGridProperties:
    """Test derived properties."""

    def test_fastest_node(self):
        grid = VelocityGrid(-4.0, 6.0, 13, "newton")
        assert grid.u_max == pytest.approx(6.0)

    def test_symmetry(self):
        assert VelocityGrid(-5.0, 5.0, 32).is_symmetric()
        assert not VelocityGrid(-5.0, 6.0, 32).is_symmetric()

    def test_scaled_grid(self):
        """Scaling keeps the rule and node count, stretches the range."""
        grid = VelocityGrid(-5.0, 5.0, 21, "newton")
        wide = grid.scaled(10.0)

        assert wide.nu == grid.nu
        assert wide.mesh_type == "newton"
        np.testing.assert_allclose(wide.u, 10.0 * grid.u)
        np.testing.assert_allclose(wide.weights, 10.0 * grid.weights)

    def test_arrays_are_read_only(self):
        grid = VelocityGrid(-1.0, 1.0, 8)
        with pytest.raises(ValueError):
            grid.u[0] = 0.0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
