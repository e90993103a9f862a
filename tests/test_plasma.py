"""
Tests for the electromagnetic coupling of the two-species plasma variant.
"""

import numpy as np
import pytest

from kineticsim.config import SolverConfig
from kineticsim.gas import PlasmaModel, primitive_to_conserved_3v
from kineticsim.plasma import advance_em, evaluate_em_flux, lorentz_source, source_energy
from kineticsim.plasma.lorentz import cross_matrix
from kineticsim.solver import Solver
from kineticsim.state import conserved_totals


def _plasma_state(velocities, n_cells=1):
    """Conserved plasma state with the given (ion, electron) bulk velocities."""
    plasma = PlasmaModel()
    blocks = []
    for mass, U in zip(plasma.masses, velocities):
        prim = np.array([mass, U[0], U[1], U[2], mass])
        blocks.append(primitive_to_conserved_3v(prim, 5.0 / 3.0))
    w = np.tile(np.concatenate(blocks), (n_cells, 1))
    return plasma, w


def _internal_energy(w):
    return np.array([w[:, 5 * s + 4] - 0.5 * np.sum(w[:, 5 * s + 1:5 * s + 4] ** 2, axis=1)
                     / w[:, 5 * s] for s in range(2)]).T


class TestCrossMatrix:
    def test_matches_numpy_cross(self):
        B = np.array([[0.75, 1.0, -0.3]])
        v = np.array([0.2, -1.0, 0.5])
        np.testing.assert_allclose(cross_matrix(B)[0] @ v, np.cross(B[0], v))


class TestLorentzSource:
    """Test the implicit Lorentz/Ampere source."""

    def test_energy_invariant(self):
        """Bulk kinetic plus electric energy is conserved to round-off."""
        plasma, w = _plasma_state([(0.3, -0.1, 0.2), (1.0, 2.0, -0.5)], n_cells=4)
        em = np.tile([0.5, -0.2, 0.1, 0.75, 1.0, 0.3], (4, 1))
        before = source_energy(w, em, plasma)

        for _ in range(10):
            lorentz_source(w, em, plasma, 1e-5)

        np.testing.assert_allclose(source_energy(w, em, plasma), before, rtol=1e-10)

    def test_density_and_internal_energy_unchanged(self):
        plasma, w = _plasma_state([(0.3, -0.1, 0.2), (1.0, 2.0, -0.5)], n_cells=3)
        em = np.tile([0.5, -0.2, 0.1, 0.75, 1.0, 0.3], (3, 1))
        rho = w[:, 0::5].copy()
        internal = _internal_energy(w)

        lorentz_source(w, em, plasma, 1e-4)

        np.testing.assert_array_equal(w[:, 0::5], rho)
        np.testing.assert_allclose(_internal_energy(w), internal, rtol=1e-10)

    def test_electric_field_accelerates_species(self):
        """Ions move along E, electrons against it, and the current drains E."""
        plasma, w = _plasma_state([(0.0, 0.0, 0.0), (0.0, 0.0, 0.0)])
        em = np.array([[1.0, 0.0, 0.0, 0.0, 0.0, 0.0]])

        lorentz_source(w, em, plasma, 1e-8)

        assert w[0, 1] > 0.0
        assert w[0, 6] < 0.0
        assert 0.0 < em[0, 0] < 1.0
        np.testing.assert_array_equal(w[0, [2, 3, 7, 8]], 0.0)

    def test_magnetic_rotation_preserves_speed(self):
        """With negligible current, B only rotates the bulk velocity."""
        plasma = PlasmaModel(debye_length=1e6)
        _, w = _plasma_state([(1.0, 0.0, 0.0), (0.0, 3.0, 0.0)])
        em = np.array([[0.0, 0.0, 0.0, 0.0, 0.0, 1.0]])
        speed = [np.linalg.norm(w[0, 1:4] / w[0, 0]), np.linalg.norm(w[0, 6:9] / w[0, 5])]

        lorentz_source(w, em, plasma, 1e-3)

        np.testing.assert_allclose(np.linalg.norm(w[0, 1:4] / w[0, 0]), speed[0], rtol=1e-8)
        np.testing.assert_allclose(np.linalg.norm(w[0, 6:9] / w[0, 5]), speed[1], rtol=1e-8)
        # Ion velocity turned: U x B with B along z pushes +x ions toward -y
        assert w[0, 2] < 0.0

    def test_stiff_timestep_stays_bounded(self):
        """dt far beyond the electron gyro period does not blow up."""
        plasma, w = _plasma_state([(0.1, 0.0, 0.0), (1.0, -1.0, 0.5)])
        em = np.array([[0.2, 0.0, 0.0, 0.75, 1.0, 0.0]])
        before = source_energy(w, em, plasma)

        lorentz_source(w, em, plasma, 1e-2)

        assert np.all(np.isfinite(w))
        np.testing.assert_allclose(source_energy(w, em, plasma), before, rtol=1e-6)


class TestMaxwellFlux:
    """Test the upwind Maxwell flux."""

    def test_uniform_field_unchanged(self):
        em = np.tile([0.1, 0.2, -0.3, 0.75, 1.0, 0.5], (8, 1))
        fem = np.zeros((7, 6))
        dx = np.full(8, 0.1)

        evaluate_em_flux(em, fem, 1, 100.0, 1e-4)
        original = em.copy()
        advance_em(em, fem, dx, 1)

        np.testing.assert_allclose(em, original, rtol=1e-14)

    def test_normal_field_constant(self):
        em = np.zeros((8, 6))
        em[:, 3] = 0.75
        em[:4, 4] = 1.0
        em[4:, 4] = -1.0
        fem = np.zeros((7, 6))

        evaluate_em_flux(em, fem, 1, 100.0, 1e-4)
        advance_em(em, fem, np.full(8, 0.1), 1)

        np.testing.assert_array_equal(em[:, 3], 0.75)
        np.testing.assert_array_equal(fem[:, 0], 0.0)
        assert em[3, 4] < 1.0  # By jump starts to spread
        assert em[3, 2] != 0.0  # and drives Ez


def _brio_wu_params(**overrides):
    params = {
        "case": "brio-wu", "space": "1d4f", "interpOrder": 2, "limiter": "vanleer",
        "cfl": 0.5, "maxTime": 0.1, "x0": 0.0, "x1": 1.0, "nx": 40, "nxg": 1,
        "pMeshType": "uniform", "u0": -5.0, "u1": 5.0, "nu": 48,
        "vMeshType": "rectangle", "knudsen": 1e-3, "inK": 0, "omega": 0.5,
        "alphaRef": 1.0, "omegaRef": 0.5,
    }
    params.update(overrides)
    return params


class TestBrioWu:
    """Smoke test of the full plasma iteration."""

    def test_few_steps(self):
        solver = Solver.from_config(SolverConfig.from_dict(_brio_wu_params()))
        mesh = solver.mesh
        totals = conserved_totals(solver.field, mesh)
        by_before = solver.field.em[mesh.interior, 4].copy()

        for _ in range(5):
            solver.step()

        field = solver.field
        assert np.all(np.isfinite(field.w))
        assert np.all(np.isfinite(field.em))
        assert np.all(solver.variant.density(field.prim[mesh.interior]) > 0.0)
        assert np.all(solver.variant.lam(field.prim[mesh.interior]) > 0.0)

        np.testing.assert_array_equal(field.em[:, 3], 0.75)
        after = conserved_totals(field, mesh)
        np.testing.assert_allclose(after[[0, 5]], totals[[0, 5]], rtol=1e-10)
        assert np.any(field.em[mesh.interior, 4] != by_before)

    def test_electron_grid_is_wider(self):
        solver = Solver.from_config(SolverConfig.from_dict(_brio_wu_params()))
        ion, electron = solver.grids

        assert electron.u_max == pytest.approx(ion.u_max * np.sqrt(2000.0))
        assert solver.mu_ref[1] < solver.mu_ref[0]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
