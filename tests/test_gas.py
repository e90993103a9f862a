"""
Unit tests for the gas model: EOS, VHS relaxation time and equilibria
"""

import pytest
import numpy as np
from kineticsim.gas import (
    GasModel,
    PlasmaModel,
    heat_capacity_ratio,
    ref_vhs_viscosity,
    vhs_collision_time,
    sound_speed,
    maxwellian,
    conserved_to_primitive_1v,
    primitive_to_conserved_1v,
    conserved_to_primitive_3v,
    primitive_to_conserved_3v,
)
from kineticsim.variants import SingleF, TwoF, FourF, get_variant
from kineticsim.velocity import VelocityGrid


class TestGasProperties:
    """Test derived gas constants."""

    def test_heat_capacity_ratio(self):
        """gamma = (K + D + 2) / (K + D)."""
        assert heat_capacity_ratio(0, 1) == pytest.approx(3.0)
        assert heat_capacity_ratio(4, 1) == pytest.approx(1.4)
        assert heat_capacity_ratio(0, 3) == pytest.approx(5.0 / 3.0)
        assert heat_capacity_ratio(2, 3) == pytest.approx(1.4)

    def test_hard_sphere_reference_viscosity(self):
        """alpha = 1, omega = 0.5 gives 30 sqrt(pi) / 96 * Kn."""
        expected = 30.0 * np.sqrt(np.pi) / 96.0 * 0.05
        assert ref_vhs_viscosity(0.05, 1.0, 0.5) == pytest.approx(expected, rel=1e-14)

    def test_collision_time_decreases_toward_continuum(self):
        """tau falls with density and with temperature (lambda = 1/(2T))."""
        omega = 0.72
        tau_ref = vhs_collision_time(1.0, 1.0, 1e-3, omega)

        assert vhs_collision_time(2.0, 1.0, 1e-3, omega) < tau_ref
        assert vhs_collision_time(1.0, 0.5, 1e-3, omega) < tau_ref

    def test_sound_speed(self):
        """c = sqrt(gamma p / rho)."""
        rho, p, gamma = 1.0, 1.0, 1.4
        assert sound_speed(0.5 * rho / p, gamma) == pytest.approx(np.sqrt(gamma * p / rho))

    def test_gas_model_from_parameters(self):
        gas = GasModel.from_parameters(knudsen=1e-3, K=4, omega=0.5, alpha_ref=1.0,
                                       omega_ref=0.5, velocity_dims=1)
        assert gas.gamma == pytest.approx(1.4)
        assert gas.mu_ref == pytest.approx(ref_vhs_viscosity(1e-3, 1.0, 0.5))

    def test_gas_model_validation(self):
        with pytest.raises(ValueError, match="gamma"):
            GasModel(gamma=1.0, mu_ref=1e-3, omega=0.5)
        with pytest.raises(ValueError, match="mu_ref"):
            GasModel(gamma=1.4, mu_ref=0.0, omega=0.5)

    def test_electron_reference_viscosity_scales_with_mass(self):
        gas = GasModel.from_parameters(knudsen=1e-2, K=0, omega=0.5, alpha_ref=1.0,
                                       omega_ref=0.5, velocity_dims=3)
        plasma = PlasmaModel()
        mu = plasma.species_reference_viscosity(gas)

        assert mu[0] == pytest.approx(gas.mu_ref)
        assert mu[1] == pytest.approx(gas.mu_ref * plasma.masses[1] / plasma.masses[0])


class TestEquationOfState:
    """Conserved <-> primitive conversions."""

    def test_round_trip_1v(self):
        prim = np.array([[1.0, 0.0, 0.5], [0.125, -0.3, 0.625], [2.0, 1.5, 0.1]])
        w = primitive_to_conserved_1v(prim, 1.4)

        np.testing.assert_allclose(conserved_to_primitive_1v(w, 1.4), prim, rtol=1e-13)

    def test_round_trip_3v(self):
        prim = np.array([[1.0, 0.1, -0.2, 0.3, 0.8], [0.5, 0.0, 0.0, 0.0, 2.0]])
        w = primitive_to_conserved_3v(prim, 5.0 / 3.0)

        np.testing.assert_allclose(conserved_to_primitive_3v(w, 5.0 / 3.0), prim, rtol=1e-13)

    def test_sod_left_state_energy(self):
        """rho E = p / (gamma - 1) + rho U^2 / 2."""
        prim = np.array([1.0, 0.0, 0.5])  # p = 1
        w = primitive_to_conserved_1v(prim, 1.4)
        assert w[2] == pytest.approx(2.5)


class TestEquilibriumMoments:
    """Moments of the equilibrium bundle reproduce the conserved state."""

    def test_single_f(self):
        variant = SingleF()
        grid = VelocityGrid(-10.0, 10.0, 100)
        u, _ = variant.field_velocities([grid])
        psi = variant.moment_tensor([grid])

        prim = np.array([[1.0, 0.3, 0.5], [0.2, -0.5, 1.5]])
        gamma = variant.heat_capacity_ratio(0)
        M = variant.equilibrium(prim, u, 0)

        np.testing.assert_allclose(variant.moments(M, psi),
                                   variant.primitive_to_conserved(prim, gamma), rtol=1e-10)

    def test_two_f_internal_energy(self):
        """b carries K/(2 lambda) of energy per unit mass; gamma = (K+3)/(K+1)."""
        variant = TwoF()
        K = 4.0
        grid = VelocityGrid(-10.0, 10.0, 100)
        u, _ = variant.field_velocities([grid])
        psi = variant.moment_tensor([grid])

        prim = np.array([[1.0, 0.0, 0.5], [0.125, 0.2, 0.625]])
        M = variant.equilibrium(prim, u, K)

        np.testing.assert_allclose(variant.moments(M, psi),
                                   variant.primitive_to_conserved(prim, 1.4),
                                   rtol=1e-10, atol=1e-12)

    def test_four_f_two_species(self):
        """Each species block integrates on its own velocity grid."""
        variant = FourF()
        K = 0.0
        ion = VelocityGrid(-8.0, 8.0, 96)
        electron = ion.scaled(np.sqrt(2000.0))
        u, _ = variant.field_velocities([ion, electron])
        psi = variant.moment_tensor([ion, electron])

        prim = np.array([[1.0, 0.1, 0.2, -0.3, 1.0, 0.0005, 0.5, -4.0, 2.0, 0.0005]])
        gamma = variant.heat_capacity_ratio(K)
        M = variant.equilibrium(prim, u, K)

        np.testing.assert_allclose(variant.moments(M, psi),
                                   variant.primitive_to_conserved(prim, gamma), rtol=1e-9)

    def test_maxwellian_shape(self):
        u = np.linspace(-3, 3, 7)
        M = maxwellian(u, np.array([1.0, 2.0]), np.array([0.0, 1.0]), np.array([0.5, 1.0]))
        assert M.shape == (2, 7)
        assert np.argmax(M[1]) == 4  # Peak at u = U = 1


class TestVariantDispatch:
    """Test tag resolution."""

    def test_tags(self):
        assert isinstance(get_variant("1d1f"), SingleF)
        assert isinstance(get_variant("1d2f"), TwoF)
        assert isinstance(get_variant("1d4f"), FourF)

    def test_layouts(self):
        assert (SingleF().n_w, SingleF().n_f) == (3, 1)
        assert (TwoF().n_w, TwoF().n_f) == (3, 2)
        assert (FourF().n_w, FourF().n_f) == (10, 8)

    def test_species_pressure(self):
        """p = rho / (2 lambda) for each species block."""
        prim = np.array([[1.0, 0.0, 0.0, 0.0, 1.0, 0.0005, 0.0, 0.0, 0.0, 0.001]])
        np.testing.assert_allclose(FourF().pressure(prim), [[0.5, 0.25]])
        np.testing.assert_allclose(TwoF().pressure(np.array([[0.125, 0.0, 0.625]])), [[0.1]])

    def test_field_names(self):
        assert SingleF().field_names == ("f",)
        assert len(FourF().field_names) * FourF().n_species == FourF().n_f

    def test_unknown_tag(self):
        with pytest.raises(ValueError, match="Unknown variant"):
            get_variant("2d2f")

    def test_collision_time_per_field(self):
        """Plasma fields relax with their own species' tau."""
        variant = FourF()
        prim = np.array([[1.0, 0.0, 0.0, 0.0, 1.0, 0.0005, 0.0, 0.0, 0.0, 0.0005]])
        tau = variant.collision_time(prim, np.array([1e-3, 5e-7]), 0.5)

        assert tau.shape == (1, 8)
        np.testing.assert_allclose(tau[0, :4], tau[0, 0])
        np.testing.assert_allclose(tau[0, 4:], tau[0, 4])
        assert tau[0, 0] == pytest.approx(vhs_collision_time(1.0, 1.0, 1e-3, 0.5))


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
