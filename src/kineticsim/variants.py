"""
Kinetic Model Variants

The three discrete-velocity models share one data layout: a bundle of
n_f distribution fields per cell, n_w conserved components per cell, and
a moment tensor psi[m, j, k] (quadrature weight times moment kernel) such
that

    w[m]  = sum_jk psi[m, j, k] * f[j, k]
    fw[m] = sum_jk psi[m, j, k] * ff[j, k]

Variants:
- SingleF  ('1d1f'): monatomic gas, f(u)
- TwoF     ('1d2f'): reduced distributions h(u), b(u) carrying K internal dof
- FourF    ('1d4f'): two-species plasma, h0..h3 per species with 3V moments

The variant is selected once at setup with get_variant() and held by the
solver for the whole run.
"""

from abc import ABC, abstractmethod

import numpy as np

from .gas import (
    heat_capacity_ratio,
    maxwellian,
    vhs_collision_time,
    conserved_to_primitive_1v,
    primitive_to_conserved_1v,
    conserved_to_primitive_3v,
    primitive_to_conserved_3v,
)


class Variant(ABC):
    """
    Field layout and physics of one kinetic model.

    Class attributes:
        tag: Configuration tag
        n_species: Number of kinetic species
        n_fields: Distribution fields per species
        n_cons: Conserved (and primitive) components per species
        velocity_dims: Translational dof carried by the moments
        has_em: Whether electromagnetic fields are evolved
        field_names: Names of the per-species distribution fields
    """

    tag = None
    n_species = 1
    n_fields = 1
    n_cons = 3
    velocity_dims = 1
    has_em = False
    field_names = ()

    # ==================== LAYOUT ====================

    @property
    def n_w(self):
        return self.n_species * self.n_cons

    @property
    def n_f(self):
        return self.n_species * self.n_fields

    @property
    def lambda_index(self):
        """Column of lambda inside one species' primitive block."""
        return self.n_cons - 1

    def species_slice(self, s):
        return slice(s * self.n_cons, (s + 1) * self.n_cons)

    def field_slice(self, s):
        return slice(s * self.n_fields, (s + 1) * self.n_fields)

    def heat_capacity_ratio(self, K):
        return heat_capacity_ratio(K, self.velocity_dims)

    # ==================== VELOCITY SPACE ====================

    def field_velocities(self, grids):
        """
        Velocity nodes and weights per distribution field.

        Args:
            grids: One VelocityGrid per species

        Returns:
            u: Shape (n_f, nv)
            weights: Shape (n_f, nv)
        """
        self._check_grids(grids)
        u = np.concatenate([np.tile(g.u, (self.n_fields, 1)) for g in grids])
        weights = np.concatenate([np.tile(g.weights, (self.n_fields, 1)) for g in grids])
        return u, weights

    def moment_tensor(self, grids):
        """
        Block-diagonal moment tensor over species.

        Returns:
            psi: Shape (n_w, n_f, nv)
        """
        self._check_grids(grids)
        nv = len(grids[0])
        psi = np.zeros((self.n_w, self.n_f, nv))
        for s, grid in enumerate(grids):
            psi[self.species_slice(s), self.field_slice(s)] = \
                self._species_moments(grid.u, grid.weights)
        return psi

    def _check_grids(self, grids):
        if len(grids) != self.n_species:
            raise ValueError(
                f"Variant '{self.tag}' needs {self.n_species} velocity grid(s), "
                f"got {len(grids)}"
            )
        if len({len(g) for g in grids}) != 1:
            raise ValueError("All species velocity grids must have the same node count")

    # ==================== STATE CONVERSION ====================

    def conserved_to_primitive(self, w, gamma):
        """EOS inversion on arrays of shape (..., n_w)."""
        blocks = w.reshape(w.shape[:-1] + (self.n_species, self.n_cons))
        return self._species_primitive(blocks, gamma).reshape(w.shape)

    def primitive_to_conserved(self, prim, gamma):
        blocks = prim.reshape(prim.shape[:-1] + (self.n_species, self.n_cons))
        return self._species_conserved(blocks, gamma).reshape(prim.shape)

    def equilibrium(self, prim, u_fields, K):
        """
        Equilibrium bundle of a primitive state.

        Args:
            prim: Shape (..., n_w)
            u_fields: Field velocities, shape (n_f, nv)
            K: Internal degrees of freedom

        Returns:
            Shape (..., n_f, nv)
        """
        parts = []
        for s in range(self.n_species):
            u = u_fields[s * self.n_fields]
            parts.append(self._species_equilibrium(prim[..., self.species_slice(s)], u, K))
        return np.concatenate(parts, axis=-2)

    def moments(self, f, psi):
        """Conserved variables of a field bundle (..., n_f, nv)."""
        return np.einsum("mjk,...jk->...m", psi, f)

    def collision_time(self, prim, mu_ref, omega):
        """
        VHS relaxation time of every field.

        Args:
            prim: Shape (n, n_w)
            mu_ref: Per-species reference viscosity, shape (n_species,)
            omega: Viscosity exponent

        Returns:
            tau: Shape (n, n_f)
        """
        tau = np.empty(prim.shape[:-1] + (self.n_f,))
        for s in range(self.n_species):
            block = prim[..., self.species_slice(s)]
            tau_s = vhs_collision_time(block[..., 0], block[..., self.lambda_index],
                                       mu_ref[s], omega)
            tau[..., self.field_slice(s)] = tau_s[..., None]
        return tau

    def density(self, prim):
        """Species densities, shape (..., n_species)."""
        return prim[..., 0::self.n_cons]

    def bulk_velocity(self, prim):
        return prim[..., 1::self.n_cons]

    def lam(self, prim):
        return prim[..., self.lambda_index::self.n_cons]

    def pressure(self, prim):
        return 0.5 * self.density(prim) / self.lam(prim)

    # ==================== PER-SPECIES PHYSICS ====================

    @abstractmethod
    def _species_moments(self, u, weights):
        """Moment kernels of one species, shape (n_cons, n_fields, nv)."""

    @abstractmethod
    def _species_primitive(self, w, gamma):
        pass

    @abstractmethod
    def _species_conserved(self, prim, gamma):
        pass

    @abstractmethod
    def _species_equilibrium(self, prim, u, K):
        """Equilibrium of one species, shape (..., n_fields, nv)."""

    def __repr__(self):
        return f"{type(self).__name__}()"


class SingleF(Variant):
    """Monatomic BGK gas in 1V; gamma = 3."""

    tag = "1d1f"
    n_fields = 1
    n_cons = 3
    field_names = ("f",)

    def _species_moments(self, u, weights):
        psi = np.zeros((3, 1, len(u)))
        psi[0, 0] = weights
        psi[1, 0] = weights * u
        psi[2, 0] = 0.5 * weights * u**2
        return psi

    def _species_primitive(self, w, gamma):
        return conserved_to_primitive_1v(w, gamma)

    def _species_conserved(self, prim, gamma):
        return primitive_to_conserved_1v(prim, gamma)

    def _species_equilibrium(self, prim, u, K):
        M = maxwellian(u, prim[..., 0], prim[..., 1], prim[..., 2])
        return M[..., None, :]


class TwoF(Variant):
    """
    Reduced-distribution gas with K internal degrees of freedom.

    h carries mass and momentum; b carries the internal energy so that
    rho E = sum(w u^2 h)/2 + sum(w b)/2.
    """

    tag = "1d2f"
    n_fields = 2
    n_cons = 3
    field_names = ("h", "b")

    def _species_moments(self, u, weights):
        psi = np.zeros((3, 2, len(u)))
        psi[0, 0] = weights
        psi[1, 0] = weights * u
        psi[2, 0] = 0.5 * weights * u**2
        psi[2, 1] = 0.5 * weights
        return psi

    def _species_primitive(self, w, gamma):
        return conserved_to_primitive_1v(w, gamma)

    def _species_conserved(self, prim, gamma):
        return primitive_to_conserved_1v(prim, gamma)

    def _species_equilibrium(self, prim, u, K):
        lam = prim[..., 2]
        H = maxwellian(u, prim[..., 0], prim[..., 1], lam)
        B = H * np.asarray(K / (2.0 * lam))[..., None]
        return np.stack([H, B], axis=-2)


class FourF(Variant):
    """
    Two-species plasma with reduced distributions in 3V.

    Per species:
        h0 = M(u)                       mass, x-momentum
        h1 = V h0, h2 = W h0            y/z-momentum
        h3 = (V^2 + W^2 + (K+2)/(2 lambda)) h0
    with rho E = sum(w (u^2 h0 + h3)) / 2.
    """

    tag = "1d4f"
    n_species = 2
    n_fields = 4
    n_cons = 5
    velocity_dims = 3
    has_em = True
    field_names = ("h0", "h1", "h2", "h3")

    def _species_moments(self, u, weights):
        psi = np.zeros((5, 4, len(u)))
        psi[0, 0] = weights
        psi[1, 0] = weights * u
        psi[2, 1] = weights
        psi[3, 2] = weights
        psi[4, 0] = 0.5 * weights * u**2
        psi[4, 3] = 0.5 * weights
        return psi

    def _species_primitive(self, w, gamma):
        return conserved_to_primitive_3v(w, gamma)

    def _species_conserved(self, prim, gamma):
        return primitive_to_conserved_3v(prim, gamma)

    def _species_equilibrium(self, prim, u, K):
        V = prim[..., 2:3]
        W = prim[..., 3:4]
        lam = prim[..., 4]
        H0 = maxwellian(u, prim[..., 0], prim[..., 1], lam)
        H3 = (V**2 + W**2 + np.asarray((K + 2.0) / (2.0 * lam))[..., None]) * H0
        return np.stack([H0, V * H0, W * H0, H3], axis=-2)


VARIANTS = {cls.tag: cls for cls in (SingleF, TwoF, FourF)}


def get_variant(tag: str) -> Variant:
    """Resolve a configuration tag ('1d1f', '1d2f', '1d4f') to a variant."""
    try:
        return VARIANTS[tag]()
    except KeyError:
        raise ValueError(
            f"Unknown variant '{tag}', expected one of {sorted(VARIANTS)}"
        ) from None
