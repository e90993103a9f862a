"""
Time-Marching Driver

One iteration runs, in fixed order:
    1. timestep      (CFL with the fastest velocity node)
    2. boundaries    (ghost values), reconstruction, boundaries (ghost slopes)
    3. flux          (KFVS, plus Maxwell flux for the plasma variant)
    4. update        (conservative update + implicit BGK relaxation)

The loop stops when the largest normalized residual component drops below
the tolerance (steady state) or when the simulation time reaches max_time.
Reaching max_time without convergence is a normal termination.

Usage:
    config = SolverConfig.from_file("config.txt")
    solver = Solver.from_config(config)
    result = solver.solve()
"""

import logging
import time as wallclock
from dataclasses import dataclass

import numpy as np

from .bgk import compute_timestep, reconstruct, evaluate_flux, update
from .boundary import make_boundary
from .constants import DEFAULT_PRINT_INTERVAL, DEFAULT_TOLERANCE
from .diagnostics import write_solution
from .gas import GasModel, PlasmaModel
from .mesh import PhysicalGrid
from .plasma import evaluate_em_flux
from .problems import initialize
from .state import FaceFlux, FlowField
from .variants import get_variant
from .velocity import VelocityGrid

logger = logging.getLogger(__name__)


@dataclass
class SolveResult:
    """Outcome of Solver.solve()."""
    converged: bool
    iterations: int
    time: float
    residual: np.ndarray
    wall_time: float = 0.0


class Solver:
    """
    Discrete-velocity BGK solver on a 1D mesh.

    Attributes:
        mesh: PhysicalGrid
        grids: VelocityGrid per species
        variant: Kinetic model, fixed for the run
        gas: GasModel
        plasma: PlasmaModel or None
        field: FlowField (cell state)
        faces: FaceFlux (interface fluxes of the last step)
        boundary: BoundaryCondition
        time: Simulation time
        iteration: Completed iterations
        residual: Residual of the last iteration
        residual_history: Max residual per iteration
    """

    def __init__(self, mesh, grids, variant, gas, field, boundary, cfl, max_time,
                 order=2, limiter="vanleer", tolerance=DEFAULT_TOLERANCE,
                 print_interval=DEFAULT_PRINT_INTERVAL, plasma=None, time=0.0,
                 case=None):
        if variant.has_em and plasma is None:
            raise ValueError(f"Variant '{variant.tag}' needs a PlasmaModel")

        self.mesh = mesh
        self.grids = list(grids)
        self.variant = variant
        self.gas = gas
        self.plasma = plasma
        self.field = field
        self.boundary = boundary
        self.cfl = cfl
        self.max_time = max_time
        self.order = order
        self.limiter = limiter
        self.tolerance = tolerance
        self.print_interval = print_interval
        self.case = case

        self.u_fields, _ = variant.field_velocities(self.grids)
        self.psi = variant.moment_tensor(self.grids)
        self.u_max = np.array([g.u_max for g in self.grids])
        if plasma is not None:
            self.mu_ref = plasma.species_reference_viscosity(gas)
        else:
            self.mu_ref = np.full(variant.n_species, gas.mu_ref)

        self.faces = FaceFlux(variant, mesh.n_faces, field.nv)

        self.time = float(time)
        self.iteration = 0
        self.dt = 0.0
        self.residual = np.ones(variant.n_w)
        self.residual_history = []

    # ==================== CONSTRUCTION ====================

    @classmethod
    def from_config(cls, config):
        """
        Build mesh, velocity grids, gas model and initial state from a
        validated SolverConfig.
        """
        setup = config.setup
        variant = get_variant(setup.space)

        mesh = PhysicalGrid(config.pspace.x0, config.pspace.x1,
                            config.pspace.nx, config.pspace.nxg)
        base_grid = VelocityGrid(config.vspace.u0, config.vspace.u1,
                                 config.vspace.nu, config.vspace.mesh_type)

        gas = GasModel.from_parameters(
            knudsen=config.gas.knudsen,
            K=config.gas.inK,
            omega=config.gas.omega,
            alpha_ref=config.gas.alpha_ref,
            omega_ref=config.gas.omega_ref,
            velocity_dims=variant.velocity_dims,
            mach=config.gas.mach,
        )

        plasma = None
        grids = [base_grid]
        if variant.has_em:
            p = config.plasma
            plasma = PlasmaModel(masses=(p.mi, p.me), charges=(p.ni, p.ne),
                                 debye_length=p.lD, larmor_radius=p.rL,
                                 speed_of_light=p.sol)
            # Electrons are faster by sqrt(mi / me)
            grids = [base_grid, base_grid.scaled(np.sqrt(plasma.mass_ratio))]

        field = FlowField(variant, mesh.n_total, base_grid.nu)
        u_fields, _ = variant.field_velocities(grids)
        initialize(field, mesh, setup.case, gas.gamma, u_fields, gas.K,
                   mach=gas.mach, plasma=plasma)

        boundary = make_boundary(setup.boundary, variant, grids)

        logger.info("Built %s solver: %s, %s, gamma=%.4f, mu_ref=%.4e",
                    variant.tag, mesh, base_grid, gas.gamma, gas.mu_ref)

        return cls(mesh, grids, variant, gas, field, boundary,
                   cfl=setup.cfl, max_time=setup.max_time,
                   order=setup.interp_order, limiter=setup.limiter,
                   tolerance=setup.tolerance, print_interval=setup.print_interval,
                   plasma=plasma, case=setup.case)

    # ==================== ITERATION ====================

    def compute_timestep(self):
        extra_speed = self.plasma.speed_of_light if self.plasma is not None else 0.0
        return compute_timestep(self.field, self.mesh, self.variant, self.gas.gamma,
                                self.u_max, self.cfl, self.time, self.max_time,
                                extra_speed=extra_speed)

    def step(self):
        """
        Advance one iteration.

        Returns:
            residual: Normalized residual per conserved component

        Raises:
            NumericalDivergenceError: if the updated state is unphysical
        """
        remaining = self.max_time - self.time
        dt = self.compute_timestep()

        self.boundary.apply(self.field, self.mesh)
        reconstruct(self.field, self.mesh, self.order, self.limiter)
        self.boundary.apply_slopes(self.field, self.mesh)

        evaluate_flux(self.field, self.faces, self.mesh, self.u_fields, self.psi, dt)
        if self.variant.has_em:
            evaluate_em_flux(self.field.em, self.faces.fem, self.mesh.nxg,
                             self.plasma.speed_of_light, dt)

        residual = update(self.field, self.faces, self.mesh, self.variant, self.gas,
                          self.u_fields, self.mu_ref, dt,
                          plasma=self.plasma, iteration=self.iteration + 1)

        self.dt = dt
        self.time = self.max_time if dt >= remaining else self.time + dt
        self.iteration += 1
        self.residual = residual
        self.residual_history.append(float(np.max(residual)))
        return residual

    def is_converged(self):
        return self.iteration > 0 and float(np.max(self.residual)) < self.tolerance

    def is_finished(self):
        return self.is_converged() or self.time >= self.max_time

    def solve(self, output_dir=None):
        """
        March until steady state or max_time.

        Args:
            output_dir: If given, the final state is written there
                (see kineticsim.diagnostics.write_solution)

        Returns:
            SolveResult
        """
        logger.info("Starting %s run: case=%s, order=%d, limiter=%s, cfl=%.3f, max_time=%g",
                    self.variant.tag, self.case, self.order, self.limiter,
                    self.cfl, self.max_time)
        start = wallclock.perf_counter()

        while not self.is_finished():
            self.step()
            if self.iteration % self.print_interval == 0:
                logger.info("iter: %d, time: %.6e, dt: %.4e, res: %.4e",
                            self.iteration, self.time, self.dt, np.max(self.residual))

        elapsed = wallclock.perf_counter() - start
        result = SolveResult(
            converged=self.is_converged(),
            iterations=self.iteration,
            time=self.time,
            residual=self.residual.copy(),
            wall_time=elapsed,
        )

        if result.converged:
            logger.info("Converged after %d iterations (t=%.6e, res=%.3e, %.2f s)",
                        result.iterations, result.time, np.max(result.residual), elapsed)
        else:
            logger.info("Reached max_time %.6e after %d iterations (res=%.3e, %.2f s)",
                        result.time, result.iterations, np.max(result.residual), elapsed)

        if output_dir is not None:
            write_solution(output_dir, self)

        return result
