"""
Numerical Constants and Reference Species

All quantities are nondimensional. Gas states use the primitive set
(density, bulk velocity, lambda) with lambda = rho / (2 p), so that the
local Maxwellian reads rho * sqrt(lambda/pi) * exp(-lambda (u - U)^2).
"""

import numpy as np

# ==================== NUMERICAL CONSTANTS ====================

RESIDUAL_EPS = 1e-7  # Guards the residual normalization against 0/0
LIMITER_EPS = 1e-7  # Guards the van Leer limiter denominator
DEFAULT_TOLERANCE = 5e-7  # Steady-state residual threshold
DEFAULT_PRINT_INTERVAL = 1000  # Iterations between progress reports

SQRT_PI = np.sqrt(np.pi)

# Electromagnetic field layout inside FlowField.em
EM_COMPONENTS = ("Ex", "Ey", "Ez", "Bx", "By", "Bz")
N_EM = len(EM_COMPONENTS)

# ==================== SPECIES DATABASE ====================

class SpeciesData:
    """
    Nondimensional properties of a kinetic species.

    Attributes:
        mass: Particle mass (ion mass = 1)
        charge: Charge number Z (0 for neutrals)
    """

    def __init__(self, mass, charge=0.0):
        self.mass = mass
        self.charge = charge

    def __repr__(self):
        return f"SpeciesData(mass={self.mass}, charge={self.charge})"


# Two-species plasma used by the Brio-Wu family of problems.
# Electron/ion mass ratio 1/2000 keeps the electron grid affordable.
PLASMA_SPECIES = {
    'ion': SpeciesData(mass=1.0, charge=1.0),
    'electron': SpeciesData(mass=0.0005, charge=-1.0),
}

# ==================== REFERENCE PROBLEMS ====================

# Plasma reference parameters for the kinetic Brio-Wu shock tube
BRIO_WU = {
    'debye_length': 0.01,  # lD
    'larmor_radius': 0.003,  # rL
    'speed_of_light': 100.0,  # sol
    'b_normal': 0.75,  # Bx
    'b_transverse': 1.0,  # |By| on either side
}

# Sod shock tube, (rho, U, p) per side
SOD = {
    'left': (1.0, 0.0, 1.0),
    'right': (0.125, 0.0, 0.1),
}
