"""
Exception types raised by the solver.
"""


class ConfigurationError(ValueError):
    """Invalid, missing or unknown configuration; raised before a run starts."""


class NumericalDivergenceError(ArithmeticError):
    """
    The discrete state became unphysical (NaN/Inf, rho <= 0, lambda <= 0).

    Attributes:
        iteration: Iteration at which the state was detected (None if unknown)
        cell: Interior cell index of the first bad cell (None if unknown)
    """

    def __init__(self, message, iteration=None, cell=None):
        super().__init__(message)
        self.iteration = iteration
        self.cell = cell
