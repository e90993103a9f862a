"""
KineticSIM Test Suite

Tests organized by:
- test_velocity_grid.py, test_gas.py: Quadrature, Maxwellian moments, VHS model
- test_reconstruction.py, test_flux.py, test_relaxation.py, test_timestep.py: BGK kernels
- test_boundary.py, test_config.py, test_diagnostics.py: Infrastructure
- test_plasma.py: Maxwell flux, Lorentz source, Brio-Wu smoke run
- test_riemann.py, test_solver.py: Exact reference and end-to-end validation

Shock-tube validations in test_solver.py run full Sod problems to t = 0.15.
"""
