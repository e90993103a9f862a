"""
Output and Diagnostic Utilities

This module turns the final solver state into files and figures:
- Macroscopic profiles (density, velocity, pressure, temperature)
- Snapshot export (NumPy .npz) and profile export (CSV)
- Timestamped output folders with a copy of the run configuration
- Visualization utilities (matplotlib)

Nothing here is called inside the time-marching loop.
"""

import csv
import logging
import shutil
from datetime import datetime
from pathlib import Path

import numpy as np

from .state import conserved_totals

logger = logging.getLogger(__name__)


def macroscopic_profiles(solver):
    """
    Interior-cell profiles per species.

    Returns:
        dict with 'x' of shape (nx,) and 'rho', 'U', 'p', 'T' of shape
        (nx, n_species); T = 1 / (2 lambda) = p / rho
    """
    interior = solver.mesh.interior
    prim = solver.field.prim[interior]
    variant = solver.variant
    return {
        'x': solver.mesh.x_interior.copy(),
        'rho': variant.density(prim),
        'U': variant.bulk_velocity(prim),
        'p': variant.pressure(prim),
        'T': 0.5 / variant.lam(prim),
    }


def create_output_folder(base_dir, config_path=None, prefix="run"):
    """
    Create <base_dir>/<prefix>_<timestamp>/ with a data/ subfolder.

    Args:
        base_dir: Parent directory (created if missing)
        config_path: Configuration file copied into the folder (optional)
        prefix: Folder name prefix

    Returns:
        Path of the new folder
    """
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    folder = Path(base_dir) / f"{prefix}_{stamp}"
    (folder / "data").mkdir(parents=True, exist_ok=False)

    if config_path is not None:
        shutil.copy2(config_path, folder / Path(config_path).name)

    logger.info("Output folder: %s", folder)
    return folder


def write_solution(output_dir, solver, filename="solution.npz"):
    """
    Save the full solver state to a compressed .npz file.

    Stored arrays: x, w, prim, f, em (if present), u (field velocities),
    time, iteration, residual, variant tag and field names.

    Returns:
        Path of the written file
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_dir / filename

    arrays = {
        'x': solver.mesh.x,
        'w': solver.field.w,
        'prim': solver.field.prim,
        'f': solver.field.f,
        'u': solver.u_fields,
        'time': np.array(solver.time),
        'iteration': np.array(solver.iteration),
        'residual': np.asarray(solver.residual),
        'variant': np.array(solver.variant.tag),
        'fields': np.array(solver.variant.field_names),
    }
    if solver.field.em is not None:
        arrays['em'] = solver.field.em

    np.savez_compressed(path, **arrays)
    logger.info("Solution saved to %s", path)
    return path


def load_solution(path):
    """Read a snapshot written by write_solution() into a dict of arrays."""
    with np.load(path) as data:
        return {key: data[key] for key in data.files}


def save_profile_csv(filename, solver):
    """
    Save macroscopic profiles to CSV (one row per interior cell).

    Args:
        filename: Output CSV filename
        solver: Solver instance
    """
    profiles = macroscopic_profiles(solver)
    n_species = solver.variant.n_species
    suffixes = [""] if n_species == 1 else [f"_{s}" for s in range(n_species)]

    with open(filename, 'w', newline='') as f:
        writer = csv.writer(f)

        header = ['x']
        for name in ('rho', 'U', 'p', 'T'):
            header += [name + suffix for suffix in suffixes]
        writer.writerow(header)

        for i, x in enumerate(profiles['x']):
            row = [x]
            for name in ('rho', 'U', 'p', 'T'):
                row += list(profiles[name][i])
            writer.writerow(row)

    logger.info("Profiles saved to %s", filename)


def conservation_report(solver, reference_totals):
    """Relative change of sum(w dx) against reference_totals, per component."""
    totals = conserved_totals(solver.field, solver.mesh)
    scale = np.maximum(np.abs(reference_totals), 1e-300)
    return np.abs(totals - reference_totals) / scale


def plot_solution(solver, exact=None, show=True, save_filename=None):
    """
    Plot density, velocity, pressure and temperature profiles.

    Args:
        solver: Solver instance
        exact: Optional dict with 'x', 'rho', 'U', 'p' reference curves
        show: Display plots interactively
        save_filename: Save figure to file (optional)
    """
    import matplotlib.pyplot as plt

    profiles = macroscopic_profiles(solver)
    x = profiles['x']
    n_species = solver.variant.n_species

    fig, axes = plt.subplots(2, 2, figsize=(12, 8))
    panels = (('rho', 'Density'), ('U', 'Velocity'), ('p', 'Pressure'), ('T', 'Temperature'))

    for ax, (key, title) in zip(axes.flat, panels):
        for s in range(n_species):
            label = 'kinetic' if n_species == 1 else f'species {s}'
            ax.plot(x, profiles[key][:, s], 'o-', markersize=3, linewidth=1.5, label=label)
        if exact is not None and key in exact:
            ax.plot(exact['x'], exact[key], 'k--', linewidth=1.5, label='exact')
        ax.set_xlabel('x', fontsize=12)
        ax.set_title(title, fontsize=14, fontweight='bold')
        ax.grid(True, alpha=0.3)
        ax.legend(fontsize=10)

    fig.suptitle(f"{solver.variant.tag}  t = {solver.time:.4f}", fontsize=14)
    plt.tight_layout()

    if save_filename:
        plt.savefig(save_filename, dpi=150, bbox_inches='tight')
        logger.info("Plot saved to %s", save_filename)

    if show:
        plt.show()

    return fig
