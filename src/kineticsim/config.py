"""
Solver Configuration

Typed, immutable configuration replacing free-form parameter dictionaries.
Files use one `key = value` pair per line (# starts a comment) or JSON
with the same keys:

    case = sod
    space = 1d2f
    interpOrder = 2
    limiter = vanleer
    cfl = 0.5
    maxTime = 0.15
    ...

Unknown keys, missing required keys and out-of-range values raise
ConfigurationError before any solver object is built.
"""

import ast
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .constants import DEFAULT_PRINT_INTERVAL, DEFAULT_TOLERANCE
from .errors import ConfigurationError

logger = logging.getLogger(__name__)


CASES = ("sod", "shock", "brio-wu")
SPACES = ("1d1f", "1d2f", "1d4f")
LIMITER_NAMES = ("vanleer", "minmod")
BOUNDARY_NAMES = ("fixed", "extrapolation", "periodic", "reflective")
PHYSICAL_MESH_TYPES = ("uniform",)
VELOCITY_MESH_NAMES = ("rectangle", "newton")


def _require(condition, message):
    if not condition:
        raise ConfigurationError(message)


# ==================== SECTIONS ====================

@dataclass(frozen=True)
class SetupConfig:
    """Case selection and time-marching controls."""
    case: str
    space: str
    interp_order: int
    limiter: str
    cfl: float
    max_time: float
    boundary: str = "fixed"
    tolerance: float = DEFAULT_TOLERANCE
    print_interval: int = DEFAULT_PRINT_INTERVAL

    def __post_init__(self):
        _require(self.case in CASES, f"Unknown case '{self.case}', expected one of {CASES}")
        _require(self.space in SPACES, f"Unknown space '{self.space}', expected one of {SPACES}")
        _require(self.interp_order in (1, 2),
                 f"interpOrder must be 1 or 2, got {self.interp_order}")
        _require(self.limiter in LIMITER_NAMES,
                 f"Unknown limiter '{self.limiter}', expected one of {LIMITER_NAMES}")
        _require(0.0 < self.cfl <= 1.0, f"cfl must be in (0, 1], got {self.cfl}")
        _require(self.max_time > 0.0, f"maxTime must be positive, got {self.max_time}")
        _require(self.boundary in BOUNDARY_NAMES,
                 f"Unknown boundary '{self.boundary}', expected one of {BOUNDARY_NAMES}")
        _require(self.tolerance > 0.0, f"tolerance must be positive, got {self.tolerance}")
        _require(self.print_interval >= 1,
                 f"printInterval must be at least 1, got {self.print_interval}")

        if self.case == "brio-wu":
            _require(self.space == "1d4f", "Case 'brio-wu' requires space '1d4f'")
        else:
            _require(self.space != "1d4f", f"Case '{self.case}' requires space '1d1f' or '1d2f'")


@dataclass(frozen=True)
class PhysicalSpaceConfig:
    x0: float
    x1: float
    nx: int
    nxg: int = 1
    mesh_type: str = "uniform"

    def __post_init__(self):
        _require(self.x1 > self.x0, f"Need x1 > x0, got [{self.x0}, {self.x1}]")
        _require(self.nx >= 3, f"nx must be at least 3, got {self.nx}")
        _require(self.nxg >= 1, f"nxg must be at least 1, got {self.nxg}")
        _require(self.mesh_type in PHYSICAL_MESH_TYPES,
                 f"Unknown pMeshType '{self.mesh_type}', expected one of {PHYSICAL_MESH_TYPES}")


@dataclass(frozen=True)
class VelocitySpaceConfig:
    u0: float
    u1: float
    nu: int
    mesh_type: str = "rectangle"

    def __post_init__(self):
        _require(self.u1 > self.u0, f"Need u1 > u0, got [{self.u0}, {self.u1}]")
        _require(self.nu >= 2, f"nu must be at least 2, got {self.nu}")
        _require(self.mesh_type in VELOCITY_MESH_NAMES,
                 f"Unknown vMeshType '{self.mesh_type}', expected one of {VELOCITY_MESH_NAMES}")
        if self.mesh_type == "newton":
            _require((self.nu - 1) % 4 == 0 and self.nu >= 5,
                     f"vMeshType 'newton' needs (nu - 1) % 4 == 0, got nu={self.nu}")


@dataclass(frozen=True)
class GasConfig:
    knudsen: float
    inK: float
    omega: float
    alpha_ref: float
    omega_ref: float
    mach: Optional[float] = None

    def __post_init__(self):
        _require(self.knudsen > 0.0, f"knudsen must be positive, got {self.knudsen}")
        _require(self.inK >= 0.0, f"inK must be non-negative, got {self.inK}")
        _require(0.5 <= self.omega <= 1.0, f"omega must be in [0.5, 1], got {self.omega}")
        _require(self.alpha_ref > 0.0, f"alphaRef must be positive, got {self.alpha_ref}")
        _require(0.5 <= self.omega_ref <= 1.0,
                 f"omegaRef must be in [0.5, 1], got {self.omega_ref}")
        if self.mach is not None:
            _require(self.mach > 1.0, f"mach must exceed 1 for a shock, got {self.mach}")


@dataclass(frozen=True)
class PlasmaConfig:
    """Nondimensional plasma constants (ion mass, electron mass, ...)."""
    mi: float = 1.0
    ni: float = 1.0
    me: float = 0.0005
    ne: float = -1.0
    lD: float = 0.01
    rL: float = 0.003
    sol: float = 100.0

    def __post_init__(self):
        for name in ("mi", "me", "lD", "rL", "sol"):
            _require(getattr(self, name) > 0.0, f"{name} must be positive")
        _require(self.me < self.mi, "Electron mass me must be below ion mass mi")


# ==================== KEY TABLE ====================

# file key -> (section, field, type, required)
KEYS = {
    "case": ("setup", "case", str, True),
    "space": ("setup", "space", str, True),
    "interpOrder": ("setup", "interp_order", int, True),
    "limiter": ("setup", "limiter", str, True),
    "cfl": ("setup", "cfl", float, True),
    "maxTime": ("setup", "max_time", float, True),
    "boundary": ("setup", "boundary", str, False),
    "tolerance": ("setup", "tolerance", float, False),
    "printInterval": ("setup", "print_interval", int, False),
    "x0": ("pspace", "x0", float, True),
    "x1": ("pspace", "x1", float, True),
    "nx": ("pspace", "nx", int, True),
    "nxg": ("pspace", "nxg", int, True),
    "pMeshType": ("pspace", "mesh_type", str, True),
    "u0": ("vspace", "u0", float, True),
    "u1": ("vspace", "u1", float, True),
    "nu": ("vspace", "nu", int, True),
    "vMeshType": ("vspace", "mesh_type", str, True),
    "knudsen": ("gas", "knudsen", float, True),
    "inK": ("gas", "inK", float, True),
    "omega": ("gas", "omega", float, True),
    "alphaRef": ("gas", "alpha_ref", float, True),
    "omegaRef": ("gas", "omega_ref", float, True),
    "mach": ("gas", "mach", float, False),
    "mi": ("plasma", "mi", float, False),
    "ni": ("plasma", "ni", float, False),
    "me": ("plasma", "me", float, False),
    "ne": ("plasma", "ne", float, False),
    "lD": ("plasma", "lD", float, False),
    "rL": ("plasma", "rL", float, False),
    "sol": ("plasma", "sol", float, False),
}


def _coerce(key, value, kind):
    if kind is str:
        if not isinstance(value, str):
            raise ConfigurationError(f"Key '{key}' expects a string, got {value!r}")
        return value
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigurationError(f"Key '{key}' expects a number, got {value!r}")
    if kind is int:
        if float(value) != int(value):
            raise ConfigurationError(f"Key '{key}' expects an integer, got {value!r}")
        return int(value)
    return float(value)


def _parse_value(text):
    try:
        return ast.literal_eval(text)
    except (ValueError, SyntaxError):
        return text  # Bare word such as: case = sod


def parse_config_text(text: str) -> dict:
    """
    Parse `key = value` lines into a dictionary.

    Raises:
        ConfigurationError: on malformed lines or duplicate keys
    """
    params = {}
    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = raw.split("#", 1)[0].strip()
        if not line:
            continue
        if "=" not in line:
            raise ConfigurationError(f"Line {lineno}: expected 'key = value', got {raw!r}")
        key, value = (part.strip() for part in line.split("=", 1))
        if not key or not value:
            raise ConfigurationError(f"Line {lineno}: expected 'key = value', got {raw!r}")
        if key in params:
            raise ConfigurationError(f"Line {lineno}: duplicate key '{key}'")
        params[key] = _parse_value(value)
    return params


# ==================== TOP-LEVEL CONFIG ====================

@dataclass(frozen=True)
class SolverConfig:
    """
    Complete, validated solver configuration.

    Attributes:
        setup: Case, variant and marching controls
        pspace: Physical mesh
        vspace: Velocity grid (ion grid for the plasma variant)
        gas: Gas parameters
        plasma: Plasma constants (plasma variant only)
    """
    setup: SetupConfig
    pspace: PhysicalSpaceConfig
    vspace: VelocitySpaceConfig
    gas: GasConfig
    plasma: Optional[PlasmaConfig] = field(default=None)

    def __post_init__(self):
        if self.setup.case == "shock":
            _require(self.gas.mach is not None, "Case 'shock' requires the 'mach' key")
        if self.setup.space == "1d1f":
            _require(self.gas.inK == 0.0,
                     f"Space '1d1f' carries no internal energy; inK must be 0, got {self.gas.inK}")
        if self.setup.space == "1d4f":
            _require(self.plasma is not None, "Space '1d4f' requires plasma parameters")

    @classmethod
    def from_dict(cls, params: dict) -> "SolverConfig":
        """
        Build from a flat dictionary keyed by file names (e.g. 'maxTime').

        Raises:
            ConfigurationError: unknown/missing keys or invalid values
        """
        unknown = sorted(set(params) - set(KEYS))
        if unknown:
            raise ConfigurationError(f"Unknown configuration key(s): {', '.join(unknown)}")

        missing = sorted(k for k, (_, _, _, required) in KEYS.items()
                         if required and k not in params)
        if missing:
            raise ConfigurationError(f"Missing configuration key(s): {', '.join(missing)}")

        sections = {"setup": {}, "pspace": {}, "vspace": {}, "gas": {}, "plasma": {}}
        for key, value in params.items():
            section, name, kind, _ = KEYS[key]
            sections[section][name] = _coerce(key, value, kind)

        plasma = None
        if sections["setup"]["space"] == "1d4f":
            plasma = PlasmaConfig(**sections["plasma"])
        elif sections["plasma"]:
            logger.warning("Plasma keys %s ignored for space '%s'",
                           sorted(sections["plasma"]), sections["setup"]["space"])

        return cls(
            setup=SetupConfig(**sections["setup"]),
            pspace=PhysicalSpaceConfig(**sections["pspace"]),
            vspace=VelocitySpaceConfig(**sections["vspace"]),
            gas=GasConfig(**sections["gas"]),
            plasma=plasma,
        )

    @classmethod
    def from_file(cls, path) -> "SolverConfig":
        """Load a `key = value` text file or a JSON file (*.json)."""
        path = Path(path)
        if not path.exists():
            raise ConfigurationError(f"Configuration file not found: {path}")

        text = path.read_text(encoding="utf-8")
        if path.suffix.lower() == ".json":
            try:
                params = json.loads(text)
            except json.JSONDecodeError as exc:
                raise ConfigurationError(f"Invalid JSON in {path}: {exc}") from exc
            if not isinstance(params, dict):
                raise ConfigurationError(f"{path} must contain a JSON object")
        else:
            params = parse_config_text(text)

        logger.info("Loaded configuration from %s", path)
        return cls.from_dict(params)
