"""
Tests for configuration parsing and validation.
"""

import json

import pytest

from kineticsim.config import SolverConfig, parse_config_text
from kineticsim.errors import ConfigurationError


SOD_TEXT = """\
# Sod shock tube, two-f gas with gamma = 1.4
case = sod
space = 1d2f
interpOrder = 2
limiter = vanleer
cfl = 0.5
maxTime = 0.15
x0 = 0.0
x1 = 1.0
nx = 100
nxg = 1
pMeshType = uniform
u0 = -6.0
u1 = 6.0
nu = 64
vMeshType = rectangle
knudsen = 0.0001
inK = 4
omega = 0.5
alphaRef = 1.0
omegaRef = 0.5
"""


def _sod_params(**overrides):
    params = parse_config_text(SOD_TEXT)
    params.update(overrides)
    return params


class TestParsing:
    """Test the key = value reader."""

    def test_types(self):
        params = parse_config_text(SOD_TEXT)

        assert params["case"] == "sod"
        assert params["nx"] == 100
        assert params["cfl"] == 0.5
        assert params["knudsen"] == pytest.approx(1e-4)

    def test_comments_and_blank_lines(self):
        params = parse_config_text("\n# comment\nnx = 10  # trailing\n\n")
        assert params == {"nx": 10}

    def test_malformed_line(self):
        with pytest.raises(ConfigurationError, match="Line 2"):
            parse_config_text("nx = 10\nnx 20\n")

    def test_duplicate_key(self):
        with pytest.raises(ConfigurationError, match="duplicate"):
            parse_config_text("nx = 10\nnx = 20\n")


class TestSolverConfig:
    """Test SolverConfig construction."""

    def test_from_text_file(self, tmp_path):
        path = tmp_path / "sod.txt"
        path.write_text(SOD_TEXT)

        config = SolverConfig.from_file(path)

        assert config.setup.case == "sod"
        assert config.setup.space == "1d2f"
        assert config.setup.interp_order == 2
        assert config.setup.boundary == "fixed"
        assert config.pspace.nx == 100
        assert config.vspace.mesh_type == "rectangle"
        assert config.gas.inK == 4.0
        assert config.plasma is None

    def test_from_json_file(self, tmp_path):
        path = tmp_path / "sod.json"
        path.write_text(json.dumps(_sod_params(boundary="extrapolation")))

        config = SolverConfig.from_file(path)

        assert config.setup.boundary == "extrapolation"
        assert config.vspace.nu == 64

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            SolverConfig.from_file(tmp_path / "absent.txt")

    def test_config_is_immutable(self):
        config = SolverConfig.from_dict(_sod_params())
        with pytest.raises(AttributeError):
            config.setup.cfl = 0.9

    def test_unknown_key(self):
        with pytest.raises(ConfigurationError, match="Unknown configuration key"):
            SolverConfig.from_dict(_sod_params(prandtl=0.67))

    def test_missing_key(self):
        params = _sod_params()
        del params["cfl"]
        with pytest.raises(ConfigurationError, match="Missing configuration key.*cfl"):
            SolverConfig.from_dict(params)

    def test_wrong_type(self):
        with pytest.raises(ConfigurationError, match="integer"):
            SolverConfig.from_dict(_sod_params(nx=10.5))
        with pytest.raises(ConfigurationError, match="number"):
            SolverConfig.from_dict(_sod_params(cfl="fast"))

    def test_unknown_space(self):
        with pytest.raises(ConfigurationError, match="Unknown space"):
            SolverConfig.from_dict(_sod_params(space="2d2f"))

    def test_case_space_mismatch(self):
        with pytest.raises(ConfigurationError, match="brio-wu"):
            SolverConfig.from_dict(_sod_params(case="brio-wu"))
        with pytest.raises(ConfigurationError, match="requires space"):
            SolverConfig.from_dict(_sod_params(space="1d4f"))

    def test_newton_node_count(self):
        with pytest.raises(ConfigurationError, match="newton"):
            SolverConfig.from_dict(_sod_params(vMeshType="newton", nu=64))
        config = SolverConfig.from_dict(_sod_params(vMeshType="newton", nu=65))
        assert config.vspace.nu == 65

    def test_single_f_rejects_internal_energy(self):
        with pytest.raises(ConfigurationError, match="inK"):
            SolverConfig.from_dict(_sod_params(space="1d1f", inK=2))
        config = SolverConfig.from_dict(_sod_params(space="1d1f", inK=0))
        assert config.gas.inK == 0.0

    def test_shock_needs_mach(self):
        with pytest.raises(ConfigurationError, match="mach"):
            SolverConfig.from_dict(_sod_params(case="shock"))
        config = SolverConfig.from_dict(_sod_params(case="shock", mach=2.0))
        assert config.gas.mach == 2.0

    @pytest.mark.parametrize("key,value", [
        ("cfl", 0.0),
        ("cfl", 1.5),
        ("maxTime", -1.0),
        ("omega", 0.3),
        ("knudsen", 0.0),
        ("interpOrder", 3),
        ("limiter", "superbee"),
        ("boundary", "inflow"),
        ("nx", 1),
    ])
    def test_out_of_range(self, key, value):
        with pytest.raises(ConfigurationError):
            SolverConfig.from_dict(_sod_params(**{key: value}))

    def test_plasma_defaults(self):
        params = _sod_params(case="brio-wu", space="1d4f", inK=0)
        config = SolverConfig.from_dict(params)

        assert config.plasma.me == pytest.approx(0.0005)
        assert config.plasma.sol == pytest.approx(100.0)

    def test_plasma_keys_ignored_for_gas(self, caplog):
        with caplog.at_level("WARNING", logger="kineticsim.config"):
            config = SolverConfig.from_dict(_sod_params(lD=0.1))

        assert config.plasma is None
        assert "ignored" in caplog.text

    def test_configuration_error_is_value_error(self):
        with pytest.raises(ValueError):
            SolverConfig.from_dict(_sod_params(case="blast"))


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
