"""Tests for preset configuration loading."""

from pathlib import Path

import pytest

from instafilter.components.filter_spec import ColorMatrixStep, CompositeStep
from instafilter.config import (
    CONFIG_ENV_VAR,
    load_config_presets,
    parse_presets,
    resolve_config_path,
)

WARM_TOML = """
[presets.warm]
steps = [
  { kind = "composite", blendMode = "screen", overlaySpec = { color = [255, 200, 120] }, opacity = 0.3 },
  { kind = "colorMatrix", brightness = 5, saturation = 10 },
]

[presets.plain]
steps = []
"""


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run each test without env config and with empty cwd/home."""
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.chdir(tmp_path)
    return tmp_path


def write_config(directory: Path, text: str = WARM_TOML, name: str = "instafilter.toml") -> Path:
    path = directory / name
    path.write_text(text)
    return path


class TestResolveConfigPath:
    """Tests for config file resolution."""

    def test_no_config(self) -> None:
        """Test None is returned when no file exists."""
        assert resolve_config_path() is None

    def test_explicit_path(self, tmp_path: Path) -> None:
        """Test an explicit path is used."""
        path = write_config(tmp_path, name="custom.toml")
        assert resolve_config_path(str(path)) == str(path)

    def test_explicit_missing(self, tmp_path: Path) -> None:
        """Test a missing explicit path raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            resolve_config_path(str(tmp_path / "missing.toml"))

    def test_env_var(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test the environment variable overrides the explicit path."""
        env_path = write_config(tmp_path, name="env.toml")
        other = write_config(tmp_path, name="other.toml")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(env_path))
        assert resolve_config_path(str(other)) == str(env_path)

    def test_env_var_missing(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test a missing env var target raises FileNotFoundError."""
        monkeypatch.setenv(CONFIG_ENV_VAR, str(tmp_path / "nope.toml"))
        with pytest.raises(FileNotFoundError):
            resolve_config_path()

    def test_cwd_default(self, tmp_path: Path) -> None:
        """Test instafilter.toml in the working directory is found."""
        write_config(tmp_path)
        assert resolve_config_path() == "instafilter.toml"


class TestLoadPresets:
    """Tests for parsing presets from TOML."""

    def test_load(self, tmp_path: Path) -> None:
        """Test presets are parsed into FilterSpecs."""
        presets = load_config_presets(str(write_config(tmp_path)))

        assert sorted(presets) == ["plain", "warm"]
        warm = presets["warm"]
        assert warm.name == "warm"
        assert isinstance(warm.steps[0], CompositeStep)
        assert warm.steps[0].opacity == pytest.approx(0.3)
        assert warm.steps[0].overlay_spec == {"color": [255, 200, 120]}
        assert isinstance(warm.steps[1], ColorMatrixStep)
        assert warm.steps[1].saturation == 10
        assert presets["plain"].steps == []

    def test_no_config_gives_empty(self) -> None:
        """Test missing default config yields no presets."""
        assert load_config_presets() == {}

    def test_invalid_toml(self, tmp_path: Path) -> None:
        """Test malformed TOML raises ValueError."""
        path = write_config(tmp_path, text="[presets.broken\n")
        with pytest.raises(ValueError, match="Invalid TOML"):
            load_config_presets(str(path))

    def test_invalid_preset(self, tmp_path: Path) -> None:
        """Test out-of-range values raise ValueError naming the preset."""
        text = '[presets.loud]\nsteps = [{ kind = "colorMatrix", contrast = 500 }]\n'
        path = write_config(tmp_path, text=text)
        with pytest.raises(ValueError, match="loud"):
            load_config_presets(str(path))

    def test_presets_must_be_table(self) -> None:
        """Test a non-table presets entry is rejected."""
        with pytest.raises(ValueError):
            parse_presets({"presets": [1, 2, 3]})

    def test_preset_must_be_table(self) -> None:
        """Test a non-table preset body is rejected."""
        with pytest.raises(ValueError):
            parse_presets({"presets": {"x": 5}})
