"""Tests for run configuration, the axis mask and YAML settings."""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest

from pbccenter.config import AxisMask, CenteringConfig
from pbccenter.exceptions import ConfigurationError, PathCollisionError


class TestAxisMask:
    def test_no_flags_enables_all_axes(self):
        mask = AxisMask.from_flags()
        np.testing.assert_array_equal(mask.as_array(), [True, True, True])

    def test_single_flag(self):
        mask = AxisMask.from_flags(z=True)
        np.testing.assert_array_equal(mask.as_array(), [False, False, True])
        assert str(mask) == "z"

    def test_str_lists_enabled_axes(self):
        assert str(AxisMask()) == "xyz"


class TestCenteringConfig:
    def test_defaults(self):
        config = CenteringConfig(structure="a.gro", output="b.gro")
        assert config.trajectory is None
        assert config.index == Path("index.ndx")
        assert config.reference == "Protein"
        assert config.skip == 1
        assert str(config.axes) == "xyz"
        assert config.precision == 3
        assert config.progress_interval == 10000

    @pytest.mark.parametrize("interval", [2.5, -1])
    def test_progress_interval_must_be_whole_non_negative(self, interval):
        with pytest.raises(ConfigurationError, match="progress_interval"):
            CenteringConfig.from_options(
                structure="a.gro", output="b.gro", progress_interval=interval
            )

    @pytest.mark.parametrize("skip", [0, -3])
    def test_non_positive_skip_rejected(self, skip):
        with pytest.raises(ConfigurationError, match="skip"):
            CenteringConfig.from_options(structure="a.gro", output="b.gro", skip=skip)

    def test_missing_output_rejected(self):
        with pytest.raises(ConfigurationError, match="output"):
            CenteringConfig.from_options(structure="a.gro")

    def test_structure_output_collision(self):
        config = CenteringConfig(structure="a.gro", output="a.gro")
        with pytest.raises(PathCollisionError, match="same file"):
            config.check_paths()

    def test_structure_trajectory_collision(self):
        config = CenteringConfig(structure="a.gro", trajectory="a.gro", output="b.xtc")
        with pytest.raises(PathCollisionError):
            config.check_paths()

    def test_trajectory_output_collision(self):
        config = CenteringConfig(structure="a.gro", trajectory="md.xtc", output="md.xtc")
        with pytest.raises(PathCollisionError):
            config.check_paths()

    def test_distinct_paths_pass(self):
        CenteringConfig(structure="a.gro", trajectory="md.xtc", output="out.xtc").check_paths()

    def test_with_overrides_ignores_none(self):
        config = CenteringConfig(structure="a.gro", output="b.gro", skip=4)
        updated = config.with_overrides(skip=None, reference="C-alpha")
        assert updated.skip == 4
        assert updated.reference == "C-alpha"


class TestYamlSettings:
    def test_relative_paths_resolved_against_file(self, tmp_path):
        settings = tmp_path / "run" / "center.yaml"
        settings.parent.mkdir()
        settings.write_text(
            "structure: system.gro\n"
            "trajectory: md.xtc\n"
            "output: out.xtc\n"
            "skip: 5\n"
            "axes: {x: false, y: false, z: true}\n"
        )
        config = CenteringConfig.from_yaml(settings)

        assert config.structure == settings.parent / "system.gro"
        assert config.trajectory == settings.parent / "md.xtc"
        assert config.skip == 5
        assert str(config.axes) == "z"

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            CenteringConfig.from_yaml(tmp_path / "missing.yaml")

    def test_not_a_mapping(self, tmp_path):
        settings = tmp_path / "bad.yaml"
        settings.write_text("- just\n- a list\n")
        with pytest.raises(ConfigurationError, match="mapping"):
            CenteringConfig.load_settings(settings)
