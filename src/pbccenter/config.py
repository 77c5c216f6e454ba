"""Run configuration for centering.

A :class:`CenteringConfig` holds everything one run needs: input and output
paths, the reference selection, the skip interval and the axis mask. It is
normally built from command line flags, optionally on top of a YAML settings
file::

    structure: system.gro
    trajectory: md.xtc
    index: index.ndx
    output: centered.xtc
    reference: Protein
    skip: 10
    axes: {x: true, y: true, z: false}
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import numpy as np
import yaml
from numpy.typing import NDArray
from pydantic import BaseModel, Field, ValidationError

from pbccenter.exceptions import ConfigurationError, PathCollisionError

# Default simulation-time cadence (ps) of progress reports
DEFAULT_PROGRESS_INTERVAL: int = 10000


class AxisMask(BaseModel):
    """Axes along which the reference group is centered.

    Attributes
    ----------
    x, y, z : bool
        Whether to center along the corresponding axis.
    """

    x: bool = True
    y: bool = True
    z: bool = True

    @classmethod
    def from_flags(cls, x: bool = False, y: bool = False, z: bool = False) -> "AxisMask":
        """Build a mask from command line flags; no flags means all axes."""
        if not (x or y or z):
            return cls()
        return cls(x=x, y=y, z=z)

    def as_array(self) -> NDArray[np.bool_]:
        return np.array([self.x, self.y, self.z], dtype=bool)

    def __str__(self) -> str:
        return "".join(name for name, on in zip("xyz", (self.x, self.y, self.z)) if on)


class CenteringConfig(BaseModel):
    """Settings for a single centering run.

    Attributes
    ----------
    structure : Path
        Structure file (GRO) providing topology and reference coordinates.
    trajectory : Path, optional
        Trajectory to center frame by frame. Without it, only the structure
        is centered and written.
    index : Path
        GROMACS index file with named atom groups. Missing files are ignored.
    output : Path
        Output structure or trajectory file.
    reference : str
        Index group name or MDAnalysis selection of the reference atoms.
    skip : int
        Only every ``skip``-th frame of the trajectory is centered and written.
    axes : AxisMask
        Axes along which to center.
    precision : int
        Decimal places kept by compressed (XTC) output.
    progress_interval : int
        Report progress for frames whose time (ps) is a multiple of this
        value. 0 disables reporting.
    """

    structure: Path
    trajectory: Optional[Path] = None
    index: Path = Path("index.ndx")
    output: Path
    reference: str = Field(default="Protein", min_length=1)
    skip: int = Field(default=1, ge=1, description="Center every Nth frame")
    axes: AxisMask = Field(default_factory=AxisMask)
    precision: int = Field(default=3, ge=1, le=10)
    progress_interval: int = Field(default=DEFAULT_PROGRESS_INTERVAL, ge=0)

    @classmethod
    def from_options(cls, **options: Any) -> "CenteringConfig":
        """Create a config, converting validation failures to ConfigurationError."""
        try:
            return cls(**options)
        except ValidationError as e:
            raise ConfigurationError(_format_validation_error(e)) from e

    @classmethod
    def load_settings(cls, path: Union[str, Path]) -> Dict[str, Any]:
        """Read raw settings from a YAML file.

        Relative paths in the file are resolved against the file's directory
        and environment variables are expanded.

        Raises
        ------
        ConfigurationError
            If the file is missing, is not valid YAML or is not a mapping.
        """
        path = Path(path)
        if not path.exists():
            raise ConfigurationError(f"Settings file not found: {path}")

        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Could not parse settings file {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"Settings file {path} must contain a mapping")

        base = path.parent
        for key in ("structure", "trajectory", "index", "output"):
            value = data.get(key)
            if isinstance(value, str):
                expanded = Path(os.path.expandvars(value))
                data[key] = str(expanded if expanded.is_absolute() else base / expanded)
        return data

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "CenteringConfig":
        """Load a complete config from a YAML settings file."""
        return cls.from_options(**cls.load_settings(path))

    def with_overrides(self, **overrides: Any) -> "CenteringConfig":
        """Return a copy with the given fields replaced (None values ignored)."""
        data = self.model_dump()
        data.update({k: v for k, v in overrides.items() if v is not None})
        return self.from_options(**data)

    def check_paths(self) -> None:
        """Refuse runs that would read from and write to the same path.

        Paths are compared textually, so two different spellings of the
        same file are not detected.

        Raises
        ------
        PathCollisionError
            If any two of structure, trajectory and output are identical.
        """
        if str(self.structure) == str(self.output):
            raise PathCollisionError(
                f"Input structure file {self.structure} and output file "
                f"{self.output} are the same file."
            )

        if self.trajectory is None:
            return

        if str(self.structure) == str(self.trajectory):
            raise PathCollisionError(
                f"Input structure file {self.structure} and input trajectory "
                f"{self.trajectory} are the same file."
            )
        if str(self.trajectory) == str(self.output):
            raise PathCollisionError(
                f"Input trajectory {self.trajectory} and output file "
                f"{self.output} are the same file."
            )


def _format_validation_error(error: ValidationError) -> str:
    lines = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"]) or "settings"
        lines.append(f"{location}: {item['msg']}")
    return "Invalid settings:\n  - " + "\n  - ".join(lines)
