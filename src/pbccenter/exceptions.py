"""Error taxonomy for centering runs.

Every failure that should stop a run derives from :class:`CenteringError`.
The command line entry point catches this base class, reports the message
and exits with :attr:`CenteringError.exit_code`.

:class:`IndexReadError` is the exception to the rule: an unreadable index
file only produces a warning and the run continues without index groups.
"""

from __future__ import annotations


class CenteringError(Exception):
    """Base class for all errors raised while centering a system."""

    exit_code: int = 1


class ConfigurationError(CenteringError):
    """Invalid or missing run settings (required paths, skip value, ...)."""


class PathCollisionError(ConfigurationError):
    """Two of the structure, trajectory and output paths are identical."""


class SelectionError(CenteringError):
    """The reference selection is invalid or matched no atoms."""


class StructureReadError(CenteringError):
    """The structure file is missing or could not be parsed."""


class InvalidBoxError(CenteringError):
    """The simulation box has a non-positive or missing edge length."""


class IndexReadError(CenteringError):
    """The index file could not be read. Demoted to a warning by callers."""


class TrajectoryOpenError(CenteringError):
    """The input trajectory could not be opened."""


class AtomCountMismatchError(CenteringError):
    """The trajectory and the structure contain different numbers of atoms."""


class OutputOpenError(CenteringError):
    """The output file could not be opened for writing."""


class FrameReadError(CenteringError):
    """A trajectory frame was corrupted or truncated mid-stream."""


class FrameWriteError(CenteringError):
    """Writing a centered frame or structure failed."""
