"""Trajectory reading and writing through MDAnalysis.

The reader side attaches a trajectory to the structure Universe, so that
every frame is loaded into the same Timestep (and positions buffer) that
the structure was loaded into. The writer side wraps ``MDAnalysis.Writer``
and turns its failures into the errors of :mod:`pbccenter.exceptions`.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any, Union

from pbccenter.exceptions import (
    AtomCountMismatchError,
    FrameReadError,
    FrameWriteError,
    OutputOpenError,
    TrajectoryOpenError,
)

if TYPE_CHECKING:
    from MDAnalysis.coordinates.base import ProtoReader, WriterBase
    from MDAnalysis.core.groups import AtomGroup
    from MDAnalysis.core.universe import Universe

LOGGER = logging.getLogger(__name__)

# Exceptions MDAnalysis readers and writers raise for unreadable files
_IO_ERRORS = (OSError, EOFError, ValueError, TypeError, RuntimeError)

# Output formats that take a compression precision (decimal places)
_PRECISION_FORMATS = {".xtc"}


def atom_count(path: Union[str, Path]) -> int:
    """Number of atoms per frame of a trajectory file.

    Raises
    ------
    TrajectoryOpenError
        If the file is missing or cannot be opened as a trajectory.
    """
    from MDAnalysis.coordinates.core import reader

    path = Path(path)
    if not path.is_file():
        raise TrajectoryOpenError(f"Trajectory file not found: {path}")

    try:
        traj = reader(str(path))
    except _IO_ERRORS as e:
        raise TrajectoryOpenError(f"File {path} could not be read as a trajectory: {e}") from e

    try:
        return int(traj.n_atoms)
    finally:
        traj.close()


def atom_count_matches(path: Union[str, Path], n_atoms: int) -> bool:
    """Check that a trajectory has ``n_atoms`` atoms per frame."""
    return atom_count(path) == n_atoms


def attach_trajectory(universe: "Universe", path: Union[str, Path]) -> "ProtoReader":
    """Load a trajectory into a structure Universe.

    Parameters
    ----------
    universe : Universe
        Universe created from the structure file.
    path : str or Path
        Trajectory file.

    Returns
    -------
    ProtoReader
        ``universe.trajectory``, positioned on the first frame.

    Raises
    ------
    TrajectoryOpenError
        If the trajectory cannot be opened.
    AtomCountMismatchError
        If the trajectory and the structure have different atom counts.
    """
    path = Path(path)
    n_atoms = universe.atoms.n_atoms
    n_traj = atom_count(path)
    if n_traj != n_atoms:
        raise AtomCountMismatchError(
            f"Number of atoms in {path} ({n_traj}) does not match the structure ({n_atoms})."
        )

    try:
        universe.load_new(str(path))
    except _IO_ERRORS as e:
        raise TrajectoryOpenError(f"File {path} could not be read as a trajectory: {e}") from e

    LOGGER.info(f"Opened trajectory {path}: {len(universe.trajectory)} frames")
    return universe.trajectory


def check_stream_complete(trajectory: "ProtoReader", frames_read: int) -> None:
    """Verify that iteration reached the true end of a trajectory.

    MDAnalysis readers turn a failed read into a normal end of iteration,
    and the XDR offset scan drops an incomplete trailing record without
    notice. Both are detected here once the stream has ended: fewer frames
    were read than the reader reported, or (for XTC/TRR files) bytes remain
    after the last complete frame.

    Parameters
    ----------
    trajectory : ProtoReader
        Reader that was iterated to its end.
    frames_read : int
        Number of frames obtained from the reader.

    Raises
    ------
    FrameReadError
        If the input ended before its last frame.
    """
    from MDAnalysis.coordinates.XDR import XDRBaseReader

    n_frames = len(trajectory)
    if frames_read < n_frames:
        raise FrameReadError(
            f"Could not read frame {frames_read} of the trajectory: "
            f"input ended after {frames_read} of {n_frames} frames"
        )

    if not isinstance(trajectory, XDRBaseReader) or n_frames == 0:
        return

    path = Path(trajectory.filename)
    # the file position after the last indexed frame must be the end of the file
    trajectory[n_frames - 1]
    end = trajectory._xdr.tell()
    trajectory.rewind()
    size = path.stat().st_size
    if end != size:
        raise FrameReadError(
            f"Could not read frame {n_frames} of the trajectory: "
            f"{size - end} trailing bytes in {path} do not form a complete frame"
        )


def open_writer(
    path: Union[str, Path],
    n_atoms: int,
    precision: int = 3,
) -> "WriterBase":
    """Open an MDAnalysis writer for the output file.

    The format is chosen from the file extension. ``precision`` (decimal
    places) is only passed to compressed formats that use it.

    Raises
    ------
    OutputOpenError
        If the file cannot be created or the format is not supported.
    """
    import MDAnalysis as mda

    path = Path(path)
    kwargs: dict[str, Any] = {}
    if path.suffix.lower() in _PRECISION_FORMATS:
        kwargs["precision"] = precision

    try:
        return mda.Writer(str(path), n_atoms=n_atoms, **kwargs)
    except _IO_ERRORS as e:
        raise OutputOpenError(f"File {path} could not be opened for writing: {e}") from e


def write_frame(writer: "WriterBase", atoms: "AtomGroup") -> None:
    """Write the current frame of ``atoms``.

    Raises
    ------
    FrameWriteError
        If the writer fails. Frames written earlier stay in the file.
    """
    try:
        writer.write(atoms)
    except _IO_ERRORS as e:
        raise FrameWriteError(f"Writing has failed: {e}") from e


def write_structure(atoms: "AtomGroup", path: Union[str, Path]) -> Path:
    """Write the current coordinates of ``atoms`` as a single structure."""
    path = Path(path)
    writer = open_writer(path, atoms.n_atoms)
    try:
        write_frame(writer, atoms)
    finally:
        writer.close()
    LOGGER.info(f"Wrote centered structure to {path}")
    return path
