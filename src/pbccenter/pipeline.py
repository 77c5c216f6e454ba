"""Frame-by-frame centering of structures and trajectories.

The pipeline reads one frame at a time into the Universe's Timestep, centers
it on the reference selection and writes it out before the next frame is
read. The positions buffer is reused for every frame, so memory use does not
grow with trajectory length.

Per-frame states::

    READY -> PROCESSING -> PROCESSED | SKIPPED -> READY ... -> DONE | FAILED

A frame is processed when its read index (counting every frame read,
including skipped ones) is a multiple of the skip interval. End of input
finishes the run once the reader confirms that every frame was read; a
corrupted or truncated frame raises :class:`FrameReadError` and a failed
write raises :class:`FrameWriteError`. Output written before a failure is
left in place.

Examples
--------
>>> from pbccenter import CenteringConfig, run_centering
>>> config = CenteringConfig(
...     structure="system.gro", trajectory="md.xtc", output="centered.xtc", skip=10
... )
>>> summary = run_centering(config)
>>> print(f"{summary.frames_written} of {summary.frames_read} frames written")
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Iterator, Optional

import click
import numpy as np
from numpy.typing import NDArray

from pbccenter.config import AxisMask, CenteringConfig
from pbccenter.core.translation import center_positions
from pbccenter.exceptions import ConfigurationError, FrameReadError, SelectionError
from pbccenter.io.index import read_ndx, write_ndx
from pbccenter.io.selection import resolve_selection
from pbccenter.io.structure import load_structure
from pbccenter.io.trajectory import (
    attach_trajectory,
    check_stream_complete,
    open_writer,
    write_frame,
    write_structure,
)

if TYPE_CHECKING:
    from MDAnalysis.coordinates.base import WriterBase
    from MDAnalysis.core.universe import Universe

LOGGER = logging.getLogger(__name__)

ProgressCallback = Callable[[int, float], None]

# Exceptions raised by MDAnalysis readers for corrupted or truncated frames
_READ_ERRORS = (OSError, EOFError, ValueError, RuntimeError)


class FrameStatus(str, Enum):
    """Outcome of one frame read from the input."""

    PROCESSED = "processed"
    SKIPPED = "skipped"


@dataclass
class FrameResult:
    """One frame read from the input.

    Attributes
    ----------
    index : int
        Read index of the frame (0-based, counting skipped frames).
    step : int
        Simulation step of the frame.
    time : float
        Simulation time of the frame in ps.
    status : FrameStatus
        Whether the frame was centered or skipped.
    translation : NDArray, optional
        Translation applied to the frame; None for skipped frames.
    """

    index: int
    step: int
    time: float
    status: FrameStatus
    translation: Optional[NDArray[np.float64]] = None


@dataclass
class CenteringSummary:
    """Result of a centering run."""

    frames_read: int
    frames_written: int
    output: Path


class TimeCadence:
    """Forward progress calls only for frames at a fixed simulation-time cadence.

    A call is forwarded when ``int(time) % interval == 0``. The cadence is
    keyed to simulation time rather than frame count, so with a time step
    that does not divide ``interval`` some or all reports are skipped.

    Parameters
    ----------
    callback : callable
        Receives ``(step, time)``.
    interval : int
        Time interval in whole ps. 0 forwards every call.
    """

    def __init__(self, callback: ProgressCallback, interval: int) -> None:
        if interval < 0:
            raise ConfigurationError(f"Progress interval must not be negative, got {interval}")
        self.callback = callback
        self.interval = interval

    def __call__(self, step: int, time: float) -> None:
        if self.interval == 0 or int(time) % self.interval == 0:
            self.callback(step, time)


def console_progress(step: int, time: float) -> None:
    """Print the current step and time on a single, overwritten line."""
    click.echo(f"Step: {step}. Time: {time:.0f} ps\r", nl=False)


class CenteringPipeline:
    """Center every frame of a Universe on a reference selection.

    Parameters
    ----------
    universe : Universe
        Universe holding the system. Its current Timestep is modified in
        place.
    reference : NDArray
        Indices of the reference atoms. Must be non-empty.
    axes : AxisMask, optional
        Axes along which to center. Default is all three.
    skip : int, optional
        Only every ``skip``-th frame read is centered. Default is 1.
    progress : callable, optional
        Observer called with ``(step, time)`` for every frame read. It has no
        effect on which frames are written.

    Examples
    --------
    >>> pipeline = CenteringPipeline(u, reference, skip=5)
    >>> with mda.Writer("centered.xtc", u.atoms.n_atoms) as writer:
    ...     summary = pipeline.run_trajectory(writer, "centered.xtc")
    """

    def __init__(
        self,
        universe: "Universe",
        reference: NDArray[np.intp],
        axes: Optional[AxisMask] = None,
        skip: int = 1,
        progress: Optional[ProgressCallback] = None,
    ) -> None:
        reference = np.asarray(reference, dtype=np.intp)
        if len(reference) == 0:
            raise SelectionError("Reference selection contains no atoms")
        if skip < 1:
            raise ConfigurationError(f"Skip must be positive, got {skip}")

        n_atoms = universe.atoms.n_atoms
        if reference.min() < 0 or reference.max() >= n_atoms:
            raise SelectionError(f"Reference indices out of range for {n_atoms} atoms")

        self.universe = universe
        self.reference = reference
        self.axes = axes if axes is not None else AxisMask()
        self.skip = skip
        self.progress = progress

    def center_current_frame(self) -> NDArray[np.float64]:
        """Center the Universe's current frame in place and return the translation."""
        ts = self.universe.trajectory.ts
        return center_positions(ts.positions, self.reference, ts.dimensions, self.axes)

    def iter_frames(self) -> Iterator[FrameResult]:
        """Read, center or skip each frame of the trajectory in order.

        The Universe's Timestep holds the centered coordinates of a processed
        frame until the next item is requested.

        Raises
        ------
        FrameReadError
            If a frame cannot be read, or the input stops before its last
            frame.
        """
        trajectory = self.universe.trajectory
        frames = iter(trajectory)
        index = 0
        while True:
            try:
                ts = next(frames)
            except StopIteration:
                check_stream_complete(trajectory, index)
                return
            except _READ_ERRORS as e:
                raise FrameReadError(f"Could not read frame {index} of the trajectory: {e}") from e

            step = int(ts.data.get("step", ts.frame))
            time = float(ts.time)

            if self.progress is not None:
                self.progress(step, time)

            if index % self.skip != 0:
                yield FrameResult(index, step, time, FrameStatus.SKIPPED)
            else:
                translation = self.center_current_frame()
                yield FrameResult(index, step, time, FrameStatus.PROCESSED, translation)
            index += 1

    def run_trajectory(self, writer: "WriterBase", output: Path) -> CenteringSummary:
        """Center the trajectory and write every processed frame.

        Raises
        ------
        FrameReadError
            If a frame is corrupted mid-stream.
        FrameWriteError
            If writing a frame fails. Earlier frames remain in the output.
        """
        frames_read = 0
        frames_written = 0
        for frame in self.iter_frames():
            frames_read += 1
            if frame.status is FrameStatus.SKIPPED:
                continue
            write_frame(writer, self.universe.atoms)
            frames_written += 1

        LOGGER.info(f"Centered {frames_written} of {frames_read} frames")
        return CenteringSummary(frames_read, frames_written, Path(output))

    def run_structure(self, output: Path) -> CenteringSummary:
        """Center the current (structure) coordinates and write one structure."""
        self.center_current_frame()
        write_structure(self.universe.atoms, output)
        return CenteringSummary(1, 1, Path(output))


def run_centering(
    config: CenteringConfig,
    progress: Optional[ProgressCallback] = None,
    save_reference: Optional[Path] = None,
) -> CenteringSummary:
    """Run a complete centering job.

    Steps, in order: path checks, structure loading, index loading (a
    failure only warns), reference resolution, then either single-structure
    centering or trajectory streaming. An empty reference aborts before any
    trajectory or output file is opened.

    Parameters
    ----------
    config : CenteringConfig
        Run settings.
    progress : callable, optional
        Progress observer receiving ``(step, time)``; filtered by
        ``config.progress_interval``. Only used for trajectories.
    save_reference : Path, optional
        Write the resolved reference atoms as an index group to this file.

    Returns
    -------
    CenteringSummary
        Frames read and written, and the output path.

    Raises
    ------
    CenteringError
        Any subclass, for the failures described in :mod:`pbccenter.exceptions`.
    """
    config.check_paths()

    universe = load_structure(config.structure)
    groups = read_ndx(config.index, n_atoms=universe.atoms.n_atoms)
    reference = resolve_selection(universe, config.reference, groups)

    if save_reference is not None:
        written = write_ndx(save_reference, universe, {config.reference: reference})
        LOGGER.info(f"Wrote reference index group to {written}")

    LOGGER.info(f"Centering along axes: {config.axes}")

    if config.trajectory is None:
        pipeline = CenteringPipeline(universe, reference, axes=config.axes)
        return pipeline.run_structure(config.output)

    attach_trajectory(universe, config.trajectory)

    if progress is not None and config.progress_interval > 0:
        observer: Optional[ProgressCallback] = TimeCadence(progress, config.progress_interval)
    else:
        observer = None

    pipeline = CenteringPipeline(
        universe,
        reference,
        axes=config.axes,
        skip=config.skip,
        progress=observer,
    )

    writer = open_writer(config.output, universe.atoms.n_atoms, precision=config.precision)
    try:
        summary = pipeline.run_trajectory(writer, config.output)
    finally:
        writer.close()

    LOGGER.info(f"Wrote centered trajectory to {config.output}")
    return summary
