"""Translation planning and periodic translation of whole frames.

:func:`plan_translation` turns a reference center into the shift that moves
it to the middle of the box. :func:`translate_in_place` applies that shift to
every atom of a frame and wraps the result back into the box, so the whole
system moves together and only the reference decides by how much.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Sequence

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pbccenter.core.centroid import compute_center
from pbccenter.core.pbc import axis_flags, box_lengths

if TYPE_CHECKING:
    from pbccenter.config import AxisMask

LOGGER = logging.getLogger(__name__)


def plan_translation(
    box: ArrayLike,
    center: ArrayLike,
    axes: "AxisMask | Sequence[bool]" = (True, True, True),
) -> NDArray[np.float64]:
    """Translation that moves ``center`` to the middle of the box.

    Parameters
    ----------
    box : array_like
        Box dimensions in MDAnalysis format or just [Lx, Ly, Lz].
    center : array_like
        Center of the reference group, shape (3,).
    axes : AxisMask or sequence of bool, optional
        Axes to center along. Disabled axes get a zero translation.

    Returns
    -------
    NDArray[np.float64]
        Translation vector of shape (3,).
    """
    lengths = box_lengths(box)
    flags = axis_flags(axes)
    center = np.asarray(center, dtype=np.float64)
    return np.where(flags, lengths / 2.0 - center, 0.0)


def translate_in_place(
    positions: NDArray[np.floating],
    translation: ArrayLike,
    box: ArrayLike,
) -> NDArray[np.floating]:
    """Shift all positions by ``translation`` and wrap them into the box.

    Parameters
    ----------
    positions : NDArray
        Atomic positions, shape (N_atoms, 3). **Modified in-place.**
    translation : array_like
        Translation vector of shape (3,). Each component must be smaller
        than the box length in magnitude (at most L/2 when produced by
        :func:`plan_translation`), so a single wrap is enough.
    box : array_like
        Box dimensions in MDAnalysis format or just [Lx, Ly, Lz].

    Returns
    -------
    NDArray
        The same ``positions`` array.

    Notes
    -----
    Axes with a zero translation are not touched at all, so atoms that sit
    slightly outside the box on those axes keep their coordinates.
    """
    lengths = box_lengths(box)
    translation = np.asarray(translation, dtype=np.float64)

    for dim in np.flatnonzero(translation != 0.0):
        length = lengths[dim]
        column = positions[:, dim]
        column += translation[dim]
        column[column < 0.0] += length
        column[column >= length] -= length

    return positions


def center_positions(
    positions: NDArray[np.floating],
    reference: NDArray[np.intp],
    box: ArrayLike,
    axes: "AxisMask | Sequence[bool]" = (True, True, True),
) -> NDArray[np.float64]:
    """Center one frame on a reference group.

    Computes the circular-mean center of ``positions[reference]``, plans the
    translation and applies it to every atom.

    Parameters
    ----------
    positions : NDArray
        Positions of all atoms, shape (N_atoms, 3). **Modified in-place.**
    reference : NDArray
        Indices of the reference atoms into ``positions``. Must be non-empty.
    box : array_like
        Box dimensions in MDAnalysis format or just [Lx, Ly, Lz].
    axes : AxisMask or sequence of bool, optional
        Axes to center along.

    Returns
    -------
    NDArray[np.float64]
        The translation that was applied.
    """
    center = compute_center(positions[reference], box, axes)
    translation = plan_translation(box, center, axes)
    translate_in_place(positions, translation, box)
    LOGGER.debug("Reference center %s, applied translation %s", center, translation)
    return translation
