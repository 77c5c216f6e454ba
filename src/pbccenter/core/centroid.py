"""Periodic-aware center of geometry.

The arithmetic mean of coordinates fails when a group of atoms straddles a
periodic boundary: points clustered near both 0 and L average to about L/2,
exactly the wrong side of the box. Here every periodic axis is treated as a
circle instead. Each coordinate is mapped to an angle, the unit vectors are
averaged and the mean angle is mapped back to a coordinate (circular mean).

Mathematical Background
=======================

For coordinates p_i along an axis of length L::

    theta_i = 2 * pi * p_i / L
    S = mean(sin(theta_i)),  C = mean(cos(theta_i))
    center  = atan2(S, C) / (2 * pi) * L      (shifted into [0, L))

The result does not depend on which periodic image each p_i is stored in,
so coordinates need not be wrapped into [0, L) beforehand.

Degenerate Case
---------------
If the points are spread uniformly around the circle, S and C are both
close to zero and the direction of the mean is arbitrary. The returned
center is then finite but unspecified; no error is raised.

References
----------
- Bai & Breen, "Calculating Center of Mass in an Unbounded 2D Environment",
  Journal of Graphics Tools 13 (2008)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Sequence

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pbccenter.core.pbc import axis_flags, box_lengths

if TYPE_CHECKING:
    from pbccenter.config import AxisMask

LOGGER = logging.getLogger(__name__)

# Mean resultant length below which an axis is reported as degenerate
_DEGENERATE_RESULTANT = 1e-6

# Relative distance from L below which a center is folded back to 0
_SEAM_TOLERANCE = 1e-12


def arithmetic_center(positions: ArrayLike) -> NDArray[np.float64]:
    """Plain (unweighted) center of geometry, ignoring periodicity.

    Parameters
    ----------
    positions : array_like
        Positions of shape (N, 3).

    Returns
    -------
    NDArray[np.float64]
        Mean position of shape (3,).
    """
    positions = np.asarray(positions, dtype=np.float64)
    if len(positions) == 0:
        raise ValueError("Cannot compute the center of an empty set of positions")
    return positions.mean(axis=0)


def compute_center(
    positions: ArrayLike,
    box: ArrayLike,
    axes: "AxisMask | Sequence[bool]" = (True, True, True),
) -> NDArray[np.float64]:
    """Compute the circular-mean center of a set of positions.

    Parameters
    ----------
    positions : array_like
        Positions of shape (N, 3) in the same units as ``box``. Coordinates
        may lie outside [0, L); only their value modulo L matters.
    box : array_like
        Box dimensions in MDAnalysis format [Lx, Ly, Lz, alpha, beta, gamma]
        or just [Lx, Ly, Lz].
    axes : AxisMask or sequence of bool, optional
        Axes for which the center is computed. Default is all three.

    Returns
    -------
    NDArray[np.float64]
        Center of shape (3,). Components on enabled axes lie in [0, L);
        components on disabled axes are 0.0 and carry no meaning.

    Raises
    ------
    ValueError
        If ``positions`` is empty.
    InvalidBoxError
        If the box has a non-positive edge length.

    Examples
    --------
    >>> box = np.array([10.0, 10.0, 10.0])
    >>> center = compute_center([[1.0, 5.0, 5.0], [9.0, 5.0, 5.0]], box)
    >>> np.round(center, 6) % 10.0  # not 5.0 on x: the pair straddles x = 0
    array([0., 5., 5.])
    """
    positions = np.asarray(positions, dtype=np.float64)
    if positions.ndim != 2 or positions.shape[1] != 3:
        raise ValueError(f"Positions must have shape (N, 3), got {positions.shape}")
    if len(positions) == 0:
        raise ValueError("Cannot compute the center of an empty set of positions")

    lengths = box_lengths(box)
    flags = axis_flags(axes)
    center = np.zeros(3, dtype=np.float64)

    for dim in np.flatnonzero(flags):
        length = lengths[dim]
        theta = positions[:, dim] * (2.0 * np.pi / length)
        mean_sin = np.sin(theta).mean()
        mean_cos = np.cos(theta).mean()

        if np.hypot(mean_sin, mean_cos) < _DEGENERATE_RESULTANT:
            LOGGER.debug(
                "Positions are spread uniformly along axis %d; circular mean is arbitrary",
                dim,
            )

        value = np.arctan2(mean_sin, mean_cos) / (2.0 * np.pi) * length
        if value < 0.0:
            value += length
        # a tiny negative angle folds to (or within rounding of) L; that is the seam at 0
        if length - value <= _SEAM_TOLERANCE * length:
            value = 0.0
        center[dim] = value

    return center
