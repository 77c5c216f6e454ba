"""Periodic box utilities shared by the centering core.

Only orthorhombic (rectangular) boxes are supported. Boxes are accepted in
MDAnalysis format, ``[Lx, Ly, Lz, alpha, beta, gamma]``, or as the three
edge lengths alone.

Supported Box Types
-------------------
- **Orthorhombic boxes** (cubic, rectangular): Fully supported
- **Triclinic boxes**: Not supported; a warning is logged once and only
  the edge lengths are used
"""

from __future__ import annotations

import logging
import warnings

import numpy as np
from numpy.typing import NDArray

from pbccenter.exceptions import InvalidBoxError

LOGGER = logging.getLogger(__name__)

# Track whether we've warned about triclinic boxes (warn once)
_TRICLINIC_WARNING_ISSUED = False


def is_orthorhombic(box: NDArray[np.floating] | None) -> bool:
    """Check if box is orthorhombic (all angles approximately 90°).

    Parameters
    ----------
    box : NDArray
        Box dimensions in MDAnalysis format: [Lx, Ly, Lz, alpha, beta, gamma]
        or just lengths [Lx, Ly, Lz].

    Returns
    -------
    bool
        True if box is orthorhombic (angles within 0.01° of 90°).
    """
    if box is None:
        return False

    # If only lengths provided, assume orthorhombic
    if len(box) == 3:
        return True

    if len(box) >= 6:
        alpha, beta, gamma = box[3:6]
        return all(abs(angle - 90.0) < 0.01 for angle in [alpha, beta, gamma])

    return False


def axis_flags(axes) -> NDArray[np.bool_]:
    """Convert an AxisMask or a sequence of three booleans to a bool array."""
    if hasattr(axes, "as_array"):
        return axes.as_array()
    flags = np.asarray(list(axes), dtype=bool)
    if flags.shape != (3,):
        raise ValueError(f"Axis mask must have three components, got {flags.shape}")
    return flags


def box_lengths(box: NDArray[np.floating] | None) -> NDArray[np.float64]:
    """Return the three edge lengths of a box, validating them.

    Parameters
    ----------
    box : NDArray
        Box dimensions in MDAnalysis format or just the three lengths.

    Returns
    -------
    NDArray[np.float64]
        Edge lengths ``[Lx, Ly, Lz]``.

    Raises
    ------
    InvalidBoxError
        If the box is missing, has fewer than three components or any
        edge length is not strictly positive and finite.
    """
    global _TRICLINIC_WARNING_ISSUED

    if box is None or len(box) < 3:
        raise InvalidBoxError(f"Simulation box is missing or incomplete: {box!r}")

    lengths = np.asarray(box[:3], dtype=np.float64)
    if not np.all(np.isfinite(lengths)) or np.any(lengths <= 0.0):
        raise InvalidBoxError(
            f"Simulation box edge lengths must be positive, got "
            f"({lengths[0]:.3f}, {lengths[1]:.3f}, {lengths[2]:.3f})"
        )

    if not is_orthorhombic(box) and not _TRICLINIC_WARNING_ISSUED:
        warnings.warn(
            "Triclinic box detected. Centering is only implemented for "
            "orthorhombic boxes; only the box edge lengths are used. "
            "This warning is shown once per session.",
            UserWarning,
            stacklevel=2,
        )
        LOGGER.warning(
            "Triclinic box detected (angles: %.1f, %.1f, %.1f). Using edge lengths only.",
            box[3] if len(box) > 3 else 90,
            box[4] if len(box) > 4 else 90,
            box[5] if len(box) > 5 else 90,
        )
        _TRICLINIC_WARNING_ISSUED = True

    return lengths


def reset_triclinic_warning() -> None:
    """Reset the triclinic warning flag.

    This is primarily useful for testing. In production, the warning
    should only be shown once per session.
    """
    global _TRICLINIC_WARNING_ISSUED
    _TRICLINIC_WARNING_ISSUED = False
