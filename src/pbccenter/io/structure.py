"""Structure loading.

Loads a structure file into an MDAnalysis Universe. The Universe owns the
single positions buffer (``universe.trajectory.ts.positions``) that the
centering pipeline mutates in place.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Union

from pbccenter.core.pbc import box_lengths
from pbccenter.exceptions import StructureReadError

if TYPE_CHECKING:
    from MDAnalysis.core.universe import Universe

LOGGER = logging.getLogger(__name__)


def load_structure(path: Union[str, Path]) -> "Universe":
    """Load a structure file.

    Parameters
    ----------
    path : str or Path
        Structure file in any format MDAnalysis reads (GRO, PDB, ...).

    Returns
    -------
    Universe
        Universe whose current frame holds the structure coordinates.

    Raises
    ------
    StructureReadError
        If the file does not exist or cannot be parsed.
    InvalidBoxError
        If the structure has no box or a non-positive box edge.
    """
    import MDAnalysis as mda

    path = Path(path)
    if not path.is_file():
        raise StructureReadError(f"Structure file not found: {path}")

    try:
        universe = mda.Universe(str(path))
    except (OSError, ValueError, TypeError, IndexError, EOFError) as e:
        raise StructureReadError(f"Could not read structure file {path}: {e}") from e

    if universe.atoms.n_atoms == 0:
        raise StructureReadError(f"Structure file {path} contains no atoms")

    box_lengths(universe.dimensions)

    LOGGER.info(f"Loaded structure {path}: {universe.atoms.n_atoms} atoms")
    return universe
