"""GROMACS index (.ndx) files.

An index file is a list of named atom groups::

    [ Protein ]
       1    2    3    4    5
    [ SOL ]
       6    7    8

Atom numbers in the file are 1-based; groups returned here hold sorted,
unique 0-based indices.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import TYPE_CHECKING, Dict, Mapping, Optional, Union

import numpy as np
from numpy.typing import NDArray

from pbccenter.exceptions import IndexReadError

if TYPE_CHECKING:
    from MDAnalysis.core.universe import Universe

LOGGER = logging.getLogger(__name__)

_HEADER = re.compile(r"^\s*\[\s*(.+?)\s*\]\s*$")


def parse_ndx(text: str, n_atoms: Optional[int] = None) -> Dict[str, NDArray[np.intp]]:
    """Parse the contents of an index file.

    Parameters
    ----------
    text : str
        Contents of an ndx file.
    n_atoms : int, optional
        Number of atoms in the system. Indices beyond it are dropped with a
        warning.

    Returns
    -------
    dict[str, NDArray]
        Group name to sorted unique 0-based atom indices, in file order.
        When a name occurs twice, the first group wins.

    Raises
    ------
    IndexReadError
        If atom numbers appear before any group header or are not integers.
    """
    raw: Dict[str, list] = {}
    current: Optional[list] = None

    for lineno, line in enumerate(text.splitlines(), start=1):
        stripped = line.split(";", 1)[0].strip()
        if not stripped:
            continue

        header = _HEADER.match(stripped)
        if header:
            name = header.group(1)
            if name in raw:
                LOGGER.warning(f"Index group '{name}' defined more than once; using the first")
                current = []
            else:
                current = raw.setdefault(name, [])
            continue

        if current is None:
            raise IndexReadError(f"Line {lineno}: atom numbers before any [ group ] header")

        try:
            current.extend(int(token) for token in stripped.split())
        except ValueError as e:
            raise IndexReadError(f"Line {lineno}: {e}") from e

    groups: Dict[str, NDArray[np.intp]] = {}
    for name, numbers in raw.items():
        indices = np.unique(np.asarray(numbers, dtype=np.intp)) - 1
        valid = indices >= 0
        if n_atoms is not None:
            valid &= indices < n_atoms
        if not np.all(valid):
            LOGGER.warning(
                f"Index group '{name}': ignoring {int(np.sum(~valid))} atom number(s) "
                "outside the system"
            )
            indices = indices[valid]
        groups[name] = indices

    return groups


def read_ndx(
    path: Union[str, Path],
    n_atoms: Optional[int] = None,
) -> Dict[str, NDArray[np.intp]]:
    """Read index groups from a file.

    A missing or unreadable index file is not an error: a warning is logged
    and an empty mapping is returned so the run can continue with built-in
    selections.

    Parameters
    ----------
    path : str or Path
        Path to the ndx file.
    n_atoms : int, optional
        Number of atoms in the system, used to drop invalid indices.

    Returns
    -------
    dict[str, NDArray]
        Group name to 0-based atom indices.
    """
    path = Path(path)
    try:
        groups = parse_ndx(path.read_text(), n_atoms=n_atoms)
    except (OSError, UnicodeDecodeError, IndexReadError) as e:
        LOGGER.warning(f"Index file {path} could not be read ({e}); continuing without groups")
        return {}

    LOGGER.info(f"Read {len(groups)} index group(s) from {path}")
    return groups


def write_ndx(
    path: Union[str, Path],
    universe: "Universe",
    groups: Mapping[str, NDArray[np.integer]],
) -> Path:
    """Write index groups of a Universe in GROMACS format.

    Uses the MDAnalysis GROMACS selection writer, which writes 1-based atom
    numbers. The file always gets the ``.ndx`` extension.

    Parameters
    ----------
    path : str or Path
        Output file.
    universe : Universe
        Universe the 0-based indices refer to.
    groups : mapping
        Group name to 0-based atom indices.

    Returns
    -------
    Path
        Path of the written file.
    """
    from MDAnalysis.selections.gromacs import SelectionWriter

    with SelectionWriter(str(path), mode="w") as writer:
        for name, indices in groups.items():
            writer.write(universe.atoms[np.asarray(indices, dtype=np.intp)], name=name)
        written = Path(writer.filename)
    return written
