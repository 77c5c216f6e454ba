"""Reference selection resolution.

A reference query is resolved in this order:

1. An index group with exactly that name (from the ndx file).
2. A GROMACS default group name such as ``Protein`` or ``C-alpha``,
   translated to the equivalent MDAnalysis selection.
3. An MDAnalysis selection string. Every index group is available inside
   it as ``group <name>``, e.g. ``group Membrane and name P``.

The result is always a sorted array of unique atom indices into the
Universe, never a copy of the atoms themselves.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Dict, Mapping, Optional

import numpy as np
from numpy.typing import NDArray

from pbccenter.exceptions import SelectionError

if TYPE_CHECKING:
    from MDAnalysis.core.universe import Universe

LOGGER = logging.getLogger(__name__)

# select_atoms keyword arguments that cannot double as group names
_RESERVED_KWARGS = {
    "sel",
    "periodic",
    "rtol",
    "atol",
    "updating",
    "sorted",
    "rdkit_kwargs",
    "smarts_kwargs",
}

_WATER = "resname SOL WAT HOH TIP3 TIP3P TIP4P SPC"
_IONS = "resname NA CL K CA MG ZN NA+ CL- K+ SOD CLA POT"

# GROMACS default group names mapped to MDAnalysis selections
DEFAULT_GROUPS: Dict[str, str] = {
    "System": "all",
    "Protein": "protein",
    "Protein-H": "protein and not name H*",
    "C-alpha": "protein and name CA",
    "Backbone": "backbone",
    "MainChain": "protein and name N CA C O",
    "non-Protein": "not protein",
    "Water": _WATER,
    "SOL": "resname SOL",
    "non-Water": f"not ({_WATER})",
    "Ion": _IONS,
    "Water_and_ions": f"({_WATER}) or ({_IONS})",
}


def resolve_selection(
    universe: "Universe",
    query: str,
    groups: Optional[Mapping[str, NDArray[np.intp]]] = None,
) -> NDArray[np.intp]:
    """Resolve a reference query to atom indices.

    Parameters
    ----------
    universe : Universe
        Universe holding the system.
    query : str
        Index group name, GROMACS default group name or MDAnalysis selection.
    groups : mapping, optional
        Index groups (name to 0-based indices), usually from
        :func:`pbccenter.io.index.read_ndx`.

    Returns
    -------
    NDArray[np.intp]
        Sorted unique atom indices.

    Raises
    ------
    SelectionError
        If the query is invalid or matches no atoms.
    """
    from MDAnalysis.exceptions import SelectionError as MDASelectionError

    groups = groups or {}
    query = query.strip()
    if not query:
        raise SelectionError("Reference selection is empty")

    if query in groups:
        indices = np.unique(np.asarray(groups[query], dtype=np.intp))
        source = f"index group '{query}'"
    else:
        if query in DEFAULT_GROUPS:
            selection = DEFAULT_GROUPS[query]
            source = f"default group '{query}' ({selection})"
        else:
            selection = query
            source = f"selection '{query}'"

        named = {
            name: universe.atoms[np.asarray(idx, dtype=np.intp)]
            for name, idx in groups.items()
            if name not in _RESERVED_KWARGS
        }
        try:
            atoms = universe.select_atoms(selection, **named)
        except (MDASelectionError, ValueError, KeyError, TypeError) as e:
            diag = get_selection_diagnostics(universe, query, groups)
            raise SelectionError(f"Invalid reference selection '{query}': {e}\n\n{diag}") from e
        indices = np.unique(atoms.indices.astype(np.intp))

    if len(indices) == 0:
        diag = get_selection_diagnostics(universe, query, groups)
        raise SelectionError(f"No reference atoms ('{query}') found.\n\n{diag}")

    LOGGER.info(f"Reference {source}: {len(indices)} atoms")
    return indices


def get_selection_diagnostics(
    universe: "Universe",
    query: str,
    groups: Optional[Mapping[str, NDArray[np.intp]]] = None,
) -> str:
    """Generate diagnostic hints for a reference query that matched nothing.

    Examples
    --------
    >>> print(get_selection_diagnostics(u, "Protien", {"SOL": ...}))
    Diagnostic info:
      - Available index groups: SOL
      - Possible typo: 'protien' - did you mean 'protein'?
    """
    lines = []
    groups = groups or {}

    if groups:
        lines.append(f"Available index groups: {', '.join(groups)}")
    else:
        lines.append("No index groups loaded (check the -n index file)")

    close = [name for name in groups if name.lower() == query.lower() and name != query]
    if close:
        lines.append(f"Index group names are case-sensitive; did you mean '{close[0]}'?")

    protein = universe.select_atoms("protein")
    if len(protein) == 0 and re.search(r"protein", query, re.IGNORECASE):
        lines.append("The structure contains no residues recognized as protein")

    resnames = sorted(set(universe.atoms.resnames))
    shown = ", ".join(resnames[:10])
    if len(resnames) > 10:
        shown += f", ... ({len(resnames)} total)"
    lines.append(f"Residue names in structure: {shown}")

    query_lower = query.lower()
    for keyword, typos in _COMMON_TYPOS.items():
        if keyword in query_lower:
            continue
        for typo in typos:
            if typo in query_lower:
                lines.append(f"Possible typo: '{typo}' - did you mean '{keyword}'?")
                break

    return "Diagnostic info:\n  - " + "\n  - ".join(lines)


_COMMON_TYPOS = {
    "protein": ["protien", "protine", "prtein", "protin"],
    "backbone": ["backbon", "backboen", "bakcbone"],
    "resid": ["resdi", "redid", "ressid"],
    "resname": ["resnam", "resnme", "resanme"],
    "name": ["nmae", "naem"],
}
