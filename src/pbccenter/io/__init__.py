"""Structure, index-group, selection and trajectory I/O."""

from pbccenter.io.index import parse_ndx, read_ndx, write_ndx
from pbccenter.io.selection import DEFAULT_GROUPS, resolve_selection
from pbccenter.io.structure import load_structure
from pbccenter.io.trajectory import (
    atom_count,
    atom_count_matches,
    attach_trajectory,
    check_stream_complete,
    open_writer,
    write_frame,
    write_structure,
)

__all__ = [
    "load_structure",
    "parse_ndx",
    "read_ndx",
    "write_ndx",
    "DEFAULT_GROUPS",
    "resolve_selection",
    "atom_count",
    "atom_count_matches",
    "check_stream_complete",
    "attach_trajectory",
    "open_writer",
    "write_frame",
    "write_structure",
]
