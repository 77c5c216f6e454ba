"""Periodic-aware centering core: center, translation and wrapping."""

from pbccenter.core.centroid import arithmetic_center, compute_center
from pbccenter.core.pbc import axis_flags, box_lengths, is_orthorhombic
from pbccenter.core.translation import center_positions, plan_translation, translate_in_place

__all__ = [
    # centroid.py
    "compute_center",
    "arithmetic_center",
    # translation.py
    "plan_translation",
    "translate_in_place",
    "center_positions",
    # pbc.py
    "axis_flags",
    "box_lengths",
    "is_orthorhombic",
]
