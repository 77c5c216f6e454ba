"""Shared fixtures: small GRO/XTC/NDX systems written on the fly."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Sequence, Tuple

import numpy as np
import pytest

# Box edge in nm (GRO units); MDAnalysis reports 10x this in Angstrom
BOX_NM = 5.0
BOX_A = BOX_NM * 10.0

AtomRecord = Tuple[int, str, str, float, float, float]


def write_gro(
    path: Path,
    atoms: Sequence[AtomRecord],
    box: Sequence[float] = (BOX_NM, BOX_NM, BOX_NM),
    title: str = "test system",
) -> Path:
    """Write a GRO file from (resid, resname, atomname, x, y, z) records in nm."""
    lines = [title, f"{len(atoms):5d}"]
    for i, (resid, resname, name, x, y, z) in enumerate(atoms, start=1):
        lines.append(f"{resid:5d}{resname:<5s}{name:>5s}{i:5d}{x:8.3f}{y:8.3f}{z:8.3f}")
    lines.append(f"{box[0]:10.5f}{box[1]:10.5f}{box[2]:10.5f}")
    path.write_text("\n".join(lines) + "\n")
    return path


def protein_water_atoms() -> List[AtomRecord]:
    """Two ALA residues split across the x = 0 boundary plus three waters."""
    return [
        # ALA 1 near x = 0
        (1, "ALA", "N", 0.10, 2.40, 2.50),
        (1, "ALA", "CA", 0.20, 2.50, 2.50),
        (1, "ALA", "C", 0.30, 2.60, 2.50),
        (1, "ALA", "O", 0.30, 2.70, 2.50),
        # ALA 2 near x = L
        (2, "ALA", "N", 4.90, 2.40, 2.50),
        (2, "ALA", "CA", 4.80, 2.50, 2.50),
        (2, "ALA", "C", 4.70, 2.60, 2.50),
        (2, "ALA", "O", 4.70, 2.70, 2.50),
        # water
        (3, "SOL", "OW", 2.50, 1.00, 1.00),
        (3, "SOL", "HW1", 2.55, 1.05, 1.00),
        (3, "SOL", "HW2", 2.45, 1.05, 1.00),
        (4, "SOL", "OW", 1.00, 4.00, 3.00),
        (4, "SOL", "HW1", 1.05, 4.05, 3.00),
        (4, "SOL", "HW2", 0.95, 4.05, 3.00),
        (5, "SOL", "OW", 3.50, 3.50, 0.50),
        (5, "SOL", "HW1", 3.55, 3.55, 0.50),
        (5, "SOL", "HW2", 3.45, 3.55, 0.50),
    ]


def write_xtc(
    path: Path,
    structure: Path,
    shifts: Iterable[Sequence[float]],
    dt: float = 10.0,
) -> Path:
    """Write an XTC whose frame i is the structure translated by shifts[i] (Angstrom)."""
    import MDAnalysis as mda

    u = mda.Universe(str(structure))
    base = u.atoms.positions.copy()
    dims = u.dimensions.copy()
    with mda.Writer(str(path), n_atoms=u.atoms.n_atoms) as writer:
        for i, shift in enumerate(shifts):
            positions = (base + np.asarray(shift, dtype=np.float32)) % dims[:3]
            u.atoms.positions = positions
            u.dimensions = dims
            u.trajectory.ts.time = i * dt
            writer.write(u.atoms)
    return path


def truncate_last_frame(path: Path, n_frames: int) -> Path:
    """Cut roughly half of the last frame off a trajectory file."""
    data = path.read_bytes()
    frame_size = len(data) // n_frames
    path.write_bytes(data[: len(data) - frame_size // 2])
    return path


@pytest.fixture
def structure_file(tmp_path: Path) -> Path:
    return write_gro(tmp_path / "system.gro", protein_water_atoms())


@pytest.fixture
def index_file(tmp_path: Path) -> Path:
    path = tmp_path / "index.ndx"
    path.write_text(
        "[ Protein ]\n1 2 3 4 5 6 7 8\n"
        "[ Ligand ]\n9 10 11\n"
        "[ FirstResidue ]\n1 2 3 4\n"
    )
    return path


@pytest.fixture
def trajectory_file(tmp_path: Path, structure_file: Path) -> Path:
    shifts = [(0.0, 2.0 * i, 0.0) for i in range(7)]
    return write_xtc(tmp_path / "md.xtc", structure_file, shifts)
