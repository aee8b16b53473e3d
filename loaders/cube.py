"""
Gaussian cube file loader.

Cube files store samples with x slowest and z fastest, which is exactly the
native ScalarField layout, so values are read straight into the field.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Callable, List, Optional

import numpy as np

from config import BOHR_TO_ANGSTROM, CUBE_AXIS_TOLERANCE
from core import BaseLoader, ScalarField

logger = logging.getLogger(__name__)


@dataclass
class CubeFile:
    """Parsed contents of one cube file (lengths in Angstrom)."""
    title: str
    comment: str
    fields: List[ScalarField] = field(default_factory=list)
    atomic_numbers: np.ndarray = field(default_factory=lambda: np.zeros(0, dtype=np.int32))
    positions: np.ndarray = field(default_factory=lambda: np.zeros((0, 3)))
    orbital_indices: List[int] = field(default_factory=list)


class GaussianCubeLoader(BaseLoader):
    """Reads ``.cube`` files into scalar fields."""

    def load(self, source: str, callback: Optional[Callable[[int, str], None]] = None) -> CubeFile:
        """
        Parse a Gaussian cube file.

        Args:
            source: Path to the ``.cube`` file.
            callback: Optional progress callback (percent, message).

        Returns:
            CubeFile: one field per stored orbital (one field for plain densities).

        Raises:
            ValueError: On malformed headers, non-orthogonal axes or a short value block.
        """
        if not os.path.isfile(source):
            raise ValueError(f"Cube file not found: {source}")

        logger.info("Loading cube file %s", source)
        if callback:
            callback(0, "Reading cube header...")

        with open(source, encoding="utf-8") as fh:
            lines = fh.read().splitlines()
        cube = self.parse(lines, name=os.path.splitext(os.path.basename(source))[0])

        if callback:
            callback(100, "Cube loaded.")
        return cube

    def parse(self, lines: List[str], name: str = "") -> CubeFile:
        if len(lines) < 6:
            raise ValueError("Cube header is truncated")

        title, comment = lines[0].strip(), lines[1].strip()
        try:
            header = lines[2].split()
            natoms = int(header[0])
            origin = np.array([float(v) for v in header[1:4]])
            axes = [lines[3 + a].split() for a in range(3)]
            counts = [int(ax[0]) for ax in axes]
            vectors = np.array([[float(v) for v in ax[1:4]] for ax in axes])
        except (IndexError, ValueError) as exc:
            raise ValueError(f"Malformed cube header: {exc}") from exc

        # Positive counts mean Bohr, negative mean Angstrom.
        scale = BOHR_TO_ANGSTROM if counts[0] > 0 else 1.0
        dims = tuple(abs(c) for c in counts)
        spacing = self._axis_spacing(vectors) * scale
        origin = origin * scale

        n_atoms = abs(natoms)
        atom_lines = lines[6:6 + n_atoms]
        if len(atom_lines) != n_atoms:
            raise ValueError(f"Expected {n_atoms} atom lines, got {len(atom_lines)}")
        try:
            atom_rows = [ln.split() for ln in atom_lines]
            numbers = np.array([int(row[0]) for row in atom_rows], dtype=np.int32)
            positions = np.array([[float(v) for v in row[2:5]] for row in atom_rows]).reshape(-1, 3)
        except (IndexError, ValueError) as exc:
            raise ValueError(f"Malformed atom line: {exc}") from exc
        positions = positions * scale

        body_start = 6 + n_atoms
        orbitals: List[int] = []
        if natoms < 0:
            # Orbital cubes carry "count idx1 idx2 ..." before the values.
            tokens = lines[body_start].split()
            n_orbitals = int(tokens[0])
            body_start += 1
            orbitals = [int(t) for t in tokens[1:]]
            while len(orbitals) < n_orbitals:
                orbitals.extend(int(t) for t in lines[body_start].split())
                body_start += 1

        n_values = max(1, len(orbitals))
        values = np.array(" ".join(lines[body_start:]).split(), dtype=np.float64)
        expected = dims[0] * dims[1] * dims[2] * n_values
        if values.size < expected:
            raise ValueError(f"Expected {expected} cube values, got {values.size}")
        if values.size > expected:
            logger.warning("Ignoring %d trailing values in cube", values.size - expected)
            values = values[:expected]

        fields = []
        per_point = values.reshape(-1, n_values)
        for m in range(n_values):
            label = f"{name} MO {orbitals[m]}" if orbitals else name
            fields.append(ScalarField(
                dimensions=dims,
                origin=tuple(origin),
                spacing=tuple(spacing),
                values=per_point[:, m].astype(np.float32),
                name=label,
            ))

        logger.info("Parsed cube %r: dims=%s, %d field(s), %d atoms",
                    name, dims, len(fields), n_atoms)
        return CubeFile(
            title=title,
            comment=comment,
            fields=fields,
            atomic_numbers=numbers,
            positions=positions,
            orbital_indices=orbitals,
        )

    @staticmethod
    def _axis_spacing(vectors: np.ndarray) -> np.ndarray:
        diagonal = np.abs(np.diag(vectors))
        off_diagonal = np.abs(vectors - np.diag(np.diag(vectors)))
        if np.any(off_diagonal > CUBE_AXIS_TOLERANCE * max(1.0, float(diagonal.max(initial=0.0)))):
            raise ValueError("Non-orthogonal cube axes are not supported")
        return np.diag(vectors).astype(np.float64)


def load_cube_into(model, path: str, callback: Optional[Callable[[int, str], None]] = None) -> CubeFile:
    """Load ``path`` and append its atoms and fields to ``model``."""
    cube = GaussianCubeLoader().load(path, callback=callback)
    if cube.atomic_numbers.size:
        model.set_atoms(cube.atomic_numbers, cube.positions)
    for scalar_field in cube.fields:
        model.add_cube(scalar_field)
    return cube


__all__ = ["CubeFile", "GaussianCubeLoader", "load_cube_into"]
