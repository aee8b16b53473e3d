"""
Molecular model holding the scalar fields (cubes) shown by the volume views.

Responsibilities:
- Owns the current version of every scalar field
- Replaces fields wholesale, never in place
- Emits a change notification tagged with a ChangeKind for UI synchronization
"""

import logging
from typing import List, Optional, Sequence, Tuple

import numpy as np
from PyQt5.QtCore import QObject, pyqtSignal

from core import ChangeKind, ScalarField

logger = logging.getLogger(__name__)


class MoleculeModel(QObject):
    """
    Atoms plus zero or more scalar fields sampled around them.
    """

    # Signals
    changed = pyqtSignal(object)  # ChangeKind

    def __init__(self, name: str = ""):
        super().__init__()
        self.name = name
        self.revision = 0
        self._cubes: List[ScalarField] = []
        self.atomic_numbers: np.ndarray = np.zeros(0, dtype=np.int32)
        self.positions: np.ndarray = np.zeros((0, 3), dtype=np.float64)

    # ==========================================
    # Scalar Fields
    # ==========================================

    def cube_count(self) -> int:
        return len(self._cubes)

    def cube(self, index: int = 0) -> Optional[ScalarField]:
        """Current version of field ``index``, or None if it does not exist."""
        if 0 <= index < len(self._cubes):
            return self._cubes[index]
        return None

    def cubes(self) -> Tuple[ScalarField, ...]:
        return tuple(self._cubes)

    def add_cube(self, field: ScalarField) -> int:
        """Append a field; returns its index."""
        if not isinstance(field, ScalarField):
            raise ValueError(f"Expected ScalarField, got {type(field).__name__}")
        self._cubes.append(field)
        logger.debug("Added cube %r %s", field.name, field.dimensions)
        self._notify(ChangeKind.FIELDS_ADDED)
        return len(self._cubes) - 1

    def remove_cube(self, index: int) -> ScalarField:
        if not 0 <= index < len(self._cubes):
            raise ValueError(f"No cube at index {index} (count={len(self._cubes)})")
        field = self._cubes.pop(index)
        self._notify(ChangeKind.FIELDS_REMOVED)
        return field

    def replace_cube(self, index: int, field: ScalarField) -> None:
        """Swap in a recomputed version of field ``index``."""
        if not 0 <= index < len(self._cubes):
            raise ValueError(f"No cube at index {index} (count={len(self._cubes)})")
        if not isinstance(field, ScalarField):
            raise ValueError(f"Expected ScalarField, got {type(field).__name__}")
        self._cubes[index] = field
        self._notify(ChangeKind.FIELDS_MODIFIED)

    def clear_cubes(self) -> None:
        if not self._cubes:
            return
        self._cubes = []
        self._notify(ChangeKind.FIELDS_REMOVED)

    def _notify(self, kind: ChangeKind) -> None:
        self.revision += 1
        self.changed.emit(kind)

    # ==========================================
    # Atoms
    # ==========================================

    def atom_count(self) -> int:
        return int(self.atomic_numbers.size)

    def set_atoms(self, atomic_numbers: Sequence[int], positions: Sequence[Sequence[float]]) -> None:
        numbers = np.asarray(atomic_numbers, dtype=np.int32).reshape(-1)
        coords = np.asarray(positions, dtype=np.float64).reshape(-1, 3)
        if numbers.size != coords.shape[0]:
            raise ValueError(
                f"Got {numbers.size} atomic numbers but {coords.shape[0]} positions"
            )
        self.atomic_numbers = numbers
        self.positions = coords
        self._notify(ChangeKind.ATOMS)

    def get_current_state_info(self) -> str:
        """Returns a status string describing what data is available."""
        return f"{self.name or 'Molecule'}: {self.atom_count()} atoms | {self.cube_count()} cubes"


__all__ = ["MoleculeModel"]
