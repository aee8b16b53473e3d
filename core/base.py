"""
Core data structures and abstract base classes.
"""

import numpy as np
import pyvista as pv
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, List, Optional, Sequence, Tuple


def _as_triplet(name: str, values: Sequence[float], cast=float) -> Tuple[Any, Any, Any]:
    items = tuple(values)
    if len(items) != 3:
        raise ValueError(f"{name} must have 3 components, got {len(items)}")
    return tuple(cast(v) for v in items)


def _frozen_values(values, expected: int, owner: str) -> np.ndarray:
    array = np.array(values, copy=True).reshape(-1)
    if array.size != expected:
        raise ValueError(
            f"{owner} expects {expected} values for its dimensions, got {array.size}"
        )
    array.flags.writeable = False
    return array


def _check_dimensions(dimensions: Sequence[int]) -> Tuple[int, int, int]:
    dims = _as_triplet("dimensions", dimensions, int)
    if any(d < 0 for d in dims):
        raise ValueError(f"dimensions must be non-negative, got {dims}")
    return dims


@dataclass(frozen=True, eq=False)
class ScalarField:
    """
    One version of a 3D scalar grid (a "cube") attached to a molecular model.

    Attributes:
        dimensions (Tuple[int, int, int]): Sample counts (nx, ny, nz).
        origin (Tuple[float, float, float]): World position of sample (0, 0, 0).
        spacing (Tuple[float, float, float]): Distance between samples per axis.
        values (np.ndarray): Flat samples, native index ``(i*ny + j)*nz + k``.
        name (str): Optional label (e.g. cube file title).

    The value buffer is copied on construction and flagged read-only; a
    recomputed field is always a new instance.
    """
    dimensions: Tuple[int, int, int]
    origin: Tuple[float, float, float] = (0.0, 0.0, 0.0)
    spacing: Tuple[float, float, float] = (1.0, 1.0, 1.0)
    values: np.ndarray = field(default_factory=lambda: np.zeros(0, dtype=np.float32))
    name: str = ""

    def __post_init__(self):
        dims = _check_dimensions(self.dimensions)
        object.__setattr__(self, "dimensions", dims)
        object.__setattr__(self, "origin", _as_triplet("origin", self.origin))
        object.__setattr__(self, "spacing", _as_triplet("spacing", self.spacing))
        object.__setattr__(
            self, "values", _frozen_values(self.values, dims[0] * dims[1] * dims[2], "ScalarField")
        )

    @classmethod
    def from_array(cls, array: np.ndarray,
                   origin: Tuple[float, float, float] = (0.0, 0.0, 0.0),
                   spacing: Tuple[float, float, float] = (1.0, 1.0, 1.0),
                   name: str = "") -> "ScalarField":
        """Build a field from a 3D array indexed ``[i, j, k]`` (x, y, z)."""
        arr = np.asarray(array)
        if arr.ndim != 3:
            raise ValueError(f"Expected 3D array, got shape={arr.shape}")
        return cls(dimensions=arr.shape, origin=origin, spacing=spacing,
                   values=np.ascontiguousarray(arr).reshape(-1), name=name)

    @property
    def size(self) -> int:
        return int(self.values.size)

    @property
    def is_empty(self) -> bool:
        return self.size == 0

    def native_index(self, i: int, j: int, k: int) -> int:
        _, ny, nz = self.dimensions
        return (i * ny + j) * nz + k

    def value_at(self, i: int, j: int, k: int):
        return self.values[self.native_index(i, j, k)]

    def world_position(self, i: int, j: int, k: int) -> Tuple[float, float, float]:
        ox, oy, oz = self.origin
        sx, sy, sz = self.spacing
        return (ox + i * sx, oy + j * sy, oz + k * sz)

    def value_range(self) -> Tuple[float, float]:
        """Min/max of finite samples, ``(0.0, 0.0)`` when there are none."""
        return _finite_range(self.values)

    def as_array(self) -> np.ndarray:
        """Read-only (nx, ny, nz) view of the samples."""
        return self.values.reshape(self.dimensions)


@dataclass(frozen=True, eq=False)
class VolumeImage:
    """
    A scalar field re-laid out for the renderer (x fastest, z slowest).

    Sample (i, j, k) lives at flat index ``(k*ny + j)*nx + i``, which is
    VTK's point ordering for ``vtkImageData``. Origin and spacing are the
    source field's, unchanged.
    """
    dimensions: Tuple[int, int, int]
    origin: Tuple[float, float, float] = (0.0, 0.0, 0.0)
    spacing: Tuple[float, float, float] = (1.0, 1.0, 1.0)
    values: np.ndarray = field(default_factory=lambda: np.zeros(0, dtype=np.float32))

    def __post_init__(self):
        dims = _check_dimensions(self.dimensions)
        object.__setattr__(self, "dimensions", dims)
        object.__setattr__(self, "origin", _as_triplet("origin", self.origin))
        object.__setattr__(self, "spacing", _as_triplet("spacing", self.spacing))
        object.__setattr__(
            self, "values", _frozen_values(self.values, dims[0] * dims[1] * dims[2], "VolumeImage")
        )

    @property
    def size(self) -> int:
        return int(self.values.size)

    @property
    def is_empty(self) -> bool:
        return self.size == 0

    def renderer_index(self, i: int, j: int, k: int) -> int:
        nx, ny, _ = self.dimensions
        return (k * ny + j) * nx + i

    def value_at(self, i: int, j: int, k: int):
        return self.values[self.renderer_index(i, j, k)]

    def value_range(self) -> Tuple[float, float]:
        return _finite_range(self.values)

    def to_pyvista(self, array_name: str = "values") -> pv.ImageData:
        """Wrap the samples as point data of a ``pv.ImageData``."""
        grid = pv.ImageData()
        grid.dimensions = self.dimensions
        grid.origin = self.origin
        grid.spacing = self.spacing
        if not self.is_empty:
            grid.point_data[array_name] = self.values.copy()
        return grid


@dataclass(frozen=True, eq=False)
class Histogram:
    """
    Binned population table of scalar samples.

    Attributes:
        values (np.ndarray): Bin centers, strictly ascending.
        populations (np.ndarray): Sample count per bin.
        edges (np.ndarray): Bin edges, ``len(values) + 1`` entries (empty when no bins).
        excluded (int): Non-finite samples left out of every bin.
    """
    values: np.ndarray
    populations: np.ndarray
    edges: np.ndarray
    excluded: int = 0

    @staticmethod
    def empty(excluded: int = 0) -> "Histogram":
        return Histogram(
            values=np.zeros(0, dtype=np.float64),
            populations=np.zeros(0, dtype=np.int64),
            edges=np.zeros(0, dtype=np.float64),
            excluded=excluded,
        )

    def __len__(self) -> int:
        return int(self.values.size)

    @property
    def is_empty(self) -> bool:
        return len(self) == 0

    @property
    def total(self) -> int:
        return int(self.populations.sum())

    @property
    def peak(self) -> int:
        return int(self.populations.max()) if len(self) else 0

    @property
    def value_range(self) -> Tuple[float, float]:
        """Span covered by the bins (outer edges)."""
        if self.is_empty:
            return (0.0, 0.0)
        return (float(self.edges[0]), float(self.edges[-1]))

    def pairs(self) -> List[Tuple[float, int]]:
        return [(float(v), int(p)) for v, p in zip(self.values, self.populations)]


class ChangeKind(Enum):
    """Category carried by a model change notification."""
    ATOMS = "atoms"
    BONDS = "bonds"
    FIELDS_ADDED = "fields_added"
    FIELDS_REMOVED = "fields_removed"
    FIELDS_MODIFIED = "fields_modified"

    @property
    def affects_field_count(self) -> bool:
        return self in (ChangeKind.FIELDS_ADDED, ChangeKind.FIELDS_REMOVED)

    @property
    def affects_fields(self) -> bool:
        return self in (ChangeKind.FIELDS_ADDED, ChangeKind.FIELDS_REMOVED,
                        ChangeKind.FIELDS_MODIFIED)


def _finite_range(values: np.ndarray) -> Tuple[float, float]:
    finite = values[np.isfinite(values)] if values.size else values
    if finite.size == 0:
        return (0.0, 0.0)
    return (float(finite.min()), float(finite.max()))


class BaseLoader(ABC):
    """Abstract base class for scalar field sources."""

    @abstractmethod
    def load(self, source, callback: Optional[Callable[[int, str], None]] = None):
        """
        Load data from a source.

        Args:
            source: Path to file, or generator parameters.
            callback: Optional progress callback (percent, message).
        """
        pass
