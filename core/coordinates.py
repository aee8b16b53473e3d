"""
Index conversion helpers between the cube layout and the renderer layout.

Convention:
- Cube (native) samples are flat with x slowest and z fastest:
  ``(i*ny + j)*nz + k``
- Renderer (VTK point) samples are flat with x fastest and z slowest:
  ``(k*ny + j)*nx + i``
- Dimensions, origin and spacing tuples are stored as (x, y, z)
"""

from __future__ import annotations

from typing import Tuple
import numpy as np

from core.base import ScalarField, VolumeImage


def native_index(ijk: Tuple[int, int, int], dimensions: Tuple[int, int, int]) -> int:
    """Flat cube index of sample (i, j, k)."""
    i, j, k = ijk
    _, ny, nz = dimensions
    return (i * ny + j) * nz + k


def renderer_index(ijk: Tuple[int, int, int], dimensions: Tuple[int, int, int]) -> int:
    """Flat renderer index of sample (i, j, k)."""
    i, j, k = ijk
    nx, ny, _ = dimensions
    return (k * ny + j) * nx + i


def native_to_renderer_order(values: np.ndarray, dimensions: Tuple[int, int, int]) -> np.ndarray:
    """
    Reorder flat cube samples into renderer order.

    Every sample moves from ``(i*ny + j)*nz + k`` to ``(k*ny + j)*nx + i``.
    The dtype is preserved; the result is a new C-contiguous buffer.
    """
    nx, ny, nz = dimensions
    flat = np.asarray(values).reshape(-1)
    if flat.size != nx * ny * nz:
        raise ValueError(f"Expected {nx * ny * nz} samples for {dimensions}, got {flat.size}")
    if flat.size == 0:
        return flat.copy()
    grid_xyz = flat.reshape(nx, ny, nz)
    return np.ascontiguousarray(np.transpose(grid_xyz, (2, 1, 0))).reshape(-1)


def renderer_to_native_order(values: np.ndarray, dimensions: Tuple[int, int, int]) -> np.ndarray:
    """Inverse of :func:`native_to_renderer_order`."""
    nx, ny, nz = dimensions
    flat = np.asarray(values).reshape(-1)
    if flat.size != nx * ny * nz:
        raise ValueError(f"Expected {nx * ny * nz} samples for {dimensions}, got {flat.size}")
    if flat.size == 0:
        return flat.copy()
    grid_zyx = flat.reshape(nz, ny, nx)
    return np.ascontiguousarray(np.transpose(grid_zyx, (2, 1, 0))).reshape(-1)


def field_to_volume_image(field: ScalarField) -> VolumeImage:
    """
    Convert a scalar field into the layout consumed by the renderer.

    World framing is untouched: the sample at (i, j, k) stays at
    ``origin + (i*sx, j*sy, k*sz)``; only the traversal order changes.
    A field with a zero dimension yields an empty image.
    """
    return VolumeImage(
        dimensions=field.dimensions,
        origin=field.origin,
        spacing=field.spacing,
        values=native_to_renderer_order(field.values, field.dimensions),
    )


def volume_image_to_field(image: VolumeImage, name: str = "") -> ScalarField:
    """Rebuild a cube-layout field from a renderer image."""
    return ScalarField(
        dimensions=image.dimensions,
        origin=image.origin,
        spacing=image.spacing,
        values=renderer_to_native_order(image.values, image.dimensions),
        name=name,
    )


def world_to_index(
    world_xyz: Tuple[float, float, float],
    spacing_xyz: Tuple[float, float, float],
    origin_xyz: Tuple[float, float, float],
) -> Tuple[int, int, int]:
    """
    Convert world coordinates (x, y, z) to the nearest sample index (i, j, k).
    """
    sx, sy, sz = spacing_xyz
    if abs(sx) < 1e-12 or abs(sy) < 1e-12 or abs(sz) < 1e-12:
        raise ValueError("Spacing components must be non-zero.")
    ox, oy, oz = origin_xyz
    xw, yw, zw = world_xyz
    return (
        int(np.rint((xw - ox) / sx)),
        int(np.rint((yw - oy) / sy)),
        int(np.rint((zw - oz) / sz)),
    )


__all__ = [
    "native_index",
    "renderer_index",
    "native_to_renderer_order",
    "renderer_to_native_order",
    "field_to_volume_image",
    "volume_image_to_field",
    "world_to_index",
]
