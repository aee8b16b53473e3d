"""
Color and opacity transfer functions for volume rendering.

A render surface owns one ``TransferFunction``; the editor dialog edits the
same instance in place. Every edit bumps ``revision`` so the surface can tell
when its VTK functions need rebuilding.
"""

from __future__ import annotations

from typing import Callable, List, Optional, Sequence, Tuple

import numpy as np

from config import (
    COLOR_RAMP_SAMPLES,
    DEFAULT_COLORMAP,
    DEFAULT_OPACITY,
    OPACITY_PRESET_SAMPLES,
    OPACITY_PRESETS,
)

RGB = Tuple[float, float, float]

_COLORMAP_CACHE = {}


def get_cached_colormap(name: str):
    """Get a cached matplotlib colormap by name."""
    if name not in _COLORMAP_CACHE:
        import matplotlib
        try:
            _COLORMAP_CACHE[name] = matplotlib.colormaps[name]
        except KeyError:
            raise ValueError(f"Unknown colormap: {name}") from None
    return _COLORMAP_CACHE[name]


def _opacity_profile(name: str, t: np.ndarray) -> np.ndarray:
    """Opacity in [0, 1] for normalized positions ``t`` in [0, 1]."""
    if name == "linear":
        return t
    if name == "linear_r":
        return 1.0 - t
    if name == "sigmoid":
        return 1.0 / (1.0 + np.exp(-10.0 * (t - 0.5)))
    if name == "sigmoid_10":
        return 1.0 / (1.0 + np.exp(-20.0 * (t - 0.5)))
    if name == "geom":
        return (np.geomspace(1.0, 101.0, t.size) - 1.0) / 100.0
    if name == "geom_r":
        return ((np.geomspace(1.0, 101.0, t.size) - 1.0) / 100.0)[::-1]
    raise ValueError(f"Unknown opacity preset: {name} (expected one of {OPACITY_PRESETS})")


class _ControlPoints:
    """Sorted (value, payload) control points with change notification."""

    def __init__(self, on_change: Optional[Callable[[], None]] = None):
        self._points: List[Tuple[float, object]] = []
        self._on_change = on_change

    def _validate(self, payload):
        return payload

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change()

    def _insert(self, value: float, payload) -> int:
        value = float(value)
        payload = self._validate(payload)
        for idx, (existing, _) in enumerate(self._points):
            if existing == value:
                self._points[idx] = (value, payload)
                return idx
        self._points.append((value, payload))
        self._points.sort(key=lambda p: p[0])
        return next(i for i, p in enumerate(self._points) if p[0] == value)

    def __len__(self) -> int:
        return len(self._points)

    @property
    def points(self) -> List[Tuple[float, object]]:
        return list(self._points)

    @property
    def range(self) -> Tuple[float, float]:
        if not self._points:
            return (0.0, 0.0)
        return (self._points[0][0], self._points[-1][0])

    def add_point(self, value: float, payload) -> int:
        """Insert a point (replacing one at the same value); returns its index."""
        idx = self._insert(value, payload)
        self._notify()
        return idx

    def remove_point(self, index: int) -> None:
        del self._points[index]
        self._notify()

    def set_points(self, points: Sequence[Tuple[float, object]]) -> None:
        self._points = []
        for value, payload in points:
            self._insert(value, payload)
        self._notify()

    def clear(self) -> None:
        self._points = []
        self._notify()

    def rescale(self, lo: float, hi: float) -> None:
        """Linearly move all points so they span [lo, hi]."""
        if not self._points:
            return
        old_lo, old_hi = self.range
        lo, hi = float(lo), float(hi)
        if old_hi == old_lo:
            positions = np.linspace(lo, hi, len(self._points)) if len(self._points) > 1 else [lo]
        else:
            scale = (hi - lo) / (old_hi - old_lo)
            positions = [lo + (v - old_lo) * scale for v, _ in self._points]
        self._points = [(float(x), p) for x, (_, p) in zip(positions, self._points)]
        self._notify()


class ColorRamp(_ControlPoints):
    """Scalar value -> RGB control points."""

    def _validate(self, payload) -> RGB:
        rgb = tuple(float(c) for c in payload)
        if len(rgb) != 3:
            raise ValueError(f"Color must have 3 components, got {len(rgb)}")
        if any(c < 0.0 or c > 1.0 for c in rgb):
            raise ValueError(f"Color components must be in [0, 1], got {rgb}")
        return rgb

    def map(self, values) -> np.ndarray:
        """Interpolate colors for ``values``; returns an (N, 3) array."""
        vals = np.asarray(values, dtype=np.float64).reshape(-1)
        if not self._points:
            return np.zeros((vals.size, 3))
        xs = np.array([p[0] for p in self._points])
        rgb = np.array([p[1] for p in self._points])
        return np.stack([np.interp(vals, xs, rgb[:, c]) for c in range(3)], axis=1)

    @classmethod
    def from_colormap(cls, name: str, lo: float, hi: float,
                      samples: int = COLOR_RAMP_SAMPLES,
                      on_change: Optional[Callable[[], None]] = None) -> "ColorRamp":
        ramp = cls(on_change=on_change)
        ramp.apply_colormap(name, lo, hi, samples)
        return ramp

    def apply_colormap(self, name: str, lo: float, hi: float,
                       samples: int = COLOR_RAMP_SAMPLES) -> None:
        """Replace the points with ``samples`` stops of a matplotlib colormap."""
        cmap = get_cached_colormap(name)
        samples = max(2, int(samples))
        ts = np.linspace(0.0, 1.0, samples)
        xs = np.linspace(float(lo), float(hi), samples) if hi > lo else [float(lo)]
        self.set_points([(x, tuple(cmap(t)[:3])) for x, t in zip(xs, ts)])


class OpacityCurve(_ControlPoints):
    """Scalar value -> opacity control points."""

    def _validate(self, payload) -> float:
        opacity = float(payload)
        if opacity < 0.0 or opacity > 1.0:
            raise ValueError(f"Opacity must be in [0, 1], got {opacity}")
        return opacity

    def map(self, values) -> np.ndarray:
        vals = np.asarray(values, dtype=np.float64).reshape(-1)
        if not self._points:
            return np.zeros(vals.size)
        xs = np.array([p[0] for p in self._points])
        ys = np.array([p[1] for p in self._points])
        return np.interp(vals, xs, ys)

    @classmethod
    def from_preset(cls, name: str, lo: float, hi: float,
                    on_change: Optional[Callable[[], None]] = None) -> "OpacityCurve":
        curve = cls(on_change=on_change)
        curve.apply_preset(name, lo, hi)
        return curve

    def apply_preset(self, name: str, lo: float, hi: float) -> None:
        samples = 2 if name in ("linear", "linear_r") else OPACITY_PRESET_SAMPLES
        t = np.linspace(0.0, 1.0, samples)
        ys = np.clip(_opacity_profile(name, t), 0.0, 1.0)
        if hi <= lo:
            self.set_points([(float(lo), float(ys[-1]))])
            return
        xs = lo + t * (hi - lo)
        self.set_points([(float(x), float(y)) for x, y in zip(xs, ys)])


class TransferFunction:
    """
    Color ramp plus opacity curve for one render surface.
    """

    def __init__(self, color_ramp: Optional[ColorRamp] = None,
                 opacity_curve: Optional[OpacityCurve] = None):
        self.revision = 0
        self.color_ramp = color_ramp if color_ramp is not None else ColorRamp()
        self.opacity_curve = opacity_curve if opacity_curve is not None else OpacityCurve()
        self.color_ramp._on_change = self._touch
        self.opacity_curve._on_change = self._touch

    def _touch(self) -> None:
        self.revision += 1

    @classmethod
    def default(cls, lo: float = 0.0, hi: float = 1.0,
                colormap: str = DEFAULT_COLORMAP,
                opacity: str = DEFAULT_OPACITY) -> "TransferFunction":
        return cls(
            color_ramp=ColorRamp.from_colormap(colormap, lo, hi),
            opacity_curve=OpacityCurve.from_preset(opacity, lo, hi),
        )

    @property
    def range(self) -> Tuple[float, float]:
        """Union of the color and opacity control point spans."""
        spans = [p.range for p in (self.color_ramp, self.opacity_curve) if len(p)]
        if not spans:
            return (0.0, 0.0)
        return (min(s[0] for s in spans), max(s[1] for s in spans))

    def fit_to_range(self, lo: float, hi: float) -> None:
        self.color_ramp.rescale(lo, hi)
        self.opacity_curve.rescale(lo, hi)

    def to_vtk(self):
        """Build fresh ``vtkColorTransferFunction`` / ``vtkPiecewiseFunction``."""
        from vtkmodules.vtkCommonDataModel import vtkPiecewiseFunction
        from vtkmodules.vtkRenderingCore import vtkColorTransferFunction

        ctf = vtkColorTransferFunction()
        for value, (r, g, b) in self.color_ramp.points:
            ctf.AddRGBPoint(value, r, g, b)
        otf = vtkPiecewiseFunction()
        for value, opacity in self.opacity_curve.points:
            otf.AddPoint(value, opacity)
        return ctf, otf


__all__ = [
    "RGB",
    "ColorRamp",
    "OpacityCurve",
    "TransferFunction",
    "get_cached_colormap",
]
