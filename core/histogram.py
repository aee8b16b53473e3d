"""
Population histogram of scalar samples.

Traversal order does not matter here, so the same builder serves cube-layout
fields, renderer-layout images and plain arrays.
"""

from __future__ import annotations

import logging
from typing import Optional, Tuple, Union

import numpy as np

from config import HISTOGRAM_BINS
from core.base import Histogram, ScalarField, VolumeImage

logger = logging.getLogger(__name__)

HistogramSource = Union[ScalarField, VolumeImage, np.ndarray]


def _samples(source: HistogramSource) -> np.ndarray:
    if isinstance(source, (ScalarField, VolumeImage)):
        return source.values
    return np.asarray(source).reshape(-1)


def _bin_edges(lo: float, hi: float, n_bins: int) -> np.ndarray:
    """
    ``n_bins + 1`` strictly increasing edges covering [lo, hi].

    Spans too narrow to split into ``n_bins`` representable steps (constant
    fields, a few ulps of spread) are widened around their midpoint.
    """
    edges = np.linspace(lo, hi, n_bins + 1)
    if np.all(np.diff(edges) > 0):
        return edges
    half = max(0.5, float(np.spacing(max(abs(lo), abs(hi)))) * n_bins)
    mid = lo / 2 + hi / 2
    logger.debug("Widening histogram span [%r, %r] to +/-%g", lo, hi, half)
    return np.linspace(mid - half, mid + half, n_bins + 1)


def build_histogram(source: HistogramSource,
                    bins: Optional[int] = None,
                    value_range: Optional[Tuple[float, float]] = None) -> Histogram:
    """
    Bin samples into contiguous, ascending, non-overlapping bins.

    Args:
        source: Field, image or array of samples.
        bins: Bin count (defaults to ``config.HISTOGRAM_BINS``).
        value_range: Optional (min, max) to bin over; samples outside it are
            left out. Defaults to the finite data range.

    Returns:
        Histogram: bin centers with their populations. Empty when there are
        no finite samples.
    """
    n_bins = HISTOGRAM_BINS if bins is None else int(bins)
    if n_bins < 1:
        raise ValueError(f"bins must be positive, got {bins}")

    samples = _samples(source)
    if samples.size == 0:
        return Histogram.empty()

    finite_mask = np.isfinite(samples)
    excluded = int(samples.size - np.count_nonzero(finite_mask))
    if excluded:
        logger.warning("Histogram skipped %d non-finite samples", excluded)
        samples = samples[finite_mask]
    if samples.size == 0:
        return Histogram.empty(excluded=excluded)

    lo, hi = value_range if value_range is not None else (samples.min(), samples.max())
    edges = _bin_edges(float(lo), float(hi), n_bins)
    populations, edges = np.histogram(samples, bins=edges)
    if value_range is not None:
        excluded += int(samples.size - populations.sum())
    centers = edges[:-1] + 0.5 * np.diff(edges)
    return Histogram(
        values=centers,
        populations=populations.astype(np.int64),
        edges=edges,
        excluded=excluded,
    )


__all__ = ["HistogramSource", "build_histogram"]
