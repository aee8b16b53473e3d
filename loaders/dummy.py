"""
Synthetic scalar fields for demos and testing.
"""

import logging
from typing import Callable, Optional

import numpy as np

from config import DUMMY_FIELD_SIZE, DUMMY_FIELD_SPACING
from core import BaseLoader, ScalarField

logger = logging.getLogger(__name__)


class DummyFieldLoader(BaseLoader):
    """Synthetic p-orbital-like field: a positive and a negative lobe along x."""

    def load(self, size: int = DUMMY_FIELD_SIZE,
             callback: Optional[Callable[[int, str], None]] = None,
             spacing: float = DUMMY_FIELD_SPACING) -> ScalarField:
        size = int(size)
        if size < 1:
            raise ValueError(f"size must be positive, got {size}")
        logger.info("Generating synthetic orbital field (size=%d)", size)
        if callback:
            callback(0, "Building sample grid...")

        half = 0.5 * (size - 1) * spacing
        axis = np.linspace(-half, half, size)
        x, y, z = np.meshgrid(axis, axis, axis, indexing="ij")
        r = np.sqrt(x ** 2 + y ** 2 + z ** 2)

        if callback:
            callback(50, "Evaluating orbital lobes...")

        # 2p_x-like shape: x * exp(-r / 2), scaled to roughly [-1, 1].
        values = x * np.exp(-r / 2.0)
        peak = float(np.abs(values).max())
        if peak > 0:
            values = values / peak

        if callback:
            callback(100, "Generation complete.")

        return ScalarField.from_array(
            values.astype(np.float32),
            origin=(-half, -half, -half),
            spacing=(spacing, spacing, spacing),
            name="Synthetic 2p",
        )


__all__ = ["DummyFieldLoader"]
