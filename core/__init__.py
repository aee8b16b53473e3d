"""
Core module containing base classes, data structures and pure algorithms.
"""

from core.base import ScalarField, VolumeImage, Histogram, ChangeKind, BaseLoader
from core.coordinates import (
    native_index,
    renderer_index,
    native_to_renderer_order,
    renderer_to_native_order,
    field_to_volume_image,
    volume_image_to_field,
    world_to_index,
)
from core.histogram import build_histogram
from core.transfer_function import ColorRamp, OpacityCurve, TransferFunction

__all__ = [
    'ScalarField', 'VolumeImage', 'Histogram', 'ChangeKind', 'BaseLoader',
    'native_index', 'renderer_index',
    'native_to_renderer_order', 'renderer_to_native_order',
    'field_to_volume_image', 'volume_image_to_field', 'world_to_index',
    'build_histogram',
    'ColorRamp', 'OpacityCurve', 'TransferFunction',
]
