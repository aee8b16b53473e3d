"""
Rendering package: active-surface tracking, volume surfaces and the
color/opacity editing controller.
"""

from rendering.active_objects import ActiveObjects, ActiveSurfaceProvider
from rendering.volume_surface import VolumeSurface, is_volume_surface
from rendering.surface_binding import BindingState, SurfaceBinding, SurfaceHandle
from rendering.volume_controller import VolumeController

__all__ = [
    'ActiveObjects',
    'ActiveSurfaceProvider',
    'VolumeSurface',
    'is_volume_surface',
    'BindingState',
    'SurfaceBinding',
    'SurfaceHandle',
    'VolumeController',
]
