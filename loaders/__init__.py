"""
Data loaders package.
"""

from loaders.cube import CubeFile, GaussianCubeLoader, load_cube_into
from loaders.dummy import DummyFieldLoader

__all__ = [
    'CubeFile',
    'GaussianCubeLoader',
    'load_cube_into',
    'DummyFieldLoader',
]
