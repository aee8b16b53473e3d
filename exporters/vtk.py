"""
VTK format exporter for converted volume images.
"""

import logging
from typing import Union

from core import ScalarField, VolumeImage, field_to_volume_image

logger = logging.getLogger(__name__)


class VTKExporter:
    """
    Responsible for exporting scalar volumes to VTK image data files (.vti).
    """

    @staticmethod
    def export(data: Union[ScalarField, VolumeImage], filepath: str) -> bool:
        """
        Write ``data`` as point data of a ``vtkImageData``.

        Args:
            data: Cube-layout field (converted first) or renderer-layout image.
            filepath: target path.

        Returns:
            bool: return True once success.
        """
        if data is None:
            raise ValueError("No data to export.")

        image = field_to_volume_image(data) if isinstance(data, ScalarField) else data
        if image.is_empty:
            raise ValueError("Cannot export an empty volume.")

        grid = image.to_pyvista()
        grid.save(filepath)
        logger.info("Volume saved to %s", filepath)
        return True


__all__ = ["VTKExporter"]
