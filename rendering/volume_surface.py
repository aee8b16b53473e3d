"""
Volume-capable render surface.

Wraps a PyVista plotter (or nothing, when headless) and owns the transfer
function the editor works on. The surface re-fetches its scalar field from
the model on every field change, converts it to renderer layout and
announces the new data through ``volume_data_updated``.
"""

import logging
from typing import Callable, Optional, Tuple

from PyQt5.QtCore import QObject, pyqtSignal

from core import (
    ChangeKind,
    ColorRamp,
    OpacityCurve,
    ScalarField,
    TransferFunction,
    VolumeImage,
    field_to_volume_image,
)

logger = logging.getLogger(__name__)

_SURFACE_ATTRIBUTES = ("volume_data_updated", "image_data", "color_ramp", "opacity_curve",
                       "render", "reload_from_model")


def is_volume_surface(widget: object) -> bool:
    """True when ``widget`` offers everything the volume controller drives."""
    if widget is None:
        return False
    return all(hasattr(widget, name) for name in _SURFACE_ATTRIBUTES)


class VolumeSurface(QObject):
    """
    Render surface that shows one scalar field of a model as a volume.
    Designed for composition with GUI classes.
    """

    volume_data_updated = pyqtSignal()

    def __init__(self, plotter=None, name: str = "",
                 status_callback: Optional[Callable[[str], None]] = None):
        """
        Args:
            plotter: Optional PyVista plotter (BackgroundPlotter in the GUI).
            name: Label used in logs and tab titles.
            status_callback: Optional callback for status updates.
        """
        super().__init__()
        self.plotter = plotter
        self.name = name
        self._status_callback = status_callback

        self._transfer_function = TransferFunction.default()
        self._field: Optional[ScalarField] = None
        self._image: Optional[VolumeImage] = None
        self._data_range: Optional[Tuple[float, float]] = None

        self._model = None
        self._cube_index = 0

        self.volume_actor = None
        self._synced_revision: Optional[int] = None

    def __repr__(self) -> str:
        return f"VolumeSurface({self.name!r})"

    def update_status(self, message: str):
        if self._status_callback:
            self._status_callback(message)
        else:
            logger.info("[%s] %s", self.name or "surface", message)

    # ------------------------------------------------------------------
    # Model feed
    # ------------------------------------------------------------------

    @property
    def model(self):
        return self._model

    @property
    def cube_index(self) -> int:
        return self._cube_index

    def set_model(self, model, cube_index: int = 0) -> None:
        """Observe ``model`` and show its field ``cube_index``."""
        if self._model is not None:
            try:
                self._model.changed.disconnect(self._on_model_changed)
            except (TypeError, RuntimeError):
                logger.debug("%r was not connected to its previous model", self)
        self._model = model
        self._cube_index = int(cube_index)
        if model is not None:
            model.changed.connect(self._on_model_changed)
        self.reload_from_model()

    def set_cube_index(self, cube_index: int) -> None:
        if cube_index == self._cube_index:
            return
        self._cube_index = int(cube_index)
        self.reload_from_model()

    def reload_from_model(self) -> bool:
        """Show the model's current field; returns False when it is already shown."""
        field = self._model.cube(self._cube_index) if self._model is not None else None
        if field is self._field:
            return False
        self.set_scalar_field(field)
        return True

    def _on_model_changed(self, kind: ChangeKind) -> None:
        if kind.affects_fields:
            self.reload_from_model()

    # ------------------------------------------------------------------
    # Volume data
    # ------------------------------------------------------------------

    def set_scalar_field(self, field: Optional[ScalarField]) -> None:
        """
        Convert ``field`` to renderer layout and rebuild the volume actor.

        The transfer function is refitted only when the data range moves,
        so user edits survive value-preserving recomputations.
        """
        self._field = field
        image = field_to_volume_image(field) if field is not None else None
        self._image = image

        if image is not None and not image.is_empty:
            data_range = image.value_range()
            if data_range != self._data_range:
                self._transfer_function.fit_to_range(*data_range)
                self._data_range = data_range
        else:
            self._data_range = None

        self._rebuild_actor()
        self.volume_data_updated.emit()

    def image_data(self) -> Optional[VolumeImage]:
        """Current renderer-layout image, or None when nothing is loaded."""
        return self._image

    @property
    def data_range(self) -> Optional[Tuple[float, float]]:
        return self._data_range

    # ------------------------------------------------------------------
    # Transfer function (shared with the editor)
    # ------------------------------------------------------------------

    def transfer_function(self) -> TransferFunction:
        return self._transfer_function

    def color_ramp(self) -> ColorRamp:
        return self._transfer_function.color_ramp

    def opacity_curve(self) -> OpacityCurve:
        return self._transfer_function.opacity_curve

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def _rebuild_actor(self) -> None:
        if self.plotter is None:
            return

        if self.volume_actor is not None:
            self.plotter.remove_actor(self.volume_actor, render=False)
            self.volume_actor = None
        self._synced_revision = None

        if self._image is None or self._image.is_empty:
            return

        grid = self._image.to_pyvista()
        self.volume_actor = self.plotter.add_volume(
            grid,
            scalars="values",
            shade=False,
            show_scalar_bar=False,
            render=False,
        )
        self._sync_transfer_function()

    def _sync_transfer_function(self) -> bool:
        """Push the transfer function into the VTK volume property if it changed."""
        if self.volume_actor is None:
            return False
        revision = self._transfer_function.revision
        if revision == self._synced_revision:
            return False
        ctf, otf = self._transfer_function.to_vtk()
        prop = self.volume_actor.GetProperty()
        prop.SetColor(ctf)
        prop.SetScalarOpacity(otf)
        self._synced_revision = revision
        return True

    def render(self) -> None:
        """Redraw with the current transfer function."""
        if self.plotter is None:
            return
        self._sync_transfer_function()
        self.plotter.render()

    def reset_camera(self) -> None:
        if self.plotter is not None:
            self.plotter.reset_camera()


__all__ = ["VolumeSurface", "is_volume_surface"]
