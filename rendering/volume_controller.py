"""
Orchestrates the color/opacity editing session for volume views.

Reacts to model changes and active-surface changes, keeps exactly one
surface bound, pushes histogram and transfer function to the editor and
forwards redraw requests to the bound surface. Designed for composition with
GUI classes: the editor is built through an injected factory.
"""

import logging
from typing import Any, Callable, Optional

from PyQt5.QtCore import QObject, pyqtSignal

from core import ChangeKind, Histogram, build_histogram
from rendering.active_objects import ActiveSurfaceProvider
from rendering.surface_binding import SurfaceBinding
from rendering.volume_surface import is_volume_surface

logger = logging.getLogger(__name__)


class VolumeController(QObject):
    """
    Keeps histogram, transfer function and redraws in step with the model
    and the active render surface.

    The editor object must provide ``set_histogram(histogram)``,
    ``set_transfer_function(color_ramp, opacity_curve)``, ``show()`` and the
    signals ``color_map_updated``, ``opacity_changed`` and ``render_needed``.
    """

    actions_enabled_changed = pyqtSignal(bool)
    histogram_updated = pyqtSignal(object)  # Histogram

    def __init__(self, active_objects: ActiveSurfaceProvider,
                 editor_factory: Optional[Callable[[], Any]] = None,
                 bins: Optional[int] = None):
        """
        Args:
            active_objects: Tracker of the widget currently in focus.
            editor_factory: Builds the editor the first time it is opened.
            bins: Histogram bin count (``config.HISTOGRAM_BINS`` when None).
        """
        super().__init__()
        self._active_objects = active_objects
        self._editor_factory = editor_factory
        self._bins = bins

        self._model = None
        self._editor = None
        self._histogram: Optional[Histogram] = None
        self._pushed = None  # (handle, model revision, image) of the last push
        self._actions_enabled = False
        self._binding = SurfaceBinding(self._on_volume_data_updated)

        self._active_objects.active_widget_changed.connect(self._on_active_widget_changed)
        self.update_actions()

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def model(self):
        return self._model

    @property
    def editor(self):
        return self._editor

    @property
    def binding(self) -> SurfaceBinding:
        return self._binding

    @property
    def bound_surface(self) -> Optional[object]:
        return self._binding.surface

    @property
    def is_bound(self) -> bool:
        return self._binding.is_bound

    @property
    def histogram(self) -> Optional[Histogram]:
        """Last histogram pushed to the editor."""
        return self._histogram

    @property
    def actions_enabled(self) -> bool:
        return self._actions_enabled

    def _has_fields(self) -> bool:
        return self._model is not None and self._model.cube_count() > 0

    def _eligible_surface(self) -> Optional[object]:
        """Active widget if it can be bound right now, else None."""
        widget = self._active_objects.active_widget()
        if not is_volume_surface(widget) or not self._has_fields():
            return None
        return widget

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    def attach_model(self, model) -> None:
        """Observe ``model`` instead of the previous one."""
        if model is self._model:
            return
        if self._model is not None:
            try:
                self._model.changed.disconnect(self.on_model_changed)
            except (TypeError, RuntimeError):
                logger.debug("Previous model was already disconnected")

        self._model = model
        if model is not None:
            model.changed.connect(self.on_model_changed)
        logger.info("Attached model %r", getattr(model, "name", model))

        self._update_binding()
        self.update_actions()
        self.refresh_histogram()

    def open_editor(self):
        """
        Create the editor on first use, then refresh and show it.

        Signals are wired only when the editor is built, so reopening never
        duplicates redraw connections.
        """
        if self._editor is None:
            if self._editor_factory is None:
                logger.warning("No editor factory configured; cannot open the editor")
                return None
            editor = self._editor_factory()
            editor.color_map_updated.connect(self.request_redraw)
            editor.opacity_changed.connect(self.request_redraw)
            editor.render_needed.connect(self.request_redraw)
            self._editor = editor
            logger.debug("Editor session created")

        self._update_binding()
        self.refresh_histogram()
        self._editor.show()
        return self._editor

    def on_model_changed(self, kind: ChangeKind) -> None:
        if kind.affects_field_count:
            self._update_binding()
            self.update_actions()
            surface = self._binding.surface
            if surface is not None:
                # A changed field re-enters through volume_data_updated.
                surface.reload_from_model()
            if not self._is_current():
                self.refresh_histogram()
        else:
            # Atom/bond edits and in-place field recomputation reach us
            # through the surface's own update signal.
            logger.debug("Ignoring model change %s", kind.name)

    def on_active_surface_changed(self) -> None:
        rebound = self._update_binding()
        self.update_actions()
        if rebound:
            self.refresh_histogram()

    def request_redraw(self) -> bool:
        """Redraw the bound surface; returns False when nothing is bound."""
        surface = self._binding.surface
        if surface is None:
            logger.debug("Redraw requested while unbound")
            return False
        surface.render()
        return True

    def update_actions(self) -> bool:
        """Recompute the enabled state of the exposed actions."""
        enabled = self._eligible_surface() is not None
        if enabled != self._actions_enabled:
            self._actions_enabled = enabled
            self.actions_enabled_changed.emit(enabled)
        return enabled

    def refresh_histogram(self) -> Optional[Histogram]:
        """
        Push the bound surface's transfer function and a fresh histogram to
        the editor. Skipped without an editor, while unbound, or when the
        surface has no image yet.
        """
        if self._editor is None:
            return None
        surface = self._binding.surface
        if surface is None or not self._has_fields():
            logger.debug("Histogram refresh skipped: no bound surface with fields")
            return None

        self._editor.set_transfer_function(surface.color_ramp(), surface.opacity_curve())

        image = surface.image_data()
        if image is None:
            logger.debug("Histogram refresh skipped: %r has no volume data yet", surface)
            return None

        histogram = build_histogram(image, bins=self._bins)
        self._histogram = histogram
        self._pushed = (self._binding.handle, self._model_revision(), image)
        self._editor.set_histogram(histogram)
        self.histogram_updated.emit(histogram)
        return histogram

    def shutdown(self) -> None:
        """Release the surface and model connections."""
        self._binding.unbind()
        self.attach_model(None)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _update_binding(self) -> bool:
        """Bind to the eligible active surface or unbind; True if a new bind happened."""
        surface = self._eligible_surface()
        if surface is None:
            self._binding.unbind()
            return False
        return self._binding.bind(surface)

    def _model_revision(self) -> Optional[int]:
        return getattr(self._model, "revision", None)

    def _is_current(self) -> bool:
        """True when the editor already holds the histogram of the bound image for this model state."""
        surface = self._binding.surface
        if surface is None or self._pushed is None:
            return False
        handle, revision, image = self._pushed
        return (handle == self._binding.handle
                and revision == self._model_revision()
                and image is surface.image_data())

    def _on_active_widget_changed(self, _widget) -> None:
        self.on_active_surface_changed()

    def _on_volume_data_updated(self) -> None:
        self.refresh_histogram()


__all__ = ["VolumeController"]
