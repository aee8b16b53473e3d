"""
Color/opacity map editor: histogram plot with an editable color gradient and
opacity curve.

The widgets edit the render surface's live ColorRamp and OpacityCurve in
place and only emit signals; redraws are the controller's business.
"""

import logging
from typing import List, Optional, Tuple

import numpy as np
import pyqtgraph as pg
from PyQt5.QtCore import pyqtSignal
from PyQt5.QtGui import QColor
from PyQt5.QtWidgets import (
    QComboBox, QDialog, QHBoxLayout, QLabel, QPushButton, QVBoxLayout, QWidget
)

from config import (
    DEFAULT_COLORMAP,
    DEFAULT_COLORMAPS,
    DEFAULT_OPACITY,
    EDITOR_WINDOW_SIZE,
    EDITOR_WINDOW_TITLE,
    OPACITY_PRESETS,
)
from core import ColorRamp, Histogram, OpacityCurve
from gui.styles import PANEL_TITLE_STYLE, SECONDARY_BUTTON_STYLE, apply_dialog_spacing

logger = logging.getLogger(__name__)


class HistogramEditorWidget(QWidget):
    """
    Population-vs-value plot with the opacity curve drawn on top and a
    gradient bar for the color ramp underneath.
    """
    # Signals
    color_map_updated = pyqtSignal()
    opacity_changed = pyqtSignal()

    def __init__(self, parent=None):
        super().__init__(parent)
        self._color_ramp: Optional[ColorRamp] = None
        self._opacity_curve: Optional[OpacityCurve] = None
        self._histogram: Optional[Histogram] = None
        self._is_updating_programmatically = False
        self._init_ui()

    def _init_ui(self):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        self.plot = pg.PlotWidget()
        self.plot.setBackground('w')
        self.plot.setMouseEnabled(x=False, y=False)
        self.plot.hideAxis('left')
        self.plot.setYRange(0.0, 1.05, padding=0)
        layout.addWidget(self.plot, stretch=1)

        self.hist_curve = pg.PlotCurveItem(stepMode="center", fillLevel=0, brush=(0, 0, 255, 80), pen='k')
        self.plot.addItem(self.hist_curve)

        self.opacity_roi: Optional[pg.PolyLineROI] = None

        self.gradient = pg.GradientWidget(orientation='bottom')
        self.gradient.setMaximumHeight(40)
        self.gradient.sigGradientChangeFinished.connect(self._on_gradient_changed)
        layout.addWidget(self.gradient)

    # ------------------------------------------------------------------
    # Inputs
    # ------------------------------------------------------------------

    def set_transfer_function(self, color_ramp: ColorRamp, opacity_curve: OpacityCurve) -> None:
        """Edit these live objects from now on."""
        self._color_ramp = color_ramp
        self._opacity_curve = opacity_curve
        self.refresh()

    def set_histogram(self, histogram: Histogram) -> None:
        """Update histogram plot with new data."""
        self._histogram = histogram
        if histogram.is_empty:
            self.hist_curve.setData([0.0, 1.0], [0.0])
        else:
            heights = histogram.populations / float(max(histogram.peak, 1))
            self.hist_curve.setData(histogram.edges, heights)
        self.refresh()

    def value_range(self) -> Tuple[float, float]:
        """Span the gradient and curve positions are mapped onto."""
        if self._histogram is not None and not self._histogram.is_empty:
            return self._histogram.value_range
        spans = [p.range for p in (self._color_ramp, self._opacity_curve) if p is not None and len(p)]
        if spans:
            return (min(s[0] for s in spans), max(s[1] for s in spans))
        return (0.0, 1.0)

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def refresh(self) -> None:
        """Redraw gradient and opacity handles from the live objects."""
        lo, hi = self.value_range()
        self.plot.setXRange(lo, hi, padding=0)
        self._is_updating_programmatically = True
        try:
            self._show_color_ramp(lo, hi)
            self._show_opacity_curve()
        finally:
            self._is_updating_programmatically = False

    def _show_color_ramp(self, lo: float, hi: float) -> None:
        if self._color_ramp is None or not len(self._color_ramp):
            return
        span = (hi - lo) or 1.0
        ticks = []
        for value, (r, g, b) in self._color_ramp.points:
            pos = float(np.clip((value - lo) / span, 0.0, 1.0))
            ticks.append((pos, (int(r * 255), int(g * 255), int(b * 255), 255)))
        self.gradient.restoreState({'mode': 'rgb', 'ticks': ticks})

    def _show_opacity_curve(self) -> None:
        if self.opacity_roi is not None:
            self.plot.removeItem(self.opacity_roi)
            self.opacity_roi = None
        if self._opacity_curve is None or not len(self._opacity_curve):
            return
        positions = [[value, opacity] for value, opacity in self._opacity_curve.points]
        self.opacity_roi = pg.PolyLineROI(positions, closed=False, pen=pg.mkPen('r', width=2))
        self.opacity_roi.sigRegionChangeFinished.connect(self._on_opacity_roi_changed)
        self.plot.addItem(self.opacity_roi)

    # ------------------------------------------------------------------
    # Edits
    # ------------------------------------------------------------------

    def _on_gradient_changed(self, *_args) -> None:
        if self._is_updating_programmatically or self._color_ramp is None:
            return
        lo, hi = self.value_range()
        points = []
        for tick, pos in self.gradient.item.listTicks():
            color = QColor(tick.color)
            points.append((lo + pos * (hi - lo), (color.redF(), color.greenF(), color.blueF())))
        self._color_ramp.set_points(points)
        self.color_map_updated.emit()

    def _on_opacity_roi_changed(self, roi) -> None:
        if self._is_updating_programmatically or self._opacity_curve is None:
            return
        view_box = self.plot.getViewBox()
        points: List[Tuple[float, float]] = []
        for _name, scene_pos in roi.getSceneHandlePositions():
            pt = view_box.mapSceneToView(scene_pos)
            points.append((float(pt.x()), float(np.clip(pt.y(), 0.0, 1.0))))
        self._opacity_curve.set_points(points)
        self.opacity_changed.emit()

    def apply_colormap(self, name: str) -> None:
        if self._color_ramp is None:
            return
        lo, hi = self.value_range()
        self._color_ramp.apply_colormap(name, lo, hi)
        self.refresh()
        self.color_map_updated.emit()

    def apply_opacity_preset(self, name: str) -> None:
        if self._opacity_curve is None:
            return
        lo, hi = self.value_range()
        self._opacity_curve.apply_preset(name, lo, hi)
        self.refresh()
        self.opacity_changed.emit()

    def fit_to_histogram(self) -> bool:
        if self._histogram is None or self._histogram.is_empty:
            logger.debug("Nothing to fit: no histogram loaded")
            return False
        lo, hi = self._histogram.value_range
        logger.debug("Fitting transfer function to [%g, %g]", lo, hi)
        if self._color_ramp is not None:
            self._color_ramp.rescale(lo, hi)
        if self._opacity_curve is not None:
            self._opacity_curve.rescale(lo, hi)
        self.refresh()
        return True


class ColorOpacityDialog(QDialog):
    """
    Non-modal dialog hosting the histogram editor and preset controls.
    """
    # Signals
    color_map_updated = pyqtSignal()
    opacity_changed = pyqtSignal()
    render_needed = pyqtSignal()

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setWindowTitle(EDITOR_WINDOW_TITLE)
        self.resize(*EDITOR_WINDOW_SIZE)
        self._init_ui()

    def _init_ui(self):
        layout = QVBoxLayout(self)
        apply_dialog_spacing(layout)

        title = QLabel("🎨 Color & Opacity Map")
        title.setStyleSheet(PANEL_TITLE_STYLE)
        layout.addWidget(title)

        self._histogram_widget = HistogramEditorWidget(self)
        self._histogram_widget.color_map_updated.connect(self.color_map_updated)
        self._histogram_widget.opacity_changed.connect(self.opacity_changed)
        layout.addWidget(self._histogram_widget, stretch=1)

        controls = QHBoxLayout()
        controls.addWidget(QLabel("Colormap:"))
        self.colormap_combo = self._create_combo(controls, DEFAULT_COLORMAPS, DEFAULT_COLORMAP,
                                                 self._histogram_widget.apply_colormap)
        controls.addWidget(QLabel("Opacity:"))
        self.opacity_combo = self._create_combo(controls, OPACITY_PRESETS, DEFAULT_OPACITY,
                                                self._histogram_widget.apply_opacity_preset)

        self.fit_button = QPushButton("Fit to Histogram")
        self.fit_button.setStyleSheet(SECONDARY_BUTTON_STYLE)
        self.fit_button.clicked.connect(self._on_fit_clicked)
        controls.addWidget(self.fit_button)
        layout.addLayout(controls)

    def _create_combo(self, layout, items, default, callback):
        combo = QComboBox()
        combo.addItems(items)
        combo.setCurrentText(default)
        combo.textActivated.connect(callback)
        layout.addWidget(combo)
        return combo

    def histogram_widget(self) -> HistogramEditorWidget:
        return self._histogram_widget

    def set_histogram(self, histogram: Histogram) -> None:
        self._histogram_widget.set_histogram(histogram)

    def set_transfer_function(self, color_ramp: ColorRamp, opacity_curve: OpacityCurve) -> None:
        self._histogram_widget.set_transfer_function(color_ramp, opacity_curve)

    def _on_fit_clicked(self) -> None:
        if self._histogram_widget.fit_to_histogram():
            self.render_needed.emit()


__all__ = ["HistogramEditorWidget", "ColorOpacityDialog"]
