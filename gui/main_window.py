"""
Main application window: tabbed PyVista volume views plus an info tab.
The color/opacity editing session is delegated to VolumeController.
"""

import logging
from typing import Dict, List, Optional

from pyvistaqt import BackgroundPlotter

from PyQt5.QtWidgets import (QMainWindow, QWidget, QVBoxLayout, QLabel,
                             QStatusBar, QTabWidget, QAction, QFileDialog,
                             QMessageBox)
from PyQt5.QtGui import QCloseEvent

from config import (
    DEFAULT_VIEW_COUNT,
    EDITOR_ACTION_TEXT,
    EDITOR_MENU_PATH,
    WINDOW_POSITION,
    WINDOW_SIZE,
    WINDOW_TITLE,
)
from core import ChangeKind
from data import MoleculeModel
from exporters.vtk import VTKExporter
from gui.panels.color_opacity_panel import ColorOpacityDialog
from gui.styles import PANEL_TITLE_STYLE, apply_dialog_spacing, summary_label
from loaders import DummyFieldLoader, load_cube_into
from rendering import ActiveObjects, VolumeController, VolumeSurface

logger = logging.getLogger(__name__)


class MoleculeInfoPage(QWidget):
    """Plain summary page; selecting it leaves no volume surface active."""

    def __init__(self, model: MoleculeModel):
        super().__init__()
        self._model = model
        layout = QVBoxLayout(self)
        apply_dialog_spacing(layout)

        title = QLabel("ℹ️ Molecule")
        title.setStyleSheet(PANEL_TITLE_STYLE)
        layout.addWidget(title)

        self.summary = summary_label()
        layout.addWidget(self.summary)
        layout.addStretch()

        model.changed.connect(self._on_model_changed)
        self._on_model_changed(None)

    def _on_model_changed(self, _kind):
        lines = [self._model.get_current_state_info()]
        for index, field in enumerate(self._model.cubes()):
            lo, hi = field.value_range()
            lines.append(
                f"Cube {index}: {field.name or 'unnamed'} {field.dimensions} "
                f"range [{lo:.4g}, {hi:.4g}]"
            )
        self.summary.setText("\n".join(lines))


class MainWindow(QMainWindow):
    """
    Main application window.
    Integrates PyQt5 menus with one PyVista canvas per volume view.
    """

    def __init__(self):
        super().__init__()
        self.model = MoleculeModel()
        self.active_objects = ActiveObjects()
        self.controller = VolumeController(
            self.active_objects,
            editor_factory=lambda: ColorOpacityDialog(self),
        )
        self.surfaces: List[VolumeSurface] = []
        self._plotters: List[BackgroundPlotter] = []
        self._tab_surfaces: Dict[int, VolumeSurface] = {}

        self.setWindowTitle(WINDOW_TITLE)
        self.setGeometry(*WINDOW_POSITION, *WINDOW_SIZE)
        self._init_ui()
        self._init_menus()

        self.controller.attach_model(self.model)
        self.model.changed.connect(self._on_model_changed)
        self._on_tab_changed(self.tabs.currentIndex())

    def _init_ui(self):
        main_widget = QWidget()
        self.setCentralWidget(main_widget)
        main_layout = QVBoxLayout(main_widget)
        main_layout.setContentsMargins(0, 0, 0, 0)

        self.tabs = QTabWidget()
        self.tabs.currentChanged.connect(self._on_tab_changed)
        main_layout.addWidget(self.tabs)

        for _ in range(DEFAULT_VIEW_COUNT):
            self.add_view()
        self.info_page = MoleculeInfoPage(self.model)
        self.tabs.addTab(self.info_page, "Molecule")

        self.status_bar = QStatusBar()
        self.setStatusBar(self.status_bar)
        self.update_status("Ready. Open a cube file or generate a sample.")

    def _init_menus(self):
        file_menu = self.menuBar().addMenu("&File")
        self._add_action(file_menu, "Open Cube…", self._open_cube_dialog)
        self._add_action(file_menu, "Generate Sample", self._load_sample)
        self._add_action(file_menu, "Export Volume…", self._export_dialog)
        file_menu.addSeparator()
        self._add_action(file_menu, "Quit", self.close)

        view_menu = self.menuBar().addMenu("&View")
        self._add_action(view_menu, "New Volume View", self._on_new_view)

        extensions_menu = self.menuBar().addMenu(EDITOR_MENU_PATH)
        self.editor_action = self._add_action(extensions_menu, EDITOR_ACTION_TEXT, self._open_editor)
        self.editor_action.setEnabled(self.controller.actions_enabled)
        self.controller.actions_enabled_changed.connect(self.editor_action.setEnabled)

    def _add_action(self, menu, text, slot) -> QAction:
        action = QAction(text, self)
        action.triggered.connect(slot)
        menu.addAction(action)
        return action

    # ==========================================
    # Views
    # ==========================================

    def add_view(self) -> VolumeSurface:
        """Create a PyVista canvas and its volume surface as a new tab."""
        name = f"View {len(self.surfaces) + 1}"
        plotter = BackgroundPlotter(show=False, title=name)
        plotter.add_axes()
        surface = VolumeSurface(plotter=plotter, name=name, status_callback=self.update_status)
        surface.set_model(self.model)

        index = self.tabs.insertTab(len(self.surfaces), plotter.app_window, name)
        self.surfaces.append(surface)
        self._plotters.append(plotter)
        self._rebuild_tab_index()
        self.tabs.setCurrentIndex(index)
        self._on_tab_changed(self.tabs.currentIndex())
        return surface

    def _rebuild_tab_index(self):
        by_window = {id(p.app_window): s for p, s in zip(self._plotters, self.surfaces)}
        self._tab_surfaces = {}
        for index in range(self.tabs.count()):
            surface = by_window.get(id(self.tabs.widget(index)))
            if surface is not None:
                self._tab_surfaces[index] = surface

    def _on_new_view(self):
        surface = self.add_view()
        surface.plotter.app_window.show()
        self.update_status(f"Added {surface.name}")

    def _on_tab_changed(self, index: int):
        widget: Optional[object] = self._tab_surfaces.get(index)
        if widget is None:
            widget = self.tabs.widget(index)
        self.active_objects.set_active_widget(widget)

    # ==========================================
    # Data
    # ==========================================

    def _open_cube_dialog(self):
        path, _ = QFileDialog.getOpenFileName(self, "Open Cube File", "", "Cube Files (*.cube *.cub);;All Files (*)")
        if not path:
            return
        try:
            self.model.clear_cubes()
            cube = load_cube_into(self.model, path)
            self.model.name = cube.title or path
            self.update_status(f"Loaded {len(cube.fields)} field(s) from {path}")
        except ValueError as e:
            self._show_err("Loading Error", e)

    def _load_sample(self):
        try:
            self.update_status("Generating synthetic field...")
            field = DummyFieldLoader().load()
            self.model.clear_cubes()
            self.model.name = field.name
            self.model.add_cube(field)
            self.update_status("Synthetic field ready.")
        except ValueError as e:
            self._show_err("Loading Error", e)

    def _export_dialog(self):
        surface = self.controller.bound_surface
        image = surface.image_data() if surface is not None else None
        if image is None:
            QMessageBox.warning(self, "No Data", "Select a volume view showing a cube first.")
            return
        path, _ = QFileDialog.getSaveFileName(self, "Export Volume", "volume.vti", "VTK Image (*.vti)")
        if not path:
            return
        try:
            VTKExporter.export(image, path)
            self.update_status(f"Exported {path}")
        except (ValueError, OSError) as e:
            self._show_err("Export Error", e)

    def _on_model_changed(self, kind: ChangeKind):
        if kind is ChangeKind.FIELDS_ADDED:
            for surface in self.surfaces:
                surface.reset_camera()

    # ==========================================
    # Editor
    # ==========================================

    def _open_editor(self):
        self.controller.open_editor()

    # ==========================================
    # Helpers
    # ==========================================

    def show(self):
        super().show()
        for plotter in self._plotters:
            plotter.app_window.show()

    def update_status(self, message: str):
        if hasattr(self, 'status_bar'):
            self.status_bar.showMessage(message)
        logger.info(message)

    def _show_err(self, title: str, err: Exception):
        logger.error("%s: %s", title, err)
        QMessageBox.critical(self, title, str(err))

    def closeEvent(self, event: QCloseEvent):
        """Release the controller and the plotters when the window closes."""
        self.controller.shutdown()
        for plotter in self._plotters:
            plotter.close()
        super().closeEvent(event)


__all__ = ["MainWindow", "MoleculeInfoPage"]
