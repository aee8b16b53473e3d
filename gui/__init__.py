"""
GUI Package for Cube Volume Studio.
Exports the editor dialog and MainWindow.
"""

from gui.styles import (
    PANEL_TITLE_STYLE,
    SECONDARY_BUTTON_STYLE
)

from gui.panels.color_opacity_panel import ColorOpacityDialog, HistogramEditorWidget
from gui.main_window import MainWindow, MoleculeInfoPage

__all__ = [
    # Styles
    'PANEL_TITLE_STYLE',
    'SECONDARY_BUTTON_STYLE',
    # Panels
    'ColorOpacityDialog',
    'HistogramEditorWidget',
    # Window
    'MainWindow',
    'MoleculeInfoPage',
]
