"""
Panels sub-package.
"""

from gui.panels.color_opacity_panel import ColorOpacityDialog, HistogramEditorWidget

__all__ = [
    'ColorOpacityDialog',
    'HistogramEditorWidget',
]
