"""
Shared styles, spacing and small widget helpers for the GUI components.
"""

from PyQt5.QtWidgets import QLabel, QLayout

# ==========================================
# Panel Title Styles
# ==========================================
PANEL_TITLE_STYLE = """
    font-size: 18px;
    font-weight: bold;
    margin-top: 8px;
    margin-bottom: 4px;
    padding: 4px;
"""

# ==========================================
# Summary Text
# ==========================================
SUMMARY_LABEL_STYLE = """
    font-family: monospace;
    font-size: 13px;
"""

# ==========================================
# Button Styles
# ==========================================
SECONDARY_BUTTON_STYLE = """
    QPushButton {
        background-color: #555555;
        color: white;
        border: none;
        padding: 6px 14px;
        border-radius: 4px;
    }
    QPushButton:hover {
        background-color: #666666;
    }
"""

# ==========================================
# Spacing
# ==========================================
DIALOG_MARGINS = (10, 10, 10, 10)
DIALOG_SPACING = 8


def apply_dialog_spacing(layout: QLayout) -> QLayout:
    layout.setContentsMargins(*DIALOG_MARGINS)
    layout.setSpacing(DIALOG_SPACING)
    return layout


def summary_label(text: str = "") -> QLabel:
    """Word-wrapped monospace label for model summaries."""
    label = QLabel(text)
    label.setWordWrap(True)
    label.setStyleSheet(SUMMARY_LABEL_STYLE)
    return label
