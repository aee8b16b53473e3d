"""
GUI entry point for Cube Volume Studio.
"""

import logging
import os
import sys
from typing import Optional

from PyQt5.QtWidgets import QApplication, QMessageBox

from config import LOG_DATE_FORMAT, LOG_FORMAT, LOG_LEVEL
from gui import MainWindow
from loaders import load_cube_into

logger = logging.getLogger(__name__)


class AppController:
    """
    Application Controller: owns the QApplication and the main window.
    """

    def __init__(self):
        self.app = QApplication(sys.argv)
        self.window = MainWindow()

    def open_cube(self, path: str) -> bool:
        try:
            self.window.model.clear_cubes()
            cube = load_cube_into(self.window.model, path)
            self.window.model.name = cube.title or os.path.basename(path)
            self.window.update_status(f"Loaded {len(cube.fields)} field(s) from {path}")
            return True
        except ValueError as e:
            logger.error("Loading Error: %s", e)
            QMessageBox.critical(self.window, "Loading Error", f"Loading Error: {e}")
            return False

    def run(self, source_path: Optional[str] = None):
        if source_path and os.path.exists(source_path):
            self.open_cube(source_path)
        self.window.show()
        sys.exit(self.app.exec_())


if __name__ == "__main__":
    logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
    app = AppController()
    app.run(sys.argv[1] if len(sys.argv) > 1 else None)
