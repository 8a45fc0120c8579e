#!/usr/bin/env python3
"""
Housing Maze Toolkit - Main Application Entry Point

Initializes the Qt application and launches the maze designer window.
"""

import logging
import os
import sys
from pathlib import Path

# Set Qt environment variables before importing Qt modules.
# These help with macOS rendering compatibility.
os.environ['QT_MAC_WANTS_LAYER'] = '1'
os.environ['QT_ACCESSIBILITY'] = '0'

from PyQt5.QtCore import Qt
from PyQt5.QtGui import QColor, QPalette
from PyQt5.QtWidgets import QApplication

logger = logging.getLogger("housing_maze")


def _dark_palette() -> QPalette:
    palette = QPalette()
    palette.setColor(QPalette.Window, QColor(43, 43, 43))
    palette.setColor(QPalette.WindowText, Qt.white)
    palette.setColor(QPalette.Base, QColor(35, 35, 35))
    palette.setColor(QPalette.AlternateBase, QColor(53, 53, 53))
    palette.setColor(QPalette.ToolTipBase, QColor(53, 53, 53))
    palette.setColor(QPalette.ToolTipText, QColor(224, 224, 224))
    palette.setColor(QPalette.Text, Qt.white)
    palette.setColor(QPalette.Button, QColor(53, 53, 53))
    palette.setColor(QPalette.ButtonText, Qt.white)
    palette.setColor(QPalette.BrightText, Qt.red)
    palette.setColor(QPalette.Link, QColor(219, 99, 255))
    palette.setColor(QPalette.Highlight, QColor(219, 99, 255))
    palette.setColor(QPalette.HighlightedText, Qt.black)
    return palette


def main():
    """Main application entry point."""
    logging.basicConfig(
        level=os.environ.get("HOUSING_MAZE_LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Allow running from a source checkout without installing
    src_dir = Path(__file__).resolve().parent / "src"
    if src_dir.is_dir() and str(src_dir) not in sys.path:
        sys.path.insert(0, str(src_dir))

    app = QApplication(sys.argv)
    app.setApplicationName("Housing Maze Toolkit")
    app.setApplicationDisplayName("Housing Maze Toolkit")
    app.setOrganizationName("HousingMazeToolkit")
    app.setStyle("Fusion")
    app.setPalette(_dark_palette())

    from housing_maze.ui.main_window import MainWindow
    window = MainWindow()
    window.show()
    logger.info("Housing Maze Toolkit started")

    return app.exec_()


if __name__ == "__main__":
    sys.exit(main())
