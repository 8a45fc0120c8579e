"""
Main application window for the Housing Maze Toolkit.

Two modes: 2D Maze (single level) and 3D Maze (stacked floors). Generated
walls and floor plates are listed with their coordinates; hovering an entry
highlights the element in the preview. An uploaded housing design can be
placed on every element and saved for import into the housing tool.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional

from PyQt5.QtCore import QSettings, Qt, pyqtSignal
from PyQt5.QtWidgets import (
    QCheckBox, QComboBox, QFileDialog, QFormLayout, QGroupBox, QHBoxLayout,
    QLabel, QLineEdit, QListWidget, QMainWindow, QMessageBox, QPushButton,
    QSplitter, QVBoxLayout, QWidget,
)

from housing_maze.conversion import (
    DesignFileError, export_elements_to_csv, format_element_coordinates,
    load_design_file, process_design, write_processed_design,
)
from housing_maze.generators.maze.engine import MazeEngine
from housing_maze.generators.maze.maze_types import MazeParams
from housing_maze.scene import PreviewScene
from housing_maze.ui.preview import PreviewWidget
from housing_maze.validation import ConnectivityError, InvalidParameterError

logger = logging.getLogger(__name__)

# (attribute, label) per form field; 3D adds the floor plate fields
FIELDS_2D = [
    ('cell_length', "Cell length"),
    ('wall_width', "Wall width"),
    ('wall_height', "Wall height"),
    ('grid_width', "Grid width"),
    ('grid_height', "Grid height"),
]
FIELDS_3D = FIELDS_2D + [
    ('floor_length', "Floor length"),
    ('floor_width', "Floor width"),
    ('floors', "Floors"),
]

SHAPE_TYPES = {2: "maze", 3: "maze3d"}


def parse_field(text: str):
    """Best-effort number parse; unparsable text is passed on for validation."""
    text = text.strip()
    try:
        return int(text)
    except ValueError:
        pass
    try:
        return float(text)
    except ValueError:
        return text


class HoverListWidget(QListWidget):
    """List that reports which row the mouse enters and leaves."""

    row_entered = pyqtSignal(int)
    row_left = pyqtSignal(int)

    def __init__(self, parent=None):
        super().__init__(parent)
        self._hover_row = -1
        self.setMouseTracking(True)
        self.itemEntered.connect(self._on_item_entered)

    def _on_item_entered(self, item):
        row = self.row(item)
        if row == self._hover_row:
            return
        self._leave_current()
        self._hover_row = row
        self.row_entered.emit(row)

    def _leave_current(self):
        if self._hover_row >= 0:
            self.row_left.emit(self._hover_row)
        self._hover_row = -1

    def leaveEvent(self, event):
        self._leave_current()
        super().leaveEvent(event)

    def clear(self):
        self._leave_current()
        super().clear()


class MainWindow(QMainWindow):
    SETTINGS_ORG = "HousingMazeToolkit"
    SETTINGS_APP = "MainWindow"

    def __init__(self):
        super().__init__()
        self.setWindowTitle("Housing Maze Toolkit")
        self._settings = QSettings(self.SETTINGS_ORG, self.SETTINGS_APP)

        self.scene = PreviewScene()
        self.engines: Dict[int, MazeEngine] = {
            2: MazeEngine(self.scene, dimensions=2),
            3: MazeEngine(self.scene, dimensions=3),
        }
        self._dimensions = 2
        self._design: Optional[dict] = None
        self._floor_design: Optional[dict] = None
        self._processed: Optional[dict] = None
        self._fields: Dict[str, QLineEdit] = {}
        self._field_rows: Dict[str, List[QWidget]] = {}

        self._setup_ui()
        self._load_fields()
        self._on_mode_changed(0)

        geometry = self._settings.value("window_geometry")
        if geometry:
            self.restoreGeometry(geometry)

    @property
    def engine(self) -> MazeEngine:
        return self.engines[self._dimensions]

    # ---------------------------------------------------------------
    # UI
    # ---------------------------------------------------------------

    def _setup_ui(self):
        splitter = QSplitter(Qt.Horizontal)
        self.setCentralWidget(splitter)

        left = QWidget()
        left_layout = QVBoxLayout(left)

        self.mode_combo = QComboBox()
        self.mode_combo.addItems(["2D Maze", "3D Maze"])
        self.mode_combo.currentIndexChanged.connect(self._on_mode_changed)
        left_layout.addWidget(self.mode_combo)

        params_group = QGroupBox("Parameters")
        form = QFormLayout(params_group)
        for attr, label in FIELDS_3D:
            edit = QLineEdit()
            edit.returnPressed.connect(self._on_generate)
            label_widget = QLabel(label)
            form.addRow(label_widget, edit)
            self._fields[attr] = edit
            self._field_rows[attr] = [label_widget, edit]
        left_layout.addWidget(params_group)

        buttons = QHBoxLayout()
        self.generate_btn = QPushButton("Generate")
        self.generate_btn.clicked.connect(self._on_generate)
        buttons.addWidget(self.generate_btn)
        self.clear_btn = QPushButton("Clear")
        self.clear_btn.clicked.connect(self._on_clear)
        buttons.addWidget(self.clear_btn)
        left_layout.addLayout(buttons)

        self.count_label = QLabel("")
        left_layout.addWidget(self.count_label)

        coords_group = QGroupBox("Coordinates")
        coords_layout = QVBoxLayout(coords_group)
        self.makeplace_check = QCheckBox("MakePlace format")
        self.makeplace_check.toggled.connect(self._update_coordinates)
        coords_layout.addWidget(self.makeplace_check)
        self.coords_list = HoverListWidget()
        self.coords_list.row_entered.connect(lambda row: self.engine.highlight_point(row))
        self.coords_list.row_left.connect(lambda row: self.engine.reset_point_color(row))
        coords_layout.addWidget(self.coords_list, stretch=1)
        csv_btn = QPushButton("Export CSV")
        csv_btn.clicked.connect(self._on_export_csv)
        coords_layout.addWidget(csv_btn)
        left_layout.addWidget(coords_group, stretch=1)

        design_group = QGroupBox("Housing Design")
        design_layout = QVBoxLayout(design_group)
        upload_btn = QPushButton("Upload Design...")
        upload_btn.clicked.connect(self._on_upload_design)
        design_layout.addWidget(upload_btn)
        self.floor_upload_btn = QPushButton("Upload Floor Design...")
        self.floor_upload_btn.clicked.connect(self._on_upload_floor_design)
        design_layout.addWidget(self.floor_upload_btn)
        self.design_label = QLabel("No design loaded")
        design_layout.addWidget(self.design_label)
        self.process_btn = QPushButton("Process Design")
        self.process_btn.clicked.connect(self._on_process_design)
        self.process_btn.setEnabled(False)
        design_layout.addWidget(self.process_btn)
        self.save_btn = QPushButton("Save Processed Design...")
        self.save_btn.clicked.connect(self._on_save_design)
        self.save_btn.setEnabled(False)
        design_layout.addWidget(self.save_btn)
        left_layout.addWidget(design_group)

        splitter.addWidget(left)

        self.preview_widget = PreviewWidget(self.scene)
        splitter.addWidget(self.preview_widget)
        splitter.setSizes([360, 900])

        self.statusBar().showMessage("Ready - Left-drag to orbit, right-drag to pan, scroll to zoom")

    def _on_mode_changed(self, index: int):
        previous = self.engine
        self._dimensions = 3 if index == 1 else 2
        if previous is not self.engine:
            previous.clear()

        for attr, widgets in self._field_rows.items():
            visible = self._dimensions == 3 or attr in dict(FIELDS_2D)
            for widget in widgets:
                widget.setVisible(visible)
        self.floor_upload_btn.setVisible(self._dimensions == 3)
        self._refresh_outputs()

    # ---------------------------------------------------------------
    # Generation
    # ---------------------------------------------------------------

    def _read_params(self) -> dict:
        fields = FIELDS_3D if self._dimensions == 3 else FIELDS_2D
        return {attr: parse_field(self._fields[attr].text()) for attr, _ in fields}

    def _on_generate(self):
        params = self._read_params()
        try:
            self.engine.generate(params)
        except InvalidParameterError as e:
            QMessageBox.warning(self, "Invalid Parameters", e.message)
            return
        except ConnectivityError as e:
            logger.error("Generation failed: %s", e)
            QMessageBox.critical(self, "Generation Failed", str(e))
            self._refresh_outputs()
            return

        self._save_fields()
        self._processed = None
        self.save_btn.setEnabled(False)
        self.preview_widget.request_fit()
        self._refresh_outputs()
        self.statusBar().showMessage(f"Generated {self.engine.total_count} elements", 5000)

    def _on_clear(self):
        self.engine.clear()
        self._processed = None
        self.save_btn.setEnabled(False)
        self._refresh_outputs()

    def _refresh_outputs(self):
        self._update_counts()
        self._update_coordinates()

    def _update_counts(self):
        label = getattr(self, 'count_label', None)
        if label is None:
            logger.debug("Count display missing; skipping count update")
            return
        engine = self.engine
        if self._dimensions == 3:
            label.setText(
                f"Generated Walls: {engine.wall_count}, Floors: {engine.floor_count} "
                f"(Total Points: {engine.total_count})"
            )
        else:
            label.setText(f"Generated Walls: {engine.wall_count} (Total Points: {engine.total_count})")

    def _update_coordinates(self):
        self.coords_list.clear()
        lines = format_element_coordinates(self.engine.elements, self.makeplace_check.isChecked())
        self.coords_list.addItems(lines)

    def _on_export_csv(self):
        if not self.engine.elements:
            QMessageBox.warning(self, "No Coordinates", "No coordinates to export")
            return
        default = f"{SHAPE_TYPES[self._dimensions]}_coordinates.csv"
        path, _ = QFileDialog.getSaveFileName(self, "Export Coordinates", default, "CSV (*.csv)")
        if not path:
            return
        csv_text = export_elements_to_csv(self.engine.elements, self.makeplace_check.isChecked())
        Path(path).write_text(csv_text, encoding='utf-8')
        self.statusBar().showMessage(f"Exported to {path}", 5000)

    # ---------------------------------------------------------------
    # Housing design
    # ---------------------------------------------------------------

    def _choose_design(self, title: str, label: str) -> Optional[dict]:
        path, _ = QFileDialog.getOpenFileName(self, title, "", "JSON (*.json)")
        if not path:
            return None
        try:
            return load_design_file(path, label)
        except DesignFileError as e:
            QMessageBox.warning(self, "File Upload Error", str(e))
            return None

    def _on_upload_design(self):
        design = self._choose_design("Upload Design", "JSON file")
        if design is None:
            return
        self._design = design
        self.design_label.setText(f"Design: {design['name']}")
        self.process_btn.setEnabled(True)

    def _on_upload_floor_design(self):
        design = self._choose_design("Upload Floor Design", "Floor JSON file")
        if design is not None:
            self._floor_design = design
            self.statusBar().showMessage(f"Floor design: {design['name']}", 5000)

    def _on_process_design(self):
        if self._design is None:
            QMessageBox.warning(self, "No Design", "Please upload a design file first.")
            return
        floor_design = self._floor_design if self._dimensions == 3 else None
        try:
            self._processed = process_design(self.engine.elements, self._design, floor_design)
        except DesignFileError as e:
            QMessageBox.warning(self, "Design Processing Error", str(e))
            return
        self.save_btn.setEnabled(True)
        self.statusBar().showMessage(
            f"Processed design with {len(self._processed['attachments'])} attachments", 5000)

    def _on_save_design(self):
        if self._processed is None:
            QMessageBox.warning(self, "Nothing to Save",
                                "No processed design available. Please process a design first.")
            return
        directory = QFileDialog.getExistingDirectory(self, "Save Processed Design", "output")
        if not directory:
            return
        try:
            path = write_processed_design(self._processed, directory, SHAPE_TYPES[self._dimensions])
        except OSError as e:
            logger.error("Saving design failed: %s", e)
            QMessageBox.critical(self, "Save Error", str(e))
            return
        QMessageBox.information(self, "Saved", f"Design saved to:\n{path}")

    # ---------------------------------------------------------------
    # Settings persistence
    # ---------------------------------------------------------------

    def _load_fields(self):
        defaults = MazeParams.defaults(3).to_dict()
        defaults['grid_width'] = defaults['grid_height'] = 5
        for attr, edit in self._fields.items():
            value = self._settings.value(f"params/{attr}", defaults[attr])
            edit.setText(str(value))

    def _save_fields(self):
        for attr, edit in self._fields.items():
            self._settings.setValue(f"params/{attr}", edit.text().strip())

    def closeEvent(self, event):
        self._settings.setValue("window_geometry", self.saveGeometry())
        self.preview_widget.cleanup()
        event.accept()
