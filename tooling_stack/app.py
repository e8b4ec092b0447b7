from __future__ import annotations

import logging
import os
import sys
from typing import Optional

from PySide6 import QtWidgets

from .models import CatalogTableModel, SetupTableModel
from .io_utils import load_catalog_table, export_setup_csv
from .pdf_export import export_setup_pdf
from .optimizer import STEEL_TOOLING, Catalog, SetupReport, calculate, parse_target

logger = logging.getLogger(__name__)

# Longest stack the window will solve; the search table grows with the target.
MAX_TARGET_IN = 120.0


class MainWindow(QtWidgets.QMainWindow):
    def __init__(self, catalog: Catalog = STEEL_TOOLING) -> None:
        super().__init__()
        self.setWindowTitle("Steel Tooling Calculator")
        self.resize(720, 560)

        self._catalog_name = catalog.name
        self._catalog: Optional[Catalog] = catalog
        self._last_report: Optional[SetupReport] = None

        self.catalog_model = CatalogTableModel(list(catalog.sizes), unit_scale=catalog.unit_scale)
        self.setup_model = SetupTableModel([])

        self.target_edit = QtWidgets.QLineEdit()
        self.target_edit.setPlaceholderText('Target width (")')

        self.result_label = QtWidgets.QLabel()
        font = self.result_label.font()
        if font.pointSizeF() > 0:
            font.setPointSizeF(font.pointSizeF() * 1.2)
        font.setBold(True)
        self.result_label.setFont(font)

        self.status_box = QtWidgets.QPlainTextEdit()
        self.status_box.setReadOnly(True)

        self.catalog_view = QtWidgets.QTableView()
        self.catalog_view.setModel(self.catalog_model)
        self.catalog_view.horizontalHeader().setStretchLastSection(True)
        self.catalog_view.setSelectionBehavior(QtWidgets.QAbstractItemView.SelectRows)

        self.setup_view = QtWidgets.QTableView()
        self.setup_view.setModel(self.setup_model)
        self.setup_view.horizontalHeader().setStretchLastSection(True)
        self.setup_view.setEditTriggers(QtWidgets.QAbstractItemView.NoEditTriggers)

        self.btn_load_catalog = QtWidgets.QPushButton("Load Catalog (CSV/XLSX)")
        self.btn_reset_catalog = QtWidgets.QPushButton("Steel Defaults")
        self.btn_add_size = QtWidgets.QPushButton("Add Size")
        self.btn_del_size = QtWidgets.QPushButton("Delete Size(s)")
        self.btn_export = QtWidgets.QPushButton("Export Setup (CSV)")
        self.btn_export_pdf = QtWidgets.QPushButton("Export Setup (PDF)")
        self.btn_export.setEnabled(False)
        self.btn_export_pdf.setEnabled(False)

        top_bar = QtWidgets.QHBoxLayout()
        top_bar.addWidget(QtWidgets.QLabel("Target:"))
        top_bar.addWidget(self.target_edit, stretch=1)
        top_bar.addWidget(self.btn_export)
        top_bar.addWidget(self.btn_export_pdf)

        catalog_btns = QtWidgets.QHBoxLayout()
        catalog_btns.addWidget(self.btn_load_catalog)
        catalog_btns.addWidget(self.btn_reset_catalog)
        catalog_btns.addStretch(1)
        catalog_btns2 = QtWidgets.QHBoxLayout()
        catalog_btns2.addWidget(self.btn_add_size)
        catalog_btns2.addWidget(self.btn_del_size)
        catalog_btns2.addStretch(1)

        left = QtWidgets.QVBoxLayout()
        left.addWidget(QtWidgets.QLabel("Tooling on hand (unlimited qty)"))
        left.addLayout(catalog_btns)
        left.addLayout(catalog_btns2)
        left.addWidget(self.catalog_view, stretch=1)

        right = QtWidgets.QVBoxLayout()
        right.addWidget(self.result_label)
        right.addWidget(self.setup_view, stretch=3)
        right.addWidget(QtWidgets.QLabel("Status"))
        right.addWidget(self.status_box, stretch=1)

        splitter = QtWidgets.QSplitter()
        left_widget = QtWidgets.QWidget()
        left_widget.setLayout(left)
        right_widget = QtWidgets.QWidget()
        right_widget.setLayout(right)
        splitter.addWidget(left_widget)
        splitter.addWidget(right_widget)
        splitter.setStretchFactor(0, 1)
        splitter.setStretchFactor(1, 2)

        central = QtWidgets.QWidget()
        layout = QtWidgets.QVBoxLayout()
        layout.addLayout(top_bar)
        layout.addWidget(splitter)
        central.setLayout(layout)
        self.setCentralWidget(central)

        self.target_edit.textChanged.connect(lambda _text: self.recalculate())
        self.catalog_model.dataChanged.connect(lambda *_: self.on_catalog_edited())
        self.catalog_model.rowsInserted.connect(lambda *_: self.on_catalog_edited())
        self.catalog_model.rowsRemoved.connect(lambda *_: self.on_catalog_edited())
        self.catalog_model.modelReset.connect(lambda: self.on_catalog_edited())
        self.btn_load_catalog.clicked.connect(self.on_load_catalog)
        self.btn_reset_catalog.clicked.connect(lambda: self.set_catalog(STEEL_TOOLING))
        self.btn_add_size.clicked.connect(lambda: self.catalog_model.add_row())
        self.btn_del_size.clicked.connect(self.on_delete_sizes)
        self.btn_export.clicked.connect(self.on_export)
        self.btn_export_pdf.clicked.connect(self.on_export_pdf)

        self.recalculate()

    def log(self, msg: str) -> None:
        self.status_box.appendPlainText(msg)

    def set_catalog(self, catalog: Catalog) -> None:
        self._catalog_name = catalog.name
        self.catalog_model.set_catalog(catalog)
        self.log(f"Catalog: {catalog.name} ({len(catalog.sizes)} sizes)")

    def on_catalog_edited(self) -> None:
        try:
            self._catalog = self.catalog_model.catalog(self._catalog_name)
        except ValueError as e:
            self._catalog = None
            self.log(f"Catalog error: {e}")
        self.recalculate()

    def on_load_catalog(self) -> None:
        path, _ = QtWidgets.QFileDialog.getOpenFileName(self, "Load Catalog", "", "Data Files (*.csv *.xlsx *.xls)")
        if not path:
            return
        try:
            catalog = load_catalog_table(path)
        except Exception as e:
            QtWidgets.QMessageBox.critical(self, "Load error", str(e))
            return
        self.set_catalog(catalog)
        self.log(f"Loaded catalog from: {path}")

    def on_delete_sizes(self) -> None:
        rows = sorted({idx.row() for idx in self.catalog_view.selectionModel().selectedRows()})
        if rows:
            self.catalog_model.remove_rows(rows)

    def recalculate(self) -> None:
        text = self.target_edit.text()
        report: Optional[SetupReport] = None
        prompt = "Enter a width to calculate tooling"
        target_in = parse_target(text)
        if target_in is not None and target_in > MAX_TARGET_IN:
            prompt = f'Target is over the {MAX_TARGET_IN:.3f}" limit'
        elif self._catalog is not None:
            try:
                report = calculate(text, self._catalog)
            except MemoryError:
                prompt = "Target too large to solve"
                self.log(f"Out of memory solving target {text!r}")
        self._last_report = report
        self.btn_export.setEnabled(report is not None)
        self.btn_export_pdf.setEnabled(report is not None)
        self.render_report(report, prompt)

    def render_report(self, report: Optional[SetupReport], prompt: str = "Enter a width to calculate tooling") -> None:
        if report is None:
            self.result_label.setText(prompt)
            self.setup_model.set_lines([])
            return

        text = f'{report.width_in:.3f}" Setup'
        if report.under_in > 0:
            text += f'  ({report.under_in:.3f}" under)'
        self.result_label.setText(text)
        self.setup_model.set_lines(report.lines, report.result.unit_scale)
        self.setup_view.resizeColumnsToContents()

    def _default_export_path(self, ext: str) -> str:
        if self._last_report is None:
            return f"tooling_setup{ext}"
        return f"tooling_setup_{self._last_report.width_in:.3f}{ext}"

    def on_export(self) -> None:
        if not self._last_report:
            return
        path, _ = QtWidgets.QFileDialog.getSaveFileName(
            self, "Export Setup CSV", self._default_export_path(".csv"), "CSV (*.csv)"
        )
        if not path:
            return
        try:
            export_setup_csv(path, self._last_report.result)
            QtWidgets.QMessageBox.information(
                self, "Exported", f"Exported:\n{path}\n\nAlso wrote:\n{path}.summary.csv"
            )
        except Exception as e:
            QtWidgets.QMessageBox.critical(self, "Export error", str(e))

    def on_export_pdf(self) -> None:
        if not self._last_report:
            return
        path, _ = QtWidgets.QFileDialog.getSaveFileName(
            self, "Export Setup PDF", self._default_export_path(".pdf"), "PDF (*.pdf)"
        )
        if not path:
            return
        try:
            export_setup_pdf(
                path,
                self._last_report.result,
                title=f"Tooling setup - {os.path.splitext(os.path.basename(path))[0]}",
                catalog_name=self._catalog_name,
            )
            QtWidgets.QMessageBox.information(self, "Exported", f"Exported:\n{path}")
        except Exception as e:
            QtWidgets.QMessageBox.critical(self, "Export error", str(e))


def main() -> int:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    app = QtWidgets.QApplication(sys.argv)

    w = MainWindow()
    w.show()
    logger.info("Started with catalog %s", STEEL_TOOLING.name)
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
