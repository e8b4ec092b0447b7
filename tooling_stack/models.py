from __future__ import annotations

from typing import Any, List, Optional
from PySide6 import QtCore

from .optimizer import BASE, Catalog, SummaryLine, to_units, u_to_in_str


def _fmt_in(inches: float, scale: int = BASE) -> str:
    # Three-decimal shop readout: 0.5 -> 0.500
    return u_to_in_str(to_units(inches, scale), scale)


class CatalogTableModel(QtCore.QAbstractTableModel):
    HEADERS = ['size (")']

    def __init__(self, sizes: Optional[List[float]] = None, unit_scale: int = BASE) -> None:
        super().__init__()
        # None marks a new row the user has not filled in yet.
        self._sizes: List[Optional[float]] = list(sizes or [])
        self._unit_scale = unit_scale

    def rowCount(self, parent: QtCore.QModelIndex = QtCore.QModelIndex()) -> int:
        return len(self._sizes)

    def columnCount(self, parent: QtCore.QModelIndex = QtCore.QModelIndex()) -> int:
        return 1

    def headerData(self, section: int, orientation: QtCore.Qt.Orientation, role: int = QtCore.Qt.DisplayRole) -> Any:
        if role != QtCore.Qt.DisplayRole:
            return None
        if orientation == QtCore.Qt.Horizontal and 0 <= section < len(self.HEADERS):
            return self.HEADERS[section]
        return None

    def flags(self, index: QtCore.QModelIndex) -> QtCore.Qt.ItemFlags:
        if not index.isValid():
            return QtCore.Qt.NoItemFlags
        return QtCore.Qt.ItemIsSelectable | QtCore.Qt.ItemIsEnabled | QtCore.Qt.ItemIsEditable

    def data(self, index: QtCore.QModelIndex, role: int = QtCore.Qt.DisplayRole) -> Any:
        if not index.isValid() or not (0 <= index.row() < len(self._sizes)):
            return None
        if role in (QtCore.Qt.DisplayRole, QtCore.Qt.EditRole):
            size = self._sizes[index.row()]
            return "" if size is None else _fmt_in(size, self._unit_scale)
        return None

    def setData(self, index: QtCore.QModelIndex, value: Any, role: int = QtCore.Qt.EditRole) -> bool:
        if role != QtCore.Qt.EditRole or not index.isValid() or index.column() != 0:
            return False
        try:
            fv = float(str(value).strip().rstrip('"'))
        except ValueError:
            return False
        if fv <= 0:
            return False
        self._sizes[index.row()] = fv
        self.dataChanged.emit(index, index, [QtCore.Qt.DisplayRole, QtCore.Qt.EditRole])
        return True

    def set_catalog(self, catalog: Catalog) -> None:
        self.beginResetModel()
        self._sizes = list(catalog.sizes)
        self._unit_scale = catalog.unit_scale
        self.endResetModel()

    def sizes(self) -> List[float]:
        """Filled-in sizes, in row order."""
        return [s for s in self._sizes if s is not None]

    def catalog(self, name: str) -> Catalog:
        """Build a Catalog from the edited rows (raises ValueError when invalid).

        Blank rows are left out.
        """
        return Catalog(sizes=tuple(self.sizes()), name=name, unit_scale=self._unit_scale)

    def add_row(self) -> None:
        self.beginInsertRows(QtCore.QModelIndex(), len(self._sizes), len(self._sizes))
        self._sizes.append(None)
        self.endInsertRows()

    def remove_rows(self, row_indices: List[int]) -> None:
        for r in sorted(set(row_indices), reverse=True):
            if 0 <= r < len(self._sizes):
                self.beginRemoveRows(QtCore.QModelIndex(), r, r)
                self._sizes.pop(r)
                self.endRemoveRows()


class SetupTableModel(QtCore.QAbstractTableModel):
    HEADERS = ["size", "count"]

    def __init__(self, lines: Optional[List[SummaryLine]] = None, unit_scale: int = BASE) -> None:
        super().__init__()
        self._lines: List[SummaryLine] = list(lines or [])
        self._unit_scale = unit_scale

    def rowCount(self, parent: QtCore.QModelIndex = QtCore.QModelIndex()) -> int:
        return len(self._lines)

    def columnCount(self, parent: QtCore.QModelIndex = QtCore.QModelIndex()) -> int:
        return 2

    def headerData(self, section: int, orientation: QtCore.Qt.Orientation, role: int = QtCore.Qt.DisplayRole) -> Any:
        if role != QtCore.Qt.DisplayRole:
            return None
        if orientation == QtCore.Qt.Horizontal and 0 <= section < len(self.HEADERS):
            return self.HEADERS[section]
        return None

    def data(self, index: QtCore.QModelIndex, role: int = QtCore.Qt.DisplayRole) -> Any:
        if not index.isValid() or not (0 <= index.row() < len(self._lines)):
            return None
        line = self._lines[index.row()]
        if role == QtCore.Qt.DisplayRole:
            if index.column() == 0:
                return f'{_fmt_in(line.size_in, self._unit_scale)}"'
            if index.column() == 1:
                return f"× {line.count}"
        if role == QtCore.Qt.TextAlignmentRole and index.column() == 1:
            return int(QtCore.Qt.AlignRight | QtCore.Qt.AlignVCenter)
        return None

    def set_lines(self, lines: List[SummaryLine], unit_scale: int = BASE) -> None:
        self.beginResetModel()
        self._lines = list(lines)
        self._unit_scale = unit_scale
        self.endResetModel()

    def lines(self) -> List[SummaryLine]:
        return list(self._lines)
