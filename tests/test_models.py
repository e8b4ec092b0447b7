"""Tests for the Qt table models."""

import pytest

pytest.importorskip("PySide6.QtCore")

from tooling_stack.models import CatalogTableModel, SetupTableModel  # noqa: E402
from tooling_stack.optimizer import STEEL_TOOLING, Catalog, SummaryLine, find_best_setup  # noqa: E402


class TestCatalogTableModel:
    def test_shows_three_decimals(self, qapp):
        model = CatalogTableModel([0.5, 0.031])
        assert model.rowCount() == 2
        assert model.data(model.index(0, 0)) == "0.500"
        assert model.data(model.index(1, 0)) == "0.031"

    def test_set_data(self, qapp):
        model = CatalogTableModel([0.5])
        assert model.setData(model.index(0, 0), '0.625"')
        assert model.sizes() == [0.625]
        assert not model.setData(model.index(0, 0), "abc")
        assert not model.setData(model.index(0, 0), "-1")
        assert model.sizes() == [0.625]

    def test_builds_catalog(self, qapp):
        model = CatalogTableModel()
        model.set_catalog(STEEL_TOOLING)
        cat = model.catalog("Steel")
        assert cat.sizes == STEEL_TOOLING.sizes

    def test_add_and_remove(self, qapp):
        model = CatalogTableModel([1.0, 0.5, 0.25])
        model.add_row()
        assert model.rowCount() == 4
        assert model.setData(model.index(3, 0), "0.1")
        model.remove_rows([0, 2, 9])
        assert model.sizes() == [0.5, 0.1]

    def test_invalid_catalog_raises(self, qapp):
        model = CatalogTableModel([0.5, 0.5])
        with pytest.raises(ValueError):
            model.catalog("Dup")


class TestSetupTableModel:
    def test_rows(self, qapp):
        model = SetupTableModel([SummaryLine(size_in=3.0, count=2), SummaryLine(size_in=0.062, count=1)])
        assert model.rowCount() == 2
        assert model.columnCount() == 2
        assert model.data(model.index(0, 0)) == '3.000"'
        assert model.data(model.index(0, 1)) == "× 2"
        assert model.data(model.index(1, 0)) == '0.062"'

    def test_set_lines(self, qapp):
        model = SetupTableModel()
        model.set_lines([SummaryLine(size_in=0.5, count=1)])
        assert model.lines() == [SummaryLine(size_in=0.5, count=1)]
        model.set_lines([])
        assert model.rowCount() == 0


class TestBlankRows:
    def test_new_row_is_blank(self, qapp):
        model = CatalogTableModel([0.5])
        model.add_row()
        assert model.rowCount() == 2
        assert model.data(model.index(1, 0)) == ""
        assert model.sizes() == [0.5]

    def test_new_rows_leave_result_unchanged(self, qapp):
        model = CatalogTableModel()
        model.set_catalog(STEEL_TOOLING)
        before = find_best_setup(0.033, model.catalog("Steel"))
        model.add_row()
        model.add_row()
        after = find_best_setup(0.033, model.catalog("Steel"))
        assert before.width_u == after.width_u == 31
        assert after.stack == before.stack

    def test_filled_row_joins_catalog(self, qapp):
        model = CatalogTableModel([0.5])
        model.add_row()
        model.setData(model.index(1, 0), "0.25")
        assert model.catalog("Mix").sizes == (0.5, 0.25)


class TestUnitScale:
    def test_catalog_keeps_scale(self, qapp):
        model = CatalogTableModel()
        model.set_catalog(Catalog(sizes=(1.25, 0.5), name="Coarse", unit_scale=100))
        assert model.catalog("Coarse").unit_scale == 100
        assert model.data(model.index(0, 0)) == "1.250"

    def test_sizes_round_half_up(self, qapp):
        model = SetupTableModel()
        model.set_lines([SummaryLine(size_in=0.3125, count=1)])
        assert model.data(model.index(0, 0)) == '0.313"'
