"""Tests for catalog import and setup export."""

import pandas as pd
import pytest

from tooling_stack.io_utils import export_setup_csv, load_catalog_table, summary_frame
from tooling_stack.optimizer import find_best_setup, summarize_stack


@pytest.fixture
def catalog_csv(tmp_path):
    path = tmp_path / "aluminum.csv"
    path.write_text(' Size ,note\n1,a\n0.5,b\n,blank\n0.25,c\n')
    return path


class TestLoadCatalogTable:
    def test_loads_sizes_in_order(self, catalog_csv):
        cat = load_catalog_table(str(catalog_csv))
        assert cat.sizes == (1.0, 0.5, 0.25)
        assert cat.name == "aluminum"

    def test_explicit_name(self, catalog_csv):
        assert load_catalog_table(str(catalog_csv), name="Alu").name == "Alu"

    def test_missing_column(self, tmp_path):
        path = tmp_path / "bad.csv"
        path.write_text("width\n1\n")
        with pytest.raises(ValueError, match="size"):
            load_catalog_table(str(path))

    def test_invalid_value(self, tmp_path):
        path = tmp_path / "bad.csv"
        path.write_text("size\n1\nabc\n")
        with pytest.raises(ValueError, match="Invalid size value"):
            load_catalog_table(str(path))

    def test_duplicate_sizes(self, tmp_path):
        path = tmp_path / "dup.csv"
        path.write_text("size\n1\n1.0\n")
        with pytest.raises(ValueError, match="Duplicate"):
            load_catalog_table(str(path))

    def test_unsupported_extension(self, tmp_path):
        path = tmp_path / "catalog.txt"
        path.write_text("size\n1\n")
        with pytest.raises(ValueError, match="Unsupported"):
            load_catalog_table(str(path))

    def test_loaded_catalog_solves(self, catalog_csv):
        cat = load_catalog_table(str(catalog_csv))
        result = find_best_setup(1.8, cat)
        assert result.width_u == 1750
        assert result.piece_count == 3


class TestExportSetupCsv:
    def test_summary_frame(self):
        lines = summarize_stack(find_best_setup(3.5).stack)
        df = summary_frame(lines)
        assert list(df.columns) == ["size_in", "count", "subtotal_in"]
        assert df["size_in"].tolist() == ["3.000", "0.500"]
        assert df["count"].tolist() == [1, 1]

    def test_empty_summary_frame(self):
        df = summary_frame([])
        assert df.empty
        assert list(df.columns) == ["size_in", "count", "subtotal_in"]

    def test_writes_setup_and_summary(self, tmp_path):
        path = tmp_path / "setup.csv"
        export_setup_csv(str(path), find_best_setup(6.062))

        setup = pd.read_csv(path, dtype=str)
        assert setup["size_in"].tolist() == ["3.000", "0.062"]
        assert setup["count"].tolist() == ["2", "1"]
        assert setup["subtotal_in"].tolist() == ["6.000", "0.062"]

        summary = pd.read_csv(str(path) + ".summary.csv", dtype=str)
        row = summary.iloc[0]
        assert row["target_in"] == "6.062"
        assert row["achieved_in"] == "6.062"
        assert row["under_in"] == "0.000"
        assert row["pieces"] == "3"
