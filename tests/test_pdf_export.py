"""Tests for the printable setup sheet."""

import pytest

from tooling_stack.optimizer import Catalog, find_best_setup

pytest.importorskip("reportlab")

from tooling_stack.pdf_export import _table_rows, export_setup_pdf  # noqa: E402


def test_table_rows_grouped():
    rows = _table_rows(find_best_setup(6.062))
    assert rows == [('3.000"', "x 2", '6.000"'), ('0.062"', "x 1", '0.062"')]


def test_writes_pdf(tmp_path):
    path = tmp_path / "setup.pdf"
    export_setup_pdf(str(path), find_best_setup(4.5), catalog_name="Steel")
    assert path.read_bytes().startswith(b"%PDF")


def test_empty_stack_still_writes(tmp_path):
    path = tmp_path / "empty.pdf"
    export_setup_pdf(str(path), find_best_setup(0.030))
    assert path.read_bytes().startswith(b"%PDF")


def test_long_stack_flows_to_more_pages(tmp_path):
    path = tmp_path / "long.pdf"
    result = find_best_setup(3.1, Catalog(sizes=(0.031,), name="Thin"))
    assert result.piece_count == 100
    export_setup_pdf(str(path), result)
    assert path.read_bytes().startswith(b"%PDF")
