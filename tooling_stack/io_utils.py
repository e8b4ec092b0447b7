from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import pandas as pd

from .optimizer import BASE, Catalog, StackResult, SummaryLine, summarize_stack, to_units, u_to_in_str

logger = logging.getLogger(__name__)


def _parse_in(value, field: str) -> Optional[float]:
    """Parse a numeric inch value from CSV/XLSX; None for a blank cell."""
    if pd.isna(value):
        return None
    text = str(value).strip().rstrip('"')
    if not text:
        return None
    try:
        return float(text)
    except ValueError as e:
        raise ValueError(f"Invalid {field} value: {value!r}") from e


def load_catalog_table(path: str, name: Optional[str] = None, unit_scale: int = BASE) -> Catalog:
    """Load a tooling catalog from a table with a ``size`` column (inches).

    Row order is kept as the catalog's declared order.
    """
    df = _read_table(path)
    df = _normalize_columns(df)
    if "size" not in df.columns:
        raise ValueError("Catalog file must have column: size")
    sizes: List[float] = []
    for _, row in df.iterrows():
        size = _parse_in(row["size"], "size")
        if size is not None:
            sizes.append(size)
    catalog = Catalog(sizes=tuple(sizes), name=name or Path(path).stem, unit_scale=unit_scale)
    logger.info("Loaded catalog %r (%d sizes) from %s", catalog.name, len(catalog.sizes), path)
    return catalog


def summary_frame(lines: List[SummaryLine], scale: int = BASE) -> pd.DataFrame:
    rows = []
    for line in lines:
        size_u = to_units(line.size_in, scale)
        rows.append(
            {
                "size_in": u_to_in_str(size_u, scale),
                "count": line.count,
                "subtotal_in": u_to_in_str(size_u * line.count, scale),
            }
        )
    return pd.DataFrame(rows, columns=["size_in", "count", "subtotal_in"])


def export_setup_csv(path: str, result: StackResult) -> None:
    scale = result.unit_scale
    summary_frame(summarize_stack(result.stack), scale).to_csv(path, index=False)
    pd.DataFrame(
        [
            {
                "target_in": u_to_in_str(result.target_u, scale),
                "achieved_in": u_to_in_str(result.width_u, scale),
                "under_in": u_to_in_str(result.under_u, scale),
                "pieces": result.piece_count,
                "exact": result.exact,
            }
        ]
    ).to_csv(path + ".summary.csv", index=False)
    logger.info("Exported setup to %s", path)


def _read_table(path: str) -> pd.DataFrame:
    p = path.lower()
    if p.endswith(".csv"):
        return pd.read_csv(path, dtype=str)
    if p.endswith(".xlsx") or p.endswith(".xls"):
        return pd.read_excel(path, dtype=str)
    raise ValueError("Unsupported file type. Use .csv or .xlsx")


def _normalize_columns(df: pd.DataFrame) -> pd.DataFrame:
    df = df.copy()
    df.columns = [str(c).strip().lower() for c in df.columns]
    return df
