from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, List, Tuple

from .optimizer import StackResult, summarize_stack, to_units, u_to_in_str


# Lazy imports so the app can run without reportlab until PDF export is used.
def _string_width(text: str, font_name: str, font_size: float) -> float:
    from reportlab.pdfbase.pdfmetrics import stringWidth
    return stringWidth(text, font_name, font_size)


@dataclass
class _SheetLayout:
    page_w: float
    page_h: float
    margin: float
    header_area_h: float
    font_size: float
    row_h: float
    size_col_w: float
    count_col_w: float
    subtotal_col_w: float
    pad_x: float


def _truncate(text: str, font_name: str, font_size: float, max_w: float) -> str:
    """Truncate a string with ellipsis to fit within max_w points."""
    if not text:
        return ""
    if _string_width(text, font_name, font_size) <= max_w:
        return text
    ell = "..."
    if _string_width(ell, font_name, font_size) >= max_w:
        return ""
    lo, hi = 0, len(text)
    while lo < hi:
        mid = (lo + hi) // 2
        if _string_width(text[:mid] + ell, font_name, font_size) <= max_w:
            lo = mid + 1
        else:
            hi = mid
    return text[: max(0, lo - 1)] + ell


def _table_rows(result: StackResult) -> List[Tuple[str, str, str]]:
    scale = result.unit_scale
    rows: List[Tuple[str, str, str]] = []
    for line in summarize_stack(result.stack):
        size_u = to_units(line.size_in, scale)
        rows.append((f'{u_to_in_str(size_u, scale)}"', f"x {line.count}", f'{u_to_in_str(size_u * line.count, scale)}"'))
    return rows


def export_setup_pdf(
    path: str,
    result: StackResult,
    *,
    title: str = "Tooling setup",
    catalog_name: str = "",
) -> None:
    """Export a printable setup sheet for one stack.

    Layout (portrait letter):
      - header with title, catalog and timestamp
      - target / achieved / under line
      - grouped table, largest piece first
      - stack order, the order pieces were found by the solver
    Long stack listings flow onto additional pages.
    """

    try:
        from reportlab.lib.pagesizes import letter
        from reportlab.pdfgen.canvas import Canvas
    except Exception as e:
        raise RuntimeError(
            "PDF export requires the 'reportlab' package. Install it with: pip install reportlab"
        ) from e

    c = Canvas(path, pagesize=letter)
    page_w, page_h = letter

    layout = _SheetLayout(
        page_w=page_w,
        page_h=page_h,
        margin=48.0,
        header_area_h=44.0,
        font_size=11.0,
        row_h=18.0,
        size_col_w=90.0,
        count_col_w=60.0,
        subtotal_col_w=90.0,
        pad_x=4.0,
    )
    scale = result.unit_scale

    page_no = 1
    _draw_page_header(c, layout, title, catalog_name, page_no=page_no)
    y = layout.page_h - layout.margin - layout.header_area_h

    c.setFont("Helvetica-Bold", 13)
    headline = f'{u_to_in_str(result.width_u, scale)}" Setup'
    if result.under_u > 0:
        headline += f'  ({u_to_in_str(result.under_u, scale)}" under)'
    c.drawString(layout.margin, y, headline)
    y -= layout.row_h
    c.setFont("Helvetica", 10)
    c.drawString(
        layout.margin,
        y,
        f'Target: {u_to_in_str(result.target_u, scale)}"   Pieces: {result.piece_count}',
    )
    y -= 1.5 * layout.row_h

    rows = _table_rows(result)
    if not rows:
        c.setFont("Helvetica", 11)
        c.drawString(layout.margin, y, "(No pieces fit under the target)")
        c.showPage()
        c.save()
        return

    y = _draw_table(c, layout, y, rows)
    y -= layout.row_h

    c.setFont("Helvetica-Bold", 11)
    c.drawString(layout.margin, y, "Stack order")
    y -= layout.row_h
    c.setFont("Helvetica", 10)
    max_w = layout.page_w - 2 * layout.margin - layout.pad_x
    for i, e in enumerate(result.stack, start=1):
        if y < layout.margin:
            c.showPage()
            page_no += 1
            _draw_page_header(c, layout, title, catalog_name, page_no=page_no)
            y = layout.page_h - layout.margin - layout.header_area_h
            c.setFont("Helvetica", 10)
        text = f'{i}.  {u_to_in_str(e.units, scale)}"'
        c.drawString(layout.margin + layout.pad_x, y, _truncate(text, "Helvetica", 10, max_w))
        y -= 14.0

    c.showPage()
    c.save()


def _draw_page_header(c: Any, layout: _SheetLayout, title: str, catalog_name: str, *, page_no: int) -> None:
    x = layout.margin
    y = layout.page_h - layout.margin

    c.setFont("Helvetica-Bold", 16)
    c.drawString(x, y, title)

    c.setFont("Helvetica", 9)
    meta = f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M')}"
    if catalog_name:
        meta = f"Catalog: {catalog_name}   " + meta
    c.drawRightString(layout.page_w - layout.margin, y, meta)

    # Footer page number
    c.drawRightString(layout.page_w - layout.margin, layout.margin - 18, f"Page {page_no}")


def _draw_table(c: Any, layout: _SheetLayout, y_top: float, rows: List[Tuple[str, str, str]]) -> float:
    """Draw the grouped size/count table; returns the y below it."""
    x0 = layout.margin
    widths = [layout.size_col_w, layout.count_col_w, layout.subtotal_col_w]
    total_w = sum(widths)
    total_h = (len(rows) + 1) * layout.row_h
    y0 = y_top - total_h

    c.setLineWidth(0.6)
    c.rect(x0, y0, total_w, total_h)
    c.setLineWidth(0.4)
    for i in range(1, len(rows) + 1):
        y = y_top - i * layout.row_h
        c.line(x0, y, x0 + total_w, y)
    x = x0
    for w in widths[:-1]:
        x += w
        c.line(x, y0, x, y_top)

    baseline = layout.row_h - layout.font_size - 1
    c.setFont("Helvetica-Bold", layout.font_size)
    x = x0
    for label, w in zip(("Size", "Count", "Subtotal"), widths):
        c.drawString(x + layout.pad_x, y_top - layout.row_h + baseline, label)
        x += w

    c.setFont("Helvetica", layout.font_size)
    for r, cells in enumerate(rows, start=1):
        row_y = y_top - (r + 1) * layout.row_h + baseline
        x = x0
        for text, w in zip(cells, widths):
            c.drawString(x + layout.pad_x, row_y, _truncate(text, "Helvetica", layout.font_size, w - 2 * layout.pad_x))
            x += w

    return y0 - layout.row_h
