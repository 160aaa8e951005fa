"""PDF rendering helpers for the capacity workspace.

A one-page snapshot of the current scenario: tariff and inputs, headline
cards, the monthly breakdown and the savings rationale.
"""

from typing import List, Optional, Tuple

from fpdf import FPDF

from frontend.ui.rendering import format_currency
from services.demand_charges import TariffConstants
from services.derivation import DerivedSeries
from services.rationale import build_savings_narrative, rationale_caption


def _pdf_text(text: str) -> str:
    """Replace characters the core Helvetica font cannot encode."""

    return str(text).encode("latin-1", errors="replace").decode("latin-1")


def _draw_metric_card(
    pdf: FPDF,
    x: float,
    y: float,
    w: float,
    h: float,
    title: str,
    value: str,
    subtitle: str,
    fill_rgb: Tuple[int, int, int],
) -> None:
    pdf.set_fill_color(*fill_rgb)
    pdf.set_draw_color(230, 232, 235)
    pdf.rect(x, y, w, h, style="DF")
    pdf.set_xy(x + 2, y + 2)
    pdf.set_text_color(50, 50, 50)
    pdf.set_font("Helvetica", "B", 10)
    pdf.cell(w - 4, 5, _pdf_text(title))

    pdf.set_xy(x + 2, y + 9)
    pdf.set_font("Helvetica", "", 13)
    pdf.set_text_color(15, 15, 15)
    pdf.cell(w - 4, 7, _pdf_text(value))

    pdf.set_xy(x + 2, y + h - 6)
    pdf.set_font("Helvetica", "", 8)
    pdf.set_text_color(80, 80, 80)
    pdf.cell(w - 4, 4, _pdf_text(subtitle))
    pdf.set_text_color(0, 0, 0)


def _draw_section_header(pdf: FPDF, title: str, margin: float, usable_width: float) -> None:
    pdf.set_font("Helvetica", "B", 12)
    pdf.set_text_color(20, 20, 20)
    pdf.cell(0, 7, _pdf_text(title), new_x="LMARGIN", new_y="NEXT")
    pdf.set_draw_color(220, 223, 228)
    pdf.line(margin, pdf.get_y(), margin + usable_width, pdf.get_y())
    pdf.ln(2)


def _draw_table(
    pdf: FPDF,
    x: float,
    y: float,
    col_widths: List[float],
    rows: List[List[str]],
    header_fill: Tuple[int, int, int] = (245, 248, 255),
    row_fill: Tuple[int, int, int] = (255, 255, 255),
    font_size: int = 9,
) -> float:
    """Render a simple table and return the updated y position (bottom of table)."""
    pdf.set_xy(x, y)
    pdf.set_font("Helvetica", "B", font_size)
    pdf.set_fill_color(*header_fill)
    pdf.set_draw_color(220, 223, 228)
    pdf.set_text_color(20, 20, 20)
    for idx, cell in enumerate(rows[0]):
        pdf.cell(col_widths[idx], 6, _pdf_text(cell), border=1, align="L", fill=True)
    pdf.ln(6)
    pdf.set_font("Helvetica", "", font_size)
    pdf.set_fill_color(*row_fill)
    for row in rows[1:]:
        pdf.set_x(x)
        for idx, cell in enumerate(row):
            pdf.cell(col_widths[idx], 6, _pdf_text(cell), border=1, align="R" if idx else "L", fill=True)
        pdf.ln(6)
    return pdf.get_y()


def _to_bytes(pdf: FPDF) -> bytes:
    pdf_bytes = pdf.output()
    return pdf_bytes.encode("latin-1") if isinstance(pdf_bytes, str) else bytes(pdf_bytes)


def build_pdf_summary(
    derived: DerivedSeries,
    tariff: TariffConstants,
    baseline_capacity_kw: float,
    explanation: Optional[str] = None,
) -> bytes:
    """Render a one-page PDF snapshot of the current capacity scenario."""
    pdf = FPDF(format="A4")
    pdf.set_auto_page_break(auto=True, margin=12)
    pdf.add_page()
    margin = 12
    usable_width = 210 - 2 * margin
    state = derived.state

    pdf.set_font("Helvetica", "B", 15)
    pdf.set_text_color(20, 20, 20)
    pdf.cell(0, 10, "CapacityLab - Contracted Capacity Summary", new_x="LMARGIN", new_y="NEXT")
    pdf.set_font("Helvetica", "", 10)
    pdf.cell(
        0,
        6,
        f"Battery: {state.battery_capacity_kw:,.0f} kW  |  Contracted: {state.contracted_capacity_kw:,.0f} kW  |  "
        f"Baseline: {baseline_capacity_kw:,.0f} kW, no battery",
        new_x="LMARGIN",
        new_y="NEXT",
    )
    pdf.cell(
        0,
        6,
        f"Tariff: ${tariff.contracted_rate_per_kw_month:.2f}/kW/month contracted, "
        f"${tariff.exceedance_rate_per_kw_month:.2f}/kW/month exceedance",
        new_x="LMARGIN",
        new_y="NEXT",
    )
    pdf.ln(3)

    if not derived.labels:
        pdf.set_text_color(90, 90, 90)
        pdf.multi_cell(0, 5, "No billing periods were loaded, so there is nothing to summarize.")
        return _to_bytes(pdf)

    _draw_section_header(pdf, "1. Headline figures", margin, usable_width)
    card_w = (usable_width - 8) / 3
    card_y = pdf.get_y()
    savings_fill = (232, 245, 233) if derived.is_positive_savings else (253, 236, 234)
    _draw_metric_card(
        pdf, margin, card_y, card_w, 22, "Total charge", format_currency(derived.total_charge),
        f"{derived.period_count} billing periods", (245, 248, 255),
    )
    _draw_metric_card(
        pdf, margin + card_w + 4, card_y, card_w, 22, "Baseline charge",
        format_currency(derived.baseline_total_charge), f"{baseline_capacity_kw:,.0f} kW, raw demand",
        (245, 248, 255),
    )
    _draw_metric_card(
        pdf, margin + 2 * (card_w + 4), card_y, card_w, 22, "Net impact",
        format_currency(derived.net_savings), derived.net_label, savings_fill,
    )
    pdf.set_y(card_y + 26)

    _draw_section_header(pdf, "2. Monthly breakdown", margin, usable_width)
    rows = [["Month", "Max (kW)", "Effective (kW)", "Exceedance (kW)", "Charge", "Net impact"]]
    for idx, label in enumerate(derived.labels):
        rows.append(
            [
                label,
                f"{derived.max_demand_kw[idx]:,.0f}",
                f"{derived.effective_demand_kw[idx]:,.0f}",
                f"{derived.exceedance_kw[idx]:,.0f}",
                format_currency(derived.monthly_charge[idx]),
                format_currency(derived.monthly_savings[idx]),
            ]
        )
    col_widths = [26.0, 28.0, 32.0, 34.0, 33.0, 33.0]
    table_bottom = _draw_table(pdf, margin, pdf.get_y(), col_widths, rows)
    pdf.set_y(table_bottom + 4)

    _draw_section_header(pdf, "3. Rationale", margin, usable_width)
    pdf.set_font("Helvetica", "", 10)
    pdf.set_text_color(40, 40, 40)
    narrative = build_savings_narrative(
        state.contracted_capacity_kw, baseline_capacity_kw, derived.is_positive_savings, derived.rationale
    )
    pdf.multi_cell(0, 5, _pdf_text(narrative), new_x="LMARGIN", new_y="NEXT")
    pdf.set_font("Helvetica", "I", 9)
    pdf.multi_cell(0, 5, _pdf_text(rationale_caption(derived.rationale)), new_x="LMARGIN", new_y="NEXT")
    if explanation:
        pdf.ln(2)
        pdf.set_font("Helvetica", "", 10)
        pdf.multi_cell(0, 5, _pdf_text(explanation))

    return _to_bytes(pdf)
