from datetime import date
from typing import Dict, Optional
import pandas as pd
from fpdf import FPDF
from schemas import TimetableResult
from display_utils import format_result_for_display

PAGE_MARGIN = 48
TITLE_HEIGHT = 24
ROW_HEIGHT = 20

def export_file_name(extension: str, today: Optional[date] = None) -> str:
    """e.g. timetable-2025-10-11.pdf"""
    today = today or date.today()
    return f"timetable-{today.isoformat()}.{extension}"

def _latin1(text: str) -> str:
    # The core PDF fonts only cover Latin-1
    return str(text).encode("latin-1", "replace").decode("latin-1")

def _fit_text(pdf: FPDF, text: str, width: float) -> str:
    text = _latin1(text)
    if pdf.get_string_width(text) <= width - 4:
        return text
    while text and pdf.get_string_width(text + "...") > width - 4:
        text = text[:-1]
    return text + "..."

def _draw_table(pdf: FPDF, title: str, df: pd.DataFrame):
    available_width = pdf.w - 2 * PAGE_MARGIN
    column_width = available_width / len(df.columns)

    pdf.set_font("Helvetica", style="B", size=14)
    pdf.cell(available_width, TITLE_HEIGHT, _latin1(title))
    pdf.ln(TITLE_HEIGHT)

    pdf.set_font("Helvetica", style="B", size=9)
    for column in df.columns:
        pdf.cell(column_width, ROW_HEIGHT, _fit_text(pdf, column, column_width), border=1, align="C")
    pdf.ln(ROW_HEIGHT)

    for row in df.itertuples(index=False):
        for position, value in enumerate(row):
            pdf.set_font("Helvetica", style="B" if position == 0 else "", size=9)
            pdf.cell(column_width, ROW_HEIGHT, _fit_text(pdf, value, column_width), border=1, align="C")
        pdf.ln(ROW_HEIGHT)

def result_to_pdf(result: TimetableResult, tables: Optional[Dict[str, pd.DataFrame]] = None) -> bytes:
    """
    Renders every table of the result on its own landscape A4 page and returns
    the document bytes.
    """
    tables = tables if tables is not None else format_result_for_display(result)
    pdf = FPDF(orientation="L", unit="pt", format="A4")
    pdf.set_margins(PAGE_MARGIN, PAGE_MARGIN, PAGE_MARGIN)
    pdf.set_auto_page_break(auto=True, margin=PAGE_MARGIN)

    if not tables:
        pdf.add_page()
        pdf.set_font("Helvetica", size=12)
        pdf.cell(0, TITLE_HEIGHT, "No timetable has been generated.")
    for title, df in tables.items():
        pdf.add_page()
        _draw_table(pdf, title, df)

    return bytes(pdf.output())
