# report.py
# PDF export for the Cyber Risk ROSI Quick Check (letter, 0.4in margins)

import io
import logging
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from fpdf import FPDF
from fpdf.enums import XPos, YPos

from charts import ale_bar_png
from risk_calculator import CalculationResult

logger = logging.getLogger(__name__)

PAGE_FORMAT = "letter"
MARGIN_IN = 0.4
LINE_H = 0.26


def currency(x: float) -> str:
    return f"${x:,.0f}"


def format_rosi(result: CalculationResult) -> str:
    return str(result.rosi)


def report_timestamp(now: Optional[datetime] = None) -> str:
    """ISO-8601 with a space separator and a UTC suffix, e.g. '2026-10-19 14:03:27.512 UTC'."""
    now = now or datetime.now(timezone.utc)
    now = now.astimezone(timezone.utc)
    return now.strftime("%Y-%m-%d %H:%M:%S.") + f"{now.microsecond // 1000:03d} UTC"


def report_filename(now: Optional[datetime] = None) -> str:
    now = now or datetime.now(timezone.utc)
    return f"CyberRisk_ROI_Report_{now.astimezone(timezone.utc):%Y-%m-%d}.pdf"


def _yes_no(flag: bool) -> str:
    return "Yes" if flag else "No"


def input_rows(result: CalculationResult) -> List[Tuple[str, str]]:
    inp = result.inputs
    return [
        ("Sector", inp.sector),
        ("Asset value", currency(inp.asset_value)),
        ("Exposure factor", f"{inp.exposure_factor:g}%"),
        ("DR strategy", inp.strategy),
        ("Multi-factor authentication", _yes_no(inp.mfa)),
        ("Phishing-awareness training", _yes_no(inp.phishing)),
        ("Succession planning", _yes_no(inp.succession)),
        ("Include DR cost in ROSI", _yes_no(inp.include_dr_cost)),
    ]


def result_rows(result: CalculationResult) -> List[Tuple[str, str]]:
    return [
        ("Loss magnitude", currency(result.loss_magnitude)),
        ("Single loss expectancy (SLE)", currency(result.sle)),
        ("ALE (pre-controls)", currency(result.ale_pre)),
        ("ALE (post-controls)", currency(result.ale_post)),
        ("Downtime loss, baseline (Cold Site)", currency(result.downtime_baseline)),
        (f"Downtime loss, {result.inputs.strategy}", currency(result.downtime_selected)),
        ("Money saved (downtime avoided)", currency(result.money_saved)),
        ("Total control cost", currency(result.total_control_cost)),
        ("ROSI cost basis", currency(result.rosi_cost)),
        ("ROSI", format_rosi(result)),
    ]


class ReportPDF(FPDF):
    def footer(self):
        self.set_y(-MARGIN_IN)
        self.set_font("Helvetica", "I", 8)
        self.set_text_color(110, 110, 110)
        self.cell(0, 0.2, f"Page {self.page_no()}/{{nb}}", align="C")


def _section(pdf: FPDF, title: str, rows: List[Tuple[str, str]]):
    pdf.set_font("Helvetica", "B", 12)
    pdf.set_text_color(0, 0, 0)
    pdf.cell(0, 0.32, title, new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.set_font("Helvetica", size=10)
    label_w = (pdf.w - 2 * MARGIN_IN) * 0.55
    for label, value in rows:
        pdf.cell(label_w, LINE_H, label)
        pdf.cell(0, LINE_H, value, align="R", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.ln(0.1)


def build_report(result: CalculationResult, timestamp: Optional[str] = None) -> bytes:
    """Render the result as PDF bytes."""
    timestamp = timestamp or report_timestamp()
    pdf = ReportPDF(orientation="P", unit="in", format=PAGE_FORMAT)
    pdf.set_margins(MARGIN_IN, MARGIN_IN, MARGIN_IN)
    pdf.set_auto_page_break(auto=True, margin=MARGIN_IN + 0.2)
    pdf.add_page()

    pdf.set_font("Helvetica", "B", 16)
    pdf.cell(0, 0.4, "Cyber Risk ROI Report", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.set_font("Helvetica", size=9)
    pdf.set_text_color(90, 90, 90)
    pdf.cell(0, 0.22, f"Generated: {timestamp}", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.ln(0.15)

    _section(pdf, "Inputs", input_rows(result))
    _section(pdf, "Results", result_rows(result))

    png = ale_bar_png(result.ale_pre, result.ale_post)
    pdf.image(io.BytesIO(png), w=5.0)
    pdf.ln(0.1)

    pdf.set_font("Helvetica", "B", 12)
    pdf.cell(0, 0.32, "Notes", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.set_font("Helvetica", size=9)
    pdf.multi_cell(
        0, 0.2,
        "ALE = loss magnitude x exposure factor x annual rate of occurrence. MFA halves the "
        "rate and phishing training lowers it by 20%. Downtime savings compare the selected "
        "DR strategy against a Cold Site baseline without succession planning. "
        "ROSI = (ALE reduction + downtime savings - cost) / cost. Figures are illustrative.",
    )

    data = bytes(pdf.output())
    logger.info("Built PDF report (%d bytes, %d page(s))", len(data), pdf.page_no())
    return data
