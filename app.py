# app.py
# Cyber Risk ROSI Quick Check
# -----------------------------------------------------
# Purpose: Estimate annualized loss, downtime exposure and return on security
# investment (ROSI) for a sector, and export the result as a PDF report.
# Notes:
# - Sector, DR strategy and control figures are illustrative reference data
#   (see reference_data.py). Calibrate with field data before relying on them.
# - All math lives in risk_calculator.py; this page only collects inputs and renders.

import logging
import os

import streamlit as st

from charts import result_chart
from reference_data import DEFAULT_TABLES, InvalidReference, strategy_summary
from report import build_report, currency, report_filename, report_timestamp
from risk_calculator import CalculationInput, compute_all

logging.basicConfig(
    level=os.environ.get("ROSI_LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# -----------------------------
# Global UI Config
# -----------------------------
st.set_page_config(
    page_title="Cyber Risk ROSI Quick Check",
    page_icon="🛡️",
    layout="wide",
    initial_sidebar_state="collapsed",
)

# -----------------------------
# Styling (clean cards)
# -----------------------------
CARD_CSS = """
<style>
.block-container {padding-top: 1.2rem;}

.card {
  border: 1px solid rgba(0,0,0,0.08);
  border-radius: 12px;
  background: #ffffff;
  padding: 1rem 1rem 0.75rem 1rem;
  box-shadow: 0 2px 8px rgba(0,0,0,0.04);
}
.card h4 {margin: 0 0 0.35rem 0; font-size: 1.05rem}
.kpi {font-weight: 800; font-size: 1.25rem;}
.kpi.good {color: #0a8a0a;}
.kpi-sub {color: #555; font-size: 0.9rem;}
.badge {display: inline-block; padding: 0.2rem 0.5rem; border-radius: 999px; font-size: 0.75rem;}
.badge.green {background:#eaf7ea; color:#106a10; border: 1px solid #bfe1bf}
.badge.amber {background:#fff6e6; color:#7a4b00; border: 1px solid #f2d49a}
.badge.gray {background:#f2f2f2; color:#333; border: 1px solid #ddd}
</style>
"""

st.markdown(CARD_CSS, unsafe_allow_html=True)

# -----------------------------
# Constants (form defaults)
# -----------------------------
DEFAULT_SECTOR = "Finance"
DEFAULT_ASSET_VALUE = 1_000_000.0
DEFAULT_EXPOSURE_FACTOR = 50
DEFAULT_STRATEGY = "Warm Site"


def card(title: str, kpi: str, sub: str = "", kpi_class: str = ""):
    st.markdown(
        f"<div class='card'><h4>{title}</h4>"
        f"<div class='kpi {kpi_class}'>{kpi}</div>"
        f"<div class='kpi-sub'>{sub}</div></div>",
        unsafe_allow_html=True,
    )


def rosi_badge(ratio) -> str:
    if ratio is None:
        return "gray"
    return "green" if ratio > 0 else ("amber" if ratio == 0 else "gray")


# -----------------------------
# Header
# -----------------------------
st.title("🛡️ Cyber Risk ROSI Quick Check")
st.caption("Annualized loss · Downtime exposure · Return on security investment")

# -----------------------------
# Inputs
# -----------------------------
left, right = st.columns([1.0, 1.5], gap="large")

sectors = DEFAULT_TABLES.sector_names()
strategies = DEFAULT_TABLES.strategy_names()
labels = strategy_summary(DEFAULT_TABLES)
costs = DEFAULT_TABLES.control_costs

with left:
    st.subheader("Your Organization")
    sector = st.selectbox("Sector", sectors, index=sectors.index(DEFAULT_SECTOR))
    asset_value = st.number_input(
        "Asset value (USD)", min_value=0.0, step=10_000.0, value=DEFAULT_ASSET_VALUE,
        help="Used for SLE, and as loss magnitude when the sector has no average breach cost.",
    )
    exposure_factor = st.slider(
        "Exposure factor (%)", min_value=0, max_value=100, value=DEFAULT_EXPOSURE_FACTOR,
        help="Share of the asset value lost in a single incident.",
    )

    st.subheader("Controls")
    mfa = st.checkbox(f"Multi-factor authentication ({currency(costs.mfa)}/yr)", value=True)
    phishing = st.checkbox(f"Phishing-awareness training ({currency(costs.phishing)}/yr)", value=True)
    succession = st.checkbox(f"Succession planning ({currency(costs.succession)}/yr)", value=False)

    st.subheader("Disaster recovery")
    strategy = st.radio(
        "DR strategy", strategies, index=strategies.index(DEFAULT_STRATEGY),
        format_func=lambda name: f"{name} — {labels[name]}",
    )
    include_dr = st.checkbox("Include DR cost in ROSI", value=True)

with right:
    st.subheader("Your Results")
    inp = CalculationInput(
        sector=sector,
        asset_value=asset_value,
        exposure_factor=exposure_factor,
        mfa=mfa,
        phishing=phishing,
        succession=succession,
        strategy=strategy,
        include_dr_cost=include_dr,
    )
    try:
        result = compute_all(inp, DEFAULT_TABLES)
    except InvalidReference as exc:
        st.error(str(exc))
        st.stop()

    c1, c2, c3 = st.columns(3)
    with c1:
        card("ALE (pre-controls)", currency(result.ale_pre), f"SLE: {currency(result.sle)}")
    with c2:
        card("ALE (post-controls)", currency(result.ale_post),
             f"Reduction: {currency(result.ale_reduction)}/yr")
    with c3:
        card("ROSI", str(result.rosi), f"Cost basis: {currency(result.rosi_cost)}/yr",
             kpi_class="good" if not result.rosi.is_undefined and result.rosi.ratio > 0 else "")
        st.markdown(
            f"<span class='badge {rosi_badge(result.rosi.ratio)}'>"
            f"{'DR cost included' if include_dr else 'DR cost excluded'}</span>",
            unsafe_allow_html=True,
        )

    c4, c5 = st.columns(2)
    with c4:
        card("Money saved (downtime avoided)", currency(result.money_saved),
             f"vs Cold Site baseline {currency(result.downtime_baseline)}", kpi_class="good")
    with c5:
        card("Total control cost", f"{currency(result.total_control_cost)}/yr",
             f"Downtime loss with {strategy}: {currency(result.downtime_selected)}")

    st.plotly_chart(result_chart(result), width="stretch")

    ts = report_timestamp()
    st.caption(f"Report timestamp: {ts}")
    st.download_button(
        "⬇️ Download PDF Report",
        data=build_report(result, ts),
        file_name=report_filename(),
        mime="application/pdf",
        key="download_rosi_pdf",
    )

# -----------------------------
# Assumptions, formulas & limitations
# -----------------------------
st.divider()
st.subheader("Assumptions, formulas & limitations")

with st.expander("Show details", expanded=False):
    st.markdown(
        """
- **Loss magnitude**: the sector's average breach cost; falls back to the asset value if none is set.
- **SLE**: asset value × exposure factor.
- **ALE (pre)**: loss magnitude × exposure factor × sector ARO.
- **ALE (post)**: as above, with ARO × **0.5** if MFA is enabled and × **0.8** if phishing training is enabled.
- **Downtime loss**: downtime cost/hour × recovery hours; succession planning lowers the hourly cost by **10%**.
- **Money saved**: Cold Site downtime loss (no succession) minus the selected strategy's, floored at 0.
- **ROSI**: (ALE reduction + money saved − cost) / cost. With *Include DR cost* off, the strategy's annual
  cost is left out of the cost basis while its downtime savings still count. Zero cost shows **inf**.

**Limitations**: Sector rates and costs are illustrative averages. Real outcomes depend on control scope,
threat landscape and recovery execution.
        """,
    )

st.caption("Cyber Risk ROSI Quick Check — illustrative estimates for discussion.")
