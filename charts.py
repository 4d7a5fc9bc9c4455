# charts.py
# ALE pre/post comparison chart (on-screen Plotly + static PNG for the PDF report)

import io
import math
from typing import List

import plotly.graph_objects as go
from matplotlib.figure import Figure
from matplotlib.ticker import FuncFormatter

from risk_calculator import CalculationResult

BAR_LABELS = ["ALE Pre", "ALE Post"]
BAR_COLORS = ["#60a5fa", "#93c5fd"]


def _shortest(value: float) -> str:
    """Shortest round-tripping text for a float, without a trailing '.0'."""
    text = repr(float(value))
    return text[:-2] if text.endswith(".0") else text


def axis_tick_label(value: float) -> str:
    """Collapse large values to k/M suffixes: 2500000 -> '2.5M', 608000 -> '608k'."""
    if value >= 1_000_000:
        return f"{_shortest(value / 1_000_000)}M"
    if value >= 1_000:
        return f"{_shortest(value / 1_000)}k"
    return _shortest(value)


def nice_ticks(max_value: float, count: int = 5) -> List[float]:
    """Round tick positions (1/2/5 x 10^n steps) from 0 up to at least max_value."""
    if max_value <= 0:
        return [0.0]
    raw_step = max_value / count
    magnitude = 10 ** math.floor(math.log10(raw_step))
    step = next(m * magnitude for m in (1, 2, 5, 10) if m * magnitude >= raw_step)
    n = int(math.ceil(max_value / step))
    return [i * step for i in range(n + 1)]


def ale_bar_figure(ale_pre: float, ale_post: float) -> go.Figure:
    values = [ale_pre, ale_post]
    ticks = nice_ticks(max(values))
    fig = go.Figure()
    fig.add_trace(go.Bar(
        x=BAR_LABELS,
        y=values,
        name="USD",
        marker_color=BAR_COLORS,
        hovertemplate="%{x}: $%{y:,.0f}<extra></extra>",
    ))
    fig.update_layout(
        showlegend=False,
        height=320,
        margin=dict(l=10, r=10, t=30, b=10),
        title="Annualized Loss Expectancy",
        yaxis=dict(
            rangemode="tozero",
            tickmode="array",
            tickvals=ticks,
            ticktext=[axis_tick_label(t) for t in ticks],
        ),
    )
    return fig


def ale_bar_png(ale_pre: float, ale_post: float, dpi: int = 150) -> bytes:
    """Render the same comparison as a PNG for embedding in the PDF."""
    fig = Figure(figsize=(5.0, 2.8))
    ax = fig.add_subplot(111)
    ax.bar(BAR_LABELS, [ale_pre, ale_post], color=BAR_COLORS)
    ax.set_ylim(bottom=0)
    ax.yaxis.set_major_formatter(FuncFormatter(lambda v, _pos: axis_tick_label(v)))
    ax.set_title("Annualized Loss Expectancy (USD)", fontsize=10)
    ax.spines["top"].set_visible(False)
    ax.spines["right"].set_visible(False)
    fig.tight_layout()
    buf = io.BytesIO()
    fig.savefig(buf, format="png", dpi=dpi)
    return buf.getvalue()


def result_chart(result: CalculationResult) -> go.Figure:
    return ale_bar_figure(result.ale_pre, result.ale_post)
