# risk_calculator.py
# Cyber Risk ROSI Quick Check — calculation engine
# -----------------------------------------------------
# Pure functions: (CalculationInput, ReferenceTables) -> CalculationResult.
# No UI state, no I/O. Inputs are coerced and clamped, never rejected; the only
# error raised is InvalidReference for an unknown sector or DR strategy.

import logging
from dataclasses import asdict, dataclass, field, replace
from typing import Any, Dict, Optional

from reference_data import (
    BASELINE_STRATEGY,
    DEFAULT_TABLES,
    DrStrategy,
    InvalidReference,
    ReferenceTables,
    SectorProfile,
    to_number,
)

logger = logging.getLogger(__name__)

__all__ = [
    "CalculationInput",
    "CalculationResult",
    "InvalidReference",
    "Rosi",
    "ale_post",
    "ale_pre",
    "clamp_percent",
    "compute_all",
    "downtime_loss",
    "return_on_security_investment",
    "single_loss_expectancy",
    "to_number",
]

MFA_RATE_FACTOR = 0.5  # MFA halves the occurrence rate
PHISH_RATE_FACTOR = 0.8  # awareness training: -20%
SUCCESSION_HOURLY_FACTOR = 0.9  # succession planning: -10% on hourly downtime cost


# -----------------------------
# Helper functions
# -----------------------------

def clamp_percent(x: Any) -> float:
    return max(0.0, min(to_number(x), 100.0))


@dataclass(frozen=True)
class Rosi:
    """ROSI ratio, or undefined when the cost basis is zero.

    Kept as a tagged value instead of float('inf') so formatting and
    serialization stay well-defined.
    """
    ratio: Optional[float] = None

    @classmethod
    def finite(cls, ratio: float) -> "Rosi":
        return cls(ratio=float(ratio))

    @classmethod
    def undefined(cls) -> "Rosi":
        return cls(ratio=None)

    @property
    def is_undefined(self) -> bool:
        return self.ratio is None

    def as_percent(self) -> Optional[float]:
        return None if self.ratio is None else self.ratio * 100.0

    def __str__(self) -> str:
        pct = self.as_percent()
        return "inf" if pct is None else f"{pct:.1f}%"


# -----------------------------
# Records
# -----------------------------

@dataclass(frozen=True)
class CalculationInput:
    sector: str
    asset_value: float = 0.0
    exposure_factor: float = 0.0  # percent, 0-100
    mfa: bool = False
    phishing: bool = False
    succession: bool = False
    strategy: str = BASELINE_STRATEGY
    include_dr_cost: bool = True

    def normalized(self) -> "CalculationInput":
        """Copy with numbers coerced, exposure factor clamped and asset value floored at 0."""
        return replace(
            self,
            asset_value=max(0.0, to_number(self.asset_value)),
            exposure_factor=clamp_percent(self.exposure_factor),
            mfa=bool(self.mfa),
            phishing=bool(self.phishing),
            succession=bool(self.succession),
            include_dr_cost=bool(self.include_dr_cost),
        )


@dataclass(frozen=True)
class CalculationResult:
    inputs: CalculationInput
    loss_magnitude: float
    sle: float
    ale_pre: float
    ale_post: float
    downtime_baseline: float
    downtime_selected: float
    money_saved: float
    total_control_cost: float
    rosi_cost: float
    rosi: Rosi = field(default_factory=Rosi.undefined)

    @property
    def ale_reduction(self) -> float:
        return self.ale_pre - self.ale_post

    def to_dict(self) -> Dict[str, Any]:
        """Flat mapping for reports/JSON; an undefined ROSI becomes None."""
        out = asdict(self.inputs)
        out.update({
            "loss_magnitude": self.loss_magnitude,
            "sle": self.sle,
            "ale_pre": self.ale_pre,
            "ale_post": self.ale_post,
            "downtime_baseline": self.downtime_baseline,
            "downtime_selected": self.downtime_selected,
            "money_saved": self.money_saved,
            "total_control_cost": self.total_control_cost,
            "rosi_cost": self.rosi_cost,
            "rosi": self.rosi.ratio,
        })
        return out


# -----------------------------
# Formulas
# -----------------------------

def single_loss_expectancy(asset_value: float, exposure_factor: float) -> float:
    return to_number(asset_value) * (clamp_percent(exposure_factor) / 100.0)


def ale_pre(sector: SectorProfile, loss_magnitude: float, exposure_factor: float) -> float:
    """Annualized loss expectancy before controls, at the sector's baseline ARO."""
    return (
        to_number(loss_magnitude)
        * (clamp_percent(exposure_factor) / 100.0)
        * sector.annual_rate_of_occurrence
    )


def ale_post(
    sector: SectorProfile,
    loss_magnitude: float,
    exposure_factor: float,
    mfa: bool = False,
    phishing: bool = False,
) -> float:
    """Annualized loss expectancy with MFA and/or phishing training applied to the ARO."""
    rate = sector.annual_rate_of_occurrence
    if mfa:
        rate *= MFA_RATE_FACTOR
    if phishing:
        rate *= PHISH_RATE_FACTOR
    return to_number(loss_magnitude) * (clamp_percent(exposure_factor) / 100.0) * rate


def downtime_loss(sector: SectorProfile, strategy: DrStrategy, succession: bool = False) -> float:
    per_hour = sector.downtime_cost_per_hour
    if succession:
        per_hour *= SUCCESSION_HOURLY_FACTOR
    return per_hour * strategy.recovery_time_hours


def return_on_security_investment(
    ale_pre_value: float,
    ale_post_value: float,
    money_saved: float,
    total_cost: float,
) -> Rosi:
    if total_cost == 0:
        return Rosi.undefined()
    return Rosi.finite(((ale_pre_value - ale_post_value) + money_saved - total_cost) / total_cost)


# -----------------------------
# Orchestration
# -----------------------------

def compute_all(inp: CalculationInput, tables: ReferenceTables = DEFAULT_TABLES) -> CalculationResult:
    """Run the full calculation for one request.

    Raises InvalidReference if the sector or strategy is not in ``tables``.
    """
    inp = inp.normalized()
    sector = tables.sector(inp.sector)
    strategy = tables.strategy(inp.strategy)
    baseline = tables.strategy(BASELINE_STRATEGY)
    costs = tables.control_costs

    loss_magnitude = sector.average_breach_cost or inp.asset_value
    sle = single_loss_expectancy(inp.asset_value, inp.exposure_factor)
    pre = ale_pre(sector, loss_magnitude, inp.exposure_factor)
    post = ale_post(sector, loss_magnitude, inp.exposure_factor, inp.mfa, inp.phishing)

    downtime_baseline = downtime_loss(sector, baseline, succession=False)
    downtime_selected = downtime_loss(sector, strategy, inp.succession)
    money_saved = max(0.0, downtime_baseline - downtime_selected)

    total_cost = strategy.annual_cost
    if inp.mfa:
        total_cost += costs.mfa
    if inp.phishing:
        total_cost += costs.phishing
    if inp.succession:
        total_cost += costs.succession

    # DR cost may be left out of the cost basis; its downtime benefit is still counted.
    rosi_cost = total_cost if inp.include_dr_cost else total_cost - strategy.annual_cost
    rosi = return_on_security_investment(pre, post, money_saved, rosi_cost)

    logger.debug(
        "computed sector=%s strategy=%s ale_pre=%.2f ale_post=%.2f saved=%.2f cost=%.2f rosi=%s",
        inp.sector, inp.strategy, pre, post, money_saved, rosi_cost, rosi,
    )
    return CalculationResult(
        inputs=inp,
        loss_magnitude=loss_magnitude,
        sle=sle,
        ale_pre=pre,
        ale_post=post,
        downtime_baseline=downtime_baseline,
        downtime_selected=downtime_selected,
        money_saved=money_saved,
        total_control_cost=total_cost,
        rosi_cost=rosi_cost,
        rosi=rosi,
    )
