# reference_data.py
# Static reference tables for the Cyber Risk ROSI Quick Check.
# -----------------------------------------------------
# Notes:
# - Sector figures are illustrative industry averages (breach-class events per year,
#   average breach cost, downtime cost per hour). Calibrate before real use.
# - Tables are read-only; pass a different ReferenceTables to the calculator to override.
#   Record fields are coerced on construction: ARO clamped to [0, 1], costs and hours floored at 0.

import logging
import math
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping

logger = logging.getLogger(__name__)


class InvalidReference(LookupError):
    """Raised when a sector or DR strategy name is not in the reference tables."""

    def __init__(self, kind: str, name: str, known):
        self.kind = kind
        self.name = name
        self.known = sorted(known)
        super().__init__(f"Unknown {kind} {name!r}; expected one of {self.known}")


# -----------------------------
# Coercion helpers
# -----------------------------

def to_number(x: Any) -> float:
    """Coerce form input to float; missing, non-numeric, overflowing or non-finite -> 0.0."""
    try:
        v = float(x)
    except (TypeError, ValueError, OverflowError):
        return 0.0
    return v if math.isfinite(v) else 0.0


def non_negative(x: Any) -> float:
    return max(0.0, to_number(x))


def _coerce_fields(record, **coercers):
    for name, fn in coercers.items():
        object.__setattr__(record, name, fn(getattr(record, name)))


# -----------------------------
# Record types
# -----------------------------

@dataclass(frozen=True)
class SectorProfile:
    annual_rate_of_occurrence: float  # ARO, probability in [0, 1]
    average_breach_cost: float  # USD, default loss magnitude
    downtime_cost_per_hour: float  # USD/h

    def __post_init__(self):
        _coerce_fields(
            self,
            annual_rate_of_occurrence=lambda v: min(non_negative(v), 1.0),
            average_breach_cost=non_negative,
            downtime_cost_per_hour=non_negative,
        )


@dataclass(frozen=True)
class DrStrategy:
    recovery_time_hours: float
    annual_cost: float  # USD/yr

    def __post_init__(self):
        _coerce_fields(self, recovery_time_hours=non_negative, annual_cost=non_negative)


@dataclass(frozen=True)
class ControlCostTable:
    mfa: float = 25_000.0
    phishing: float = 7_500.0
    succession: float = 5_000.0

    def __post_init__(self):
        _coerce_fields(self, mfa=non_negative, phishing=non_negative, succession=non_negative)


# -----------------------------
# Constants
# -----------------------------
SECTOR_DATA: Mapping[str, SectorProfile] = MappingProxyType({
    "Healthcare": SectorProfile(0.59, 9_770_000.0, 300_000.0),
    "Finance": SectorProfile(0.20, 6_080_000.0, 5_600_000.0),
    "Retail": SectorProfile(0.14, 2_500_000.0, 200_000.0),
    "Manufacturing": SectorProfile(0.62, 4_800_000.0, 2_300_000.0),
})

BASELINE_STRATEGY = "Cold Site"

DR_STRATEGIES: Mapping[str, DrStrategy] = MappingProxyType({
    "Cold Site": DrStrategy(recovery_time_hours=336.0, annual_cost=10_000.0),
    "Warm Site": DrStrategy(recovery_time_hours=48.0, annual_cost=50_000.0),
    "Hot Site": DrStrategy(recovery_time_hours=4.0, annual_cost=150_000.0),
})

CONTROL_COSTS = ControlCostTable()


@dataclass(frozen=True)
class ReferenceTables:
    """Bundle of the lookup tables the calculator reads.

    Mappings are wrapped read-only on construction so one instance can be
    shared between callers.
    """
    sectors: Mapping[str, SectorProfile] = field(default_factory=lambda: SECTOR_DATA)
    strategies: Mapping[str, DrStrategy] = field(default_factory=lambda: DR_STRATEGIES)
    control_costs: ControlCostTable = field(default_factory=ControlCostTable)

    def __post_init__(self):
        object.__setattr__(self, "sectors", MappingProxyType(dict(self.sectors)))
        object.__setattr__(self, "strategies", MappingProxyType(dict(self.strategies)))

    def sector(self, name: str) -> SectorProfile:
        try:
            return self.sectors[name]
        except (KeyError, TypeError):
            logger.warning("Unknown sector requested: %r", name)
            raise InvalidReference("sector", name, self.sectors.keys()) from None

    def strategy(self, name: str) -> DrStrategy:
        try:
            return self.strategies[name]
        except (KeyError, TypeError):
            logger.warning("Unknown DR strategy requested: %r", name)
            raise InvalidReference("DR strategy", name, self.strategies.keys()) from None

    def sector_names(self) -> list:
        return list(self.sectors.keys())

    def strategy_names(self) -> list:
        return list(self.strategies.keys())


DEFAULT_TABLES = ReferenceTables()


def strategy_summary(tables: ReferenceTables = DEFAULT_TABLES) -> Dict[str, str]:
    """Short label per strategy, e.g. 'Warm Site' -> '48h recovery · $50,000/yr'."""
    return {
        name: f"{s.recovery_time_hours:,.0f}h recovery · ${s.annual_cost:,.0f}/yr"
        for name, s in tables.strategies.items()
    }
