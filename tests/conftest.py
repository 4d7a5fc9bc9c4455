"""Shared fixtures for the ROSI calculator tests."""

import pytest

from reference_data import DEFAULT_TABLES
from risk_calculator import CalculationInput


@pytest.fixture
def tables():
    return DEFAULT_TABLES


@pytest.fixture
def finance_input():
    """Finance / Warm Site scenario with MFA and phishing training on."""
    return CalculationInput(
        sector="Finance",
        asset_value=1_000_000,
        exposure_factor=50,
        mfa=True,
        phishing=True,
        succession=False,
        strategy="Warm Site",
        include_dr_cost=True,
    )
