"""Shared fixtures for fx-settle tests."""

from datetime import date

import pytest

from fx_settle.models import FxRate


@pytest.fixture
def eur_usd_rates():
    """EUR->USD rates for two consecutive days."""
    return [
        FxRate(base_ccy="EUR", quote_ccy="USD", rate=1.1, as_of=date(2025, 8, 10)),
        FxRate(base_ccy="EUR", quote_ccy="USD", rate=1.2, as_of=date(2025, 8, 11)),
    ]
