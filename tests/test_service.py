"""Tests for SettlementService layer."""

import json
import logging
from datetime import UTC, date, datetime

import pytest

from fx_settle.config import Settings
from fx_settle.exceptions import LedgerError, MissingRateError, SplitRatioError
from fx_settle.models import Expense, FxRate, Ledger, Split
from fx_settle.settle.service import SettlementService


# Helper function for tests
def make_expense(
    payer: str,
    amount_minor: int,
    shares: dict[str, float],
    currency: str = "USD",
    timestamp: datetime = datetime(2025, 8, 10, 12, 0, 0, tzinfo=UTC),
    id: str | None = None,
) -> Expense:
    """Create an Expense for testing."""
    return Expense(
        id=id,
        payer_id=payer,
        amount_minor=amount_minor,
        currency=currency,
        timestamp=timestamp,
        splits=[
            Split(participant_id=pid, share_ratio=ratio)
            for pid, ratio in shares.items()
        ],
    )


@pytest.fixture
def settings():
    """Create settings with a EUR default."""
    return Settings(settlement_currency="EUR")


@pytest.fixture
def service(settings):
    """Create a SettlementService instance."""
    return SettlementService(settings)


@pytest.fixture
def ledger_data():
    """A small two-currency ledger as it would appear on disk."""
    return {
        "settlement_currency": "USD",
        "expenses": [
            {
                "id": "dinner",
                "payer_id": "alice",
                "amount_minor": 10000,
                "currency": "EUR",
                "timestamp": "2025-08-10T12:00:00Z",
                "splits": [
                    {"participant_id": "alice", "share_ratio": 0.5},
                    {"participant_id": "bob", "share_ratio": 0.5},
                ],
            },
            {
                "id": "taxi",
                "payer_id": "bob",
                "amount_minor": 3000,
                "currency": "USD",
                "timestamp": "2025-08-10T22:15:00Z",
                "splits": [
                    {"participant_id": "alice", "share_ratio": 0.5},
                    {"participant_id": "carol", "share_ratio": 0.5},
                ],
            },
        ],
        "rates": [
            {"base_ccy": "EUR", "quote_ccy": "USD", "rate": 1.1, "as_of": "2025-08-10"}
        ],
    }


@pytest.fixture
def ledger_file(tmp_path, ledger_data):
    """Write the sample ledger to a temporary file."""
    path = tmp_path / "ledger.json"
    path.write_text(json.dumps(ledger_data))
    return path


class TestLoadLedger:
    """Tests for load_ledger."""

    def test_loads_valid_file(self, service, ledger_file):
        """Expenses and rates are parsed into models."""
        ledger = service.load_ledger(ledger_file)

        assert ledger.settlement_currency == "USD"
        assert [e.id for e in ledger.expenses] == ["dinner", "taxi"]
        assert ledger.rates[0].as_of == date(2025, 8, 10)

    def test_missing_file(self, service, tmp_path):
        """A missing file raises LedgerError."""
        with pytest.raises(LedgerError, match="Cannot read ledger"):
            service.load_ledger(tmp_path / "nope.json")

    def test_malformed_json(self, service, tmp_path):
        """Broken JSON raises LedgerError."""
        path = tmp_path / "bad.json"
        path.write_text("{not json")

        with pytest.raises(LedgerError, match="Invalid ledger"):
            service.load_ledger(path)

    def test_out_of_range_share(self, service, tmp_path, ledger_data):
        """A share ratio above 1 is rejected at load time."""
        ledger_data["expenses"][0]["splits"][0]["share_ratio"] = 1.5
        path = tmp_path / "ledger.json"
        path.write_text(json.dumps(ledger_data))

        with pytest.raises(LedgerError):
            service.load_ledger(path)

    def test_non_positive_rate(self, service, tmp_path, ledger_data):
        """Rates must be positive."""
        ledger_data["rates"][0]["rate"] = 0
        path = tmp_path / "ledger.json"
        path.write_text(json.dumps(ledger_data))

        with pytest.raises(LedgerError):
            service.load_ledger(path)

    def test_infinite_rate(self, service, tmp_path, ledger_data):
        """An overflowing rate like 1e400 is rejected rather than read as inf."""
        path = tmp_path / "ledger.json"
        path.write_text(
            json.dumps(ledger_data).replace('"rate": 1.1', '"rate": 1e400')
        )

        with pytest.raises(LedgerError, match="Invalid ledger"):
            service.load_ledger(path)


class TestSettle:
    """Tests for settle and settle_ledger."""

    def test_settle_ledger_end_to_end(self, service, ledger_file):
        """Balances and transfers for the sample ledger."""
        ledger = service.load_ledger(ledger_file)

        result = service.settle_ledger(ledger)

        # dinner: 11000 USD, alice +5500 bob -5500
        # taxi: bob +3000, alice -1500, carol -1500
        balances = {b.participant_id: b.amount_minor for b in result.balances}
        assert result.settlement_currency == "USD"
        assert balances == {"alice": 4000, "bob": -2500, "carol": -1500}
        assert [(t.from_id, t.to_id, t.amount_minor) for t in result.transfers] == [
            ("bob", "alice", 2500),
            ("carol", "alice", 1500),
        ]

    def test_explicit_currency_beats_ledger(self, service, ledger_file):
        """A caller-supplied currency overrides the ledger's."""
        ledger = service.load_ledger(ledger_file)

        result = service.settle_ledger(ledger, "EUR")

        # taxi in USD converts via the inverse EUR/USD entry
        balances = {b.participant_id: b.amount_minor for b in result.balances}
        assert result.settlement_currency == "EUR"
        assert balances == {"alice": 3636, "bob": -2273, "carol": -1364}

    def test_falls_back_to_configured_currency(self, service):
        """Without caller or ledger currency, settings decide."""
        ledger = Ledger(
            expenses=[
                make_expense("alice", 10000, {"alice": 0.5, "bob": 0.5}, currency="EUR")
            ]
        )

        result = service.settle_ledger(ledger)

        assert result.settlement_currency == "EUR"
        assert [b.amount_minor for b in result.balances] == [5000, -5000]

    def test_settle_scenario_a(self, service):
        """Equal split in one currency."""
        expenses = [make_expense("alice", 10000, {"alice": 0.5, "bob": 0.5})]

        result = service.settle(expenses, [], "USD")

        assert [(t.from_id, t.to_id, t.amount_minor) for t in result.transfers] == [
            ("bob", "alice", 5000)
        ]

    def test_missing_rate_propagates(self, service):
        """No partial result when a rate is missing."""
        expenses = [make_expense("alice", 10000, {"bob": 1.0}, currency="GBP")]

        with pytest.raises(MissingRateError):
            service.settle(expenses, [], "USD")

    def test_split_ratio_error_propagates(self, service):
        """No partial result when splits are unbalanced."""
        expenses = [make_expense("alice", 10000, {"alice": 0.8, "bob": 0.1})]

        with pytest.raises(SplitRatioError):
            service.settle(expenses, [], "USD")

    def test_logs_summary(self, service, caplog):
        """A summary line is logged at INFO."""
        caplog.set_level(logging.INFO, logger="fx_settle")
        expenses = [make_expense("alice", 10000, {"alice": 0.5, "bob": 0.5})]

        service.settle(expenses, [], "USD")

        assert "Settled 1 expenses in USD: 2 participants, 1 transfers" in caplog.text

    def test_logs_rounding_drift(self, service, caplog):
        """Per-split drift is reported."""
        caplog.set_level(logging.INFO, logger="fx_settle")
        third = 1 / 3
        expenses = [
            make_expense("alice", 10000, {"alice": third, "bob": third, "carol": third})
        ]

        service.settle(expenses, [], "USD")

        assert "Per-split rounding drift: 1 minor units" in caplog.text


class TestFindRate:
    """Tests for find_rate."""

    def test_delegates_to_resolver(self, service):
        """Inverse lookups work through the service."""
        rates = [
            FxRate(base_ccy="EUR", quote_ccy="USD", rate=1.25, as_of=date(2025, 1, 1))
        ]

        assert service.find_rate(rates, "USD", "EUR", date(2025, 1, 1)) == 0.8
