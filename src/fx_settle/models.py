"""Pydantic domain models for fx-settle."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

# ============================================================================
# Engine Inputs
# ============================================================================


class Split(BaseModel):
    """One participant's share of an expense."""

    model_config = ConfigDict(frozen=True)

    participant_id: str
    share_ratio: float = Field(ge=0.0, le=1.0, allow_inf_nan=False)


class Expense(BaseModel):
    """A shared expense paid by one participant.

    amount_minor is the total cost in the minor units of `currency`.
    Only the UTC calendar date of `timestamp` matters for rate lookup.
    """

    model_config = ConfigDict(frozen=True)

    id: str | None = None
    payer_id: str
    amount_minor: int
    currency: str
    timestamp: datetime
    splits: list[Split]
    description: str | None = None


class FxRate(BaseModel):
    """An observed exchange rate: 1 unit of base = `rate` units of quote."""

    model_config = ConfigDict(frozen=True)

    base_ccy: str
    quote_ccy: str
    rate: float = Field(gt=0.0, allow_inf_nan=False)
    as_of: date


# ============================================================================
# Engine Outputs
# ============================================================================


class Balance(BaseModel):
    """A participant's net position in the settlement currency.

    Positive: the group owes this participant. Negative: they owe the group.
    """

    model_config = ConfigDict(frozen=True)

    participant_id: str
    amount_minor: int


class Transfer(BaseModel):
    """A payment from one participant to another that settles debt."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    from_id: str = Field(alias="from")
    to_id: str = Field(alias="to")
    amount_minor: int = Field(gt=0)


# ============================================================================
# Ledger File / Results
# ============================================================================


class Ledger(BaseModel):
    """The contents of a ledger file: expenses plus the rate table."""

    settlement_currency: str | None = None
    expenses: list[Expense] = Field(default_factory=list)
    rates: list[FxRate] = Field(default_factory=list)


class SettlementResult(BaseModel):
    """Balances and the transfers that settle them."""

    settlement_currency: str
    balances: list[Balance]
    transfers: list[Transfer]
