"""Exchange-rate lookup against a flat table of observed rates."""

import logging
from collections.abc import Iterable
from datetime import date

from ..exceptions import MissingRateError
from ..models import FxRate

logger = logging.getLogger(__name__)


def resolve_rate(
    rates: Iterable[FxRate], from_ccy: str, to_ccy: str, as_of: date
) -> float:
    """
    Resolve how many units of `to_ccy` one unit of `from_ccy` buys on `as_of`.

    Lookup order:
    1. Same currency: 1.0, no lookup
    2. Direct entry (from_ccy -> to_ccy) for exactly that date
    3. Inverse entry (to_ccy -> from_ccy) for exactly that date, as 1 / rate

    The first matching entry wins. There is no nearest-date fallback.

    Args:
        rates: Rate table (unordered)
        from_ccy: Currency to convert from
        to_ccy: Currency to convert to
        as_of: Calendar date the rate must have been observed for

    Returns:
        Positive conversion rate

    Raises:
        MissingRateError: If neither a direct nor an inverse entry exists
    """
    if from_ccy == to_ccy:
        return 1.0

    rates = list(rates)

    for fx in rates:
        if fx.base_ccy == from_ccy and fx.quote_ccy == to_ccy and fx.as_of == as_of:
            logger.debug(f"Direct rate {from_ccy}/{to_ccy} @ {as_of}: {fx.rate}")
            return fx.rate

    for fx in rates:
        if fx.base_ccy == to_ccy and fx.quote_ccy == from_ccy and fx.as_of == as_of:
            logger.debug(f"Inverse rate {from_ccy}/{to_ccy} @ {as_of}: 1/{fx.rate}")
            return 1 / fx.rate

    raise MissingRateError(from_ccy, to_ccy, as_of)
