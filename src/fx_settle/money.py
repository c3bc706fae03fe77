"""Minor-unit money helpers."""

from decimal import ROUND_HALF_CEILING, Decimal


def round_half_ceiling(value: Decimal) -> int:
    """Round a Decimal to the nearest integer, ties toward +infinity.

    -2.5 rounds to -2 and 2.5 to 3, so refunds round the same way as costs.
    """
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_CEILING))


def scale(amount_minor: int, factor: float) -> int:
    """
    Multiply an integer minor-unit amount by a real factor and round once.

    The factor goes through its shortest repr so 10000 * 1.1 is exactly 11000
    rather than 11000.000000000002.
    """
    return round_half_ceiling(Decimal(amount_minor) * Decimal(repr(factor)))


def to_minor_units(amount_major: Decimal | float | str, minor_factor: int = 100) -> int:
    """
    Convert a major-unit amount (e.g. dollars) to integer minor units.

    Args:
        amount_major: Amount in major units
        minor_factor: Minor units per major unit (100 for cents)

    Returns:
        Amount in minor units, ties rounded toward +infinity
    """
    if isinstance(amount_major, float):
        amount_major = repr(amount_major)
    return round_half_ceiling(Decimal(amount_major) * minor_factor)


def from_minor_units(amount_minor: int, minor_factor: int = 100) -> Decimal:
    """Convert integer minor units back to a major-unit Decimal."""
    return Decimal(amount_minor) / Decimal(minor_factor)


def format_money(
    amount_minor: int,
    currency: str,
    minor_factor: int = 100,
    use_color: bool = True,
) -> str:
    """
    Format money in accounting style with alignment.

    Negative amounts use parentheses: (85.02 USD)
    Positive amounts have spaces:      85.02 USD
    """
    abs_amount = abs(from_minor_units(amount_minor, minor_factor))
    if amount_minor < 0:
        if use_color:
            return f"([red]{abs_amount:,.2f}[/red] {currency})"
        return f"({abs_amount:,.2f} {currency})"
    if use_color:
        return f" [green]{abs_amount:,.2f}[/green] {currency} "
    return f" {abs_amount:,.2f} {currency} "
