"""Settlement engine: rate lookup, balance computation and transfer planning."""

from .balances import compute_balances
from .rates import resolve_rate
from .transfers import apply_transfers, minimal_transfers

__all__ = [
    "apply_transfers",
    "compute_balances",
    "minimal_transfers",
    "resolve_rate",
]
