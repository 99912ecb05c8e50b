"""
Voting counter: accumulates endorsement weight for one direction of one entry.
"""
import threading

from sitetags.core.config import UINT256_MAX
from sitetags.core.errors import ArithmeticOverflow, InvalidAmount
from sitetags.registry.sinks import PaymentSink


def _check_unsigned(value, field: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidAmount(f"{field} must be an integer, got {type(value).__name__}")
    if value < 0:
        raise InvalidAmount(f"{field} must be non-negative, got {value}")
    return value


class VotingCounter:
    """
    Monotonic weight accumulator.

    Each endorsement adds ``amount + compute_budget_remaining``. The payment
    is burned through the sink before the new weight is committed; if the
    sink fails or the bound would be exceeded the weight stays as it was.
    """

    def __init__(self, sink: PaymentSink, max_weight: int = UINT256_MAX):
        self._sink = sink
        self._max_weight = max_weight
        self._weight = 0
        self._lock = threading.Lock()

    def record_endorsement(self, amount: int, compute_budget_remaining: int) -> int:
        """
        Burn ``amount`` and credit ``amount + compute_budget_remaining``

        Returns:
            New accumulated weight

        Raises:
            InvalidAmount: negative or non-integer input
            ArithmeticOverflow: new weight would exceed the counter bound
            PaymentSinkError: the sink could not absorb the payment
        """
        _check_unsigned(amount, "amount")
        _check_unsigned(compute_budget_remaining, "compute_budget_remaining")

        with self._lock:
            new_weight = self._weight + amount + compute_budget_remaining
            if new_weight > self._max_weight:
                raise ArithmeticOverflow(
                    "endorsement would overflow accumulated weight",
                    metadata={"weight": str(self._weight), "added": str(amount + compute_budget_remaining)},
                )
            self._sink.burn(amount)
            self._weight = new_weight
            return new_weight

    def current_weight(self) -> int:
        return self._weight

    def __repr__(self) -> str:
        return f"VotingCounter(weight={self._weight})"
