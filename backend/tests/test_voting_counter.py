"""
Tests for VotingCounter weighting and atomicity
"""
import threading

import pytest

from sitetags.core.errors import ArithmeticOverflow, InvalidAmount, PaymentSinkError
from sitetags.registry.sinks import BurnSink
from sitetags.registry.voting import VotingCounter


def test_counter_starts_at_zero(sink):
    assert VotingCounter(sink).current_weight() == 0


def test_weight_is_amount_plus_budget(sink):
    counter = VotingCounter(sink)

    assert counter.record_endorsement(100, 5) == 105
    assert counter.current_weight() == 105


def test_weight_accumulates_sum_of_pairs(sink):
    """Weight is non-decreasing and equals the sum of all (amount + budget)"""
    counter = VotingCounter(sink)
    pairs = [(0, 0), (3, 4), (10, 0), (0, 9), (250, 1)]

    previous = 0
    for amount, budget in pairs:
        weight = counter.record_endorsement(amount, budget)
        assert weight >= previous
        previous = weight

    assert counter.current_weight() == sum(a + b for a, b in pairs)


def test_amount_is_burned_but_budget_is_not(sink):
    counter = VotingCounter(sink)
    counter.record_endorsement(40, 1000)
    counter.record_endorsement(2, 0)

    assert sink.total_burned == 42


def test_overflow_fails_without_burning():
    sink = BurnSink()
    counter = VotingCounter(sink, max_weight=100)
    counter.record_endorsement(90, 0)

    with pytest.raises(ArithmeticOverflow):
        counter.record_endorsement(10, 1)

    assert counter.current_weight() == 90
    assert sink.total_burned == 90


def test_exact_bound_is_allowed():
    counter = VotingCounter(BurnSink(), max_weight=100)
    assert counter.record_endorsement(60, 40) == 100


def test_default_bound_is_uint256(sink):
    counter = VotingCounter(sink)
    counter.record_endorsement(2 ** 256 - 2, 1)

    with pytest.raises(ArithmeticOverflow):
        counter.record_endorsement(0, 1)


def test_sink_failure_leaves_weight_unchanged(failing_sink):
    counter = VotingCounter(failing_sink)

    with pytest.raises(PaymentSinkError):
        counter.record_endorsement(10, 10)

    assert counter.current_weight() == 0
    assert failing_sink.calls == 1


@pytest.mark.parametrize("amount, budget", [(-1, 0), (0, -1), (1.5, 0), ("3", 0), (True, 0)])
def test_rejects_non_unsigned_inputs(sink, amount, budget):
    counter = VotingCounter(sink)

    with pytest.raises(InvalidAmount):
        counter.record_endorsement(amount, budget)

    assert counter.current_weight() == 0
    assert sink.total_burned == 0


def test_concurrent_endorsements_do_not_lose_updates(sink):
    counter = VotingCounter(sink)
    per_thread = 200
    threads = [
        threading.Thread(target=lambda: [counter.record_endorsement(1, 2) for _ in range(per_thread)])
        for _ in range(8)
    ]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert counter.current_weight() == 8 * per_thread * 3
    assert sink.total_burned == 8 * per_thread
