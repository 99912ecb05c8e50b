"""
Payment sinks and cost signals injected into the catalog.

A payment sink irrevocably absorbs the amount paid for an endorsement. A cost
signal reports the "remaining computational budget" figure that is added to
the endorsement weight alongside the payment. Both are supplied to
``CatalogService`` at construction time.
"""
import threading
import time
import uuid
from typing import Callable, Optional, Protocol

import httpx

from sitetags.core.config import Settings
from sitetags.core.errors import PaymentSinkError
from sitetags.core.logging_config import LoggingConfig, request_context
from sitetags.core.metrics import record_burn

logger = LoggingConfig.get_logger(__name__)


class PaymentSink(Protocol):
    name: str

    def burn(self, amount: int) -> None:
        """Irrevocably consume ``amount``; raise PaymentSinkError on failure"""
        ...


class CostSignal(Protocol):
    name: str

    def start(self) -> float:
        """Reading of the signal's own clock, taken when handling begins"""
        ...

    def remaining(self, started_at: Optional[float] = None) -> int:
        """
        Budget left for an endorsement whose handling began at ``started_at``

        ``started_at`` must come from this signal's ``start()``; None means
        handling begins now.
        """
        ...


class BurnSink:
    """In-process sink: payments go to a running total nobody can withdraw from"""

    name = "burn"

    def __init__(self):
        self._total = 0
        self._lock = threading.Lock()

    @property
    def total_burned(self) -> int:
        return self._total

    def burn(self, amount: int) -> None:
        with self._lock:
            self._total += amount
        record_burn(self.name, amount)
        logger.debug(f"Burned {amount}", extra={"amount": amount})


class HttpPaymentSink:
    """
    Sink that reports each burn to an external ledger.

    The ledger must answer with a 2xx status. Transport errors, timeouts and
    error statuses all raise PaymentSinkError so the endorsement is aborted.
    Every burn carries an ``Idempotency-Key`` header (the current request id,
    or a fresh uuid outside a request) so the ledger can void a burn whose
    acknowledgement was lost.
    """

    name = "http"
    idempotency_header = "Idempotency-Key"

    def __init__(self, url: str, timeout: float = 5.0, client: Optional[httpx.Client] = None):
        self.url = url
        self._client = client or httpx.Client(timeout=timeout)

    @staticmethod
    def _burn_key() -> str:
        return request_context.get({}).get("request_id") or uuid.uuid4().hex

    def burn(self, amount: int) -> None:
        key = self._burn_key()
        try:
            response = self._client.post(
                self.url,
                json={"amount": amount},
                headers={self.idempotency_header: key},
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.warning(
                f"Ledger rejected burn of {amount}: HTTP {e.response.status_code}",
                extra={"amount": amount, "status_code": e.response.status_code, "idempotency_key": key}
            )
            raise PaymentSinkError(
                f"ledger rejected burn with HTTP {e.response.status_code}",
                metadata={"status_code": e.response.status_code, "idempotency_key": key},
            ) from e
        except httpx.HTTPError as e:
            logger.warning(
                f"Ledger unreachable: {e}",
                extra={"amount": amount, "error_type": type(e).__name__, "idempotency_key": key}
            )
            raise PaymentSinkError(
                f"ledger unreachable: {e}",
                metadata={"idempotency_key": key},
            ) from e
        record_burn(self.name, amount)

    def close(self):
        self._client.close()


class StaticCostSignal:
    """Reports the same remaining budget for every endorsement"""

    name = "static"

    def __init__(self, value: int = 0):
        if value < 0:
            raise ValueError("static cost signal must be non-negative")
        self.value = value

    def start(self) -> float:
        return 0.0

    def remaining(self, started_at: Optional[float] = None) -> int:
        return self.value


class ElapsedBudgetSignal:
    """
    Allowance in microseconds minus the time already spent handling the call.

    Both readings come from the signal's own clock. Like unused gas, the
    figure is approximate: it is sampled before the weight update itself
    runs, so that cost is never deducted.
    """

    name = "elapsed"

    def __init__(self, budget_us: int, clock: Callable[[], float] = time.perf_counter):
        if budget_us < 0:
            raise ValueError("budget must be non-negative")
        self.budget_us = budget_us
        self._clock = clock

    def start(self) -> float:
        return self._clock()

    def remaining(self, started_at: Optional[float] = None) -> int:
        if started_at is None:
            return self.budget_us
        spent_us = int((self._clock() - started_at) * 1_000_000)
        return min(self.budget_us, max(0, self.budget_us - spent_us))


def build_payment_sink(settings: Settings) -> PaymentSink:
    if settings.payment_sink == "http":
        if not settings.payment_sink_url:
            raise ValueError("payment_sink_url is required when payment_sink is 'http'")
        return HttpPaymentSink(settings.payment_sink_url, timeout=settings.payment_sink_timeout_seconds)
    return BurnSink()


def build_cost_signal(settings: Settings) -> CostSignal:
    if settings.cost_signal == "elapsed":
        return ElapsedBudgetSignal(settings.cost_signal_budget_us)
    return StaticCostSignal(settings.cost_signal_static_value)
