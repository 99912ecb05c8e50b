"""
Catalog service: the single entry point for adding and endorsing sites and tags.

Routes structural changes to the site registry (and each site's tag
registry) and endorsements to the matching voting counter. The service holds
no process-wide state; construct one per catalog and pass it around.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from sitetags.core.config import UINT256_MAX, Settings
from sitetags.core.errors import CatalogError
from sitetags.core.logging_config import LoggingConfig
from sitetags.core.metrics import observe_endorsement, record_entry_created
from sitetags.registry.entries import NamedEntry, Site, Tag, validate_name
from sitetags.registry.sinks import (BurnSink, CostSignal, PaymentSink,
                                     StaticCostSignal, build_cost_signal,
                                     build_payment_sink)
from sitetags.registry.store import SiteRegistry

logger = LoggingConfig.get_logger(__name__)


class CatalogService:
    def __init__(
        self,
        sink: Optional[PaymentSink] = None,
        cost_signal: Optional[CostSignal] = None,
        max_weight: int = UINT256_MAX,
    ):
        self.sink = sink if sink is not None else BurnSink()
        self.cost_signal = cost_signal if cost_signal is not None else StaticCostSignal()
        self.sites = SiteRegistry(self.sink, max_weight=max_weight)

    @classmethod
    def from_settings(cls, settings: Settings) -> "CatalogService":
        return cls(
            sink=build_payment_sink(settings),
            cost_signal=build_cost_signal(settings),
            max_weight=settings.max_weight,
        )

    # --- Structure ---
    def add_site(self, name: str) -> Site:
        validate_name(name)
        site = self.sites.add(name)
        record_entry_created("site")
        logger.info(f"Site '{name}' added", extra={"site": name})
        return site

    def add_tag(self, site_name: str, tag_name: str) -> Tag:
        validate_name(tag_name)
        site = self.sites.get(site_name)
        tag = site.tags.add(tag_name)
        record_entry_created("tag")
        logger.info(f"Tag '{tag_name}' added to site '{site_name}'", extra={"site": site_name, "tag": tag_name})
        return tag

    # --- Lookups ---
    def get_site(self, name: str) -> Site:
        return self.sites.get(name)

    def get_tag(self, site_name: str, tag_name: str) -> Tag:
        return self.sites.get(site_name).tags.get(tag_name)

    def list_sites(self) -> Tuple[Site, ...]:
        return self.sites.enumerate_all()

    def list_tags(self, site_name: str) -> Tuple[Tag, ...]:
        return self.sites.get(site_name).tags.enumerate_all()

    # --- Endorsements ---
    def start_budget_clock(self) -> float:
        """Mark the start of handling on the cost signal's own clock"""
        return self.cost_signal.start()

    def current_budget(self, started_at: Optional[float] = None) -> int:
        """Remaining-budget figure from the injected cost signal"""
        return self.cost_signal.remaining(started_at)

    def endorse(self, site_name: str, amount: int, compute_budget_remaining: int, positive: bool) -> int:
        """Endorse a site for (positive) or against; returns the counter's new weight"""
        site = self.sites.get(site_name)
        return self._endorse_entry(site, amount, compute_budget_remaining, positive, site=site_name)

    def endorse_tag(
        self,
        site_name: str,
        tag_name: str,
        amount: int,
        compute_budget_remaining: int,
        positive: bool,
    ) -> int:
        tag = self.sites.get(site_name).tags.get(tag_name)
        return self._endorse_entry(tag, amount, compute_budget_remaining, positive, site=site_name, tag=tag_name)

    def _endorse_entry(
        self,
        entry: NamedEntry,
        amount: int,
        compute_budget_remaining: int,
        positive: bool,
        **context,
    ) -> int:
        direction = "positive" if positive else "negative"
        try:
            weight = entry.counter(positive).record_endorsement(amount, compute_budget_remaining)
        except CatalogError as e:
            observe_endorsement(entry.kind, positive, e.kind)
            logger.warning(
                f"Endorsement of {entry.kind} '{entry.name}' rejected: {e.message}",
                extra={**context, "direction": direction, "error_type": e.kind},
            )
            raise
        observe_endorsement(entry.kind, positive, "success", amount + compute_budget_remaining)
        logger.info(
            f"Endorsed {entry.kind} '{entry.name}' ({direction})",
            extra={
                **context,
                "direction": direction,
                "amount": amount,
                "budget": compute_budget_remaining,
                "weight": str(weight),
            },
        )
        return weight

    # --- Serialization ---
    def dump(self) -> List[str]:
        return self.sites.dump()
