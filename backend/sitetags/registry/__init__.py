"""
Catalog registry layer.

Sites and tags, their voting counters, and the ``CatalogService`` facade
that routes adds, lookups and endorsements to them.
"""

from .entries import FIELD_SEPARATOR, NamedEntry, Site, Tag, validate_name
from .service import CatalogService
from .sinks import (BurnSink, CostSignal, ElapsedBudgetSignal, HttpPaymentSink,
                    PaymentSink, StaticCostSignal)
from .store import EntryRegistry, SiteRegistry, TagRegistry
from .voting import VotingCounter

__all__ = [
    "FIELD_SEPARATOR",
    "BurnSink",
    "CatalogService",
    "CostSignal",
    "ElapsedBudgetSignal",
    "EntryRegistry",
    "HttpPaymentSink",
    "NamedEntry",
    "PaymentSink",
    "Site",
    "SiteRegistry",
    "StaticCostSignal",
    "Tag",
    "TagRegistry",
    "VotingCounter",
    "validate_name",
]
