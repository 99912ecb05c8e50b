"""
API routes for the site/tag catalog.

Catalog errors raised here are translated to HTTP responses by the handler
registered in ``sitetags.main``.
"""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Request, status
from pydantic import BaseModel, Field

from sitetags.registry.entries import NamedEntry, Site
from sitetags.registry.service import CatalogService

router = APIRouter(prefix="/api/sites", tags=["catalog"])


def get_catalog(request: Request) -> CatalogService:
    return request.app.state.catalog


class EntryCreate(BaseModel):
    name: str = Field(..., description="Entry name; non-empty, no ';'")


class EndorsementRequest(BaseModel):
    amount: int = Field(..., ge=0, description="Payment burned by this endorsement")
    positive: bool = Field(default=True, description="Endorse for (true) or against (false)")
    budget: Optional[int] = Field(
        default=None,
        ge=0,
        description="Remaining compute budget; taken from the service cost signal when omitted",
    )


class EntryResponse(BaseModel):
    name: str
    positive: str
    negative: str

    @classmethod
    def from_entry(cls, entry: NamedEntry) -> "EntryResponse":
        # weights go out as decimal strings, they can exceed JSON number precision
        return cls(
            name=entry.name,
            positive=str(entry.positive.current_weight()),
            negative=str(entry.negative.current_weight()),
        )


class SiteResponse(EntryResponse):
    tags: List[EntryResponse] = Field(default_factory=list)

    @classmethod
    def from_site(cls, site: Site) -> "SiteResponse":
        base = EntryResponse.from_entry(site)
        return cls(
            **base.model_dump(),
            tags=[EntryResponse.from_entry(t) for t in site.tags.enumerate_all()],
        )


class EndorsementResponse(BaseModel):
    name: str
    direction: str
    amount: int
    budget: int
    weight: str


class DumpResponse(BaseModel):
    entries: List[str]


def _resolve_budget(request: Request, payload: EndorsementRequest, catalog: CatalogService) -> int:
    """Caller-supplied budget, else the cost signal measured from request arrival"""
    if payload.budget is not None:
        return payload.budget
    return catalog.current_budget(getattr(request.state, "budget_started_at", None))


@router.post("", response_model=EntryResponse, status_code=status.HTTP_201_CREATED)
def add_site(payload: EntryCreate, catalog: CatalogService = Depends(get_catalog)):
    site = catalog.add_site(payload.name)
    return EntryResponse.from_entry(site)


@router.get("", response_model=List[SiteResponse])
def list_sites(catalog: CatalogService = Depends(get_catalog)):
    return [SiteResponse.from_site(s) for s in catalog.list_sites()]


@router.get("/dump", response_model=DumpResponse)
def dump_catalog(catalog: CatalogService = Depends(get_catalog)):
    return DumpResponse(entries=catalog.dump())


@router.get("/{site_name}", response_model=SiteResponse)
def get_site(site_name: str, catalog: CatalogService = Depends(get_catalog)):
    return SiteResponse.from_site(catalog.get_site(site_name))


@router.post("/{site_name}/tags", response_model=EntryResponse, status_code=status.HTTP_201_CREATED)
def add_tag(site_name: str, payload: EntryCreate, catalog: CatalogService = Depends(get_catalog)):
    tag = catalog.add_tag(site_name, payload.name)
    return EntryResponse.from_entry(tag)


@router.get("/{site_name}/tags", response_model=List[EntryResponse])
def list_tags(site_name: str, catalog: CatalogService = Depends(get_catalog)):
    return [EntryResponse.from_entry(t) for t in catalog.list_tags(site_name)]


@router.post("/{site_name}/endorse", response_model=EndorsementResponse)
def endorse_site(
    request: Request,
    site_name: str,
    payload: EndorsementRequest,
    catalog: CatalogService = Depends(get_catalog),
):
    budget = _resolve_budget(request, payload, catalog)
    weight = catalog.endorse(site_name, payload.amount, budget, payload.positive)
    return EndorsementResponse(
        name=site_name,
        direction="positive" if payload.positive else "negative",
        amount=payload.amount,
        budget=budget,
        weight=str(weight),
    )


@router.post("/{site_name}/tags/{tag_name}/endorse", response_model=EndorsementResponse)
def endorse_tag(
    request: Request,
    site_name: str,
    tag_name: str,
    payload: EndorsementRequest,
    catalog: CatalogService = Depends(get_catalog),
):
    budget = _resolve_budget(request, payload, catalog)
    weight = catalog.endorse_tag(site_name, tag_name, payload.amount, budget, payload.positive)
    return EndorsementResponse(
        name=tag_name,
        direction="positive" if payload.positive else "negative",
        amount=payload.amount,
        budget=budget,
        weight=str(weight),
    )
