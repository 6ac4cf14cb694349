"""Domain models for catalog generation and delivery."""

from dataclasses import dataclass
from datetime import date
from typing import Literal

from pydantic import BaseModel, Field, model_validator


class CatalogFilter(BaseModel):
    """Which products a catalog should include."""

    category: str | None = Field(None, description="Partial, case-insensitive category match")
    search: str | None = Field(None, description="Search by product name or SKU")
    min_stock: int | None = Field(None, ge=0, description="Only products with at least this stock")
    min_price: int | None = Field(None, ge=0, description="Minimum price in cents")
    max_price: int | None = Field(None, ge=0, description="Maximum price in cents")
    product_ids: list[str] | None = None
    limit: int = Field(100, ge=1, le=500)
    status: Literal["active", "draft", "archived"] = "active"

    @model_validator(mode="after")
    def _check_price_range(self) -> "CatalogFilter":
        if self.min_price is not None and self.max_price is not None and self.min_price > self.max_price:
            raise ValueError("min_price must not exceed max_price")
        return self


class CatalogOptions(BaseModel):
    """Presentation options passed through to the renderer."""

    title: str = "Catálogo"
    include_images: bool = True
    show_stock: bool = False
    show_compare_price: bool = True
    page_size: Literal["A4", "LETTER"] = "A4"
    workspace_name: str | None = None
    logo_url: str | None = None
    locale: str = "es-AR"


def default_catalog_filename(day: date | None = None) -> str:
    return f"catalogo_{(day or date.today()).isoformat()}.pdf"


@dataclass(frozen=True)
class RenderedCatalog:
    """Output of a catalog renderer."""

    payload: bytes
    item_count: int
    page_count: int
    filename: str
    content_type: str = "application/pdf"


class Destination(BaseModel):
    """Where and on whose behalf a dispatched artifact goes."""

    tenant_id: str
    session_id: str
    recipient: str = Field(..., min_length=1, description="E.164 phone number")
    correlation_id: str


class ProducedArtifact(BaseModel):
    """Summary returned to the caller of produce."""

    reference: str
    item_count: int
    page_count: int
    filename: str
    size_kb: int


class DispatchAccepted(BaseModel):
    """A delivery job was durably enqueued (not necessarily delivered)."""

    reference: str
    job_id: str
    filename: str
    media_url: str


DEFAULT_BUSINESS_NAME = "Productos"


class WorkspaceProfile(BaseModel):
    """Branding a tenant shows on its catalogs."""

    name: str | None = None
    business_name: str | None = None
    logo_url: str | None = None

    @property
    def display_name(self) -> str:
        return self.business_name or self.name or DEFAULT_BUSINESS_NAME
