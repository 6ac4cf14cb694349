from __future__ import annotations
from typing import Protocol
from artifacthandoff.domain.models import CatalogFilter, CatalogOptions, RenderedCatalog

class CatalogRenderer(Protocol):
    # Raises CatalogRenderError when no products match or rendering fails
    async def render(self, tenant_id: str, filter: CatalogFilter, options: CatalogOptions) -> RenderedCatalog: ...
