"""Client for the catalog rendering service."""

from __future__ import annotations

import re

import httpx
from loguru import logger

from artifacthandoff.domain.errors import CatalogRenderError
from artifacthandoff.domain.models import (
    CatalogFilter,
    CatalogOptions,
    RenderedCatalog,
    default_catalog_filename,
)

_FILENAME_RE = re.compile(r'filename="?([^";]+)"?')


class HttpCatalogRenderer:
    """
    Render catalogs by POSTing to the rendering service.

    The service answers with the PDF body and reports counts in
    ``X-Item-Count`` / ``X-Page-Count``. 404 and 422 mean nothing matched the
    filter or the request was unusable.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    async def render(self, tenant_id: str, filter: CatalogFilter, options: CatalogOptions) -> RenderedCatalog:
        payload = {
            "tenant_id": tenant_id,
            "filter": filter.model_dump(exclude_none=True),
            "options": options.model_dump(exclude_none=True),
        }

        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                response = await client.post(
                    f"{self.base_url}/catalogs/render",
                    json=payload,
                    timeout=self.timeout,
                )
        except httpx.TimeoutException as e:
            raise CatalogRenderError("Rendering service timed out") from e
        except httpx.HTTPError as e:
            raise CatalogRenderError(f"Rendering service unreachable: {e}") from e

        if response.status_code in (404, 422):
            raise CatalogRenderError(_error_detail(response) or "No products found matching the filter criteria")
        if response.status_code != 200:
            logger.error(f"Renderer error {response.status_code}: {response.text[:200]}")
            raise CatalogRenderError(f"HTTP {response.status_code}: {response.text[:200]}")

        return RenderedCatalog(
            payload=response.content,
            item_count=int(response.headers.get("x-item-count", 0)),
            page_count=int(response.headers.get("x-page-count", 0)),
            filename=_filename_from(response) or default_catalog_filename(),
            content_type=response.headers.get("content-type", "application/pdf").split(";")[0],
        )


def _filename_from(response: httpx.Response) -> str | None:
    match = _FILENAME_RE.search(response.headers.get("content-disposition", ""))
    return match.group(1) if match else None


def _error_detail(response: httpx.Response) -> str | None:
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        detail = body.get("detail") or body.get("error")
        return str(detail) if detail else None
    return None
