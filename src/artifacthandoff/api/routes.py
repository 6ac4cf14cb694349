"""
API routes for catalog generation and handoff.

The tenant is taken from the ``x-tenant-id`` header; authentication is
handled upstream.
"""

import uuid
from datetime import datetime, timezone
from urllib.parse import quote

from fastapi import APIRouter, Depends, Header, HTTPException, Response, status
from loguru import logger
from pydantic import BaseModel, Field

from artifacthandoff.domain.errors import (
    EnqueueFailed,
    GenerationFailed,
    ReferenceNotFound,
    UploadFailed,
)
from artifacthandoff.domain.models import (
    CatalogFilter,
    CatalogOptions,
    Destination,
    DispatchAccepted,
    ProducedArtifact,
)
from artifacthandoff.infrastructure.container import HandoffServices, get_services

router = APIRouter()


# ============================================================================
# Request/Response Models
# ============================================================================


class GenerateCatalogRequest(BaseModel):
    """Request body for catalog generation."""

    filter: CatalogFilter = Field(default_factory=CatalogFilter)
    options: CatalogOptions = Field(default_factory=CatalogOptions)


class DispatchRequest(BaseModel):
    """Request body for sending a generated catalog."""

    session_id: str
    recipient: str = Field(..., min_length=1, description="E.164 phone number")
    caption: str | None = None
    correlation_id: str | None = Field(None, description="Generated when omitted")


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    timestamp: str
    artifacts: int
    sweeper_running: bool
    uploader: str
    queue: str


def _tenant(x_tenant_id: str = Header(..., alias="x-tenant-id", min_length=1)) -> str:
    return x_tenant_id


# ============================================================================
# Endpoints
# ============================================================================


@router.post("/catalogs", status_code=status.HTTP_201_CREATED, response_model=ProducedArtifact)
async def generate_catalog(
    request: GenerateCatalogRequest,
    tenant_id: str = Depends(_tenant),
    services: HandoffServices = Depends(get_services),
) -> ProducedArtifact:
    """Render a catalog and return its reference."""
    try:
        return await services.producer.produce(request.filter, request.options, tenant_id)
    except GenerationFailed as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)) from e


@router.get("/catalogs/{reference}")
async def download_catalog(
    reference: str,
    tenant_id: str = Depends(_tenant),
    services: HandoffServices = Depends(get_services),
) -> Response:
    """Download the bytes of a live catalog."""
    artifact = services.store.get(reference, tenant_id)
    if artifact is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=ReferenceNotFound.user_message)

    return Response(
        content=artifact.payload,
        media_type=artifact.content_type,
        headers={
            "Content-Disposition": f"attachment; filename*=UTF-8''{quote(artifact.filename)}",
            "X-Item-Count": str(artifact.item_count),
            "X-Page-Count": str(artifact.page_count),
            "X-Catalog-Title": quote(str(artifact.metadata.get("title", ""))),
            "Expires": artifact.expires_at.strftime("%a, %d %b %Y %H:%M:%S GMT"),
        },
    )


@router.post(
    "/catalogs/{reference}/dispatch",
    status_code=status.HTTP_202_ACCEPTED,
    response_model=DispatchAccepted,
)
async def dispatch_catalog(
    reference: str,
    request: DispatchRequest,
    tenant_id: str = Depends(_tenant),
    services: HandoffServices = Depends(get_services),
) -> DispatchAccepted:
    """Upload a catalog and queue it for delivery."""
    destination = Destination(
        tenant_id=tenant_id,
        session_id=request.session_id,
        recipient=request.recipient,
        correlation_id=request.correlation_id or str(uuid.uuid4()),
    )
    try:
        return await services.dispatcher.dispatch(reference, destination, request.caption)
    except ReferenceNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.user_message) from e
    except UploadFailed as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=e.user_message) from e
    except EnqueueFailed as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=e.user_message) from e


@router.get("/internal/handoff/health", response_model=HealthResponse)
async def handoff_health(services: HandoffServices = Depends(get_services)) -> HealthResponse:
    """Health check for the handoff subsystem."""
    dispatcher = services.dispatcher
    health = HealthResponse(
        status="healthy" if services.store.running else "degraded",
        timestamp=datetime.now(timezone.utc).isoformat(),
        artifacts=len(services.store),
        sweeper_running=services.store.running,
        uploader=type(dispatcher.uploader).__name__,
        queue=type(dispatcher.queue).__name__,
    )
    if not health.sweeper_running:
        logger.warning("Artifact sweeper is not running; expired catalogs are not being evicted")
    return health
