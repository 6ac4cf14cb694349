"""Use case for rendering a catalog and parking it in the artifact store."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Callable

from loguru import logger

from artifacthandoff.application.ports.artifact_store import ArtifactStore
from artifacthandoff.application.ports.catalog_renderer import CatalogRenderer
from artifacthandoff.domain.entities.artifact import Artifact, short_ref
from artifacthandoff.domain.errors import CatalogRenderError, GenerationFailed
from artifacthandoff.domain.models import CatalogFilter, CatalogOptions, ProducedArtifact

DEFAULT_TTL = timedelta(minutes=30)


class ArtifactProducer:
    """
    Render a catalog and register it under a fresh reference.

    Flow:
    1. Delegate rendering to the external renderer
    2. Wrap the bytes into an immutable Artifact (expires_at = now + ttl)
    3. Store it (exactly one put per successful call)
    4. Return the reference plus summary metadata

    Eviction is owned by the store's sweeper. Nothing is retried here.
    """

    def __init__(
        self,
        store: ArtifactStore,
        renderer: CatalogRenderer,
        ttl: timedelta = DEFAULT_TTL,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        if ttl <= timedelta(0):
            raise ValueError("ttl must be positive")
        self.store = store
        self.renderer = renderer
        self.ttl = ttl
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    async def produce(
        self,
        filter: CatalogFilter,
        options: CatalogOptions,
        tenant_id: str,
    ) -> ProducedArtifact:
        """
        Render and store a catalog for a tenant.

        Raises:
            GenerationFailed: The renderer failed; the store is untouched.
        """
        logger.info(f"Generating catalog for tenant {tenant_id} (filter={filter.model_dump(exclude_none=True)})")

        try:
            rendered = await self.renderer.render(tenant_id, filter, options)
        except CatalogRenderError as e:
            logger.warning(f"Catalog generation failed for tenant {tenant_id}: {e}")
            raise GenerationFailed(f"Error generating catalog: {e}") from e
        except Exception as e:
            logger.exception(f"Catalog renderer crashed for tenant {tenant_id}: {e}")
            raise GenerationFailed(f"Error generating catalog: {e}") from e

        if not rendered.payload:
            raise GenerationFailed("Error generating catalog: renderer returned an empty document")

        artifact = Artifact.create(
            tenant_id=tenant_id,
            payload=rendered.payload,
            filename=rendered.filename,
            content_type=rendered.content_type,
            created_at=self._clock(),
            ttl=self.ttl,
            item_count=rendered.item_count,
            page_count=rendered.page_count,
            metadata={"title": options.title},
        )
        self.store.put(artifact)

        logger.info(
            f"Catalog {short_ref(artifact.reference)}... ready: {artifact.item_count} items, "
            f"{artifact.page_count} pages, {artifact.size_kb}KB"
        )
        return ProducedArtifact(
            reference=artifact.reference,
            item_count=artifact.item_count,
            page_count=artifact.page_count,
            filename=artifact.filename,
            size_kb=artifact.size_kb,
        )
