"""Wiring of the artifact store, producer and dispatcher from settings."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable

from loguru import logger

from artifacthandoff.application.ports.catalog_renderer import CatalogRenderer
from artifacthandoff.application.ports.durable_uploader import DurableUploader
from artifacthandoff.application.ports.job_queue import JobQueue
from artifacthandoff.application.ports.recipient_directory import RecipientDirectory
from artifacthandoff.application.ports.workspace_directory import WorkspaceDirectory
from artifacthandoff.application.tools import BaseTool, create_catalog_tools
from artifacthandoff.application.use_cases.dispatch_artifact import DeliveryDispatcher
from artifacthandoff.application.use_cases.produce_artifact import ArtifactProducer
from artifacthandoff.infrastructure.settings import Settings, get_settings
from artifacthandoff.infrastructure.stores.memory_artifact_store import InMemoryArtifactStore


@dataclass
class HandoffServices:
    """One store shared by every producer and dispatcher call in the process."""

    store: InMemoryArtifactStore
    producer: ArtifactProducer
    dispatcher: DeliveryDispatcher
    recipients: RecipientDirectory
    workspaces: WorkspaceDirectory

    def catalog_tools(self) -> list[BaseTool]:
        """Agent tools bound to this process's store."""
        return create_catalog_tools(self.producer, self.dispatcher, self.recipients, self.workspaces)

    def init(self) -> None:
        self.store.init()

    def teardown(self) -> None:
        self.store.teardown()


def _default_uploader(settings: Settings) -> DurableUploader:
    if settings.uploader_backend == "s3":
        from artifacthandoff.infrastructure.uploads.s3_uploader import s3_uploader_from_settings

        return s3_uploader_from_settings(settings)

    from artifacthandoff.infrastructure.uploads.local_uploader import LocalFileUploader

    return LocalFileUploader(
        upload_dir=settings.upload_dir,
        public_base_url=settings.public_base_url,
        probe_ngrok=settings.environment == "development",
    )


def _default_queue(settings: Settings) -> JobQueue:
    if settings.queue_backend == "kafka":
        from artifacthandoff.infrastructure.queue.kafka_queue import kafka_queue_from_settings

        return kafka_queue_from_settings(settings)

    if settings.environment != "development":
        # Nothing consumes this queue outside a developer machine
        raise ValueError(
            f"In-memory job queue is not allowed in {settings.environment}. Set QUEUE_BACKEND=kafka"
        )

    from artifacthandoff.infrastructure.queue.memory_queue import InMemoryJobQueue

    logger.warning("Using in-memory job queue; delivery jobs will not leave this process")
    return InMemoryJobQueue()


def build_services(
    settings: Settings | None = None,
    *,
    renderer: CatalogRenderer | None = None,
    uploader: DurableUploader | None = None,
    queue: JobQueue | None = None,
    recipients: RecipientDirectory | None = None,
    workspaces: WorkspaceDirectory | None = None,
    clock: Callable[[], datetime] | None = None,
) -> HandoffServices:
    """Build the service graph. Any collaborator may be overridden."""
    settings = settings or get_settings()

    if renderer is None:
        from artifacthandoff.infrastructure.rendering.http_renderer import HttpCatalogRenderer

        renderer = HttpCatalogRenderer(settings.renderer_url, timeout=settings.renderer_timeout_seconds)
    if recipients is None:
        from artifacthandoff.infrastructure.recipients.static_directory import StaticRecipientDirectory

        recipients = StaticRecipientDirectory()
    if workspaces is None:
        from artifacthandoff.infrastructure.workspaces.static_profiles import StaticWorkspaceDirectory

        workspaces = StaticWorkspaceDirectory()

    store = InMemoryArtifactStore(
        clock=clock,
        sweep_interval_seconds=settings.artifact_sweep_interval_seconds,
    )
    producer = ArtifactProducer(store, renderer, ttl=settings.artifact_ttl, clock=clock)
    dispatcher = DeliveryDispatcher(
        store,
        uploader if uploader is not None else _default_uploader(settings),
        queue if queue is not None else _default_queue(settings),
        policy=settings.retry_policy(),
    )
    return HandoffServices(
        store=store,
        producer=producer,
        dispatcher=dispatcher,
        recipients=recipients,
        workspaces=workspaces,
    )


# Singleton instance
_services: HandoffServices | None = None


def get_services() -> HandoffServices:
    """Get or create the process-wide services."""
    global _services
    if _services is None:
        _services = build_services()
    return _services


def set_services(services: HandoffServices | None) -> None:
    """Replace the process-wide services (tests, custom wiring)."""
    global _services
    _services = services
