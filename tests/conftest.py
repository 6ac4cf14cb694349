"""Shared fakes and fixtures for the handoff tests."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import pytest

from artifacthandoff.application.use_cases.dispatch_artifact import DeliveryDispatcher
from artifacthandoff.application.use_cases.produce_artifact import ArtifactProducer
from artifacthandoff.domain.entities.artifact import Artifact
from artifacthandoff.domain.errors import CatalogRenderError
from artifacthandoff.domain.models import CatalogFilter, CatalogOptions, Destination, RenderedCatalog
from artifacthandoff.infrastructure.queue.memory_queue import InMemoryJobQueue
from artifacthandoff.infrastructure.stores.memory_artifact_store import InMemoryArtifactStore

TENANT = "ws_acme"
OTHER_TENANT = "ws_globex"
RECIPIENT = "+5491122334455"


class FakeClock:
    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@dataclass
class Product:
    id: str
    name: str
    category: str
    stock: int
    price: int = 1000


class FakeRenderer:
    """Filters an in-memory product list and returns fake PDF bytes."""

    def __init__(self, products: list[Product]) -> None:
        self.products = products
        self.calls = 0
        self.last_options: CatalogOptions | None = None

    async def render(self, tenant_id: str, filter: CatalogFilter, options: CatalogOptions) -> RenderedCatalog:
        self.calls += 1
        self.last_options = options
        matches = [
            p
            for p in self.products
            if (filter.min_stock is None or p.stock >= filter.min_stock)
            and (filter.category is None or filter.category.lower() in p.category.lower())
        ][: filter.limit]
        if not matches:
            raise CatalogRenderError("No products found matching the filter criteria")
        body = "\n".join(p.name for p in matches).encode()
        return RenderedCatalog(
            payload=b"%PDF-1.7\n" + body,
            item_count=len(matches),
            page_count=(len(matches) + 9) // 10,
            filename="catalogo_2026-03-01.pdf",
        )


class FakeUploader:
    def __init__(self, fail_with: Exception | None = None, url: str = "https://cdn.example/catalogs/x.pdf") -> None:
        self.fail_with = fail_with
        self.url = url
        self.calls: list[tuple[bytes, str, str, str]] = []

    async def upload(self, data: bytes, filename: str, mime_type: str, tenant_id: str) -> str:
        self.calls.append((data, filename, mime_type, tenant_id))
        if self.fail_with is not None:
            raise self.fail_with
        return self.url


class FailingQueue:
    def __init__(self, error: Exception) -> None:
        self.error = error
        self.calls = 0

    async def enqueue(self, name, job, policy) -> str:
        self.calls += 1
        raise self.error


def make_artifact(clock: FakeClock, tenant_id: str = TENANT, ttl_minutes: int = 30, payload: bytes = b"%PDF") -> Artifact:
    return Artifact.create(
        tenant_id=tenant_id,
        payload=payload,
        filename="catalogo.pdf",
        content_type="application/pdf",
        created_at=clock(),
        ttl=timedelta(minutes=ttl_minutes),
        item_count=1,
        page_count=1,
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(clock) -> InMemoryArtifactStore:
    return InMemoryArtifactStore(clock=clock, sweep_interval_seconds=0.05)


@pytest.fixture
def products() -> list[Product]:
    return [
        Product("p1", "Agua 500ml", "Bebidas", stock=10),
        Product("p2", "Coca 1.5L", "Bebidas", stock=3),
        Product("p3", "Yerba 1kg", "Almacen", stock=1),
        Product("p4", "Fideos", "Almacen", stock=25),
        Product("p5", "Arroz", "Almacen", stock=7),
        Product("p6", "Galletitas", "Almacen", stock=0),
    ]


@pytest.fixture
def renderer(products) -> FakeRenderer:
    return FakeRenderer(products)


@pytest.fixture
def uploader() -> FakeUploader:
    return FakeUploader()


@pytest.fixture
def queue() -> InMemoryJobQueue:
    return InMemoryJobQueue()


@pytest.fixture
def producer(store, renderer, clock) -> ArtifactProducer:
    return ArtifactProducer(store, renderer, ttl=timedelta(minutes=30), clock=clock)


@pytest.fixture
def dispatcher(store, uploader, queue) -> DeliveryDispatcher:
    return DeliveryDispatcher(store, uploader, queue)


@pytest.fixture
def destination() -> Destination:
    return Destination(
        tenant_id=TENANT,
        session_id="sess-1",
        recipient=RECIPIENT,
        correlation_id="corr-1",
    )
