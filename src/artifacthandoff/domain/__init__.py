"""Domain models and entities."""

from artifacthandoff.domain.entities.artifact import Artifact, new_reference, short_ref
from artifacthandoff.domain.entities.delivery_job import (
    DELIVERY_ATTEMPTS,
    DELIVERY_BACKOFF_DELAY_MS,
    DeliveryJob,
    RetryPolicy,
)
from artifacthandoff.domain.errors import (
    CatalogRenderError,
    DuplicateReference,
    EnqueueFailed,
    GenerationFailed,
    HandoffError,
    RecipientNotFound,
    ReferenceNotFound,
    UploadFailed,
)
from artifacthandoff.domain.models import (
    CatalogFilter,
    CatalogOptions,
    Destination,
    DispatchAccepted,
    ProducedArtifact,
    RenderedCatalog,
    WorkspaceProfile,
    default_catalog_filename,
)

__all__ = [
    "Artifact",
    "new_reference",
    "short_ref",
    "DELIVERY_ATTEMPTS",
    "DELIVERY_BACKOFF_DELAY_MS",
    "DeliveryJob",
    "RetryPolicy",
    "HandoffError",
    "GenerationFailed",
    "ReferenceNotFound",
    "RecipientNotFound",
    "UploadFailed",
    "EnqueueFailed",
    "DuplicateReference",
    "CatalogRenderError",
    "CatalogFilter",
    "CatalogOptions",
    "Destination",
    "DispatchAccepted",
    "ProducedArtifact",
    "RenderedCatalog",
    "WorkspaceProfile",
    "default_catalog_filename",
]
