"""Store implementations."""

from artifacthandoff.infrastructure.stores.memory_artifact_store import InMemoryArtifactStore

__all__ = [
    "InMemoryArtifactStore",
]
