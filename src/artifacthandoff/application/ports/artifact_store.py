from __future__ import annotations
from typing import Optional, Protocol
from artifacthandoff.domain.entities.artifact import Artifact

class ArtifactStore(Protocol):
    def put(self, artifact: Artifact) -> None: ...
    def get(self, reference: str, tenant_id: Optional[str] = None) -> Optional[Artifact]: ...
    def evict_expired(self) -> int: ...
