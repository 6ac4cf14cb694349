from __future__ import annotations
from typing import Optional, Protocol
from artifacthandoff.domain.models import WorkspaceProfile

class WorkspaceDirectory(Protocol):
    async def profile_for(self, tenant_id: str) -> Optional[WorkspaceProfile]: ...
