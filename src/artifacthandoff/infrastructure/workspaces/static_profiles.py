from __future__ import annotations

from typing import Mapping, Optional

from artifacthandoff.domain.models import WorkspaceProfile


class StaticWorkspaceDirectory:
    """Workspace branding backed by a fixed tenant -> profile mapping."""

    def __init__(self, profiles: Mapping[str, WorkspaceProfile] | None = None) -> None:
        self._profiles = dict(profiles or {})

    def add(self, tenant_id: str, profile: WorkspaceProfile) -> None:
        self._profiles[tenant_id] = profile

    async def profile_for(self, tenant_id: str) -> Optional[WorkspaceProfile]:
        return self._profiles.get(tenant_id)
