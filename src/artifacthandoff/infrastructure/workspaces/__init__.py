from artifacthandoff.infrastructure.workspaces.static_profiles import StaticWorkspaceDirectory

__all__ = ["StaticWorkspaceDirectory"]
