"""Infrastructure layer - adapters, configuration and wiring."""

from artifacthandoff.infrastructure.container import (
    HandoffServices,
    build_services,
    get_services,
    set_services,
)
from artifacthandoff.infrastructure.settings import Settings, get_settings
from artifacthandoff.infrastructure.stores import InMemoryArtifactStore

__all__ = [
    # Settings
    "Settings",
    "get_settings",
    # Store
    "InMemoryArtifactStore",
    # Wiring
    "HandoffServices",
    "build_services",
    "get_services",
    "set_services",
]
