"""Application layer - use cases, ports and agent tools."""

from artifacthandoff.application.use_cases.dispatch_artifact import DeliveryDispatcher, DispatchState
from artifacthandoff.application.use_cases.produce_artifact import ArtifactProducer

__all__ = [
    "ArtifactProducer",
    "DeliveryDispatcher",
    "DispatchState",
]
