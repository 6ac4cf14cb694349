"""Delivery job queue adapters."""

from artifacthandoff.infrastructure.queue.kafka_queue import JobEnvelope, KafkaJobQueue
from artifacthandoff.infrastructure.queue.memory_queue import InMemoryJobQueue, QueuedJob

__all__ = [
    "JobEnvelope",
    "KafkaJobQueue",
    "InMemoryJobQueue",
    "QueuedJob",
]
