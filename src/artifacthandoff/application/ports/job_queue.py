from __future__ import annotations
from typing import Protocol
from artifacthandoff.domain.entities.delivery_job import DeliveryJob, RetryPolicy

class JobQueue(Protocol):
    # Returns once the job is durably accepted by the backend
    async def enqueue(self, name: str, job: DeliveryJob, policy: RetryPolicy) -> str: ...
