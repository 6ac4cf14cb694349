"""In-process job queue for local runs and tests."""

from __future__ import annotations

import threading
from dataclasses import dataclass

from loguru import logger

from artifacthandoff.domain.entities.delivery_job import DeliveryJob, RetryPolicy


@dataclass(frozen=True)
class QueuedJob:
    name: str
    job: DeliveryJob
    policy: RetryPolicy


class InMemoryJobQueue:
    """Records enqueued jobs. Nothing consumes them."""

    def __init__(self) -> None:
        self._jobs: list[QueuedJob] = []
        self._lock = threading.Lock()

    async def enqueue(self, name: str, job: DeliveryJob, policy: RetryPolicy) -> str:
        with self._lock:
            self._jobs.append(QueuedJob(name=name, job=job, policy=policy))
        logger.debug(f"Queued job {job.job_id} ({name}) in memory")
        return job.job_id

    @property
    def jobs(self) -> list[QueuedJob]:
        return list(self._jobs)

    def __len__(self) -> int:
        return len(self._jobs)
