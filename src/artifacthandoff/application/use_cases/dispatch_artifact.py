"""Use case for handing a stored artifact off to the delivery queue."""

from __future__ import annotations

from enum import Enum

from loguru import logger

from artifacthandoff.application.ports.artifact_store import ArtifactStore
from artifacthandoff.application.ports.durable_uploader import DurableUploader
from artifacthandoff.application.ports.job_queue import JobQueue
from artifacthandoff.domain.entities.artifact import short_ref
from artifacthandoff.domain.entities.delivery_job import DeliveryJob, RetryPolicy
from artifacthandoff.domain.errors import EnqueueFailed, ReferenceNotFound, UploadFailed
from artifacthandoff.domain.models import Destination, DispatchAccepted


class DispatchState(str, Enum):
    """Per-call progress; any failed transition ends the call."""

    UNRESOLVED = "unresolved"
    RESOLVED = "resolved"
    UPLOADED = "uploaded"
    DISPATCHED = "dispatched"


class DeliveryDispatcher:
    """
    Resolve a reference, upload its bytes durably, enqueue a delivery job.

    Flow:
    1. Look up the artifact (caller's tenant must own it)
    2. Upload bytes, get a fetchable URL
    3. Enqueue a DeliveryJob with the retry policy

    A successful dispatch means the job was accepted by the queue, not that
    the message was delivered. Every call enqueues a new job; dispatching the
    same reference twice sends twice. Nothing is persisted on failure, so the
    caller can retry from scratch while the artifact is still live.
    """

    def __init__(
        self,
        store: ArtifactStore,
        uploader: DurableUploader,
        queue: JobQueue,
        policy: RetryPolicy | None = None,
    ) -> None:
        self.store = store
        self.uploader = uploader
        self.queue = queue
        self.policy = policy or RetryPolicy()

    async def dispatch(
        self,
        reference: str,
        destination: Destination,
        caption: str | None = None,
    ) -> DispatchAccepted:
        """
        Hand an artifact to the delivery pipeline.

        Raises:
            ReferenceNotFound: Unknown, expired or foreign reference. Nothing
                was uploaded or enqueued.
            UploadFailed: Upload failed. Nothing was enqueued.
            EnqueueFailed: The queue did not accept the job. The uploaded
                file is left behind for the storage retention policy.
        """
        ref = short_ref(reference)
        state = DispatchState.UNRESOLVED

        artifact = self.store.get(reference, destination.tenant_id)
        if artifact is None:
            logger.info(f"Dispatch of {ref}... rejected: reference not found (tenant={destination.tenant_id})")
            raise ReferenceNotFound(
                "Catalog not found. It may have expired. Please generate a new catalog.",
                reference=reference,
            )
        state = DispatchState.RESOLVED

        try:
            media_url = await self.uploader.upload(
                artifact.payload,
                artifact.filename,
                artifact.content_type,
                artifact.tenant_id,
            )
        except Exception as e:
            logger.error(f"Upload of {ref}... failed in state {state.value}: {e}")
            raise UploadFailed(f"Error uploading catalog: {e}", reference=reference) from e

        if not media_url:
            logger.error(f"Uploader returned no URL for {ref}...")
            raise UploadFailed("Error uploading catalog: uploader returned no URL", reference=reference)
        state = DispatchState.UPLOADED

        job = DeliveryJob(
            tenant_id=destination.tenant_id,
            session_id=destination.session_id,
            recipient=destination.recipient,
            media_url=media_url,
            caption=caption or f"📋 {artifact.filename}",
            correlation_id=destination.correlation_id,
        )

        try:
            await self.queue.enqueue(f"catalog-{reference}", job, self.policy)
        except EnqueueFailed:
            logger.error(f"Enqueue of {ref}... failed in state {state.value}; upload {media_url} is orphaned")
            raise
        except Exception as e:
            logger.error(f"Enqueue of {ref}... failed in state {state.value}; upload {media_url} is orphaned: {e}")
            raise EnqueueFailed(f"Error queueing catalog: {e}", reference=reference) from e
        state = DispatchState.DISPATCHED

        logger.info(
            f"Dispatch of {ref}... {state.value}: job={job.job_id} to={destination.recipient} "
            f"correlation={destination.correlation_id}"
        )
        return DispatchAccepted(
            reference=reference,
            job_id=job.job_id,
            filename=artifact.filename,
            media_url=media_url,
        )
