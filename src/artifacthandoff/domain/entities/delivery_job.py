from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Any, Literal

# Queue-side execution policy for outbound media: 2s, 4s, 8s
DELIVERY_ATTEMPTS = 3
DELIVERY_BACKOFF_DELAY_MS = 2000


@dataclass(frozen=True)
class RetryPolicy:
    """Attempt/backoff options handed to the job queue with each job."""

    attempts: int = DELIVERY_ATTEMPTS
    backoff_type: Literal["exponential", "fixed"] = "exponential"
    backoff_delay_ms: int = DELIVERY_BACKOFF_DELAY_MS

    def __post_init__(self) -> None:
        if self.attempts < 1:
            raise ValueError("RetryPolicy.attempts must be >= 1")
        if self.backoff_delay_ms < 0:
            raise ValueError("RetryPolicy.backoff_delay_ms must be >= 0")

    def delay_before_retry_ms(self, retry: int) -> int:
        """Delay before the given retry (1-based), as the queue applies it."""
        if self.backoff_type == "fixed":
            return self.backoff_delay_ms
        return self.backoff_delay_ms * 2 ** (retry - 1)

    def to_dict(self) -> dict[str, Any]:
        return {
            "attempts": self.attempts,
            "backoff": {"type": self.backoff_type, "delay": self.backoff_delay_ms},
        }


@dataclass(frozen=True)
class DeliveryJob:
    """Outbound media message handed to the job queue.

    Execution is at-least-once: a consumer may see the same job more than
    once after transient failures and should key any dedup on ``job_id``.
    """

    tenant_id: str
    session_id: str
    recipient: str
    media_url: str
    caption: str
    correlation_id: str
    media_type: str = "document"
    message_type: str = "media"
    job_id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def __post_init__(self) -> None:
        if not self.media_url:
            raise ValueError("DeliveryJob requires a media_url from a completed upload")
        if not self.recipient:
            raise ValueError("DeliveryJob requires a recipient")

    def to_payload(self) -> dict[str, Any]:
        """Wire shape consumed by the outbound message worker."""
        return {
            "tenantId": self.tenant_id,
            "sessionId": self.session_id,
            "recipient": self.recipient,
            "messageType": self.message_type,
            "content": {
                "text": self.caption,
                "mediaUrl": self.media_url,
                "mediaType": self.media_type,
            },
            "correlationId": self.correlation_id,
        }
