"""
Kafka-backed delivery job queue.

Each job is published as a JSON envelope carrying the message payload and
the attempt/backoff options. The outbound message worker consumes the topic,
executes the send, and schedules retries from those options; after the last
attempt it routes the job to its dead-letter topic.
"""

from __future__ import annotations

import asyncio
import json
import threading
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional

from loguru import logger

from artifacthandoff.domain.entities.delivery_job import DeliveryJob, RetryPolicy
from artifacthandoff.domain.errors import EnqueueFailed
from artifacthandoff.infrastructure.settings import Settings


@dataclass
class JobEnvelope:
    """Kafka message envelope for a delivery job."""

    job_id: str
    name: str
    payload: dict
    options: dict
    schema_version: str = "v1"
    queue: str = "message-send"
    created_at: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    source_service: str = "artifact-handoff"
    source_version: str = "0.1.0"

    def to_dict(self) -> dict:
        """Convert envelope to dictionary for JSON serialization."""
        return {
            "job_id": self.job_id,
            "name": self.name,
            "schema_version": self.schema_version,
            "queue": self.queue,
            "created_at": self.created_at,
            "source": {
                "service": self.source_service,
                "version": self.source_version,
            },
            "options": self.options,
            "payload": self.payload,
        }


class KafkaJobQueue:
    """Publishes delivery jobs and waits for broker acknowledgement."""

    def __init__(
        self,
        brokers: str,
        username: str | None = None,
        password: str | None = None,
        topic: str = "outbound.message-send.v1",
        flush_timeout: float = 10.0,
        producer: Optional[Any] = None,
    ):
        self.topic = topic
        self.flush_timeout = flush_timeout

        if producer is None:
            from confluent_kafka import Producer

            config = {
                "bootstrap.servers": brokers,
                # A job counts as enqueued only once all in-sync replicas have it
                "acks": "all",
                "enable.idempotence": True,
                "retries": 3,
                "retry.backoff.ms": 1000,
                "linger.ms": 5,
            }
            if username and password:
                config.update(
                    {
                        "security.protocol": "SASL_SSL",
                        "sasl.mechanisms": "PLAIN",
                        "sasl.username": username,
                        "sasl.password": password,
                    }
                )
            producer = Producer(config)

        self.producer = producer
        logger.info(f"Kafka job queue initialized for topic {topic}")

    async def enqueue(self, name: str, job: DeliveryJob, policy: RetryPolicy) -> str:
        envelope = JobEnvelope(
            job_id=job.job_id,
            name=name,
            payload=job.to_payload(),
            options=policy.to_dict(),
        )
        await asyncio.to_thread(self._publish, envelope, job.tenant_id)
        return envelope.job_id

    def _publish(self, envelope: JobEnvelope, tenant_id: str) -> None:
        # Set by whichever thread serves this message's delivery report
        acked = threading.Event()
        errors: list[str] = []

        def _delivery_callback(err, msg):
            if err:
                errors.append(str(err))
            else:
                logger.debug(f"Delivered job {envelope.job_id} to {msg.topic()}[{msg.partition()}] @ {msg.offset()}")
            acked.set()

        deadline = time.monotonic() + self.flush_timeout
        try:
            self.producer.produce(
                topic=self.topic,
                # Same tenant always lands on the same partition
                key=tenant_id.encode(),
                value=json.dumps(envelope.to_dict()).encode("utf-8"),
                callback=_delivery_callback,
            )
            remaining = self.producer.flush(self.flush_timeout)
            # A concurrent flush may have taken our report without running it yet
            while not acked.wait(0.05) and time.monotonic() < deadline:
                self.producer.poll(0)
        except Exception as e:
            # BufferError on a full local queue, KafkaException from the client
            raise EnqueueFailed(f"Kafka produce failed: {e}") from e

        if errors:
            raise EnqueueFailed(f"Kafka delivery failed: {errors[0]}")
        if not acked.is_set():
            raise EnqueueFailed(
                f"Job {envelope.job_id} not acknowledged within {self.flush_timeout}s ({remaining} pending)"
            )
        logger.debug(f"Published job {envelope.job_id} ({envelope.name}) to {self.topic}")


def kafka_queue_from_settings(settings: Settings) -> KafkaJobQueue:
    if not settings.kafka_brokers:
        raise ValueError("Kafka not configured. Set KAFKA_BROKERS (and SASL credentials if required)")
    return KafkaJobQueue(
        brokers=settings.kafka_brokers,
        username=settings.kafka_sasl_username,
        password=settings.kafka_sasl_password.get_secret_value() if settings.kafka_sasl_password else None,
        topic=settings.kafka_topic_delivery,
        flush_timeout=settings.kafka_flush_timeout_seconds,
    )
