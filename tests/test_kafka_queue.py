"""Tests for KafkaJobQueue with a stand-in producer."""

import asyncio
import json
import threading

import pytest

from artifacthandoff.domain.entities.delivery_job import DeliveryJob, RetryPolicy
from artifacthandoff.domain.errors import EnqueueFailed
from artifacthandoff.infrastructure.queue import KafkaJobQueue
from artifacthandoff.infrastructure.queue.kafka_queue import kafka_queue_from_settings
from artifacthandoff.infrastructure.settings import Settings

from conftest import RECIPIENT, TENANT


class FakeMessage:
    def topic(self):
        return "outbound.message-send.v1"

    def partition(self):
        return 0

    def offset(self):
        return 17


class FakeProducer:
    """Mimics confluent_kafka.Producer: callbacks fire during flush."""

    def __init__(self, error: str | None = None, ack: bool = True, raise_on_produce: Exception | None = None):
        self.error = error
        self.ack = ack
        self.raise_on_produce = raise_on_produce
        self.produced: list[dict] = []
        self._pending = []
        self._lock = threading.Lock()

    def produce(self, topic, key, value, callback):
        if self.raise_on_produce is not None:
            raise self.raise_on_produce
        with self._lock:
            self.produced.append({"topic": topic, "key": key, "value": value})
            self._pending.append(callback)

    def flush(self, timeout):
        if not self.ack:
            return len(self._pending)
        # Like librdkafka, any flushing thread serves every queued report
        with self._lock:
            pending, self._pending = self._pending, []
        for callback in pending:
            callback(self.error, None if self.error else FakeMessage())
        return 0

    def poll(self, timeout):
        return 0


class HandedOffProducer(FakeProducer):
    """flush() returns 0 while another worker still holds the delivery report."""

    def flush(self, timeout):
        with self._lock:
            pending, self._pending = self._pending, []
        for callback in pending:
            threading.Timer(0.1, callback, args=(None, FakeMessage())).start()
        return 0


def _job() -> DeliveryJob:
    return DeliveryJob(
        tenant_id=TENANT,
        session_id="sess-1",
        recipient=RECIPIENT,
        media_url="https://cdn.example/x.pdf",
        caption="📋 catalogo.pdf",
        correlation_id="corr-1",
    )


@pytest.mark.asyncio
async def test_enqueue_publishes_envelope_keyed_by_tenant():
    producer = FakeProducer()
    queue = KafkaJobQueue(brokers="unused", producer=producer)
    job = _job()

    job_id = await queue.enqueue("catalog-cat_abc", job, RetryPolicy())

    assert job_id == job.job_id
    assert len(producer.produced) == 1
    sent = producer.produced[0]
    assert sent["topic"] == "outbound.message-send.v1"
    assert sent["key"] == TENANT.encode()

    envelope = json.loads(sent["value"])
    assert envelope["job_id"] == job.job_id
    assert envelope["name"] == "catalog-cat_abc"
    assert envelope["options"] == {"attempts": 3, "backoff": {"type": "exponential", "delay": 2000}}
    assert envelope["payload"] == job.to_payload()
    assert envelope["source"]["service"] == "artifact-handoff"


@pytest.mark.asyncio
async def test_broker_error_is_enqueue_failed():
    queue = KafkaJobQueue(brokers="unused", producer=FakeProducer(error="Broker: Not enough in-sync replicas"))

    with pytest.raises(EnqueueFailed, match="in-sync replicas"):
        await queue.enqueue("catalog-x", _job(), RetryPolicy())


@pytest.mark.asyncio
async def test_unacknowledged_is_enqueue_failed():
    queue = KafkaJobQueue(brokers="unused", producer=FakeProducer(ack=False), flush_timeout=0.1)

    with pytest.raises(EnqueueFailed, match="not acknowledged"):
        await queue.enqueue("catalog-x", _job(), RetryPolicy())


@pytest.mark.asyncio
async def test_local_buffer_full_is_enqueue_failed():
    queue = KafkaJobQueue(brokers="unused", producer=FakeProducer(raise_on_produce=BufferError("queue full")))

    with pytest.raises(EnqueueFailed, match="queue full"):
        await queue.enqueue("catalog-x", _job(), RetryPolicy())


def test_from_settings_requires_brokers():
    with pytest.raises(ValueError, match="KAFKA_BROKERS"):
        kafka_queue_from_settings(Settings(_env_file=None, kafka_brokers=None))


@pytest.mark.asyncio
async def test_report_served_by_another_worker_still_counts():
    queue = KafkaJobQueue(brokers="unused", producer=HandedOffProducer(), flush_timeout=2.0)
    job = _job()

    assert await queue.enqueue("catalog-x", job, RetryPolicy()) == job.job_id


@pytest.mark.asyncio
async def test_concurrent_enqueues_on_one_producer():
    producer = FakeProducer()
    queue = KafkaJobQueue(brokers="unused", producer=producer, flush_timeout=2.0)
    jobs = [_job() for _ in range(20)]

    job_ids = await asyncio.gather(*(queue.enqueue(f"catalog-{i}", job, RetryPolicy()) for i, job in enumerate(jobs)))

    assert job_ids == [job.job_id for job in jobs]
    assert len(producer.produced) == 20
