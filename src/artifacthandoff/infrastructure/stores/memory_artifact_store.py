"""In-process artifact store with time-based eviction."""

from __future__ import annotations

import heapq
import itertools
import threading
from datetime import datetime, timezone
from typing import Callable

from loguru import logger

from artifacthandoff.domain.entities.artifact import Artifact, short_ref
from artifacthandoff.domain.errors import DuplicateReference

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryArtifactStore:
    """
    Process-wide map of reference -> Artifact.

    Entries are immutable and live until ``expires_at``; reads never touch
    lifetime. Expiry times sit in a min-heap that one background sweeper
    thread drains, so there is no timer per entry. Between ``expires_at`` and
    the next sweep an entry is already reported as missing.

    Lifecycle: ``init()`` at process start launches the sweeper,
    ``teardown()`` stops it. Both are idempotent.
    """

    def __init__(
        self,
        clock: Clock | None = None,
        sweep_interval_seconds: float = 30.0,
    ) -> None:
        if sweep_interval_seconds <= 0:
            raise ValueError("sweep_interval_seconds must be positive")
        self._clock = clock or utc_now
        self.sweep_interval_seconds = sweep_interval_seconds

        self._lock = threading.Lock()
        self._entries: dict[str, Artifact] = {}
        self._expiry_heap: list[tuple[datetime, int, str]] = []
        self._seq = itertools.count()

        self._stop = threading.Event()
        self._sweeper: threading.Thread | None = None

    # ------------------------------------------------------------------
    # Store contract
    # ------------------------------------------------------------------

    def put(self, artifact: Artifact) -> None:
        """Insert an artifact. Raises DuplicateReference if the key exists."""
        with self._lock:
            if artifact.reference in self._entries:
                raise DuplicateReference(f"Reference {short_ref(artifact.reference)}... already stored")
            self._entries[artifact.reference] = artifact
            heapq.heappush(
                self._expiry_heap,
                (artifact.expires_at, next(self._seq), artifact.reference),
            )
        logger.debug(
            f"Stored artifact {short_ref(artifact.reference)}... "
            f"tenant={artifact.tenant_id} size={artifact.size_bytes}B expires_at={artifact.expires_at.isoformat()}"
        )

    def get(self, reference: str, tenant_id: str | None = None) -> Artifact | None:
        """
        Look up a live artifact.

        When ``tenant_id`` is given it must match the owning tenant; a
        mismatch is reported exactly like a missing reference.
        """
        with self._lock:
            artifact = self._entries.get(reference)
        if artifact is None:
            return None
        if artifact.is_expired(self._clock()):
            return None
        if tenant_id is not None and artifact.tenant_id != tenant_id:
            logger.warning(
                f"Tenant {tenant_id} attempted to read artifact {short_ref(reference)}... "
                f"owned by another tenant"
            )
            return None
        return artifact

    def evict_expired(self) -> int:
        """Remove every entry whose expires_at has passed. Returns the count."""
        evicted = 0
        with self._lock:
            now = self._clock()
            while self._expiry_heap and self._expiry_heap[0][0] <= now:
                _, _, reference = heapq.heappop(self._expiry_heap)
                if self._entries.pop(reference, None) is not None:
                    evicted += 1
            remaining = len(self._entries)

        if evicted:
            logger.info(f"Evicted {evicted} expired artifacts ({remaining} live)")
        return evicted

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, reference: object) -> bool:
        with self._lock:
            return reference in self._entries

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def running(self) -> bool:
        return self._sweeper is not None and self._sweeper.is_alive()

    def init(self) -> None:
        """Start the background sweeper."""
        if self.running:
            # Also revives a sweeper that outlived its teardown join
            self._stop.clear()
            return
        self._stop.clear()
        self._sweeper = threading.Thread(
            target=self._sweep_loop,
            name="artifact-sweeper",
            daemon=True,
        )
        self._sweeper.start()
        logger.info(f"Artifact sweeper started (interval={self.sweep_interval_seconds}s)")

    def teardown(self, timeout: float = 5.0) -> None:
        """Stop the sweeper. Stored entries are left in place."""
        if self._sweeper is None:
            return
        self._stop.set()
        self._sweeper.join(timeout)
        if self._sweeper.is_alive():
            # Keep the handle so init() does not start a second sweeper
            logger.warning(f"Artifact sweeper did not stop within {timeout}s")
            return
        self._sweeper = None
        logger.info("Artifact sweeper stopped")

    def _sweep_loop(self) -> None:
        while not self._stop.wait(self.sweep_interval_seconds):
            try:
                self.evict_expired()
            except Exception as e:
                logger.exception(f"Artifact sweep failed: {e}")
