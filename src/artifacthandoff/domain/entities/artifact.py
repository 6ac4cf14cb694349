from __future__ import annotations

import secrets
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from types import MappingProxyType
from typing import Any, Mapping

REFERENCE_PREFIX = "cat_"


def new_reference() -> str:
    # 256 bits of entropy; collisions are not a practical concern
    return f"{REFERENCE_PREFIX}{secrets.token_urlsafe(32)}"


def short_ref(reference: str) -> str:
    """Loggable prefix of a reference (the full token is a capability)."""
    return reference[: len(REFERENCE_PREFIX) + 8]


@dataclass(frozen=True)
class Artifact:
    reference: str
    tenant_id: str
    payload: bytes
    filename: str
    content_type: str
    created_at: datetime
    expires_at: datetime
    item_count: int = 0
    page_count: int = 0
    metadata: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.reference:
            raise ValueError("Artifact reference must not be empty")
        if not isinstance(self.payload, bytes):
            # bytearray/memoryview would let the caller mutate stored content
            object.__setattr__(self, "payload", bytes(self.payload))
        if self.expires_at <= self.created_at:
            raise ValueError("Artifact expires_at must be after created_at")
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))

    @classmethod
    def create(
        cls,
        *,
        tenant_id: str,
        payload: bytes,
        filename: str,
        content_type: str,
        created_at: datetime,
        ttl: timedelta,
        item_count: int = 0,
        page_count: int = 0,
        metadata: Mapping[str, Any] | None = None,
    ) -> Artifact:
        return cls(
            reference=new_reference(),
            tenant_id=tenant_id,
            payload=payload,
            filename=filename,
            content_type=content_type,
            created_at=created_at,
            expires_at=created_at + ttl,
            item_count=item_count,
            page_count=page_count,
            metadata=metadata or {},
        )

    @property
    def size_bytes(self) -> int:
        return len(self.payload)

    @property
    def size_kb(self) -> int:
        # Half up, so 2.5KB reports as 3
        return int(self.size_bytes / 1024 + 0.5)

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at
