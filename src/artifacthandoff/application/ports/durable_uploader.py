from __future__ import annotations
from typing import Protocol

class DurableUploader(Protocol):
    # Returns a fetchable URL; must raise instead of returning a partial upload
    async def upload(self, data: bytes, filename: str, mime_type: str, tenant_id: str) -> str: ...
