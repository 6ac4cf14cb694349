from __future__ import annotations
from typing import Optional, Protocol

class RecipientDirectory(Protocol):
    async def phone_for(self, tenant_id: str, customer_id: str) -> Optional[str]: ...
