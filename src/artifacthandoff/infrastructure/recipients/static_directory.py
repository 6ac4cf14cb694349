from __future__ import annotations

from typing import Mapping, Optional


class StaticRecipientDirectory:
    """Customer phone lookup backed by a fixed (tenant, customer) mapping."""

    def __init__(self, phones: Mapping[tuple[str, str], str] | None = None) -> None:
        self._phones = dict(phones or {})

    def add(self, tenant_id: str, customer_id: str, phone: str) -> None:
        self._phones[(tenant_id, customer_id)] = phone

    async def phone_for(self, tenant_id: str, customer_id: str) -> Optional[str]:
        # Scoped by tenant: a customer id from another workspace resolves to nothing
        return self._phones.get((tenant_id, customer_id))
