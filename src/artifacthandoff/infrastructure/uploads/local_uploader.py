"""Uploader that writes artifacts under a directory served at a public URL."""

from __future__ import annotations

import asyncio
import os
import re
import time
import uuid
from pathlib import Path

import httpx
from loguru import logger

_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9._-]")

# Checked in order when no base URL is passed explicitly
PUBLIC_URL_ENV_VARS = (
    "PUBLIC_BASE_URL",
    "API_BASE_URL",
    "PUBLIC_API_URL",
    "NGROK_URL",
    "BASE_URL",
)

NGROK_API_URL = "http://127.0.0.1:4040/api/tunnels"


def sanitize_filename(name: str) -> str:
    return _UNSAFE_CHARS.sub("_", name or "catalogo.pdf")


class LocalFileUploader:
    """
    Write bytes to ``{upload_dir}/catalogs`` and return the public URL.

    The files are expected to be served by the API under
    ``/uploads/catalogs``. Upload fails when no public base URL can be
    resolved, since a job pointing at an unreachable URL could never deliver.
    """

    def __init__(
        self,
        upload_dir: str | Path,
        public_base_url: str | None = None,
        probe_ngrok: bool = False,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.upload_dir = Path(upload_dir)
        self.public_base_url = public_base_url
        self.probe_ngrok = probe_ngrok
        self._transport = transport

    @property
    def catalogs_dir(self) -> Path:
        return self.upload_dir / "catalogs"

    async def upload(self, data: bytes, filename: str, mime_type: str, tenant_id: str) -> str:
        base_url = await self._resolve_public_base_url()
        if not base_url:
            raise RuntimeError("No public base URL configured for serving uploaded catalogs")

        safe_name = sanitize_filename(filename)
        unique_name = f"{sanitize_filename(tenant_id)}-{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}-{safe_name}"
        path = self.catalogs_dir / unique_name

        await asyncio.to_thread(self._write, path, data)
        logger.debug(f"Wrote {len(data)} bytes ({mime_type}) to {path}")

        return f"{base_url}/uploads/catalogs/{unique_name}"

    @staticmethod
    def _write(path: Path, data: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        # Write-then-rename so a reader never sees a partial file
        tmp = path.with_name(f".{path.name}.part")
        tmp.write_bytes(data)
        os.replace(tmp, path)

    async def _resolve_public_base_url(self) -> str | None:
        candidates = [self.public_base_url] + [os.getenv(name) for name in PUBLIC_URL_ENV_VARS]
        for candidate in candidates:
            if candidate and candidate.strip():
                return candidate.strip().rstrip("/")

        if self.probe_ngrok:
            return await self._resolve_ngrok_base_url()
        return None

    async def _resolve_ngrok_base_url(self) -> str | None:
        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                response = await client.get(NGROK_API_URL, timeout=1.5)
        except httpx.HTTPError as e:
            logger.debug(f"ngrok API not reachable: {e}")
            return None

        if response.status_code != 200:
            return None
        for tunnel in response.json().get("tunnels", []):
            public_url = tunnel.get("public_url") or ""
            if public_url.startswith("https://"):
                return public_url.rstrip("/")
        return None
