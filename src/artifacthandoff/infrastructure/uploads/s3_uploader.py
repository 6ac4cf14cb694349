from __future__ import annotations

import asyncio
import uuid
from dataclasses import dataclass
from typing import Any

import boto3
from botocore.config import Config
from loguru import logger

from artifacthandoff.infrastructure.settings import Settings
from artifacthandoff.infrastructure.uploads.local_uploader import sanitize_filename


@dataclass(frozen=True)
class S3UploaderConfig:
    endpoint: str | None
    region: str
    access_key: str | None
    secret_key: str | None
    bucket: str
    prefix: str = "catalogs"
    force_path_style: bool = True
    presign_seconds: int = 3600
    # When set, URLs are public_base_url/key instead of presigned GETs
    public_base_url: str | None = None


class S3ArtifactUploader:
    def __init__(self, cfg: S3UploaderConfig, client: Any | None = None) -> None:
        self.cfg = cfg
        if client is None:
            s3_cfg = Config(
                signature_version="s3v4",
                s3={"addressing_style": "path"} if cfg.force_path_style else {},
            )
            client = boto3.client(
                "s3",
                endpoint_url=cfg.endpoint,
                aws_access_key_id=cfg.access_key,
                aws_secret_access_key=cfg.secret_key,
                region_name=cfg.region,
                config=s3_cfg,
            )
        self.client = client

    def object_key(self, tenant_id: str, filename: str) -> str:
        # prefix/tenant/uuid8-filename.ext
        return f"{self.cfg.prefix}/{sanitize_filename(tenant_id)}/{uuid.uuid4().hex[:8]}-{sanitize_filename(filename)}"

    async def upload(self, data: bytes, filename: str, mime_type: str, tenant_id: str) -> str:
        key = self.object_key(tenant_id, filename)
        return await asyncio.to_thread(self._put, key, data, mime_type)

    def _put(self, key: str, data: bytes, mime_type: str) -> str:
        self.client.put_object(
            Bucket=self.cfg.bucket,
            Key=key,
            Body=data,
            ContentType=mime_type,
        )
        logger.debug(f"Uploaded {len(data)} bytes to s3://{self.cfg.bucket}/{key}")

        if self.cfg.public_base_url:
            return f"{self.cfg.public_base_url.rstrip('/')}/{key}"
        return self.client.generate_presigned_url(
            "get_object",
            Params={"Bucket": self.cfg.bucket, "Key": key},
            ExpiresIn=self.cfg.presign_seconds,
        )


def s3_uploader_from_settings(settings: Settings) -> S3ArtifactUploader:
    cfg = S3UploaderConfig(
        endpoint=settings.s3_endpoint,
        region=settings.s3_region,
        access_key=settings.s3_access_key.get_secret_value() if settings.s3_access_key else None,
        secret_key=settings.s3_secret_key.get_secret_value() if settings.s3_secret_key else None,
        bucket=settings.s3_bucket,
        prefix=settings.s3_prefix,
        force_path_style=settings.s3_force_path_style,
        presign_seconds=settings.s3_presign_seconds,
        public_base_url=settings.s3_public_base_url,
    )
    return S3ArtifactUploader(cfg)
