"""Durable uploaders."""

from artifacthandoff.infrastructure.uploads.local_uploader import LocalFileUploader, sanitize_filename

__all__ = [
    "LocalFileUploader",
    "sanitize_filename",
]
