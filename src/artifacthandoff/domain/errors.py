"""Error taxonomy for catalog generation and handoff."""

from __future__ import annotations


class HandoffError(Exception):
    """Base class for errors surfaced to produce/dispatch callers."""

    user_message = "Could not send the catalog right now, please try again."

    def __init__(self, message: str, *, reference: str | None = None) -> None:
        super().__init__(message)
        self.reference = reference


class GenerationFailed(HandoffError):
    """The renderer could not build the document; nothing was cached."""

    user_message = "Could not generate the catalog."


class ReferenceNotFound(HandoffError):
    """Reference is unknown, expired, or belongs to another tenant."""

    user_message = "That catalog is no longer available, generate a new one."


class RecipientNotFound(HandoffError):
    """No deliverable address for the conversation's customer."""

    user_message = "Customer phone number not found"


class UploadFailed(HandoffError):
    """Durable upload failed; no job was enqueued."""


class EnqueueFailed(HandoffError):
    """Queue backend rejected or did not confirm the job."""


class DuplicateReference(Exception):
    """A reference was stored twice. Programming error, never user-facing."""


class CatalogRenderError(Exception):
    """Raised by renderers, e.g. when no products match the filter."""
