from artifacthandoff.infrastructure.recipients.static_directory import StaticRecipientDirectory

__all__ = ["StaticRecipientDirectory"]
