"""Ephemeral catalog artifact handoff: render, park, upload, enqueue."""

__version__ = "0.1.0"
