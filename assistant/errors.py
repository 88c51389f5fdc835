from __future__ import annotations


class ChatError(RuntimeError):
    """Base class for errors raised by a conversation session."""


class ConfigurationError(ChatError):
    """A required setting is missing or invalid. Raised before any client is built."""


class RemoteServiceError(ChatError):
    """The hosted model call failed (network, auth, quota or malformed reply)."""
