"""Backend communication."""

from .client import BackendClient, BackendError, TransportError

__all__ = ["BackendClient", "BackendError", "TransportError"]
