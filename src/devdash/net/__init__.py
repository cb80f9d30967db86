from .client import HttpClient, TransportError

__all__ = ["HttpClient", "TransportError"]
