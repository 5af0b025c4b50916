"""
Custom exceptions for cast discovery.
"""


class CastDiscoveryError(Exception):
    """Base class for all cast discovery errors."""
    pass

class DiscoveryTransportError(CastDiscoveryError):
    """Raised when an mDNS query cannot be started (socket setup, interface
    binding, or browser creation failed)."""
    def __init__(self, message: str, service_name: str | None = None):
        super().__init__(message)
        self.service_name = service_name
