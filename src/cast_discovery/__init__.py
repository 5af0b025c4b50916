"""cast-discovery - finds Google Cast devices on the local network over mDNS
and keeps a cache of what it has seen.
"""

__version__ = "0.1.0"

from .config import Config
from .discovery import DiscoverService, DiscoveryCache
from .exceptions import CastDiscoveryError, DiscoveryTransportError
from .models import DeviceRecord

__all__ = [
    "CastDiscoveryError",
    "Config",
    "DeviceRecord",
    "DiscoverService",
    "DiscoveryCache",
    "DiscoveryTransportError",
]
