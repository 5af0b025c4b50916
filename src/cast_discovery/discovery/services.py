"""Well-known mDNS-discoverable services."""
from enum import Enum


class DiscoverService(str, Enum):
    GOOGLE_CAST = "googlecast"

    def service_string(self) -> str:
        """DNS-SD service type to browse for, fully qualified for zeroconf."""
        return _SERVICE_TYPES[self]


_SERVICE_TYPES: dict[DiscoverService, str] = {
    DiscoverService.GOOGLE_CAST: "_googlecast._tcp.local.",
}
