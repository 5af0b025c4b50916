"""
mDNS discovery of cast devices: service names, record parsing, the zeroconf
transport, and the polling device cache.
"""
from .cache import DEFAULT_TIMEOUT_MS, DiscoveryCache, PollState
from .parser import decode_txt_entries, parse_device_record, parse_txt_attributes
from .services import DiscoverService
from .transport import MdnsResponse, MdnsTransport, ZeroconfTransport

__all__ = [
    "DEFAULT_TIMEOUT_MS",
    "DiscoverService",
    "DiscoveryCache",
    "MdnsResponse",
    "MdnsTransport",
    "PollState",
    "ZeroconfTransport",
    "decode_txt_entries",
    "parse_device_record",
    "parse_txt_attributes",
]
