"""
Translation of raw mDNS records into DeviceRecord values.

See https://blog.oakbits.com/google-cast-protocol-discovery-and-connection.html
for the meaning of the Google Cast TXT keys.
"""
import ipaddress
from collections.abc import Iterable

import structlog
from zeroconf import DNSAddress, DNSPointer, DNSRecord, DNSService, DNSText

from ..models.device import DeviceRecord

logger = structlog.get_logger(__name__)

# TXT key -> DeviceRecord field
TXT_FIELDS: dict[str, str] = {
    "ca": "certificate_authority_id",
    "fn": "friendly_name",
    "ic": "icon_path",
    "id": "device_id",
    "md": "model_name",
    "ve": "protocol_version",
}


def decode_txt_entries(data: bytes) -> list[str]:
    """Split DNS TXT rdata (a run of length-prefixed strings) into text entries."""
    entries: list[str] = []
    offset = 0
    while offset < len(data):
        length = data[offset]
        offset += 1
        chunk = data[offset:offset + length]
        offset += length
        if chunk:
            entries.append(chunk.decode("utf-8", errors="replace"))
    return entries


def parse_txt_attributes(entries: Iterable[str]) -> dict[str, str]:
    """Map recognised `key=value` TXT entries onto DeviceRecord field names.

    Entries that do not split into exactly one key and one value are skipped,
    as are unknown keys. Later entries win.
    """
    attributes: dict[str, str] = {}
    for entry in entries:
        parts = entry.split("=")
        if len(parts) != 2: # Not RFC 1464 form
            continue
        key, value = parts
        field = TXT_FIELDS.get(key)
        if field is not None:
            attributes[field] = value
    return attributes


def parse_device_record(records: Iterable[DNSRecord]) -> DeviceRecord | None:
    """
    Build a DeviceRecord from the records carried by one mDNS response.

    Returns None when no A/AAAA or no SRV record was present; that is an
    incomplete advertisement, not an error.
    """
    address: ipaddress.IPv4Address | ipaddress.IPv6Address | None = None
    port: int | None = None
    service_pointer: str | None = None
    attributes: dict[str, str] = {}

    for record in records:
        if isinstance(record, DNSAddress):
            try:
                address = ipaddress.ip_address(record.address)
            except ValueError:
                logger.debug("Ignoring malformed address record", name=record.name, length=len(record.address))
        elif isinstance(record, DNSService):
            port = record.port
        elif isinstance(record, DNSPointer):
            service_pointer = record.alias
        elif isinstance(record, DNSText):
            attributes.update(parse_txt_attributes(decode_txt_entries(record.text)))

    if address is None:
        logger.info("No A/AAAA address record found; invalid device")
        return None
    if port is None:
        logger.info("No SRV service-location record found; invalid device", address=str(address))
        return None

    return DeviceRecord(
        service_pointer=service_pointer,
        address=address,
        port=port,
        **attributes,
    )
