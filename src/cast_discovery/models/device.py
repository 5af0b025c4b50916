from ipaddress import IPv4Address, IPv6Address

from pydantic import Field

from .common import FrozenPydanticModel

DEFAULT_NAME = "Unnamed"

# Cast devices serve their icon and setup endpoints over plain HTTP on this port.
DEVICE_HTTP_PORT = 8008


class DeviceRecord(FrozenPydanticModel):
    """
    Device details obtained via mDNS discovery of a cast device.

    TXT keys not mapped here (cd, rm, st, bs, nf, rs) have no known use and
    are dropped by the parser.
    """
    service_pointer: str | None = Field(None, description="Advertised service path from the PTR record.")
    address: IPv4Address | IPv6Address = Field(..., description="Address from the A/AAAA record.")
    port: int = Field(..., ge=0, le=65535, description="Service port from the SRV record.")
    device_id: str | None = Field(None, description="Device UUID (TXT 'id').")
    model_name: str | None = Field(None, description="Human-readable model, e.g. 'Chromecast Ultra' (TXT 'md').")
    # Observed values: 02 on first-generation Chromecast, 04 on Nexus Player,
    # 05 on Chromecast Audio and every current device.
    protocol_version: str | None = Field(None, description="Protocol version (TXT 've').")
    icon_path: str | None = Field(None, description="Icon URL path on the device's HTTP port (TXT 'ic').")
    certificate_authority_id: str | None = Field(None, description="Certificate authority marker, differs per hardware revision (TXT 'ca').")
    friendly_name: str | None = Field(None, description="Owner-assigned name, e.g. 'Living Room' (TXT 'fn').")

    @property
    def key(self) -> tuple[IPv4Address | IPv6Address, int]:
        """Identity of the device on the network."""
        return (self.address, self.port)

    def display_name(self) -> str:
        """User-friendly display name."""
        return f"{self.friendly_name or DEFAULT_NAME} ({self.address})"

    def icon_url(self) -> str | None:
        if not self.icon_path:
            return None
        host = f"[{self.address}]" if self.address.version == 6 else str(self.address)
        return f"http://{host}:{DEVICE_HTTP_PORT}{self.icon_path}"
