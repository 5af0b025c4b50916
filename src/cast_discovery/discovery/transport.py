"""
mDNS transport used by the discovery cache.

The cache only needs `query(service_name, timeout_ms)`, an async stream of
responses; anything with that shape satisfies MdnsTransport.
"""
import asyncio
from collections.abc import AsyncIterator
from dataclasses import dataclass, field
from typing import Protocol

import structlog
from zeroconf import (
    DNSRecord,
    Error as ZeroconfError,
    InterfaceChoice,
    IPVersion,
    ServiceStateChange,
    Zeroconf,
)
from zeroconf.asyncio import AsyncServiceBrowser, AsyncServiceInfo, AsyncZeroconf

from ..exceptions import DiscoveryTransportError

logger = structlog.get_logger(__name__)

# How often the response loop wakes up to re-check its deadline
_QUEUE_POLL_INTERVAL = 0.5


@dataclass(frozen=True)
class MdnsResponse:
    """All records learned about one advertised service instance."""
    name: str
    records: tuple[DNSRecord, ...] = ()
    error: Exception | None = field(default=None, compare=False)


class MdnsTransport(Protocol):
    def query(self, service_name: str, timeout_ms: int) -> AsyncIterator[MdnsResponse]:
        ...


def records_from_service_info(info: AsyncServiceInfo, ip_version: IPVersion | None = None) -> tuple[DNSRecord, ...]:
    """
    Collect the PTR, SRV, A/AAAA and TXT records zeroconf holds for a service.

    AAAA records come before A records: the parser keeps the last address, and
    IPv4 is preferred because cast devices usually advertise an unscoped
    link-local IPv6 address alongside it.
    """
    records: list[DNSRecord] = [info.dns_pointer()]
    if info.port is not None and info.server:
        records.append(info.dns_service())
    if ip_version in (None, IPVersion.All, IPVersion.V6Only):
        records.extend(info.dns_addresses(version=IPVersion.V6Only))
    if ip_version in (None, IPVersion.All, IPVersion.V4Only):
        records.extend(info.dns_addresses(version=IPVersion.V4Only))
    if info.text:
        records.append(info.dns_text())
    return tuple(records)


class ZeroconfTransport:
    """
    Browses for a DNS-SD service type with python-zeroconf and yields one
    MdnsResponse per resolved service instance.
    """

    def __init__(
        self,
        request_timeout_ms: int = 3000,
        interfaces: InterfaceChoice = InterfaceChoice.All,
        ip_version: IPVersion | None = None,
    ):
        self.request_timeout_ms = request_timeout_ms
        self.interfaces = interfaces
        self.ip_version = ip_version
        self.logger = logger.bind(transport="zeroconf")

    async def query(self, service_name: str, timeout_ms: int) -> AsyncIterator[MdnsResponse]:
        """
        Browse for `service_name` for `timeout_ms` milliseconds.

        Raises DiscoveryTransportError if zeroconf cannot be started or the
        browser rejects the service type.
        """
        log = self.logger.bind(service_type=service_name)
        try:
            aiozc = AsyncZeroconf(interfaces=self.interfaces, ip_version=self.ip_version)
        except (OSError, ZeroconfError) as e:
            raise DiscoveryTransportError(f"Could not start mDNS query: {e}", service_name=service_name) from e

        queue: asyncio.Queue[MdnsResponse] = asyncio.Queue()
        pending: set[asyncio.Task] = set()
        browser: AsyncServiceBrowser | None = None

        def on_service_state_change(
            zeroconf: Zeroconf, service_type: str, name: str, state_change: ServiceStateChange
        ) -> None:
            log.debug("mDNS service state change detected.", service_name=name, state=state_change)
            if state_change in (ServiceStateChange.Added, ServiceStateChange.Updated):
                task = asyncio.create_task(self._resolve(zeroconf, service_type, name, queue))
                pending.add(task)
                task.add_done_callback(pending.discard)

        try:
            try:
                browser = AsyncServiceBrowser(aiozc.zeroconf, [service_name], handlers=[on_service_state_change])
            except (OSError, ZeroconfError) as e:
                raise DiscoveryTransportError(f"Could not browse for {service_name}: {e}", service_name=service_name) from e

            loop = asyncio.get_running_loop()
            end_time = loop.time() + timeout_ms / 1000
            while (remaining := end_time - loop.time()) > 0:
                try:
                    response = await asyncio.wait_for(queue.get(), timeout=min(remaining, _QUEUE_POLL_INTERVAL))
                except TimeoutError:
                    continue
                yield response
        finally:
            for task in list(pending):
                task.cancel()
            try:
                if browser is not None:
                    await browser.async_cancel()
            finally:
                await aiozc.async_close()
            log.debug("mDNS query finished.")

    async def _resolve(self, zc: Zeroconf, service_type: str, name: str, queue: asyncio.Queue) -> None:
        """Resolve one service instance and queue whatever records were learned."""
        log = self.logger.bind(service_name=name, service_type=service_type)
        info = AsyncServiceInfo(service_type, name)
        try:
            resolved = await info.async_request(zc, self.request_timeout_ms)
        except Exception as e:
            log.warning("Error resolving mDNS service info", error=str(e))
            queue.put_nowait(MdnsResponse(name=name, error=e))
            return

        if not resolved:
            log.debug("mDNS service info incomplete after request timeout.")
        queue.put_nowait(MdnsResponse(name=name, records=records_from_service_info(info, self.ip_version)))
