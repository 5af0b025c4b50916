"""
Device discovery cache: runs time-bounded mDNS polls in the background and
keeps the devices they find.
"""
from __future__ import annotations

import asyncio
import threading
import time
from enum import Enum
from ipaddress import IPv4Address, IPv6Address
from typing import TYPE_CHECKING

import structlog
from zeroconf import IPVersion

from ..models.device import DeviceRecord
from .parser import parse_device_record
from .transport import MdnsTransport, ZeroconfTransport

if TYPE_CHECKING:
    from ..config import Config

logger = structlog.get_logger(__name__)

DEFAULT_TIMEOUT_MS = 2000

# Allowance on top of the poll timeout for the transport to close its sockets
SHUTDOWN_GRACE_SECONDS = 1.0

_IP_VERSIONS = {
    "auto": None,
    "all": IPVersion.All,
    "v4": IPVersion.V4Only,
    "v6": IPVersion.V6Only,
}


class PollState(Enum):
    IDLE = "IDLE"
    POLLING = "POLLING"


class DiscoveryCache:
    """
    Discovered devices for one mDNS service name.

    At most one poll runs at a time. Devices are keyed by (address, port); a
    re-advertisement from the same endpoint replaces the earlier record.
    Entries never expire.
    """

    def __init__(
        self,
        service_name: str,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        transport: MdnsTransport | None = None,
    ):
        self.service_name = service_name
        self.timeout_ms = timeout_ms # Read when a poll starts
        self.transport: MdnsTransport = transport or ZeroconfTransport()
        self.last_error: Exception | None = None
        self.logger = logger.bind(service=service_name)

        # Guards _devices, _state, poll_finished_at and last_error. Never held across an await.
        self._lock = threading.Lock()
        self._devices: dict[tuple[IPv4Address | IPv6Address, int], DeviceRecord] = {}
        self._state = PollState.IDLE
        self._poll_task: asyncio.Task | None = None
        now = time.monotonic()
        self.poll_started_at = now
        self.poll_finished_at = now

    @classmethod
    def from_config(cls, app_config: Config) -> DiscoveryCache:
        discovery_config = app_config.discovery
        transport = ZeroconfTransport(
            request_timeout_ms=discovery_config.request_timeout_ms,
            ip_version=_IP_VERSIONS[discovery_config.ip_version.value],
        )
        return cls(
            discovery_config.service.service_string(),
            timeout_ms=discovery_config.timeout_ms,
            transport=transport,
        )

    def start_discovery(self) -> bool:
        """
        Start a background discovery poll unless one is already running.

        Must be called from a running event loop. Returns True if a poll was
        started.
        """
        loop = asyncio.get_running_loop()
        with self._lock:
            if self._state is PollState.POLLING:
                self.logger.debug("Discovery already running; not restarting")
                return False
            self._state = PollState.POLLING
            self.poll_started_at = time.monotonic()
            self.last_error = None

        timeout_ms = self.timeout_ms
        self.logger.info("Starting discovery poll", timeout_ms=timeout_ms)
        self._poll_task = loop.create_task(self._poll(timeout_ms), name=f"discovery-poll:{self.service_name}")
        return True

    def is_discovery_running(self) -> bool:
        with self._lock:
            return self._state is PollState.POLLING

    def devices(self) -> set[DeviceRecord]:
        """Snapshot of the devices discovered so far."""
        with self._lock:
            return set(self._devices.values())

    def clear(self) -> None:
        with self._lock:
            self._devices.clear()

    async def wait_for_poll(self) -> None:
        """Wait until the in-flight poll, if any, has finished."""
        task = self._poll_task
        if task is not None:
            await asyncio.shield(task)

    def _upsert(self, record: DeviceRecord) -> None:
        with self._lock:
            previous = self._devices.get(record.key)
            self._devices[record.key] = record
        if previous is None:
            self.logger.info("Discovered device", device=record.display_name(), port=record.port)
        elif previous != record:
            self.logger.debug("Device record updated", device=record.display_name(), port=record.port)

    async def _poll(self, timeout_ms: int) -> None:
        found = 0
        try:
            async with asyncio.timeout(timeout_ms / 1000 + SHUTDOWN_GRACE_SECONDS):
                async for response in self.transport.query(self.service_name, timeout_ms):
                    if response.error is not None:
                        self.logger.warning("Skipping unreadable mDNS response", name=response.name, error=str(response.error))
                        continue
                    record = parse_device_record(response.records)
                    if record is not None:
                        self._upsert(record)
                        found += 1
        except TimeoutError:
            self.logger.debug("Discovery poll reached its timeout")
        except Exception as e:
            self.logger.exception("Discovery poll failed", error=str(e))
            with self._lock:
                self.last_error = e
        finally:
            with self._lock:
                self.poll_finished_at = time.monotonic()
                self._state = PollState.IDLE
            self.logger.info("Discovery poll finished", responses_accepted=found, failed=self.last_error is not None)
