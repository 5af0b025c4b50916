"""Shared fixtures: builders for zeroconf DNS records and a scripted transport."""
import asyncio
import ipaddress

import pytest
from zeroconf import DNSAddress, DNSPointer, DNSService, DNSText
from zeroconf.const import _CLASS_IN, _TYPE_A, _TYPE_AAAA, _TYPE_PTR, _TYPE_SRV, _TYPE_TXT

from cast_discovery.discovery.transport import MdnsResponse

SERVICE_TYPE = "_googlecast._tcp.local."
INSTANCE = "Chromecast-Ultra-abc123._googlecast._tcp.local."
TTL = 120


class DnsRecords:
    """Builds the records a cast device advertises."""

    @staticmethod
    def address(ip: str, name: str = "abc123.local.") -> DNSAddress:
        parsed = ipaddress.ip_address(ip)
        type_ = _TYPE_A if parsed.version == 4 else _TYPE_AAAA
        return DNSAddress(name, type_, _CLASS_IN, TTL, parsed.packed)

    @staticmethod
    def service(port: int, name: str = INSTANCE, server: str = "abc123.local.") -> DNSService:
        return DNSService(name, _TYPE_SRV, _CLASS_IN, TTL, 0, 0, port, server)

    @staticmethod
    def pointer(alias: str = INSTANCE, name: str = SERVICE_TYPE) -> DNSPointer:
        return DNSPointer(name, _TYPE_PTR, _CLASS_IN, TTL, alias)

    @staticmethod
    def text(*entries: str, name: str = INSTANCE) -> DNSText:
        payload = b"".join(bytes([len(raw)]) + raw for raw in (e.encode() for e in entries))
        return DNSText(name, _TYPE_TXT, _CLASS_IN, TTL, payload)


@pytest.fixture
def dns():
    return DnsRecords


class ScriptedTransport:
    """
    Stand-in for the zeroconf transport. Yields the scripted responses, then
    optionally blocks on `release` so a test can observe an in-flight poll.
    """

    def __init__(self, responses=(), hold: bool = False, fail_with: Exception | None = None):
        self.responses = list(responses)
        self.hold = hold
        self.fail_with = fail_with
        self.calls: list[tuple[str, int]] = []
        self.release = asyncio.Event()

    async def query(self, service_name: str, timeout_ms: int):
        self.calls.append((service_name, timeout_ms))
        if self.fail_with is not None:
            raise self.fail_with
        for response in self.responses:
            yield response
        if self.hold:
            await self.release.wait()


@pytest.fixture
def make_transport():
    return ScriptedTransport


@pytest.fixture
def cast_response(dns):
    def _make(ip: str, port: int = 8009, *txt: str, name: str = INSTANCE) -> MdnsResponse:
        records = [dns.pointer(), dns.service(port), dns.address(ip)]
        if txt:
            records.append(dns.text(*txt))
        return MdnsResponse(name=name, records=tuple(records))
    return _make
