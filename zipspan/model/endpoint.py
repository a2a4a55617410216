"""Network location that recorded span activity."""

from __future__ import annotations

import ipaddress
import logging
from dataclasses import dataclass
from typing import Optional

from zipspan import runtime_config
from zipspan.errors import ValidationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Endpoint:
    """
    Service name and address of a span's local or remote side.

    Fields are normalized on construction: the service name is lowercased,
    addresses are parsed and re-rendered in canonical form and a zero port
    is dropped. :meth:`create` additionally sorts a single ``ip`` literal
    into ``ipv4``/``ipv6``.
    """

    service_name: Optional[str] = None
    ipv4: Optional[str] = None
    ipv6: Optional[str] = None
    port: Optional[int] = None

    def __post_init__(self) -> None:
        service_name = self.service_name
        if service_name is not None and not isinstance(service_name, str):
            raise ValidationError("service name must be a string", {"service_name": service_name})

        port = self.port
        if port is not None:
            if isinstance(port, bool) or not isinstance(port, int) or not 0 <= port <= 0xFFFF:
                raise ValidationError("invalid port", {"port": port})

        ipv4, _ = _parse_ip(self.ipv4)
        mapped, ipv6 = _parse_ip(self.ipv6)

        object.__setattr__(self, "service_name", service_name.lower() if service_name else None)
        object.__setattr__(self, "ipv4", ipv4 or mapped)
        object.__setattr__(self, "ipv6", ipv6)
        object.__setattr__(self, "port", port or None)

    @classmethod
    def create(
        cls,
        service_name: Optional[str] = None,
        ip: Optional[str] = None,
        port: Optional[int] = None,
    ) -> "Endpoint":
        """
        Create a normalized endpoint.

        Args:
            service_name: lowercased; empty means absent
            ip: IPv4 or IPv6 literal; unparseable input is ignored
            port: 0 means absent; must be within 0..65535
        """
        ipv4, ipv6 = _parse_ip(ip)
        return cls(service_name=service_name, ipv4=ipv4, ipv6=ipv6, port=port)

    def is_empty(self) -> bool:
        return (
            self.service_name is None
            and self.ipv4 is None
            and self.ipv6 is None
            and self.port is None
        )

    def to_dict(self) -> dict:
        """Ordered dict of the present fields, keyed as in the JSON form."""
        result = {}
        if self.service_name is not None:
            result["serviceName"] = self.service_name
        if self.ipv4 is not None:
            result["ipv4"] = self.ipv4
        if self.ipv6 is not None:
            result["ipv6"] = self.ipv6
        if self.port is not None:
            result["port"] = self.port
        return result


def _parse_ip(ip: Optional[str]):
    """Return ``(ipv4, ipv6)``; an IPv4-mapped IPv6 address yields its IPv4 form."""
    if ip is None:
        return None, None
    if not isinstance(ip, str):
        raise ValidationError("ip must be a string", {"ip": ip})
    if not ip:
        return None, None
    try:
        address = ipaddress.ip_address(ip.strip("[]"))
    except ValueError:
        if runtime_config.get_debug():
            logger.debug("ignoring unparseable endpoint address %r", ip)
        return None, None
    if address.version == 4:
        return str(address), None
    if address.ipv4_mapped is not None:
        return str(address.ipv4_mapped), None
    return None, str(address)
