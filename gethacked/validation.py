"""Checks on domains, hostnames and IP addresses submitted as scan targets."""

from __future__ import annotations

import ipaddress
import string

from gethacked.errors import BadRequestError

MAX_NAME_LENGTH = 253
MAX_LABEL_LENGTH = 63

_LABEL_CHARS = frozenset(string.ascii_letters + string.digits + "-")
_HOSTNAME_CHARS = _LABEL_CHARS | {"."}

FREE_SCAN_BLOCKED = (
    "localhost",
    ".local",
    ".test",
    ".example",
    ".invalid",
    ".onion",
    ".internal",
)

RESERVED_HOSTNAMES = frozenset({"localhost", "localhost.localdomain", "broadcasthost"})
RESERVED_SUFFIXES = (".local", ".internal", ".test", ".example", ".invalid", ".onion")

_V4_RESERVED = tuple(
    ipaddress.IPv4Network(net)
    for net in (
        "127.0.0.0/8",  # loopback
        "10.0.0.0/8",  # private
        "172.16.0.0/12",  # private
        "192.168.0.0/16",  # private
        "169.254.0.0/16",  # link-local, including cloud metadata
        "255.255.255.255/32",  # broadcast
        "0.0.0.0/8",  # unspecified and "this network"
    )
)
_V4_CGNAT = ipaddress.IPv4Network("100.64.0.0/10")

_V6_LOOPBACK = ipaddress.IPv6Address("::1")
_V6_UNSPECIFIED = ipaddress.IPv6Address("::")
_V6_UNIQUE_LOCAL = ipaddress.IPv6Network("fc00::/7")
_V6_LINK_LOCAL = ipaddress.IPv6Network("fe80::/10")


def _is_valid_label(label: str) -> bool:
    return (
        bool(label)
        and len(label) <= MAX_LABEL_LENGTH
        and set(label) <= _LABEL_CHARS
        and not label.startswith("-")
        and not label.endswith("-")
    )


def is_valid_domain(domain: str) -> bool:
    """True if ``domain`` is a public, well-formed name fit for a free scan."""
    if not domain or len(domain.encode("utf-8")) > MAX_NAME_LENGTH:
        return False
    lower = domain.lower()
    if any(lower == blocked or lower.endswith(blocked) for blocked in FREE_SCAN_BLOCKED):
        return False
    labels = domain.split(".")
    if len(labels) < 2:
        return False
    return all(_is_valid_label(label) for label in labels)


def validate_hostname(hostname: str) -> str:
    """Check a hostname per RFC 1123, rejecting reserved names.

    Returns the hostname trimmed and lower-cased; raises BadRequestError otherwise.
    """
    host = hostname.strip().lower()
    if not host or len(host.encode("utf-8")) > MAX_NAME_LENGTH:
        raise BadRequestError("Invalid hostname length")
    if not set(host) <= _HOSTNAME_CHARS:
        raise BadRequestError("Hostname contains invalid characters")
    if any(not label or len(label) > MAX_LABEL_LENGTH for label in host.split(".")):
        raise BadRequestError("Invalid hostname label length")
    if host in RESERVED_HOSTNAMES:
        raise BadRequestError("Reserved hostname")
    if host.endswith(RESERVED_SUFFIXES):
        raise BadRequestError("Reserved hostname suffix")
    return host


def validate_ip_address(ip: str) -> ipaddress.IPv4Address | ipaddress.IPv6Address:
    """Parse an IP address and reject private, reserved and link-local ranges."""
    text = ip.strip()
    if "%" in text:
        raise BadRequestError("Invalid IP address format")
    try:
        addr = ipaddress.ip_address(text)
    except ValueError:
        raise BadRequestError("Invalid IP address format") from None

    if isinstance(addr, ipaddress.IPv4Address):
        if any(addr in net for net in _V4_RESERVED):
            raise BadRequestError("IP address is in a reserved or private range")
        if addr in _V4_CGNAT:
            raise BadRequestError("IP address is in a reserved range (CGNAT)")
    else:
        if addr in (_V6_LOOPBACK, _V6_UNSPECIFIED):
            raise BadRequestError("IP address is in a reserved range")
        if addr in _V6_UNIQUE_LOCAL:
            raise BadRequestError("IP address is in a private range (ULA)")
        if addr in _V6_LINK_LOCAL:
            raise BadRequestError("IP address is in a link-local range")
    return addr


def validate_target(
    hostname: str | None, ip_address: str | None
) -> tuple[str | None, ipaddress.IPv4Address | ipaddress.IPv6Address | None]:
    """Validate the parts of a new scan target; at least one must be given.

    Returns the normalized hostname and the parsed address, each None if absent.
    """
    host = validate_hostname(hostname) if hostname is not None else None
    addr = validate_ip_address(ip_address) if ip_address is not None else None
    if hostname is None and ip_address is None:
        raise BadRequestError("Either hostname or IP address must be provided")
    return host, addr