"""
IPv4 address helpers.
"""

import ipaddress
from ipaddress import IPv4Address

from cf_ddns.exceptions import MalformedAddressError


def parse_ipv4(value: str) -> IPv4Address:
    """
    Parse a string as an IPv4 dotted-quad.

    Surrounding whitespace is ignored. No semantic checks are made, so
    loopback and private addresses are returned as-is.

    Args:
        value: Text to parse

    Returns:
        IPv4Address: Parsed address

    Raises:
        MalformedAddressError: If the text is not an IPv4 address
    """
    text = (value or "").strip()
    try:
        return ipaddress.IPv4Address(text)
    except ipaddress.AddressValueError as e:
        raise MalformedAddressError(f"Not an IPv4 address: {text!r} ({e})") from e
