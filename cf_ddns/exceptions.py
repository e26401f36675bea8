"""
Exception classes for cf-ddns.

Every error raised by a run derives from DDNSError so the entry point can turn
any failure into a single terminal message and a non-zero exit status.
"""


class DDNSError(Exception):
    """Base class for all cf-ddns failures."""


class ConfigError(DDNSError):
    """
    Raised when the configuration is missing required values or cannot be
    parsed.
    """


class IPDiscoveryError(DDNSError):
    """
    Raised when none of the IP-echo services produced a usable address.
    """


class MalformedAddressError(DDNSError, ValueError):
    """
    Raised when a value cannot be parsed as an IPv4 dotted-quad.
    """


class ProviderError(DDNSError):
    """Raised when a call to the DNS provider fails."""


class ProviderLookupError(ProviderError):
    """
    Raised when the zone or record lookup fails or returns no results.
    """


class ProviderUpdateError(ProviderError):
    """
    Raised when the provider rejects the record update.
    """
