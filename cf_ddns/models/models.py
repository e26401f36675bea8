"""
Data models for cf-ddns.
"""

from dataclasses import dataclass
from ipaddress import IPv4Address
from typing import Dict, Union

# Cloudflare treats a TTL of 1 as "automatic"
AUTO_TTL = 1


@dataclass(frozen=True)
class CurrentRecord:
    """
    The A record currently published by the provider for the managed name.
    """

    zone_id: str
    record_id: str
    address: IPv4Address
    name: str = ""


@dataclass(frozen=True)
class UpdateRequest:
    """
    Payload sent to the provider to point the record at a new address.
    """

    name: str
    content: str
    type: str = "A"
    ttl: int = AUTO_TTL
    proxied: bool = True

    @classmethod
    def for_address(cls, fqdn: str, address: IPv4Address) -> "UpdateRequest":
        """
        Build the update for a record name and a newly discovered address.

        Args:
            fqdn: Record name
            address: Address the record should point at

        Returns:
            UpdateRequest: Update with the fixed record policy applied
        """
        return cls(name=fqdn, content=str(address))

    def to_payload(self) -> Dict[str, Union[str, int, bool]]:
        return {
            "type": self.type,
            "name": self.name,
            "content": self.content,
            "ttl": self.ttl,
            "proxied": self.proxied,
        }


@dataclass(frozen=True)
class ReconcileResult:
    """
    Outcome of a single reconciliation run.
    """

    changed: bool
    old_address: IPv4Address
    new_address: IPv4Address
    dry_run: bool = False
