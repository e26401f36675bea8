"""
Cloudflare provider module for cf-ddns.

This module is responsible for interfacing with the Cloudflare API to look up
and update the managed A record.
"""

import logging
from typing import Optional

import cloudflare
import httpx

from cf_ddns.exceptions import ProviderLookupError, ProviderUpdateError
from cf_ddns.models.models import CurrentRecord, UpdateRequest
from cf_ddns.utils.address import parse_ipv4


class CloudflareProvider:
    """
    Provider that interfaces with the Cloudflare API.
    """

    def __init__(
        self,
        api_token: str,
        timeout: float = 5.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize a CloudflareProvider.

        Args:
            api_token: Cloudflare API token
            timeout: Timeout in seconds for each API call
            http_client: HTTP client to send requests through (the SDK creates one if omitted)
        """
        self.logger = logging.getLogger("cf-ddns.provider.cloudflare")

        # A failed call aborts the run, so the SDK must not retry on its own
        self.cf = cloudflare.AsyncCloudflare(
            api_token=api_token,
            timeout=timeout,
            max_retries=0,
            http_client=http_client,
        )

    async def zone_id(self, domain: str) -> str:
        """
        Returns the ID of the zone whose name is exactly the given domain.

        Args:
            domain: Zone name

        Returns:
            str: Zone ID of the first matching zone

        Raises:
            ProviderLookupError: If the lookup fails or no zone matches
        """
        self.logger.debug(f"Looking up zone ID for {domain}")
        try:
            page = await self.cf.zones.list(name=domain)
        except cloudflare.CloudflareError as e:
            raise ProviderLookupError(
                f"Zone lookup for {domain} failed: {self._describe(e)}"
            ) from e

        zones = page.result or []
        zone_id = getattr(zones[0], "id", None) if zones else None
        if not zone_id:
            raise ProviderLookupError(f"Failed to receive any zones named {domain}")

        if len(zones) > 1:
            self.logger.debug(
                f"Received {len(zones)} zones named {domain}, using the first ({zone_id})"
            )
        return zone_id

    async def record(self, zone_id: str, fqdn: str) -> CurrentRecord:
        """
        Returns the A record for a name within a zone.

        Args:
            zone_id: Zone ID
            fqdn: Record name

        Returns:
            CurrentRecord: First matching record

        Raises:
            ProviderLookupError: If the lookup fails or no record matches
            MalformedAddressError: If the record content is not an IPv4 address
        """
        self.logger.debug(f"Looking up A record for {fqdn} in zone {zone_id}")
        try:
            page = await self.cf.dns.records.list(
                zone_id=zone_id,
                type="A",
                name={"exact": fqdn},
            )
        except cloudflare.CloudflareError as e:
            raise ProviderLookupError(
                f"Record lookup for {fqdn} in zone {zone_id} failed: {self._describe(e)}"
            ) from e

        records = page.result or []
        record = records[0] if records else None
        record_id = getattr(record, "id", None)
        if not record_id:
            raise ProviderLookupError(
                f"Did not receive any records for zone {zone_id} and name {fqdn}"
            )

        return CurrentRecord(
            zone_id=zone_id,
            record_id=record_id,
            address=parse_ipv4(getattr(record, "content", None) or ""),
            name=getattr(record, "name", None) or fqdn,
        )

    async def current_record(self, domain: str, fqdn: str) -> CurrentRecord:
        """
        Resolves the zone for a domain, then the A record for a name in it.

        Args:
            domain: Zone name
            fqdn: Record name

        Returns:
            CurrentRecord: Currently published record
        """
        zone_id = await self.zone_id(domain)
        return await self.record(zone_id, fqdn)

    async def update_record(self, record: CurrentRecord, request: UpdateRequest) -> None:
        """
        Overwrites an existing record.

        Args:
            record: Record to overwrite, addressed by its zone and record IDs
            request: New record contents

        Raises:
            ProviderUpdateError: If the provider rejects the update
        """
        self.logger.debug(
            f"Updating DNS record {record.record_id} in zone {record.zone_id}: "
            f"{request.type} {request.name} -> {request.content} "
            f"(TTL: {request.ttl}, Proxied: {request.proxied})"
        )
        try:
            await self.cf.dns.records.update(
                dns_record_id=record.record_id,
                zone_id=record.zone_id,
                **request.to_payload(),
            )
        except cloudflare.CloudflareError as e:
            raise ProviderUpdateError(
                f"Updating record {record.record_id} for {request.name} failed: {self._describe(e)}"
            ) from e

    async def close(self) -> None:
        await self.cf.close()

    @staticmethod
    def _describe(error: cloudflare.CloudflareError) -> str:
        """
        Summarize an SDK error for an operator-facing message.

        Args:
            error: Error raised by the SDK

        Returns:
            str: Description including the HTTP status where there is one
        """
        status_code = getattr(error, "status_code", None)
        if status_code is not None:
            return f"HTTP {status_code}: {error}"
        return str(error) or type(error).__name__
