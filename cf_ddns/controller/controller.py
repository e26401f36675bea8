"""
Controller module for cf-ddns.

This module is responsible for coordinating between the IP discoverer and the
provider so that the managed record points at the host's current address.
"""

import asyncio
import logging

from cf_ddns.config.config import Config
from cf_ddns.models.models import ReconcileResult, UpdateRequest


class Controller:
    """
    Controller that reconciles the published record with the discovered address.
    """

    def __init__(self, config: Config, discoverer, provider):
        """
        Initialize a Controller.

        Args:
            config: Run configuration
            discoverer: Source of the host's public address
            provider: DNS provider holding the managed record
        """
        self.config = config
        self.discoverer = discoverer
        self.provider = provider
        self.logger = logging.getLogger("cf-ddns.controller")

    async def run_once(self) -> ReconcileResult:
        """
        Performs a single reconciliation run.

        The address discovery and the zone/record lookup run concurrently; the
        record is only updated once both are known and they differ.

        Returns:
            ReconcileResult: What the run found and did
        """
        discover_task = asyncio.create_task(
            self.discoverer.discover(), name="discover-ip"
        )
        record_task = asyncio.create_task(
            self.provider.current_record(self.config.domain, self.config.fqdn),
            name="current-record",
        )
        try:
            discovered, current = await asyncio.gather(discover_task, record_task)
        finally:
            # If one side failed, the other is abandoned
            for task in (discover_task, record_task):
                task.cancel()
            await asyncio.gather(discover_task, record_task, return_exceptions=True)

        if current.address == discovered:
            self.logger.info(f"IP address is unchanged: ip={discovered}")
            return ReconcileResult(
                changed=False, old_address=current.address, new_address=discovered
            )

        if self.config.dry_run:
            self.logger.info(
                f"Dry run mode, not updating {self.config.fqdn}: "
                f"old_ip={current.address} new_ip={discovered}"
            )
            return ReconcileResult(
                changed=True,
                old_address=current.address,
                new_address=discovered,
                dry_run=True,
            )

        request = UpdateRequest.for_address(self.config.fqdn, discovered)
        await self.provider.update_record(current, request)

        self.logger.info(f"Updated IP: old_ip={current.address} new_ip={discovered}")
        return ReconcileResult(
            changed=True, old_address=current.address, new_address=discovered
        )
