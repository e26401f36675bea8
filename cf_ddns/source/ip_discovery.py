"""
IP discovery module for cf-ddns.

This module is responsible for finding the host's public IPv4 address by racing
several independent IP-echo services and taking the first valid answer.
"""

import asyncio
import logging
from ipaddress import IPv4Address
from typing import List, Optional

import httpx

from cf_ddns.exceptions import IPDiscoveryError, MalformedAddressError
from cf_ddns.utils.address import parse_ipv4


class IPDiscoverer:
    """
    Source that races IP-echo services for the host's public address.
    """

    def __init__(self, services: List[str], client: httpx.AsyncClient):
        """
        Initialize an IPDiscoverer.

        Args:
            services: IP-echo service URLs, each answering GET with a bare address
            client: Shared HTTP client used for every request
        """
        self.services = list(services)
        self.client = client
        self.logger = logging.getLogger("cf-ddns.source.ip_discovery")

    async def discover(self) -> IPv4Address:
        """
        Returns the first valid IPv4 address reported by any service.

        Requests to the remaining services are cancelled as soon as one
        succeeds.

        Returns:
            IPv4Address: Public address of the host

        Raises:
            IPDiscoveryError: If every service failed
        """
        tasks = [
            asyncio.create_task(self._fetch_ip(url), name=f"fetch-ip {url}")
            for url in self.services
        ]
        try:
            for next_done in asyncio.as_completed(tasks):
                ip = await next_done
                if ip is not None:
                    return ip
        finally:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)

        raise IPDiscoveryError(
            f"Failed to receive any IPs from {len(self.services)} services"
        )

    async def _fetch_ip(self, url: str) -> Optional[IPv4Address]:
        """
        Ask a single IP-echo service for the host's address.

        Args:
            url: Service URL

        Returns:
            Optional[IPv4Address]: Address reported by the service, None if it failed
        """
        try:
            response = await self.client.get(url)
            response.raise_for_status()
            ip = parse_ipv4(response.text)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            self.logger.debug(f"IP-echo service {url} failed: {e!r}")
            return None
        except MalformedAddressError as e:
            self.logger.debug(f"IP-echo service {url} returned a bad body: {e}")
            return None

        self.logger.debug(f"IP-echo service {url} reported {ip}")
        return ip
