"""
Main entry point for cf-ddns.
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

import httpx

from cf_ddns import __version__
from cf_ddns.config.config import Config
from cf_ddns.controller.controller import Controller
from cf_ddns.exceptions import DDNSError
from cf_ddns.models.models import ReconcileResult
from cf_ddns.provider.cloudflare import CloudflareProvider
from cf_ddns.source.ip_discovery import IPDiscoverer


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="cf-ddns",
        description="Point a Cloudflare A record at this host's public IPv4 address",
    )
    parser.add_argument("-d", "--domain", help="Zone name, e.g. example.com")
    parser.add_argument("-f", "--fqdn", help="Record to manage, e.g. home.example.com")
    parser.add_argument("-t", "--token", help="Cloudflare API token")
    parser.add_argument("-c", "--config", help="Path to a YAML configuration file")
    parser.add_argument(
        "--timeout", type=float, help="Timeout in seconds for each HTTP call"
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        default=None,
        help="Report the change without updating the record",
    )
    parser.add_argument("--log-level", help="Logging level (default: info)")
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    return parser.parse_args(argv)


def setup_logging(log_level: str = "info") -> None:
    level = getattr(logging, log_level.upper(), logging.INFO)
    logging.basicConfig(
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    logging.getLogger().setLevel(level)
    # Set httpx logger level to WARNING unless root is DEBUG
    httpx_log_level = logging.DEBUG if level == logging.DEBUG else logging.WARNING
    logging.getLogger("httpx").setLevel(httpx_log_level)


async def run(config: Config) -> ReconcileResult:
    """Run a single reconciliation with clients built from the configuration."""
    provider = CloudflareProvider(
        config.token.get_secret_value(), timeout=config.timeout
    )
    try:
        async with httpx.AsyncClient(timeout=config.timeout) as client:
            discoverer = IPDiscoverer(config.ip_services, client)
            controller = Controller(config, discoverer, provider)
            return await controller.run_once()
    finally:
        await provider.close()


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point; returns the process exit status."""
    args = parse_args(argv)
    setup_logging(args.log_level or "info")
    logger = logging.getLogger("cf-ddns")

    try:
        config = Config.from_yaml(
            args.config,
            overrides={
                "domain": args.domain,
                "fqdn": args.fqdn,
                "token": args.token,
                "timeout": args.timeout,
                "dry_run": args.dry_run,
                "log_level": args.log_level,
            },
        )
        setup_logging(config.log_level)
        logger.debug(f"Starting cf-ddns v{__version__} for {config.fqdn}")

        asyncio.run(run(config))
    except DDNSError as e:
        logger.error(str(e))
        return 1
    except KeyboardInterrupt:
        print("\nInterrupted")
        return 130

    return 0


if __name__ == "__main__":
    sys.exit(main())
