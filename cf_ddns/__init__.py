"""
cf-ddns: keep a Cloudflare A record pointed at the host's public IPv4 address.
"""

__version__ = "0.1.0"
