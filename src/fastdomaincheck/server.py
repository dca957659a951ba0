"""
FastDomainCheck MCP Server

Exposes a single check_domains tool over stdio.
"""

import json
import logging
from typing import List, Optional

from mcp.server.fastmcp import FastMCP

from . import __version__
from .checkers import AvailabilityService
from .checkers.availability_service import MAX_BATCH_SIZE
from .config import Settings, configure_logging, load_settings

logger = logging.getLogger(__name__)

mcp = FastMCP("fastdomaincheck")
mcp._mcp_server.version = __version__

_service: Optional[AvailabilityService] = None


def get_service() -> AvailabilityService:
    """Service shared by tool calls; built on first use."""
    global _service
    if _service is None:
        _service = AvailabilityService.from_settings(load_settings())
    return _service


@mcp.tool()
def check_domains(domains: List[str]) -> str:
    """
    Check domain registration status in bulk (up to 50 domains).

    Args:
        domains: List of domain names to check

    Returns:
        JSON list with one entry per domain, in input order:
        {"domain", "available", "method", "fallback"?, "error"?}
    """
    if not isinstance(domains, list):
        raise ValueError('domains must be an array')
    if not domains:
        raise ValueError('domains array cannot be empty')
    if len(domains) > MAX_BATCH_SIZE:
        raise ValueError(f'Cannot check more than {MAX_BATCH_SIZE} domains at once')

    results = get_service().check_batch(domains)
    return json.dumps([r.to_dict() for r in results], indent=2, ensure_ascii=False)


def run(settings: Optional[Settings] = None, verbose: bool = False):
    """Run the MCP server on stdio."""
    global _service
    settings = settings or load_settings()
    configure_logging(verbose=verbose, debug_whois=settings.debug_whois)
    _service = AvailabilityService.from_settings(settings)
    logger.info("FastDomainCheck MCP Server running on stdio")
    mcp.run()
