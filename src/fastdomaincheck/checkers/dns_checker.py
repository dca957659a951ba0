"""DNS-based registration probe."""

import logging
from typing import Callable, Optional

import dns.exception
import dns.resolver

from ..errors import DnsResolutionError

logger = logging.getLogger(__name__)

# Checked in order; only a clean "no such name / no data" moves on to the next
RECORD_TYPES = ('A', 'AAAA', 'NS')


class DNSChecker:
    """Use the presence of DNS records as a proxy for registration."""

    def __init__(
        self,
        timeout: Optional[float] = None,
        resolver_factory: Optional[Callable[[], dns.resolver.Resolver]] = None
    ):
        self.timeout = timeout
        self._resolver_factory = resolver_factory or dns.resolver.Resolver

    def _make_resolver(self) -> dns.resolver.Resolver:
        try:
            resolver = self._resolver_factory()
        except dns.resolver.NoResolverConfiguration as e:
            raise DnsResolutionError(f'No DNS resolver configuration: {e}') from e
        if self.timeout is not None:
            resolver.timeout = self.timeout
            resolver.lifetime = self.timeout
        return resolver

    def has_records(self, domain: str) -> bool:
        """Return True if the domain has A, AAAA or NS records.

        A resolver failure other than NXDOMAIN/NoAnswer counts as no
        presence, as does clean absence of all three record types.
        """
        resolver = self._make_resolver()

        for rdtype in RECORD_TYPES:
            try:
                resolver.resolve(domain, rdtype)
                return True
            except (dns.resolver.NXDOMAIN, dns.resolver.NoAnswer):
                continue
            except dns.exception.DNSException as e:
                logger.debug("DNS %s lookup for %s failed: %s", rdtype, domain, e)
                return False

        return False

