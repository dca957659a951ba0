"""Combined availability checking service."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence

from ..config import DIAGNOSTICS_LOGGER, Settings
from ..errors import DomainCheckError, InvalidBatch, InvalidDomain, WhoisError
from ..utils.domain_validator import get_tld, normalize_domain, to_ascii
from ..utils.rate_limiter import FixedDelayLimiter, TokenBucketLimiter
from .classifier import WhoisResponseClassifier
from .dns_checker import DNSChecker
from .whois_client import WhoisClient
from .whois_servers import WhoisTable, get_default_table, load_whois_table

logger = logging.getLogger(__name__)
diagnostics = logging.getLogger(DIAGNOSTICS_LOGGER)

MAX_BATCH_SIZE = 50
DEBUG_EXCERPT_LENGTH = 500


def make_limiter(settings: Settings):
    """Fixed pause by default; a token bucket when bursts are allowed."""
    if settings.burst > 1 and settings.request_delay > 0:
        return TokenBucketLimiter(rate=1 / settings.request_delay, capacity=settings.burst)
    return FixedDelayLimiter(delay=settings.request_delay)


@dataclass
class DomainResult:
    """Result of domain availability check."""
    domain: Any
    available: bool
    method: Optional[str] = None
    fallback: bool = False
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result = {
            'domain': self.domain,
            'available': self.available,
        }
        if self.method:
            result['method'] = self.method
        if self.fallback:
            result['fallback'] = True
        if self.error:
            result['error'] = self.error
        return result


class AvailabilityService:
    """Sequential WHOIS-first availability checks with DNS fallback.

    Every collaborator can be injected; the defaults talk to the network
    and pause between domains.

    Args:
        table: TLD -> WHOIS server lookup table
        whois_client: Object with query(domain, server) -> str
        dns_checker: Object with has_records(domain) -> bool
        classifier: Object with classify(text, tld) -> Verdict
        limiter: Object with wait(), called after every check
        debug_whois: Log each WHOIS exchange to the diagnostics logger
    """

    def __init__(
        self,
        table: Optional[WhoisTable] = None,
        whois_client=None,
        dns_checker=None,
        classifier=None,
        limiter=None,
        debug_whois: bool = False
    ):
        self.table = table if table is not None else get_default_table()
        self.whois_client = whois_client or WhoisClient(table=self.table)
        self.dns_checker = dns_checker or DNSChecker()
        self.classifier = classifier or WhoisResponseClassifier(self.table)
        self.limiter = limiter or FixedDelayLimiter()
        self.debug_whois = debug_whois

    @classmethod
    def from_settings(cls, settings: Settings, **overrides) -> 'AvailabilityService':
        """Build a service wired from Settings; keyword overrides win."""
        if settings.whois_servers_file:
            table = load_whois_table(Path(settings.whois_servers_file))
        else:
            table = get_default_table()
        components = {
            'table': table,
            'whois_client': WhoisClient(
                timeout=settings.whois_timeout,
                max_follow=settings.whois_max_follow,
                table=table
            ),
            'dns_checker': DNSChecker(timeout=settings.dns_timeout),
            'limiter': make_limiter(settings),
            'debug_whois': settings.debug_whois,
        }
        components.update(overrides)
        return cls(**components)

    def _check_dns(self, raw_domain: Any, ascii_domain: str, fallback: bool) -> DomainResult:
        has_records = self.dns_checker.has_records(ascii_domain)
        return DomainResult(
            domain=raw_domain,
            available=not has_records,
            method='dns',
            fallback=fallback
        )

    def _log_whois_debug(self, domain: str, tld: str, server: str, text: str, verdict):
        diagnostics.debug(
            "WHOIS debug for %s\nTLD: %s, Server: %s\nResponse length: %d\n"
            "First %d chars:\n%s\nAvailable: %s (%s)",
            domain, tld, server, len(text), DEBUG_EXCERPT_LENGTH,
            text[:DEBUG_EXCERPT_LENGTH], verdict.available, verdict.rule
        )

    def _check(self, raw_domain: Any) -> DomainResult:
        domain = normalize_domain(raw_domain)
        ascii_domain = to_ascii(domain)
        tld = get_tld(domain)

        if not tld:
            raise InvalidDomain('Invalid domain format')

        server = self.table.resolve(tld)

        if not server:
            # No WHOIS server configured, DNS is all we have
            logger.debug("No WHOIS server for .%s, using DNS for %s", tld, ascii_domain)
            return self._check_dns(raw_domain, ascii_domain, fallback=False)

        try:
            text = self.whois_client.query(ascii_domain, server)
        except WhoisError as e:
            logger.info("WHOIS lookup of %s via %s failed (%s), falling back to DNS",
                        ascii_domain, server, e)
            return self._check_dns(raw_domain, ascii_domain, fallback=True)

        verdict = self.classifier.classify(text, tld)

        if self.debug_whois:
            self._log_whois_debug(domain, tld, server, text or '', verdict)

        return DomainResult(domain=raw_domain, available=verdict.available, method='whois')

    def check_single(self, domain: Any) -> DomainResult:
        """Check a single domain's availability.

        Never raises: failures are reported in the result's error field
        with available=False.
        """
        try:
            return self._check(domain)
        except DomainCheckError as e:
            logger.info("Check of %r failed: %s", domain, e)
            return DomainResult(domain=domain, available=False, error=str(e))
        except Exception as e:
            logger.exception("Unexpected error checking %r", domain)
            return DomainResult(domain=domain, available=False, error=str(e) or type(e).__name__)

    def check_batch(
        self,
        domains: Sequence[Any],
        progress_callback: Optional[Callable[[int, int], None]] = None
    ) -> List[DomainResult]:
        """Check multiple domains, one at a time, in input order.

        Args:
            domains: 1 to MAX_BATCH_SIZE raw domain strings
            progress_callback: Optional callback(current, total) after each domain

        Raises:
            InvalidBatch: if the batch is empty or too large.
        """
        if not domains:
            raise InvalidBatch('domains array cannot be empty')
        if len(domains) > MAX_BATCH_SIZE:
            raise InvalidBatch(f'Cannot check more than {MAX_BATCH_SIZE} domains at once')

        results = []
        total = len(domains)

        for i, domain in enumerate(domains):
            results.append(self.check_single(domain))

            if progress_callback:
                progress_callback(i + 1, total)

            # Pause after every check, the last one included
            self.limiter.wait()

        return results
