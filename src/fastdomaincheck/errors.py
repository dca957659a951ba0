"""Exception types raised by the availability engine."""


class DomainCheckError(Exception):
    """Base class for all domain check failures."""


class InvalidDomain(DomainCheckError):
    """Input is not a usable domain name."""


class InvalidBatch(DomainCheckError):
    """Batch is empty or larger than the driver accepts."""


class WhoisError(DomainCheckError):
    """WHOIS lookup could not produce a response."""


class WhoisTimeout(WhoisError):
    """WHOIS query exceeded its time budget."""


class WhoisQueryError(WhoisError):
    """Connection or protocol failure while talking to a WHOIS server."""


class DnsResolutionError(DomainCheckError):
    """DNS fallback could not be attempted at all."""


class ConfigError(DomainCheckError):
    """Configuration or lookup table file could not be loaded."""
