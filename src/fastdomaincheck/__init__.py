"""FastDomainCheck - bulk domain availability via WHOIS with DNS fallback."""

__version__ = "1.0.2"

from .checkers import AvailabilityService, DomainResult
from .errors import (
    DomainCheckError,
    DnsResolutionError,
    InvalidBatch,
    InvalidDomain,
    WhoisQueryError,
    WhoisTimeout,
)


__all__ = [
    'AvailabilityService', 'DomainResult',
    'DomainCheckError', 'DnsResolutionError', 'InvalidBatch', 'InvalidDomain',
    'WhoisQueryError', 'WhoisTimeout',
]
