"""Domain name normalization and validation."""

import re
from typing import Optional

import idna

from ..errors import InvalidDomain

MIN_DOMAIN_LENGTH = 1
MAX_DOMAIN_LENGTH = 253

# Labels of 1-63 chars, alphanumeric at both ends, hyphens allowed inside
DOMAIN_PATTERN = re.compile(
    r'^[a-z0-9]([a-z0-9-]{0,61}[a-z0-9])?(\.[a-z0-9]([a-z0-9-]{0,61}[a-z0-9])?)*$'
)


def to_ascii(name: str) -> str:
    """Convert a (possibly internationalized) name to its ASCII-compatible form.

    Non-ASCII names go through IDNA 2008 with UTS #46 mapping, non-transitional,
    so deviation characters such as "ß" are kept rather than folded to "ss".
    """
    try:
        if name.isascii():
            # Nothing to map, only label lengths to check
            return name.encode('idna').decode('ascii')
        return idna.encode(name, uts46=True, transitional=False).decode('ascii')
    except (idna.IDNAError, UnicodeError) as e:
        raise InvalidDomain(f"Cannot encode '{name}' as IDNA: {e}") from e


def is_valid_idn(name: str) -> bool:
    """Return True if IDNA conversion succeeds and actually changes the name."""
    try:
        return to_ascii(name) != name
    except InvalidDomain:
        return False


def normalize_domain(domain) -> str:
    """Canonicalize and validate a raw domain string.
    
    Returns the trimmed, lowercased name. Internationalized names are
    returned in their Unicode form; use to_ascii() for network queries.
    
    Raises:
        InvalidDomain: if the input is empty, not a string, out of the
            1-253 character range or not a well-formed domain name.
    """
    if not domain or not isinstance(domain, str):
        raise InvalidDomain('Domain must be a non-empty string')
    
    name = domain.strip().lower()
    
    if not MIN_DOMAIN_LENGTH <= len(name) <= MAX_DOMAIN_LENGTH:
        raise InvalidDomain(
            f'Domain length must be between {MIN_DOMAIN_LENGTH} and {MAX_DOMAIN_LENGTH} characters'
        )
    
    if not DOMAIN_PATTERN.match(name) and not is_valid_idn(name):
        raise InvalidDomain('Invalid domain format')
    
    return name


def get_tld(domain: str) -> Optional[str]:
    """Return the last label of a domain, or None for single-label names."""
    parts = domain.split('.')
    if len(parts) < 2:
        return None
    return parts[-1]
