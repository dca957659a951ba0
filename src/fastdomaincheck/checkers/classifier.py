"""Heuristic classification of raw WHOIS responses.

WHOIS output is free text and every registry words "not found" its own way,
so availability is decided by an ordered list of rules. The first rule that
matches wins; anything the rules cannot place is reported as registered.
"""

import re
from dataclasses import dataclass
from typing import Callable, List, Optional, Pattern, Sequence, Tuple

from .whois_servers import WhoisTable

_FLAGS = re.IGNORECASE | re.MULTILINE

REGISTERED_INDICATORS: Tuple[Pattern, ...] = tuple(re.compile(p, _FLAGS) for p in (
    r'^\s*domain name:\s*\S+',
    r'^\s*registry domain id:\s*\S+',
    r'^\s*registrar whois server:',
    r'^\s*registrar url:',
    r'^\s*creation date:',
    r'^\s*created:',
    r'^\s*registered on:',
    r'^\s*expiry date:',
    r'^\s*expiration date:',
    r'^\s*registry expiry date:',
    r'^\s*registrar:\s*\S+',
    r'^\s*registrant',
    r'^\s*updated date:',
    r'^\s*last updated:',
    r'^\s*status:\s*(active|ok|registered|clienttransferprohibited)',
    r'^\s*domain status:\s*(active|ok|registered|clienttransferprohibited)',
    r'^\s*name server:',
    r'^\s*nameserver:',
    r'^\s*dns:',
    r'^\s*dnssec:',
    r'^\s*registrar iana id:',
    r'^\s*registrar abuse contact',
))

UNREGISTERED_PATTERNS: Tuple[Pattern, ...] = tuple(re.compile(p, _FLAGS) for p in (
    r'^no match for domain',
    r'^no match for ".*"',
    r'^not found\.?\s*$',
    r'^domain not found',
    r'^no data found',
    r'^no entries found',
    r'^object does not exist',
    r'^%% no entries found',
    r'^not registered',
    r'^available for registration',
    r'^this domain is available',
    r'^status:\s*available',
    r'^domain status:\s*available',
)) + (
    # The whole response is a single "not found" style word
    re.compile(r'\A\s*(not found|no match|available|free)\s*\Z', re.IGNORECASE),
)

# Terms that reveal a real record even when a "not found" phrase matched
REGISTRATION_GUARD_TERMS = ('registrar:', 'creation date:', 'domain name:', 'registry domain id:')

ERROR_PATTERNS: Tuple[Pattern, ...] = tuple(re.compile(p, re.IGNORECASE) for p in (
    r'error',
    r'quota exceeded',
    r'limit exceeded',
    r'try again',
    r'temporarily unavailable',
    r'connection refused',
    r'timeout',
    r'rate limit',
))

SHORT_RESPONSE_LENGTH = 100


@dataclass(frozen=True)
class Verdict:
    """Outcome of classifying one WHOIS response."""
    available: bool
    rule: str


@dataclass(frozen=True)
class Rule:
    """A named predicate and the availability it implies when it holds."""
    name: str
    matches: Callable[[str, Sequence[Pattern]], bool]
    available: bool


def _is_empty(text: str, tld_patterns: Sequence[Pattern]) -> bool:
    return not text


def has_registration_indicator(text: str, tld_patterns: Sequence[Pattern] = ()) -> bool:
    return any(p.search(text) for p in REGISTERED_INDICATORS)


def has_registration_data(text: str) -> bool:
    lowered = text.lower()
    return any(term in lowered for term in REGISTRATION_GUARD_TERMS)


def has_unregistered_pattern(text: str, tld_patterns: Sequence[Pattern] = ()) -> bool:
    """True if a "not registered" phrase matches and survives the guard check."""
    for pattern in (*UNREGISTERED_PATTERNS, *tld_patterns):
        if not pattern.search(text):
            continue
        if has_registration_data(text):
            # False positive, keep looking
            continue
        return True
    return False


def is_short_error(text: str, tld_patterns: Sequence[Pattern] = ()) -> bool:
    if len(text.strip()) >= SHORT_RESPONSE_LENGTH:
        return False
    return any(p.search(text) for p in ERROR_PATTERNS)


def _always(text: str, tld_patterns: Sequence[Pattern]) -> bool:
    return True


RULES: Tuple[Rule, ...] = (
    Rule('empty-response', _is_empty, available=True),
    Rule('registration-indicator', has_registration_indicator, available=False),
    Rule('unregistered-pattern', has_unregistered_pattern, available=True),
    Rule('short-error-response', is_short_error, available=False),
    Rule('default-registered', _always, available=False),
)


class WhoisResponseClassifier:
    """Decide registered vs. available from WHOIS text."""

    def __init__(self, table: Optional[WhoisTable] = None, rules: Sequence[Rule] = RULES):
        self.table = table
        self.rules: List[Rule] = list(rules)

    def classify(self, text: Optional[str], tld: str) -> Verdict:
        """Run the rules in order and report the first one that matches."""
        text = text or ''
        tld_patterns = self.table.patterns_for(tld) if self.table is not None else ()
        for rule in self.rules:
            if rule.matches(text, tld_patterns):
                return Verdict(available=rule.available, rule=rule.name)
        return Verdict(available=False, rule='default-registered')

    def is_unregistered(self, text: Optional[str], tld: str) -> bool:
        return self.classify(text, tld).available
