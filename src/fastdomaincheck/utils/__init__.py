from .domain_validator import get_tld, is_valid_idn, normalize_domain, to_ascii
from .rate_limiter import FixedDelayLimiter, TokenBucketLimiter

__all__ = [
    'get_tld', 'is_valid_idn', 'normalize_domain', 'to_ascii',
    'FixedDelayLimiter', 'TokenBucketLimiter',
]
