from .dns_checker import DNSChecker
from .whois_client import WhoisClient
from .whois_servers import WhoisTable, get_default_table, load_whois_table
from .classifier import Verdict, WhoisResponseClassifier
from .availability_service import AvailabilityService, DomainResult

__all__ = [
    'DNSChecker', 'WhoisClient', 'WhoisTable', 'get_default_table', 'load_whois_table',
    'Verdict', 'WhoisResponseClassifier', 'AvailabilityService', 'DomainResult',
]
