"""Shared fakes for availability tests."""

import pytest

from fastdomaincheck.checkers import AvailabilityService, WhoisTable


class FakeWhoisClient:
    """Returns canned text per domain, or raises a canned exception."""

    def __init__(self, responses=None):
        self.responses = responses or {}
        self.calls = []

    def query(self, domain, server):
        self.calls.append((domain, server))
        response = self.responses.get(domain, '')
        if isinstance(response, Exception):
            raise response
        return response


class FakeDNSChecker:
    def __init__(self, registered=(), error=None):
        self.registered = set(registered)
        self.error = error
        self.calls = []

    def has_records(self, domain):
        self.calls.append(domain)
        if self.error:
            raise self.error
        return domain in self.registered


class RecordingLimiter:
    def __init__(self):
        self.waits = 0

    def wait(self):
        self.waits += 1


@pytest.fixture
def table():
    return WhoisTable(
        servers={
            'com': 'whois.verisign-grs.com',
            'de': 'whois.denic.de',
            'xn--p1ai': 'whois.tcinet.ru',
        },
        patterns={'de': [r'^status:\s*free']},
        query_formats={'whois.denic.de': '-T dn,ace {domain}\r\n'},
    )


@pytest.fixture
def whois():
    return FakeWhoisClient()


@pytest.fixture
def dns_checker():
    return FakeDNSChecker()


@pytest.fixture
def limiter():
    return RecordingLimiter()


@pytest.fixture
def service(table, whois, dns_checker, limiter):
    return AvailabilityService(
        table=table,
        whois_client=whois,
        dns_checker=dns_checker,
        limiter=limiter,
    )


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ('DEBUG_WHOIS', 'FASTDOMAINCHECK_REQUEST_DELAY', 'FASTDOMAINCHECK_WHOIS_TIMEOUT'):
        monkeypatch.delenv(name, raising=False)
