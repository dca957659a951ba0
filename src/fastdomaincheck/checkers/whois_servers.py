"""TLD to WHOIS server lookup table."""

import re
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Pattern, Tuple

import yaml

from ..errors import ConfigError, InvalidDomain
from ..utils.domain_validator import to_ascii

DEFAULT_TABLE_FILE = Path(__file__).resolve().parent.parent / 'data' / 'whois_servers.yaml'
DEFAULT_QUERY_FORMAT = '{domain}\r\n'


def _tld_keys(tld: str) -> Tuple[str, ...]:
    """Lookup keys for a TLD: ASCII-compatible form first, then as given."""
    try:
        ascii_tld = to_ascii(tld)
    except InvalidDomain:
        return (tld,)
    if ascii_tld == tld:
        return (tld,)
    return (ascii_tld, tld)


class WhoisTable:
    """Read-only WHOIS server and "not registered" pattern table."""

    def __init__(
        self,
        servers: Mapping[str, str],
        patterns: Optional[Mapping[str, List[str]]] = None,
        query_formats: Optional[Mapping[str, str]] = None
    ):
        self.servers: Mapping[str, str] = MappingProxyType(
            {str(tld).lower(): host for tld, host in servers.items()}
        )
        compiled: Dict[str, Tuple[Pattern, ...]] = {}
        for tld, regexes in (patterns or {}).items():
            try:
                compiled[str(tld).lower()] = tuple(
                    re.compile(regex, re.IGNORECASE | re.MULTILINE) for regex in regexes
                )
            except re.error as e:
                raise ConfigError(f"Bad pattern for TLD '{tld}': {e}") from e
        self.patterns: Mapping[str, Tuple[Pattern, ...]] = MappingProxyType(compiled)
        self.query_formats: Mapping[str, str] = MappingProxyType(dict(query_formats or {}))

    def resolve(self, tld: str) -> Optional[str]:
        """Return the WHOIS server for a TLD, or None if none is configured."""
        for key in _tld_keys(tld):
            server = self.servers.get(key)
            if server:
                return server
        return None

    def patterns_for(self, tld: str) -> Tuple[Pattern, ...]:
        for key in _tld_keys(tld):
            if key in self.patterns:
                return self.patterns[key]
        return ()

    def query_for(self, server: str, domain: str) -> bytes:
        """Build the query line sent to a server for a domain."""
        template = self.query_formats.get(server, DEFAULT_QUERY_FORMAT)
        return template.format(domain=domain).encode('ascii')

    def __contains__(self, tld: str) -> bool:
        return self.resolve(tld) is not None

    def __len__(self) -> int:
        return len(self.servers)


def load_whois_table(path: Optional[Path] = None) -> WhoisTable:
    """Load a lookup table from YAML.

    The file holds three optional sections: ``servers`` (TLD -> host),
    ``patterns`` (TLD -> list of regexes) and ``query_formats``
    (host -> query template with a ``{domain}`` placeholder).
    """
    table_file = Path(path) if path else DEFAULT_TABLE_FILE
    try:
        with open(table_file) as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Cannot load WHOIS table from {table_file}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"WHOIS table {table_file} must be a mapping")

    return WhoisTable(
        servers=data.get('servers') or {},
        patterns=data.get('patterns') or {},
        query_formats=data.get('query_formats') or {}
    )


@lru_cache(maxsize=None)
def get_default_table() -> WhoisTable:
    """Bundled table, loaded once per process."""
    return load_whois_table()
