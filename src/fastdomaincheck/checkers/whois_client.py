"""Plain-socket WHOIS client with a total time budget and referral following."""

import logging
import re
import socket
import time
from typing import Callable, Optional, Set

from ..errors import WhoisQueryError, WhoisTimeout
from .whois_servers import DEFAULT_QUERY_FORMAT, WhoisTable

logger = logging.getLogger(__name__)

WHOIS_PORT = 43
WHOIS_TIMEOUT = 10.0
MAX_FOLLOW = 5

REFERRAL_PATTERN = re.compile(
    r'^[ \t]*(?:registrar whois server|whois server|referralserver|refer|whois):[ \t]*'
    r'(?:r?whois://)?([a-z0-9][a-z0-9.-]*[a-z0-9])',
    re.IGNORECASE | re.MULTILINE
)


def find_referral(response: str, current_host: str) -> Optional[str]:
    """Return the next WHOIS host named in a response, if any."""
    for match in REFERRAL_PATTERN.finditer(response):
        host = match.group(1).lower()
        if '.' in host and host != current_host.lower():
            return host
    return None


class WhoisClient:
    """Query WHOIS servers over TCP port 43.

    Args:
        timeout: Total budget in seconds for the query, referrals included
        max_follow: Maximum number of referral hops to follow
        table: Lookup table providing per-server query formats
        connect: Socket factory with the signature of socket.create_connection
    """

    def __init__(
        self,
        timeout: float = WHOIS_TIMEOUT,
        max_follow: int = MAX_FOLLOW,
        table: Optional[WhoisTable] = None,
        port: int = WHOIS_PORT,
        connect: Callable = socket.create_connection,
        clock: Callable[[], float] = time.monotonic
    ):
        self.timeout = timeout
        self.max_follow = max_follow
        self.table = table
        self.port = port
        self._connect = connect
        self._clock = clock

    def _remaining(self, deadline: float, server: str) -> float:
        remaining = deadline - self._clock()
        if remaining <= 0:
            raise WhoisTimeout(f'WHOIS query timeout ({server})')
        return remaining

    def _query_line(self, domain: str, server: str) -> bytes:
        if self.table is not None:
            return self.table.query_for(server, domain)
        return DEFAULT_QUERY_FORMAT.format(domain=domain).encode('ascii')

    def _exchange(self, domain: str, server: str, deadline: float) -> str:
        """Send one query and read the reply until the server closes."""
        try:
            sock = self._connect((server, self.port), timeout=self._remaining(deadline, server))
        except socket.timeout as e:
            raise WhoisTimeout(f'WHOIS query timeout ({server})') from e
        except OSError as e:
            raise WhoisQueryError(f'Cannot connect to {server}: {e}') from e

        chunks = []
        try:
            with sock:
                # Connecting may have used up the budget
                sock.settimeout(self._remaining(deadline, server))
                sock.sendall(self._query_line(domain, server))
                while True:
                    sock.settimeout(self._remaining(deadline, server))
                    data = sock.recv(4096)
                    if not data:
                        break
                    chunks.append(data)
        except socket.timeout as e:
            raise WhoisTimeout(f'WHOIS query timeout ({server})') from e
        except OSError as e:
            raise WhoisQueryError(f'WHOIS query to {server} failed: {e}') from e

        return b''.join(chunks).decode('utf-8', errors='replace')

    def query(self, domain: str, server: str) -> str:
        """Return the raw WHOIS text for an ASCII-compatible domain.

        Referrals are followed up to max_follow hops; if the chain is
        longer, the last response obtained is returned.

        The budget is checked before and after every connect. The host
        name lookup inside the socket factory is not bounded by it, so a
        slow resolver can overrun the budget before WhoisTimeout is raised.

        Raises:
            WhoisTimeout: the total budget ran out.
            WhoisQueryError: any server in the chain could not be queried.
        """
        deadline = self._clock() + self.timeout
        response = self._exchange(domain, server, deadline)
        visited: Set[str] = {server.lower()}
        host = server

        for _ in range(self.max_follow):
            referral = find_referral(response, host)
            if not referral or referral in visited:
                break
            visited.add(referral)
            logger.debug("Following referral from %s to %s for %s", host, referral, domain)
            response = self._exchange(domain, referral, deadline)
            host = referral

        return response
