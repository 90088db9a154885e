"""HTTP documentation fetcher with SSRF protection.

All network I/O goes through a single Fetcher instance shared across
requests. The Fetcher receives an httpx.AsyncClient via constructor
injection; the lifespan owns the client lifecycle.

Unlike most of the codebase, ``Fetcher.fetch`` never raises for remote
failures: every outcome is returned as a ``FetchResult`` so callers can
substitute placeholders or stale cache entries.
"""

from __future__ import annotations

import ipaddress
from collections.abc import Iterable
from urllib.parse import urljoin, urlparse

import httpx
import structlog

from mcpadvisor.config import FetcherSettings
from mcpadvisor.models.fetch import (
    FetchHttpError,
    FetchOk,
    FetchResult,
    FetchTransportError,
)

log = structlog.get_logger()

PRIVATE_NETWORKS: list[ipaddress.IPv4Network | ipaddress.IPv6Network] = [
    ipaddress.ip_network("10.0.0.0/8"),
    ipaddress.ip_network("172.16.0.0/12"),
    ipaddress.ip_network("192.168.0.0/16"),
    ipaddress.ip_network("127.0.0.0/8"),
    ipaddress.ip_network("169.254.0.0/16"),
    ipaddress.ip_network("::1/128"),
    ipaddress.ip_network("fc00::/7"),
]


def build_http_client(settings: FetcherSettings | None = None) -> httpx.AsyncClient:
    """Create the shared httpx client. Called once at startup."""
    settings = settings or FetcherSettings()
    return httpx.AsyncClient(
        follow_redirects=False,
        timeout=httpx.Timeout(settings.timeout_seconds),
        headers={"User-Agent": settings.user_agent},
        limits=httpx.Limits(
            max_connections=10,
            max_keepalive_connections=5,
        ),
    )


def _base_domain(hostname: str) -> str:
    """Return the last two DNS labels: ``'docs.example.com'`` → ``'example.com'``."""
    parts = hostname.rstrip(".").split(".")
    return ".".join(parts[-2:]) if len(parts) >= 2 else hostname


def build_allowlist(urls: Iterable[str]) -> frozenset[str]:
    """Build the SSRF domain allowlist from the configured source URLs."""
    base_domains: set[str] = set()
    for url in urls:
        hostname = urlparse(url).hostname or ""
        if hostname:
            base_domains.add(_base_domain(hostname))
    return frozenset(base_domains)


def is_url_allowed(url: str, allowlist: frozenset[str]) -> bool:
    """Check whether a URL is permitted by the SSRF allowlist.

    Private IP ranges are blocked unconditionally, regardless of allowlist.
    """
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https"):
        return False
    hostname = parsed.hostname or ""

    # Block private IPs unconditionally
    try:
        addr = ipaddress.ip_address(hostname)
        if any(addr in net for net in PRIVATE_NETWORKS):
            return False
    except ValueError:
        pass  # hostname is a domain name, not an IP

    return _base_domain(hostname) in allowlist


class Fetcher:
    """HTTP fetcher with SSRF-safe redirect handling, implementing FetcherProtocol."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        allowlist: frozenset[str],
        *,
        max_redirects: int = 3,
    ) -> None:
        self._client = client
        self._allowlist = allowlist
        self._max_redirects = max_redirects

    async def fetch(self, url: str) -> FetchResult:
        """Fetch a URL with per-hop SSRF validation.

        Returns ``FetchOk`` with the response text on a 2xx response,
        ``FetchHttpError`` for any other final status, and
        ``FetchTransportError`` for network errors, malformed or blocked
        URLs and redirect loops.
        """
        current_url = url

        try:
            for hop in range(self._max_redirects + 1):
                if not is_url_allowed(current_url, self._allowlist):
                    log.warning("ssrf_blocked", url=current_url, reason="not_in_allowlist")
                    return FetchTransportError(f"URL not in allowlist: {current_url}")

                response = await self._client.get(current_url)

                if response.is_redirect and "location" in response.headers:
                    if hop == self._max_redirects:
                        break
                    current_url = urljoin(current_url, response.headers["location"])
                    continue

                if not response.is_success:
                    log.warning("fetch_http_error", url=url, status_code=response.status_code)
                    return FetchHttpError(response.status_code)

                log.info(
                    "fetch_complete",
                    url=url,
                    status_code=response.status_code,
                    content_length=len(response.text),
                )
                return FetchOk(response.text)

        except (httpx.InvalidURL, ValueError) as exc:
            # Index links are remote input: bad ports, unbalanced IPv6 brackets
            log.warning("fetch_invalid_url", url=current_url, error=str(exc))
            return FetchTransportError(f"Invalid URL {current_url}: {exc}")
        except httpx.HTTPError as exc:
            log.warning("fetch_transport_error", url=url, error=str(exc))
            return FetchTransportError(f"Network error fetching {url}: {exc}")

        log.warning("fetch_too_many_redirects", url=url, max_redirects=self._max_redirects)
        return FetchTransportError(f"Too many redirects fetching {url}")
