"""Unit tests for mcpadvisor.fetcher."""

from __future__ import annotations

import httpx
import respx

from mcpadvisor.config import FetcherSettings
from mcpadvisor.fetcher import (
    Fetcher,
    _base_domain,
    build_allowlist,
    build_http_client,
    is_url_allowed,
)
from mcpadvisor.models.fetch import FetchHttpError, FetchOk, FetchTransportError

# ---------------------------------------------------------------------------
# _base_domain
# ---------------------------------------------------------------------------


class TestBaseDomain:
    def test_three_labels(self) -> None:
        assert _base_domain("raw.githubusercontent.com") == "githubusercontent.com"

    def test_two_labels(self) -> None:
        assert _base_domain("modelcontextprotocol.io") == "modelcontextprotocol.io"

    def test_single_label(self) -> None:
        assert _base_domain("localhost") == "localhost"

    def test_trailing_dot(self) -> None:
        assert _base_domain("spec.modelcontextprotocol.io.") == "modelcontextprotocol.io"


# ---------------------------------------------------------------------------
# build_allowlist / is_url_allowed
# ---------------------------------------------------------------------------


class TestBuildAllowlist:
    def test_extracts_base_domains(self) -> None:
        allowlist = build_allowlist(
            [
                "https://modelcontextprotocol.io/llms.txt",
                "https://raw.githubusercontent.com/org/repo/main/schema/{version}/schema.json",
                "https://github.com/modelcontextprotocol/",
            ]
        )
        assert allowlist == frozenset(
            {"modelcontextprotocol.io", "githubusercontent.com", "github.com"}
        )

    def test_skips_urls_without_host(self) -> None:
        assert build_allowlist(["not a url", "/relative/path"]) == frozenset()


ALLOWLIST = frozenset({"example.com", "docs.dev"})


class TestIsUrlAllowed:
    def test_allowed_domain(self) -> None:
        assert is_url_allowed("https://example.com/llms.txt", ALLOWLIST)

    def test_subdomain_allowed(self) -> None:
        assert is_url_allowed("https://spec.example.com/path", ALLOWLIST)

    def test_disallowed_domain(self) -> None:
        assert not is_url_allowed("https://evil.com/path", ALLOWLIST)

    def test_non_http_scheme(self) -> None:
        assert not is_url_allowed("file:///etc/passwd", ALLOWLIST)

    def test_private_ipv4(self) -> None:
        assert not is_url_allowed("http://127.0.0.1/secret", frozenset({"127.0.0.1"}))
        assert not is_url_allowed("http://10.0.0.1/secret", frozenset({"10.0.0.1"}))

    def test_private_ipv6_loopback(self) -> None:
        assert not is_url_allowed("http://[::1]/secret", frozenset({"::1"}))

    def test_link_local_metadata_address(self) -> None:
        url = "http://169.254.169.254/latest/meta-data"
        assert not is_url_allowed(url, frozenset({"169.254"}))


# ---------------------------------------------------------------------------
# build_http_client
# ---------------------------------------------------------------------------


class TestBuildHttpClient:
    async def test_client_configuration(self) -> None:
        client = build_http_client(FetcherSettings(timeout_seconds=5.0, user_agent="test/1"))
        try:
            assert client.follow_redirects is False
            assert client.timeout.read == 5.0
            assert client.headers["User-Agent"] == "test/1"
        finally:
            await client.aclose()


# ---------------------------------------------------------------------------
# Fetcher
# ---------------------------------------------------------------------------


class TestFetcher:
    async def test_successful_fetch(self) -> None:
        with respx.mock:
            respx.get("https://example.com/llms.txt").mock(
                return_value=httpx.Response(200, text="# MCP\n- [a](https://example.com/a.md)")
            )
            async with httpx.AsyncClient() as client:
                result = await Fetcher(client, ALLOWLIST).fetch("https://example.com/llms.txt")
                assert result == FetchOk("# MCP\n- [a](https://example.com/a.md)")

    async def test_404_is_http_error(self) -> None:
        with respx.mock:
            respx.get("https://example.com/missing").mock(return_value=httpx.Response(404))
            async with httpx.AsyncClient() as client:
                result = await Fetcher(client, ALLOWLIST).fetch("https://example.com/missing")
                assert result == FetchHttpError(404)

    async def test_500_is_http_error(self) -> None:
        with respx.mock:
            respx.get("https://example.com/error").mock(return_value=httpx.Response(503))
            async with httpx.AsyncClient() as client:
                result = await Fetcher(client, ALLOWLIST).fetch("https://example.com/error")
                assert result == FetchHttpError(503)
                assert result.describe() == "HTTP 503"

    async def test_network_error_is_transport_error(self) -> None:
        with respx.mock:
            respx.get("https://example.com/timeout").mock(
                side_effect=httpx.ConnectError("Connection refused")
            )
            async with httpx.AsyncClient() as client:
                result = await Fetcher(client, ALLOWLIST).fetch("https://example.com/timeout")
                assert isinstance(result, FetchTransportError)
                assert "Connection refused" in result.message

    async def test_redirect_followed(self) -> None:
        with respx.mock:
            respx.get("https://example.com/old").mock(
                return_value=httpx.Response(301, headers={"location": "/new"})
            )
            respx.get("https://example.com/new").mock(
                return_value=httpx.Response(200, text="Redirected content")
            )
            async with httpx.AsyncClient() as client:
                result = await Fetcher(client, ALLOWLIST).fetch("https://example.com/old")
                assert result == FetchOk("Redirected content")

    async def test_redirect_to_disallowed_domain(self) -> None:
        with respx.mock:
            respx.get("https://example.com/redirect").mock(
                return_value=httpx.Response(301, headers={"location": "https://evil.com/steal"})
            )
            async with httpx.AsyncClient() as client:
                result = await Fetcher(client, ALLOWLIST).fetch("https://example.com/redirect")
                assert isinstance(result, FetchTransportError)
                assert "not in allowlist" in result.message

    async def test_too_many_redirects(self) -> None:
        with respx.mock:
            # 4 redirects (max is 3)
            for i in range(4):
                respx.get(f"https://example.com/r{i}").mock(
                    return_value=httpx.Response(
                        301, headers={"location": f"https://example.com/r{i + 1}"}
                    )
                )
            respx.get("https://example.com/r4").mock(return_value=httpx.Response(200, text="Final"))
            async with httpx.AsyncClient() as client:
                result = await Fetcher(client, ALLOWLIST).fetch("https://example.com/r0")
                assert isinstance(result, FetchTransportError)
                assert "Too many redirects" in result.message

    async def test_url_not_in_allowlist_never_requested(self) -> None:
        with respx.mock(assert_all_called=False) as router:
            route = router.get("https://unknown.org/path")
            async with httpx.AsyncClient() as client:
                result = await Fetcher(client, ALLOWLIST).fetch("https://unknown.org/path")
            assert isinstance(result, FetchTransportError)
            assert not route.called

    async def test_invalid_port_is_transport_error(self) -> None:
        with respx.mock(assert_all_called=False):
            async with httpx.AsyncClient() as client:
                result = await Fetcher(client, ALLOWLIST).fetch("https://example.com:abc/page.md")
            assert isinstance(result, FetchTransportError)
            assert result.message.startswith("Invalid URL https://example.com:abc/page.md")

    async def test_unbalanced_ipv6_host_is_transport_error(self) -> None:
        with respx.mock(assert_all_called=False):
            async with httpx.AsyncClient() as client:
                result = await Fetcher(client, ALLOWLIST).fetch("https://[example.com/page.md")
            assert isinstance(result, FetchTransportError)
            assert "Invalid URL" in result.message

    async def test_redirect_to_malformed_location(self) -> None:
        with respx.mock:
            respx.get("https://example.com/moved").mock(
                return_value=httpx.Response(302, headers={"location": "https://example.com:bad/"})
            )
            async with httpx.AsyncClient() as client:
                result = await Fetcher(client, ALLOWLIST).fetch("https://example.com/moved")
            assert isinstance(result, FetchTransportError)
            assert "Invalid URL https://example.com:bad/" in result.message
