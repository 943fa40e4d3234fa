"""
Tests for subscription URL checks and SSRF (Server-Side Request Forgery) protection.
"""

import pytest

from feedkeeper.exceptions import BadInput
from feedkeeper.url_validator import (
    SSRFError,
    is_ip_blocked,
    validate_feed_url,
    validate_public_url,
)


class TestValidateFeedUrl:
    """Tests for the syntax-only check."""

    def test_returns_input_unchanged(self):
        url = "https://Example.com/feed.xml?x=1"
        assert validate_feed_url(url) == url

    def test_allows_http(self):
        assert validate_feed_url("http://example.com/rss") == "http://example.com/rss"

    def test_allows_private_hosts(self):
        """Network policy is not this check's concern."""
        assert validate_feed_url("http://localhost:8080/feed") == "http://localhost:8080/feed"

    @pytest.mark.parametrize("url", [
        "",
        "example.com/feed",
        "/feed.xml",
        "mailto:someone@example.com",
        "file:///etc/passwd",
        "https://",
        "https://exa mple.com/feed",
        "https://example.com:notaport/",
        "http://[::1/feed",
    ])
    def test_rejects_malformed(self, url):
        with pytest.raises(BadInput):
            validate_feed_url(url)

    def test_rejects_non_string(self):
        with pytest.raises(BadInput):
            validate_feed_url(None)


class TestSSRFProtection:
    """Tests for URL validation and SSRF prevention."""

    # --- Allowed URLs ---

    def test_allows_https_url(self):
        """Should allow standard HTTPS URLs."""
        result = validate_public_url("https://example.com/feed.xml", resolve_dns=False)
        assert result == "https://example.com/feed.xml"

    def test_allows_public_ip(self):
        """Should allow public IP addresses."""
        result = validate_public_url("http://8.8.8.8/feed", resolve_dns=False)
        assert result == "http://8.8.8.8/feed"

    # --- Blocked Schemes ---

    def test_blocks_file_scheme(self):
        """Should refuse file:// URLs as bad input."""
        with pytest.raises(BadInput, match="scheme"):
            validate_public_url("file:///etc/passwd")

    # --- Blocked Hostnames ---

    @pytest.mark.parametrize("url", [
        "http://localhost/admin",
        "http://localhost.localdomain/",
        "http://metadata.google.internal/",
        "http://myserver.local/",
        "http://api.internal/",
        "http://foo.localhost/",
    ])
    def test_blocks_internal_hostnames(self, url):
        with pytest.raises(SSRFError, match="not allowed"):
            validate_public_url(url, resolve_dns=False)

    # --- Blocked IP Ranges ---

    @pytest.mark.parametrize("url", [
        "http://127.0.0.1/admin",
        "http://10.0.0.1/",
        "http://172.16.0.1/",
        "http://192.168.1.1/",
        "http://169.254.169.254/latest/meta-data/",
        "http://0.0.0.0/",
        "http://[::1]/",
        "http://[fe80::1]/",
    ])
    def test_blocks_private_addresses(self, url):
        with pytest.raises(SSRFError, match="not allowed"):
            validate_public_url(url, resolve_dns=False)

    def test_ssrf_error_is_bad_input(self):
        """Blocked targets surface to clients as a 400."""
        assert issubclass(SSRFError, BadInput)
        assert SSRFError("x").status_code == 400


class TestIsIpBlocked:
    """Tests for is_ip_blocked()."""

    @pytest.mark.parametrize("ip", [
        "127.0.0.1", "10.1.2.3", "192.168.0.10", "100.64.1.1", "224.0.0.1",
        "::1", "fd00::1", "::ffff:127.0.0.1",
    ])
    def test_blocked(self, ip):
        assert is_ip_blocked(ip)

    @pytest.mark.parametrize("ip", ["8.8.8.8", "1.1.1.1", "2606:4700:4700::1111"])
    def test_public(self, ip):
        assert not is_ip_blocked(ip)

    def test_not_an_ip(self):
        assert not is_ip_blocked("example.com")
