"""
==============================================================================
Repository Context Tests
==============================================================================

Tests for RepoContextResolver's decision table.

==============================================================================
"""

import pytest

from notes_portal.catalog import RepoContextResolver


@pytest.fixture
def resolver() -> RepoContextResolver:
    return RepoContextResolver()


class TestLocalMode:
    """Tests for hosts resolved to local mode."""

    @pytest.mark.parametrize("host, scheme", [
        ("localhost", "http"),
        ("127.0.0.1", "http"),
        ("::1", "http"),
        ("", "file"),
        ("", "https"),
        ("devbox", "http"),
        ("notes.local", "http"),
        ("portal", "file:"),
    ])
    def test_local_hosts(self, resolver: RepoContextResolver, host, scheme):
        """Test loopback, file and dotless hosts."""
        context = resolver.resolve(host, "/", scheme)
        assert context.is_local is True
        assert context.use_remote_source is False
        assert (context.owner, context.repo, context.branch) == ("local", "dev_notes", "main")

    def test_none_host(self, resolver: RepoContextResolver):
        """Test a missing host never fails."""
        assert resolver.resolve(None).is_local is True

    def test_unknown_host_falls_back_to_local(self, resolver: RepoContextResolver, caplog):
        """Test an unrecognised public host stays offline."""
        context = resolver.resolve("notes.example.com", "/x/", "https")
        assert context.use_remote_source is False
        assert "Unknown environment" in caplog.text


class TestStaticHosting:
    """Tests for the static hosting provider pattern."""

    def test_owner_and_repo(self, resolver: RepoContextResolver):
        """Test owner from host, repo from first path segment."""
        context = resolver.resolve("Maria.GitHub.io", "/estudos/aula.html", "https")
        assert (context.owner, context.repo) == ("maria", "estudos")
        assert context.is_local is False
        assert context.use_remote_source is True

    def test_user_site_without_path(self, resolver: RepoContextResolver):
        """Test an empty path targets the user site repo."""
        context = resolver.resolve("maria.github.io", "/", "https")
        assert context.repo == "maria.github.io"

    def test_bare_suffix_is_not_an_owner(self, resolver: RepoContextResolver):
        """Test the provider domain alone is not a repository host."""
        assert resolver.resolve("github.io", "/x/", "https").use_remote_source is False

    def test_custom_suffix(self):
        """Test a configured provider suffix."""
        resolver = RepoContextResolver(host_suffix="pages.example.org")
        context = resolver.resolve("team.pages.example.org", "/wiki/", "https")
        assert (context.owner, context.repo) == ("team", "wiki")

    def test_resolve_url(self, resolver: RepoContextResolver):
        """Test resolving from a full URL."""
        context = resolver.resolve_url("https://joao.github.io/cadernos/")
        assert (context.owner, context.repo) == ("joao", "cadernos")
        assert resolver.resolve_url(None).is_local is True
