"""
==============================================================================
Repository Context Module
==============================================================================

Decides where the canonical note listing lives for this session.

Decision Table (first match wins):
---------------------------------
1. Loopback/dev host, ``file`` scheme or dotless host -> local mode
2. ``<owner>.<static host suffix>`` -> remote listing for owner/repo
3. Anything else -> local mode; unknown environments never hit the network

The resolver is pure: the caller supplies host, path and scheme.

==============================================================================
"""

from __future__ import annotations

import logging
from typing import Optional
from urllib.parse import urlsplit

from .models import RepoContext


# Module logger
logger = logging.getLogger(__name__)


LOOPBACK_HOSTS = frozenset({"localhost", "127.0.0.1", "::1", "[::1]", "0.0.0.0"})

LOCAL_OWNER = "local"
LOCAL_REPO = "dev_notes"
DEFAULT_BRANCH = "main"


class RepoContextResolver:
    """
    Resolve a RepoContext from the execution environment.

    Example:
        >>> resolver = RepoContextResolver()
        >>> ctx = resolver.resolve("maria.github.io", "/estudos/", "https")
        >>> (ctx.owner, ctx.repo, ctx.use_remote_source)
        ('maria', 'estudos', True)
    """

    def __init__(self, host_suffix: str = "github.io", branch: str = DEFAULT_BRANCH) -> None:
        self._host_suffix = host_suffix.lower().lstrip(".")
        self._branch = branch

    def local_context(self) -> RepoContext:
        return RepoContext(
            owner=LOCAL_OWNER,
            repo=LOCAL_REPO,
            branch=self._branch,
            is_local=True,
            use_remote_source=False,
        )

    @staticmethod
    def is_local_host(hostname: str, scheme: str = "") -> bool:
        """Loopback aliases, ``local`` hosts, file URLs and dotless hosts."""
        host = hostname.lower()
        return (
            host in LOOPBACK_HOSTS
            or "local" in host
            or scheme.lower().rstrip(":") == "file"
            or host == ""
            or "." not in host
        )

    def resolve(self, hostname: Optional[str], pathname: str = "/", scheme: str = "") -> RepoContext:
        """
        Resolve the repository context.

        Args:
            hostname: Host the portal is served from (may be empty)
            pathname: URL path of the portal page
            scheme: URL scheme, with or without the trailing colon

        Returns:
            RepoContext; never raises
        """
        host = (hostname or "").strip().lower()
        logger.debug(f"🔍 Resolving environment: host={host!r} path={pathname!r} scheme={scheme!r}")

        if self.is_local_host(host, scheme):
            logger.info("🏠 Local environment detected, using static note table")
            return self.local_context()

        suffix = f".{self._host_suffix}"
        if host.endswith(suffix) and len(host) > len(suffix):
            owner = host[: -len(suffix)].split(".")[0]
            parts = [p for p in (pathname or "").split("/") if p]
            repo = parts[0] if parts else f"{owner}.{self._host_suffix}"

            logger.info(f"🌐 Static hosting detected: {owner}/{repo}")
            return RepoContext(
                owner=owner,
                repo=repo,
                branch=self._branch,
                is_local=False,
                use_remote_source=True,
            )

        logger.warning(f"⚠️ Unknown environment {host!r}, falling back to local mode")
        return self.local_context()

    def resolve_url(self, url: Optional[str]) -> RepoContext:
        """Resolve from a full URL; a missing URL resolves to local mode."""
        if not url:
            return self.local_context()
        parts = urlsplit(url)
        return self.resolve(parts.hostname or "", parts.path or "/", parts.scheme)
