"""Recursive Solidity import resolution against a remote package mirror."""

import logging
import re
import threading
import time
from typing import List, Optional
from urllib.parse import urljoin

import requests

from .constants import (
    DEFAULT_FETCH_TIMEOUT,
    DEFAULT_IMPORT_BUDGET,
    DEFAULT_MAX_IMPORT_DEPTH,
    DEFAULT_MAX_IMPORT_FETCHES,
    DEFAULT_MIRROR_BASE_URL,
)
from .exceptions import DeploymentCancelledError, ImportFetchError, ImportLimitError
from .types import SourceSet, SourceUnit

logger = logging.getLogger(__name__)

# Matches:
#   import "path";
#   import "path" as Name;
#   import {A, B as C} from "path";
#   import * as Name from "path";
IMPORT_PATTERN = re.compile(
    r"""import\s+"""
    r"""(?:(?:\{[^}]*\}|\*\s+as\s+\w+)\s+from\s+)?"""
    r"""(?P<quote>["'])(?P<path>[^"']+)(?P=quote)"""
    r"""(?:\s+as\s+\w+)?\s*;"""
)


def find_imports(source: str) -> List[str]:
    """
    Return import paths in the order they appear in the source text.

    Args:
        source: Solidity source text

    Returns:
        Import paths, left-to-right, duplicates preserved
    """
    return [match.group("path") for match in IMPORT_PATTERN.finditer(source)]


def is_relative_import(path: str) -> bool:
    return path.startswith("./") or path.startswith("../")


def _mirror_root(mirror_base_url: str) -> str:
    return mirror_base_url.rstrip("/") + "/"


def resolve_relative_import(
    import_path: str,
    base_path: str,
    mirror_base_url: str = DEFAULT_MIRROR_BASE_URL,
) -> str:
    """
    Resolve an import path to a mirror-absolute logical path.

    Relative paths are joined against the importing file's fetch URL with URL
    semantics, so "." and ".." segments collapse. Non-relative paths are
    returned unchanged.

    Args:
        import_path: Path as written in the import statement
        base_path: Logical path of the importing file
        mirror_base_url: Mirror base URL

    Returns:
        Logical path relative to the mirror root

    Raises:
        ImportFetchError: If the resolved URL falls outside the mirror
    """
    if not is_relative_import(import_path):
        return import_path

    root = _mirror_root(mirror_base_url)
    resolved_url = urljoin(root + base_path, import_path)
    if not resolved_url.startswith(root):
        raise ImportFetchError(
            f"Import '{import_path}' from '{base_path}' resolves outside the mirror: {resolved_url}"
        )
    return resolved_url[len(root):]


class ImportResolver:
    """
    Builds the closed SourceSet for a root source module.

    Each distinct logical path is fetched at most once; visited paths are
    recorded before fetching so cyclic and diamond import graphs terminate.
    """

    def __init__(
        self,
        mirror_base_url: str = DEFAULT_MIRROR_BASE_URL,
        session: Optional[requests.Session] = None,
        fetch_timeout: float = DEFAULT_FETCH_TIMEOUT,
        max_depth: int = DEFAULT_MAX_IMPORT_DEPTH,
        max_fetches: int = DEFAULT_MAX_IMPORT_FETCHES,
        budget_seconds: float = DEFAULT_IMPORT_BUDGET,
        cancel_event: Optional[threading.Event] = None,
    ):
        self.mirror_base_url = mirror_base_url
        self.session = session if session is not None else requests.Session()
        self.fetch_timeout = fetch_timeout
        self.max_depth = max_depth
        self.max_fetches = max_fetches
        self.budget_seconds = budget_seconds
        self.cancel_event = cancel_event

    def resolve(self, root_source: str, root_path: str) -> SourceSet:
        """
        Resolve all imports reachable from a root source module.

        Args:
            root_source: Source text of the root module
            root_path: Logical path under which the root module is compiled

        Returns:
            SourceSet containing the root unit and every transitively imported
            module, with relative imports rewritten to logical paths

        Raises:
            ImportFetchError: If any module cannot be fetched
            ImportLimitError: If the depth, fetch-count or time budget is exceeded
            DeploymentCancelledError: If the cancel event is set
        """
        sources = SourceSet()
        visited = {root_path}
        deadline = time.monotonic() + self.budget_seconds
        fetches = [0]

        root_content = self._resolve_children(
            root_source, root_path, sources, visited, 0, deadline, fetches
        )
        sources.add(SourceUnit(path=root_path, content=root_content))

        logger.info(
            "Resolved %d source unit(s) for %s (%d fetched)",
            len(sources),
            root_path,
            fetches[0],
        )
        return sources

    def _resolve_children(
        self,
        source: str,
        base_path: str,
        sources: SourceSet,
        visited: set,
        depth: int,
        deadline: float,
        fetches: List[int],
    ) -> str:
        """Fetch every import of `source` and return it with relative imports rewritten."""

        def _rewrite(match: "re.Match[str]") -> str:
            statement = match.group(0)
            import_path = match.group("path")
            if not is_relative_import(import_path):
                return statement
            logical_path = resolve_relative_import(import_path, base_path, self.mirror_base_url)
            start = match.start("path") - match.start()
            end = match.end("path") - match.start()
            return statement[:start] + logical_path + statement[end:]

        for import_path in find_imports(source):
            logical_path = resolve_relative_import(import_path, base_path, self.mirror_base_url)
            if logical_path in visited:
                continue
            visited.add(logical_path)
            self._fetch_into(logical_path, sources, visited, depth + 1, deadline, fetches)

        return IMPORT_PATTERN.sub(_rewrite, source)

    def _fetch_into(
        self,
        logical_path: str,
        sources: SourceSet,
        visited: set,
        depth: int,
        deadline: float,
        fetches: List[int],
    ) -> None:
        if self.cancel_event is not None and self.cancel_event.is_set():
            raise DeploymentCancelledError(f"Import resolution cancelled before '{logical_path}'")
        if depth > self.max_depth:
            raise ImportLimitError(
                f"Import depth limit ({self.max_depth}) exceeded at '{logical_path}'"
            )
        if fetches[0] >= self.max_fetches:
            raise ImportLimitError(
                f"Import fetch limit ({self.max_fetches}) exceeded at '{logical_path}'"
            )
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            raise ImportLimitError(
                f"Import resolution exceeded {self.budget_seconds}s budget at '{logical_path}'"
            )

        fetches[0] += 1
        content = self.fetch(logical_path, timeout=min(self.fetch_timeout, remaining))

        rewritten = self._resolve_children(
            content, logical_path, sources, visited, depth, deadline, fetches
        )
        sources.add(SourceUnit(path=logical_path, content=rewritten))

    def fetch(self, logical_path: str, timeout: Optional[float] = None) -> str:
        """
        Fetch the raw text of one module from the mirror.

        Args:
            logical_path: Mirror-absolute logical path
            timeout: Request timeout in seconds (defaults to fetch_timeout)

        Returns:
            Response body as text

        Raises:
            ImportFetchError: On transport errors, non-2xx status or empty body
        """
        url = _mirror_root(self.mirror_base_url) + logical_path
        logger.debug("Fetching import %s", url)
        try:
            response = self.session.get(
                url, timeout=self.fetch_timeout if timeout is None else timeout
            )
        except requests.RequestException as e:
            raise ImportFetchError(f"Network error fetching '{logical_path}': {e}") from e

        if not 200 <= response.status_code < 300:
            raise ImportFetchError(
                f"Fetching '{logical_path}' failed with status {response.status_code}"
            )

        content = response.text
        if not content or not content.strip():
            raise ImportFetchError(f"Empty response body for '{logical_path}'")
        return content


def resolve_imports(
    root_source: str,
    root_path: str,
    mirror_base_url: str = DEFAULT_MIRROR_BASE_URL,
    session: Optional[requests.Session] = None,
    **kwargs,
) -> SourceSet:
    """
    Resolve imports of a root source module (convenience wrapper).

    See ImportResolver for keyword arguments.
    """
    resolver = ImportResolver(mirror_base_url=mirror_base_url, session=session, **kwargs)
    return resolver.resolve(root_source, root_path)
