"""
CSS fragment resolution.

Maps each package to its single CSS fragment, rewriting relative ``url()``
references so they point at the package's copied asset directory
(``<package_id>/<path>``).
"""

from __future__ import annotations

import logging
import posixpath
import re
from collections.abc import Iterable, Mapping

from .cache import FragmentCache, NullFragmentCache, fragment_cache_key
from .errors import FragmentNotFoundError
from .models import CssFragment, PackageDescriptor

logger = logging.getLogger(__name__)

_URL_RE = re.compile(r"""url\(\s*(?P<quote>['"]?)(?P<path>[^'")]*?)(?P=quote)\s*\)""")
_SCHEME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*:")


def is_relative_url(path: str) -> bool:
    """Return True for references that live inside the package directory."""
    if not path or path.startswith(("/", "#")):
        return False
    if _SCHEME_RE.match(path):
        return False
    normalized = posixpath.normpath(path)
    return normalized != ".." and not normalized.startswith("../")


def rewrite_urls(css: str, package_id: str) -> tuple[str, tuple[str, ...]]:
    """
    Point relative ``url()`` references at ``<package_id>/``.

    Args:
        css: CSS source
        package_id: Package the CSS belongs to

    Returns:
        Tuple of (rewritten css, rewritten asset paths)
    """
    asset_urls: list[str] = []

    def _replace(match: re.Match[str]) -> str:
        path = match.group("path").strip()
        if not is_relative_url(path):
            return match.group(0)
        asset = f"{package_id}/{posixpath.normpath(path)}"
        asset_urls.append(asset)
        return f"url('{asset}')"

    return _URL_RE.sub(_replace, css), tuple(asset_urls)


class FragmentResolver:
    """Resolves package ids to CSS fragments, consulting a fragment cache."""

    def __init__(
        self,
        packages: Mapping[str, PackageDescriptor] | Iterable[PackageDescriptor],
        cache: FragmentCache | None = None,
    ):
        if isinstance(packages, Mapping):
            self.packages = dict(packages)
        else:
            self.packages = {package.id: package for package in packages}
        self.cache = cache if cache is not None else NullFragmentCache()

    def resolve(self, package_id: str) -> CssFragment:
        """
        Resolve the CSS fragment for a package.

        Args:
            package_id: Package to resolve

        Returns:
            The package's fragment

        Raises:
            FragmentNotFoundError: If the package is unknown or has no CSS
        """
        package = self.packages.get(package_id)
        if package is None:
            raise FragmentNotFoundError(package_id, f"Unknown package '{package_id}'")
        css = package.css
        if css is None or not css.strip():
            raise FragmentNotFoundError(package_id)

        return self.cache.get_or_resolve(
            fragment_cache_key(package), lambda: self._build_fragment(package_id, css)
        )

    def _build_fragment(self, package_id: str, css: str) -> CssFragment:
        text, asset_urls = rewrite_urls(css.strip(), package_id)
        logger.debug("Resolved fragment for %s (%d asset urls)", package_id, len(asset_urls))
        return CssFragment(package_id=package_id, text=text, asset_urls=asset_urls)


__all__ = ["FragmentResolver", "is_relative_url", "rewrite_urls"]
