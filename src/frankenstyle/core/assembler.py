"""
Stylesheet assembly.

Concatenates resolved fragments in dependency order, one per line. The
orderer already guarantees each package appears once, so nothing is
deduplicated here.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

from .models import CssFragment, UrlStyle


def apply_url_style(fragment: CssFragment, url_style: UrlStyle) -> str:
    """
    Render a fragment's rewritten asset references in the requested style.

    Only references produced by url rewriting are touched; absolute urls
    stay literal.

    Args:
        fragment: Resolved fragment
        url_style: LITERAL keeps ``url('...')``, HELPER emits ``asset-url('...')``

    Returns:
        Fragment text ready for the stylesheet
    """
    if url_style is UrlStyle.LITERAL or not fragment.asset_urls:
        return fragment.text

    assets = "|".join(re.escape(asset) for asset in dict.fromkeys(fragment.asset_urls))
    pattern = re.compile(rf"(?<![\w-])url\('({assets})'\)")
    return pattern.sub(r"asset-url('\1')", fragment.text)


def assemble(fragments: Iterable[CssFragment], url_style: UrlStyle = UrlStyle.LITERAL) -> str:
    """
    Concatenate fragments into the final stylesheet.

    Args:
        fragments: Fragments in dependency order
        url_style: Asset reference style

    Returns:
        CSS text with each fragment on its own line
    """
    return "".join(f"{apply_url_style(fragment, url_style)}\n" for fragment in fragments)


__all__ = ["apply_url_style", "assemble"]
