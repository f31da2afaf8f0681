"""Tests for CSS fragment resolution and url rewriting."""

import pytest

from frankenstyle.core.cache import MemoryFragmentCache
from frankenstyle.core.errors import FragmentNotFoundError
from frankenstyle.core.fragments import FragmentResolver, is_relative_url, rewrite_urls


class TestRewriteUrls:
    def test_single_quoted(self) -> None:
        css, assets = rewrite_urls(".drums {background: url('drums.png')}", "drums")

        assert css == ".drums {background: url('drums/drums.png')}"
        assert assets == ("drums/drums.png",)

    @pytest.mark.parametrize(
        "reference",
        ['url("drums.png")', "url(drums.png)", "url( './drums.png' )"],
    )
    def test_quote_styles_are_normalized(self, reference: str) -> None:
        css, _ = rewrite_urls(f".drums {{background: {reference}}}", "drums")
        assert css == ".drums {background: url('drums/drums.png')}"

    def test_keeps_subdirectories(self) -> None:
        css, assets = rewrite_urls(".gate {background: url('img/gate.svg')}", "gate")

        assert css == ".gate {background: url('gate/img/gate.svg')}"
        assert assets == ("gate/img/gate.svg",)

    @pytest.mark.parametrize(
        "reference",
        [
            "url('/static/logo.png')",
            "url('https://example.com/logo.png')",
            "url('data:image/png;base64,AAAA')",
            "url('#gradient')",
        ],
    )
    def test_absolute_references_are_untouched(self, reference: str) -> None:
        source = f".logo {{background: {reference}}}"

        css, assets = rewrite_urls(source, "logo")

        assert css == source
        assert assets == ()

    def test_multiple_references(self) -> None:
        source = ".a {background: url('a.png'), url('b.png')}"

        css, assets = rewrite_urls(source, "a")

        assert css == ".a {background: url('a/a.png'), url('a/b.png')}"
        assert assets == ("a/a.png", "a/b.png")

    def test_parent_references_are_untouched(self) -> None:
        source = ".a {background: url('../secret.png')}"

        css, assets = rewrite_urls(source, "a")

        assert css == source
        assert assets == ()


def test_is_relative_url() -> None:
    assert is_relative_url("drums.png")
    assert is_relative_url("img/../drums.png")
    assert not is_relative_url("../shared/drums.png")
    assert not is_relative_url("..")
    assert not is_relative_url("")
    assert not is_relative_url("//cdn.example.com/x.png")
    assert not is_relative_url("http://example.com/x.png")


class TestFragmentResolver:
    def test_resolves_one_rule_per_package(self, car_packages) -> None:
        resolver = FragmentResolver(car_packages)

        fragment = resolver.resolve("brakes")

        assert fragment.package_id == "brakes"
        assert fragment.text == ".brakes {background: url('brakes/brakes.png')}"
        assert fragment.asset_urls == ("brakes/brakes.png",)

    def test_accepts_mapping(self, car_packages) -> None:
        resolver = FragmentResolver({p.id: p for p in car_packages})
        assert resolver.resolve("gate").package_id == "gate"

    def test_unknown_package_raises(self, car_packages) -> None:
        resolver = FragmentResolver(car_packages)

        with pytest.raises(FragmentNotFoundError) as exc_info:
            resolver.resolve("hoverboard")

        assert exc_info.value.package_id == "hoverboard"

    @pytest.mark.parametrize("css", [None, "", "   \n"])
    def test_missing_css_raises(self, package, css) -> None:
        resolver = FragmentResolver([package("plain", css=css)])

        with pytest.raises(FragmentNotFoundError, match="No CSS source found for package 'plain'"):
            resolver.resolve("plain")

    def test_uses_cache(self, car_packages) -> None:
        cache = MemoryFragmentCache()
        resolver = FragmentResolver(car_packages, cache)

        first = resolver.resolve("drums")
        second = resolver.resolve("drums")

        assert first is second
        assert cache.stats() == {"hits": 1, "misses": 1}

    def test_changed_css_misses_cache(self, package) -> None:
        cache = MemoryFragmentCache()
        FragmentResolver([package("drums")], cache).resolve("drums")

        restyled = package("drums", css=".drums {color: red}")
        fragment = FragmentResolver([restyled], cache).resolve("drums")

        assert fragment.text == ".drums {color: red}"
        assert cache.misses == 2

    def test_keeps_the_cache_it_was_given(self, car_packages) -> None:
        cache = MemoryFragmentCache()
        resolver = FragmentResolver(car_packages, cache)

        resolver.resolve("drums")

        assert resolver.cache is cache
        assert len(cache) == 1

    def test_strips_surrounding_whitespace(self, package) -> None:
        resolver = FragmentResolver([package("drums", css="\n  .drums {color: red}  \n")])
        assert resolver.resolve("drums").text == ".drums {color: red}"
