#!/usr/bin/env python
"""
ABOUTME: Tests for canonical URL normalization, page paths and duplicate detection
ABOUTME: Includes idempotence checks over a spread of messy inputs
"""

import pytest

from seo_modules.canonical import (
    CanonicalResolver,
    are_duplicate_urls,
    detect_duplicates,
    enforce_www_consistency,
    extract_path,
    is_valid_internal_url,
    normalize_url,
    page_path,
)

MESSY_URLS = [
    "",
    "/",
    "//",
    "/Blog/Post/",
    "/a//b///c/",
    "https://Example.com//Path//?q=1#top",
    "https://example.com/",
    "/path/?utm_source=x",
    "#fragment",
    "///",
]


class TestNormalizeUrl:
    """Tests for normalize_url"""

    def test_strips_query_fragment_case_and_slash(self):
        assert normalize_url("https://Example.com/Blog/Post/?a=1#x") == "https://example.com/blog/post"

    def test_root_keeps_its_slash(self):
        assert normalize_url("/") == "/"

    def test_scheme_slashes_preserved(self):
        assert normalize_url("https://example.com//a//b") == "https://example.com/a/b"

    @pytest.mark.parametrize("url", MESSY_URLS)
    def test_idempotent(self, url):
        once = normalize_url(url)
        assert normalize_url(once) == once

    def test_duplicates(self):
        assert are_duplicate_urls("/Mixing/", "/mixing?ref=nav")
        assert not are_duplicate_urls("/mixing", "/mastering")


class TestDetectDuplicates:
    """Tests for duplicate URL grouping"""

    def test_later_variants_reported(self):
        duplicates = detect_duplicates(["/mixing", "/Mixing/", "/mastering", "/mixing", "/mixing#top"])
        assert [(d.url, d.duplicate_of) for d in duplicates] == [
            ("/Mixing/", "/mixing"),
            ("/mixing#top", "/mixing"),
        ]

    def test_no_duplicates(self):
        assert detect_duplicates(["/a", "/b"]) == []


class TestPagePaths:
    """Tests for per-type URL templates"""

    def test_root_slug_types(self):
        assert page_path("post", "eq-basics") == "/eq-basics"
        assert page_path("blog", "eq-basics") == "/eq-basics"
        assert page_path("hub", "mixing") == "/mixing"
        assert page_path("pillar", "guide") == "/guide"

    def test_prefixed_types(self):
        assert page_path("programmatic", "hip-hop", "best-plugins") == "/genre/hip-hop/best-plugins"
        assert page_path("programmatic", "hip-hop") == "/genre/hip-hop"
        assert page_path("resource", "kit") == "/resources/kit"
        assert page_path("author", "jane-doe") == "/author/jane-doe"
        assert page_path("about") == "/about"

    def test_unknown_type_is_home(self):
        assert page_path("landing", "x") == "/"


class TestCanonicalResolver:
    """Tests for absolute canonical URLs"""

    def test_base_url_trailing_slash_trimmed(self):
        resolver = CanonicalResolver("https://example.com/")
        assert resolver.canonical("/Mixing/") == "https://example.com/mixing"
        assert resolver.canonical("mixing") == "https://example.com/mixing"

    def test_home(self):
        assert CanonicalResolver("https://example.com").canonical_for_type("home") == "https://example.com"
        assert CanonicalResolver("").canonical_for_type("home") == "/"

    def test_type_dispatch(self):
        resolver = CanonicalResolver("https://example.com")
        assert resolver.canonical_for_type("resource", "kit") == "https://example.com/resources/kit"
        assert resolver.canonical_for_type("unknown", "x") == "https://example.com"

    def test_relative_without_base(self):
        assert CanonicalResolver().canonical_for_type("hub", "mixing") == "/mixing"

    def test_absolute_passthrough(self):
        resolver = CanonicalResolver("https://example.com")
        assert resolver.absolute("https://cdn.test/a.png") == "https://cdn.test/a.png"
        assert resolver.absolute("images/a.png") == "https://example.com/images/a.png"


class TestHostHelpers:
    """Tests for www handling and internal URL checks"""

    def test_www_consistency(self):
        assert enforce_www_consistency("https://www.example.com/a") == "https://example.com/a"
        assert enforce_www_consistency("https://example.com/a", use_www=True) == "https://www.example.com/a"
        assert enforce_www_consistency("/relative") == "/relative"

    def test_internal_urls(self):
        assert is_valid_internal_url("/mixing", "https://example.com")
        assert is_valid_internal_url("https://example.com/x", "https://example.com")
        assert not is_valid_internal_url("https://other.test/x", "https://example.com")

    def test_extract_path(self):
        assert extract_path("https://example.com/a/b?x=1") == "/a/b"
        assert extract_path("/only/path") == "/only/path"
