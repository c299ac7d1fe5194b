# ABOUTME: Canonical URL resolver - normalization, per-page-type URL templates and duplicate detection
# ABOUTME: Base URL is passed in explicitly; every artifact generator builds its links through here

import re
from dataclasses import dataclass
from urllib.parse import urljoin, urlsplit, urlunsplit

# Doubled slashes anywhere except right after a scheme's colon
_DUPLICATE_SLASHES_RE = re.compile(r"([^:])//+")

PAGE_TYPES = ("home", "about", "blog", "post", "hub", "pillar", "programmatic", "resource", "author")


def normalize_url(url: str) -> str:
    """
    Normalize a URL for canonical comparison.

    Drops the query string and fragment, lower-cases, collapses doubled
    slashes (the ``://`` after a scheme is kept) and removes one trailing
    slash unless the URL is the root ``/``. Collapsing runs before the
    trailing-slash removal so the function is idempotent.
    """
    if not url:
        return ""

    normalized = url.split("?", 1)[0].split("#", 1)[0]
    normalized = normalized.lower()
    normalized = _DUPLICATE_SLASHES_RE.sub(r"\1/", normalized)

    if len(normalized) > 1 and normalized.endswith("/"):
        normalized = normalized[:-1]

    return normalized


def are_duplicate_urls(url1: str, url2: str) -> bool:
    return normalize_url(url1) == normalize_url(url2)


@dataclass(frozen=True)
class DuplicateUrl:
    url: str
    duplicate_of: str


def detect_duplicates(urls: list[str]) -> list[DuplicateUrl]:
    """
    Group URLs by normalized form and flag every later variant.

    The first URL seen for a normalized form is the canonical one; exact
    repeats of that same string are not reported.
    """
    duplicates: list[DuplicateUrl] = []
    seen: dict[str, str] = {}

    for url in urls:
        normalized = normalize_url(url)
        existing = seen.get(normalized)
        if existing is None:
            seen[normalized] = url
        elif existing != url:
            duplicates.append(DuplicateUrl(url=url, duplicate_of=existing))

    return duplicates


def page_path(page_type: str, slug: str = "", extra: str = "") -> str:
    """
    Site-relative path for a page type.

    Posts, hubs and pillars live at the root (``/{slug}``); programmatic
    pages under ``/genre/{slug}/{extra}``; resources under ``/resources``;
    authors under ``/author``. Unknown types map to the home page.
    """
    slug = slug or ""

    if page_type in ("blog", "post", "hub", "pillar"):
        return f"/{slug}"
    if page_type == "programmatic":
        return f"/genre/{slug}/{extra}" if extra else f"/genre/{slug}"
    if page_type == "resource":
        return f"/resources/{slug}"
    if page_type == "author":
        return f"/author/{slug}"
    if page_type == "about":
        return "/about"
    return "/"


class CanonicalResolver:
    """Builds absolute canonical URLs against one site origin."""

    def __init__(self, base_url: str = ""):
        self.base_url = (base_url or "").rstrip("/")

    def canonical(self, path: str) -> str:
        """Prefix the base onto the normalized, slash-prefixed path."""
        normalized_path = normalize_url(path)
        clean_path = normalized_path if normalized_path.startswith("/") else f"/{normalized_path}"
        return f"{self.base_url}{clean_path}"

    def canonical_for_type(self, page_type: str, slug: str = "", extra: str = "") -> str:
        if page_type not in PAGE_TYPES or page_type == "home":
            return self.home()
        return self.canonical(page_path(page_type, slug, extra))

    def home(self) -> str:
        return self.base_url or "/"

    def absolute(self, url: str) -> str:
        """Absolute URLs pass through untouched; site-relative ones get the base."""
        if url.startswith(("http://", "https://")):
            return url
        return f"{self.base_url}{url if url.startswith('/') else '/' + url}"


def enforce_www_consistency(url: str, use_www: bool = False) -> str:
    """Add or strip the ``www.`` host prefix; unparseable URLs are returned unchanged."""
    try:
        parts = urlsplit(url)
    except ValueError:
        return url
    if not parts.hostname:
        return url

    netloc = parts.netloc
    if use_www and not parts.hostname.startswith("www."):
        netloc = netloc.replace(parts.hostname, f"www.{parts.hostname}", 1)
    elif not use_www and parts.hostname.startswith("www."):
        netloc = netloc.replace("www.", "", 1)

    return urlunsplit((parts.scheme, netloc, parts.path, parts.query, parts.fragment))


def is_valid_internal_url(url: str, base_url: str) -> bool:
    """True when ``url`` resolves to the same host as ``base_url`` (relative URLs are internal)."""
    if not base_url:
        return not url.startswith(("http://", "https://", "//"))
    try:
        resolved = urlsplit(urljoin(base_url, url))
        base = urlsplit(base_url)
    except ValueError:
        return not url.startswith(("http://", "https://", "//"))
    return resolved.hostname == base.hostname


def extract_path(url: str) -> str:
    try:
        return urlsplit(urljoin("http://localhost", url)).path or "/"
    except ValueError:
        return url
