# ABOUTME: Content quality classifier - word counts and empty/thin verdicts for HTML content
# ABOUTME: Pure functions over strings shared by the indexability engine, feeds and audits

import re
from dataclasses import dataclass, field
from html import unescape

from core.content_models import QualitySettings

_TAG_RE = re.compile(r"<[^>]*>")

# Length windows for page titles and meta descriptions (characters)
SEO_TITLE_MIN = 30
SEO_TITLE_MAX = 60
META_DESCRIPTION_MIN = 70
META_DESCRIPTION_MAX = 160


def strip_html(content: str | None) -> str:
    """Remove HTML tags, decode entities and trim surrounding whitespace"""
    if not content:
        return ""

    text = _TAG_RE.sub("", content)
    text = unescape(text)
    return text.strip()


def word_count(content: str | None) -> int:
    """Count whitespace-delimited words in the plain text of ``content``."""
    plain_text = strip_html(content)
    if not plain_text:
        return 0
    return len(plain_text.split())


def is_empty_content(content: str | None) -> bool:
    return len(strip_html(content)) == 0


def is_thin_content(content: str | None, threshold: int) -> bool:
    return word_count(content) < threshold


def content_quality_score(content: str | None, settings: QualitySettings) -> int:
    """
    Bucket content depth into a 0-100 score relative to the minimum length.

    Returns:
        int: 0 (no words), 25 (< half the minimum), 50 (< minimum),
            75 (< twice the minimum) or 100
    """
    words = word_count(content)
    min_length = settings.min_content_length

    if words == 0:
        return 0
    if words < min_length / 2:
        return 25
    if words < min_length:
        return 50
    if words < min_length * 2:
        return 75
    return 100


@dataclass
class SeoReadiness:
    is_ready: bool
    score: int
    issues: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


def check_seo_readiness(
    title: str, seo_title: str, meta_description: str, content: str, settings: QualitySettings
) -> SeoReadiness:
    """
    Editorial readiness check for a single page.

    Issues block readiness; warnings only lower the score. A page is ready
    when it has no issues and scores at least 70.

    Args:
        title: Page title
        seo_title: Title used in the <title> tag (optional)
        meta_description: Meta description (optional)
        content: Page body HTML
        settings: Quality thresholds for the thin-content check

    Returns:
        SeoReadiness: Verdict with score (floored at 0), issues and warnings
    """
    issues: list[str] = []
    warnings: list[str] = []
    score = 100

    if not title:
        issues.append("Title is missing")
        score -= 20

    if not seo_title:
        warnings.append("SEO title is not set (will use page title)")
        score -= 5
    elif len(seo_title) > SEO_TITLE_MAX:
        warnings.append(f"SEO title is too long (over {SEO_TITLE_MAX} characters)")
        score -= 5
    elif len(seo_title) < SEO_TITLE_MIN:
        warnings.append(f"SEO title is too short (under {SEO_TITLE_MIN} characters)")
        score -= 5

    if not meta_description:
        issues.append("Meta description is missing")
        score -= 15
    elif len(meta_description) > META_DESCRIPTION_MAX:
        warnings.append(f"Meta description is too long (over {META_DESCRIPTION_MAX} characters)")
        score -= 5
    elif len(meta_description) < META_DESCRIPTION_MIN:
        warnings.append(f"Meta description is too short (under {META_DESCRIPTION_MIN} characters)")
        score -= 5

    if is_empty_content(content):
        issues.append("Content is empty")
        score -= 30
    elif is_thin_content(content, settings.min_content_length):
        warnings.append("Content is thin (below minimum word count)")
        score -= 10

    return SeoReadiness(
        is_ready=not issues and score >= 70,
        score=max(0, score),
        issues=issues,
        warnings=warnings,
    )
