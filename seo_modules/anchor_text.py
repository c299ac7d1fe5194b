# ABOUTME: Anchor text generation for internal links, derived from target titles
# ABOUTME: Prefers an explicit keyword, otherwise the first words of the title, never a generic phrase

ANCHOR_MAX_WORDS = 4
KEYWORD_MIN_LENGTH = 3

# Boilerplate anchors that carry no topical signal
GENERIC_ANCHORS = frozenset(
    {
        "click here",
        "here",
        "read more",
        "more",
        "learn more",
        "this link",
        "link",
        "this",
        "this post",
        "this article",
        "continue reading",
        "see more",
    }
)


def is_generic_anchor(text: str) -> bool:
    return " ".join(text.lower().split()) in GENERIC_ANCHORS


def generate_anchor_text(keyword: str, target_title: str) -> str:
    """
    Build link text for a target page.

    An explicit keyword longer than two characters is used verbatim unless
    it is a generic phrase like "click here". Otherwise the target title is
    used whole when it has at most four words, or cut to its first four.

    Args:
        keyword: Explicit anchor keyword (may be empty)
        target_title: Title of the page being linked to

    Returns:
        str: Anchor text; empty only when both inputs are empty
    """
    if keyword and len(keyword) >= KEYWORD_MIN_LENGTH and not is_generic_anchor(keyword):
        return keyword

    words = (target_title or "").split()
    if not words:
        return target_title or ""
    if len(words) <= ANCHOR_MAX_WORDS:
        return " ".join(words)

    return " ".join(words[:ANCHOR_MAX_WORDS])
