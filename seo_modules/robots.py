# ABOUTME: robots.txt generation, per-bot crawl policy checks and validation of custom robots text
# ABOUTME: Path matcher supports the '*' wildcard and a trailing '$' end anchor

import re
from dataclasses import dataclass, field

from core.content_models import SiteSettings

DEFAULT_USER_AGENT = "*"
DEFAULT_ALLOW = ("/",)
DEFAULT_DISALLOW = (
    "/admin/",
    "/admin/*",
    "/api/",
    "/*.json$",
    "/draft/",
)

# Crawlers that are refused the whole site
BLOCKED_BOTS = {"gptbot": "GPTBot", "ccbot": "CCBot"}

_KNOWN_DIRECTIVES = ("user-agent:", "sitemap:", "allow:", "disallow:", "crawl-delay:")


@dataclass
class RobotsRules:
    allow: list[str] = field(default_factory=list)
    disallow: list[str] = field(default_factory=list)


@dataclass
class RobotsValidation:
    valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


def default_rules() -> RobotsRules:
    return RobotsRules(allow=list(DEFAULT_ALLOW), disallow=list(DEFAULT_DISALLOW))


def sitemap_url(base_url: str) -> str:
    base = (base_url or "").rstrip("/")
    return f"{base}/sitemap.xml"


# =============================================================================
# GENERATION
# =============================================================================


def generate_robots_txt(site: SiteSettings) -> str:
    """
    Render robots.txt for the site.

    Custom text from settings is returned as written, with a Sitemap line
    appended if it has none. Otherwise the default policy is rendered.
    """
    custom = site.robots_txt_content
    if custom and custom.strip():
        if "Sitemap:" not in custom:
            return f"{custom}\n\nSitemap: {sitemap_url(site.base_url)}"
        return custom

    return generate_default_robots_txt(site)


def generate_default_robots_txt(site: SiteSettings) -> str:
    rules = default_rules()
    lines = [f"User-agent: {DEFAULT_USER_AGENT}"]
    lines.extend(f"Allow: {path}" for path in rules.allow)
    lines.extend(f"Disallow: {path}" for path in rules.disallow)

    if site.block_ai_crawlers:
        for bot_name in BLOCKED_BOTS.values():
            lines.append("")
            lines.append(f"User-agent: {bot_name}")
            lines.append("Disallow: /")

    lines.append("")
    lines.append(f"Sitemap: {sitemap_url(site.base_url)}")
    return "\n".join(lines)


# =============================================================================
# POLICY CHECKS
# =============================================================================


def get_bot_rules(bot_name: str) -> RobotsRules:
    """Rules for a named crawler; blocked bots lose every allow and get ``Disallow: /``."""
    rules = default_rules()
    if bot_name.lower() in BLOCKED_BOTS:
        rules.disallow.append("/")
        rules.allow.clear()
    return rules


def pattern_to_regex(pattern: str) -> re.Pattern:
    """
    Compile a robots.txt path pattern.

    Everything is literal except ``*`` (any run of characters) and a
    trailing ``$`` (end of path). Patterns are anchored at the start.
    """
    has_end_anchor = pattern.endswith("$")
    if has_end_anchor:
        pattern = pattern[:-1]

    body = ".*".join(re.escape(part) for part in pattern.split("*"))
    return re.compile(f"^{body}{'$' if has_end_anchor else ''}")


def match_path(path: str, pattern: str) -> bool:
    return pattern_to_regex(pattern).match(path) is not None


def is_path_allowed(path: str, user_agent: str = DEFAULT_USER_AGENT) -> bool:
    """
    Whether ``user_agent`` may crawl ``path``.

    The first matching disallow rule blocks the path unless a longer (more
    specific) allow rule also matches. Paths matching nothing are allowed.
    """
    rules = default_rules() if user_agent == DEFAULT_USER_AGENT else get_bot_rules(user_agent)

    for disallow in rules.disallow:
        if match_path(path, disallow):
            return any(match_path(path, allow) and len(allow) > len(disallow) for allow in rules.allow)

    return True


# =============================================================================
# VALIDATION
# =============================================================================


def validate_robots_txt(content: str) -> RobotsValidation:
    """
    Check custom robots.txt text.

    Errors: Allow/Disallow before any User-agent, no User-agent at all.
    Warnings: no Sitemap line, unrecognized non-comment directives.
    """
    errors: list[str] = []
    warnings: list[str] = []
    has_user_agent = False
    has_sitemap = False

    for raw_line in (content or "").split("\n"):
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue

        lowered = line.lower()
        if lowered.startswith("user-agent:"):
            has_user_agent = True
        elif lowered.startswith("sitemap:"):
            has_sitemap = True
        elif lowered.startswith(("allow:", "disallow:")):
            if not has_user_agent:
                errors.append("Allow/Disallow rules must come after User-agent directive")
        elif not lowered.startswith(_KNOWN_DIRECTIVES):
            warnings.append(f"Unrecognized directive: {line}")

    if not has_user_agent:
        errors.append("Missing User-agent directive")
    if not has_sitemap:
        warnings.append("No Sitemap directive found")

    return RobotsValidation(valid=not errors, errors=errors, warnings=warnings)
