import argparse
import dataclasses
import os
import sys
from datetime import datetime, timezone
from typing import Any

from core.content_models import ContentSnapshot
from core.errors import SeoGraphError
from core.seo_config import apply_cli_overrides, load_config_file
from core.snapshot_loader import load_snapshot_file
from monitoring.performance_timing import get_timing
from seo_modules.canonical import page_path
from seo_modules.internal_links import (
    all_internal_urls,
    broken_links,
    check_link_coverage,
    pillar_outbound_links,
)
from seo_modules.robots import generate_robots_txt, validate_robots_txt
from seo_modules.rss_feed import (
    FeedOptions,
    generate_author_feed,
    generate_category_feed,
    generate_main_feed,
    generate_tag_feed,
    slugify_label,
)
from seo_modules.seo_audit import audit_site, build_seo_stats
from seo_modules.sitemap import SitemapAssembler, sitemap_stats
from utils.console_output import console, print_error, print_info, print_section, print_success, print_warning
from utils.simple_json_utils import write_json_file
from version import get_version_string


def write_text_file(path: str, text: str) -> int:
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    data = text.encode("utf-8")
    with open(path, "wb") as f:
        f.write(data)
    return len(data)


def load_content(args: argparse.Namespace) -> ContentSnapshot:
    """Load the snapshot and apply config file and CLI layers in order."""
    snapshot = load_snapshot_file(args.snapshot)
    if args.config:
        snapshot = load_config_file(snapshot, args.config)
        print_info(f"Applied config: {args.config}", indent=1)
    return apply_cli_overrides(
        snapshot,
        base_url=args.base_url.rstrip("/") if args.base_url else None,
        block_ai_crawlers=args.block_ai_crawlers,
    )


def collect_tag_slugs(snapshot: ContentSnapshot) -> list[str]:
    """Declared tag slugs followed by any tag labels used on posts, without duplicates."""
    slugs = [tag.slug for tag in snapshot.tags if tag.slug]
    for post in snapshot.posts:
        slugs.extend(slugify_label(label) for label in post.tags)
    return list(dict.fromkeys(slug for slug in slugs if slug))


# =============================================================================
# ARTIFACTS
# =============================================================================


def write_sitemap(snapshot: ContentSnapshot, output_dir: str, now: datetime) -> dict[str, Any]:
    assembler = SitemapAssembler()
    xml = assembler.render(snapshot, now)
    size = write_text_file(os.path.join(output_dir, "sitemap.xml"), xml)

    build = assembler.last_build
    print_success(f"sitemap.xml: {len(build.entries)} URLs ({console.format_size(size)})", indent=1)
    if build.issues:
        print_warning(f"{len(build.issues)} sitemap entries failed validation and were left out", indent=1)

    return {
        "stats": sitemap_stats(snapshot),
        "issues": [dataclasses.asdict(issue) for issue in build.issues],
    }


def write_robots(snapshot: ContentSnapshot, output_dir: str) -> dict[str, Any]:
    text = generate_robots_txt(snapshot.site)
    write_text_file(os.path.join(output_dir, "robots.txt"), text)
    print_success("robots.txt written", indent=1)
    return dataclasses.asdict(validate_robots_txt(text))


def is_safe_slug(slug: str) -> bool:
    """True when a slug can be used as a single file name inside the output directory."""
    return bool(slug) and "/" not in slug and "\\" not in slug and ".." not in slug


def write_feeds(snapshot: ContentSnapshot, output_dir: str, now: datetime) -> list[str]:
    written = []
    root = os.path.realpath(output_dir)

    def emit(feed_path: str, xml: str) -> None:
        target = os.path.realpath(os.path.join(output_dir, feed_path.lstrip("/")))
        if os.path.commonpath([root, target]) != root:
            print_warning(f"Skipping feed outside the output directory: {feed_path}", indent=1)
            return
        write_text_file(target, xml)
        written.append(feed_path)

    def usable(kind: str, slug: str) -> bool:
        if is_safe_slug(slug):
            return True
        print_warning(f"Skipping {kind} feed with unsafe slug {slug!r}", indent=1)
        return False

    emit("/rss.xml", generate_main_feed(FeedOptions(snapshot, now=now)))

    for category in snapshot.categories:
        if category.slug and usable("category", category.slug):
            emit(f"/rss/{category.slug}.xml", generate_category_feed(category.slug, FeedOptions(snapshot, now=now)))

    for tag_slug in collect_tag_slugs(snapshot):
        if not usable("tag", tag_slug):
            continue
        emit(f"/rss/tag/{tag_slug}.xml", generate_tag_feed(tag_slug, FeedOptions(snapshot, now=now)))

    for author in snapshot.authors:
        if author.slug and author.is_active and usable("author", author.slug):
            emit(
                f"/rss/author/{author.slug}.xml", generate_author_feed(author.slug, FeedOptions(snapshot, now=now))
            )

    print_success(f"{len(written)} RSS feeds written", indent=1)
    return written


def build_link_report(snapshot: ContentSnapshot) -> dict[str, Any]:
    known_urls = all_internal_urls(snapshot)
    posts = []
    for post in snapshot.posts:
        if not post.is_published:
            continue
        coverage = check_link_coverage(post, snapshot)
        posts.append(
            {
                "id": post.id,
                "url": page_path("post", post.slug),
                "suggested_links": coverage.suggested_links,
                "has_pillar_link": coverage.has_pillar_link,
                "has_hub_link": coverage.has_hub_link,
                "has_related_links": coverage.has_related_links,
                "broken_links": broken_links(post.content, known_urls),
            }
        )

    pillars = [
        {
            "id": pillar.id,
            "url": page_path("pillar", pillar.slug),
            "outbound_links": pillar_outbound_links(pillar, snapshot),
            "broken_links": broken_links(pillar.content, known_urls),
        }
        for pillar in snapshot.pillars
    ]

    return {"posts": posts, "pillars": pillars}


def check_robots_file(path: str) -> dict[str, Any]:
    """Validate a robots.txt file and print what it found. Raises OSError if unreadable."""
    with open(path, encoding="utf-8") as f:
        result = validate_robots_txt(f.read())

    if result.valid:
        print_success(f"{path} is valid", indent=1)
    for error in result.errors:
        print_error(error, indent=2)
    for warning in result.warnings:
        print_warning(warning, indent=2)
    return dataclasses.asdict(result)


# =============================================================================
# ENTRY POINT
# =============================================================================


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate sitemap, robots.txt, RSS feeds and SEO reports from a CMS content snapshot",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Generate every artifact into ./public
  python seograph.py snapshot.json --output public/ --base-url https://example.com

  # Layer an INI config over the snapshot settings
  python seograph.py snapshot.json --config seo.ini --output public/

  # Skip feeds and validate a hand-written robots.txt
  python seograph.py snapshot.json --no-feeds --robots-check custom-robots.txt
        """,
    )

    parser.add_argument(
        "--version", action="version", version=get_version_string(), help="Show version information and exit"
    )
    parser.add_argument("snapshot", help="Path to the JSON content snapshot")
    parser.add_argument("--config", help="INI file overriding snapshot settings")
    parser.add_argument("--output", default="seo-output", help="Output directory (default: seo-output)")
    parser.add_argument("--base-url", help="Canonical base URL, e.g. https://example.com")
    parser.add_argument(
        "--block-ai-crawlers",
        action="store_true",
        default=None,
        help="Add Disallow: / blocks for GPTBot and CCBot to the default robots.txt",
    )
    parser.add_argument("--no-feeds", action="store_true", help="Do not generate RSS feeds")
    parser.add_argument("--robots-check", metavar="FILE", help="Validate an existing robots.txt file")

    # Logging Arguments
    parser.add_argument("--log-file", help="Path to log file (relative names go in the output directory)")
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level for file output (default: INFO)",
    )
    parser.add_argument("--timing", action="store_true", help="Print per-phase timing summary")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    output_dir = args.output
    timing = get_timing()

    try:
        os.makedirs(output_dir, exist_ok=True)
        if args.log_file:
            log_file_path = args.log_file
            if not os.path.dirname(log_file_path):
                log_file_path = os.path.join(output_dir, log_file_path)
            console.setup_file_logging(log_file_path, args.log_level)
            print_info(f"File logging enabled: {log_file_path} (level: {args.log_level})")
    except OSError as e:
        print_error(f"Cannot prepare output directory {output_dir}: {e}")
        return 1

    print_section(get_version_string())

    try:
        with timing.time_phase("Load snapshot"):
            snapshot = load_content(args)
    except SeoGraphError as e:
        print_error(str(e))
        return 1

    print_info(
        f"{len(snapshot.posts)} posts, {len(snapshot.hubs)} hubs, {len(snapshot.pillars)} pillars, "
        f"{len(snapshot.programmatic_pages)} programmatic, {len(snapshot.resources)} resources",
        indent=1,
    )
    if not snapshot.site.base_url:
        print_warning("No base URL configured; URLs will be site-relative", indent=1)

    now = datetime.now(timezone.utc)
    report: dict[str, Any] = {"generator": get_version_string(), "generated_at": now.isoformat()}

    try:
        print_section("Generating artifacts")
        with timing.time_phase("Sitemap"):
            report["sitemap"] = write_sitemap(snapshot, output_dir, now)
        with timing.time_phase("Robots"):
            report["robots"] = write_robots(snapshot, output_dir)
        if not args.no_feeds:
            with timing.time_phase("Feeds"):
                report["feeds"] = write_feeds(snapshot, output_dir, now)
        with timing.time_phase("Internal links"):
            write_json_file(os.path.join(output_dir, "internal-links.json"), build_link_report(snapshot))
            print_success("internal-links.json written", indent=1)
        if args.robots_check:
            print_section(f"Checking {args.robots_check}")
            report["robots_check"] = check_robots_file(args.robots_check)
        with timing.time_phase("SEO report"):
            report["stats"] = build_seo_stats(snapshot)
            report["pages"] = audit_site(snapshot)
            write_json_file(os.path.join(output_dir, "seo-report.json"), report)
            print_success("seo-report.json written", indent=1)
    except OSError as e:
        print_error(f"Failed to write artifacts: {e}")
        return 1

    stats = report["stats"]
    print_success(
        f"Done: {stats.indexed_pages}/{stats.total_pages} pages indexable, "
        f"{stats.broken_links} broken internal links -> {output_dir}"
    )
    if args.timing:
        timing.print_summary()
    return 0


if __name__ == "__main__":
    sys.exit(main())
