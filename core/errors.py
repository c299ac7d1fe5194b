# ABOUTME: Exception hierarchy for the SEO content graph engine
# ABOUTME: Only raised at the I/O edge (snapshot and config loading), never for malformed content


class SeoGraphError(Exception):
    """Base class for all engine errors."""


class SnapshotError(SeoGraphError):
    """Raised when a content snapshot file cannot be read or decoded."""


class ConfigError(SeoGraphError):
    """Raised when a configuration file cannot be read or parsed."""
