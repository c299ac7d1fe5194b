# ABOUTME: Version information for the SEO content graph engine
# ABOUTME: Single source of truth for the CLI --version flag and report metadata

__version__ = "1.0.0"
__project__ = "seograph"


def get_version_string() -> str:
    return f"{__project__} {__version__}"
