# ABOUTME: Shared Jinja2 environment for XML artifact templates (sitemap, RSS)
# ABOUTME: Every {{ }} output is XML-escaped unless it is already Markup (CDATA sections)

import os
from typing import Any
from xml.sax.saxutils import escape

from jinja2 import Environment, FileSystemLoader, StrictUndefined
from markupsafe import Markup

TEMPLATE_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "templates")

# saxutils.escape covers & < >; quotes are added for attribute and text safety
_XML_QUOTE_ENTITIES = {'"': "&quot;", "'": "&apos;"}

_env: Environment | None = None


def escape_xml(value: Any) -> str:
    """Escape ``& < > " '`` for use in an XML text node or attribute."""
    if value is None:
        return ""
    return escape(str(value), _XML_QUOTE_ENTITIES)


def cdata(value: Any) -> Markup:
    """Wrap raw HTML in a CDATA section, splitting any embedded ``]]>``."""
    text = "" if value is None else str(value)
    return Markup("<![CDATA[" + text.replace("]]>", "]]]]><![CDATA[>") + "]]>")


def _finalize(value: Any) -> Any:
    if isinstance(value, Markup):
        return value
    return escape_xml(value)


def get_jinja_env() -> Environment:
    """Create the environment once per process."""
    global _env
    if _env is None:
        _env = Environment(
            loader=FileSystemLoader(TEMPLATE_DIR),
            autoescape=False,
            finalize=_finalize,
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=StrictUndefined,
        )
        _env.filters["cdata"] = cdata
    return _env


def render_template(template_name: str, **context: Any) -> str:
    return get_jinja_env().get_template(template_name).render(**context)
