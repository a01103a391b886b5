from __future__ import annotations

import logging
from typing import Any, Optional

from jinja2 import ChoiceLoader, Environment, FileSystemLoader, PrefixLoader, select_autoescape

from blog.config import TEMPLATES_DIR, SiteConfig, get_config
from blog.services.dates import format_date


logger = logging.getLogger(__name__)


def normalize_base_path(base_url: str) -> str:
    return "" if not base_url.strip("/") else f"/{base_url.strip('/')}"


def format_date_or_raw(value: Any) -> str:
    try:
        return format_date(value)
    except ValueError:
        logger.warning("Unrecognized post date '%s', showing it as written", value)
        return str(value)


def build_environment(config: Optional[SiteConfig] = None, base_url: str = "") -> Environment:
    """Jinja environment shared by the app and the static export.

    Aliases such as ``$components`` are mounted as loader prefixes, so a template
    can ``{% include "$components/post_list.html" %}``.
    """
    config = config or get_config()
    aliases = PrefixLoader(
        {name: FileSystemLoader(str(target)) for name, target in config.aliases.items()},
        delimiter="/",
    )
    env = Environment(
        loader=ChoiceLoader([aliases, FileSystemLoader(str(TEMPLATES_DIR))]),
        autoescape=select_autoescape(["html"]),
    )
    env.filters["format_date"] = format_date_or_raw
    env.globals["site_title"] = config.title
    env.globals["base_path"] = normalize_base_path(base_url)
    return env
