from __future__ import annotations

import asyncio
import logging
from datetime import date, datetime
from pathlib import Path
from typing import Any, Iterable, List, Optional

import frontmatter
import yaml

from blog.config import SiteConfig, get_config
from blog.models.post import Page, PostRecord
from blog.services.markdown_renderer import render_markdown


logger = logging.getLogger(__name__)


class PostLoadError(RuntimeError):
    def __init__(self, path: Path, reason: Exception) -> None:
        super().__init__(f"Failed to load {path}: {reason}")
        self.path = path
        self.reason = reason


def list_post_files(config: Optional[SiteConfig] = None) -> List[Path]:
    """Files directly inside the posts directory that carry the feed extension."""
    config = config or get_config()
    posts_path = config.posts_path
    if not posts_path.is_dir():
        logger.warning("Posts directory %s does not exist", posts_path)
        return []
    return sorted(
        path for path in posts_path.iterdir()
        if path.is_file() and path.name.endswith(config.feed_extension)
    )


def slug_for(path: Path, extension: str) -> str:
    name = path.name
    if extension and name.endswith(extension):
        return name[: -len(extension)]
    return name


def load_record(path: Path, extension: str) -> PostRecord:
    parsed = _parse(path)
    return PostRecord(slug=slug_for(path, extension), metadata=_normalize(parsed.metadata or {}))


def sort_posts(records: Iterable[PostRecord]) -> List[PostRecord]:
    """Newest first by plain string comparison of ``date``; undated posts go last."""
    return sorted(records, key=lambda record: (record.date is not None, record.date or ""), reverse=True)


async def load_feed(config: Optional[SiteConfig] = None) -> List[PostRecord]:
    config = config or get_config()
    paths = list_post_files(config)
    records = await asyncio.gather(
        *(asyncio.to_thread(load_record, path, config.feed_extension) for path in paths)
    )
    logger.debug("Loaded %d posts from %s", len(records), config.posts_path)
    return sort_posts(records)


def find_page(section: str, name: str, config: Optional[SiteConfig] = None) -> Optional[Path]:
    """Locate ``<content>/<section>/<name><ext>`` for the first markdown extension present."""
    config = config or get_config()
    if not name or name.startswith(".") or "/" in name or "\\" in name:
        return None
    for extension in config.extensions:
        candidate = config.content_dir / section / f"{name}{extension}"
        if candidate.is_file():
            return candidate
    return None


def load_page(path: Path, config: Optional[SiteConfig] = None) -> Page:
    config = config or get_config()
    parsed = _parse(path)
    extension = next((ext for ext in config.extensions if path.name.endswith(ext)), path.suffix)
    return Page(
        slug=slug_for(path, extension),
        path=path,
        metadata=_normalize(parsed.metadata or {}),
        content_html=render_markdown(parsed.content, config),
        layout=config.layout_for(path),
    )


def _parse(path: Path) -> frontmatter.Post:
    try:
        return frontmatter.load(path)
    except (OSError, UnicodeDecodeError, yaml.YAMLError, ValueError) as exc:
        logger.error("Could not parse %s: %s", path, exc)
        raise PostLoadError(path, exc) from exc


def _normalize(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, dict):
        return {str(key): _normalize(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_normalize(item) for item in value]
    return value
