from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Dict, List, Optional

import yaml


logger = logging.getLogger(__name__)

BASE_DIR = Path(__file__).resolve().parent.parent
PACKAGE_DIR = Path(__file__).resolve().parent
DEFAULT_CONTENT_DIR = BASE_DIR / "content"
TEMPLATES_DIR = PACKAGE_DIR / "templates"
STATIC_DIR = BASE_DIR / "static"

CONFIG_PATHS = [
    BASE_DIR / "blog.yaml",
    BASE_DIR / "blog.yml",
    BASE_DIR / "blog.json",
]


def _default_content_dir() -> Path:
    return Path(os.getenv("BLOG_CONTENT_DIR", str(DEFAULT_CONTENT_DIR))).expanduser()


def _default_layouts() -> Dict[str, str]:
    return {
        "posts": "layouts/posts.html",
        "about": "layouts/about.html",
    }


def _default_aliases() -> Dict[str, Path]:
    return {"$components": TEMPLATES_DIR / "components"}


@dataclass(slots=True)
class SiteConfig:
    title: str = "Blog"
    content_dir: Path = field(default_factory=_default_content_dir)
    posts_dir: str = "posts"
    feed_extension: str = ".svx"
    extensions: List[str] = field(default_factory=lambda: [".svelte.md", ".md", ".svx"])
    layouts: Dict[str, str] = field(default_factory=_default_layouts)
    default_layout: str = "layouts/default.html"
    aliases: Dict[str, Path] = field(default_factory=_default_aliases)
    smartypants: bool = True
    smartypants_dashes: bool = True

    @property
    def posts_path(self) -> Path:
        return self.content_dir / self.posts_dir

    def layout_for(self, path: Path) -> str:
        """Pick the layout template by the first directory below the content root."""
        try:
            parts = path.relative_to(self.content_dir).parts
        except ValueError:
            return self.default_layout
        if len(parts) < 2:
            return self.default_layout
        return self.layouts.get(parts[0], self.default_layout)


_config: Optional[SiteConfig] = None


def _read_config_file(path: Optional[Path] = None) -> dict:
    candidates = [path] if path else CONFIG_PATHS
    env_path = os.getenv("BLOG_CONFIG_PATH")
    if path is None and env_path:
        candidates = [Path(env_path).expanduser()]

    for candidate in candidates:
        if not candidate.exists():
            continue
        try:
            if candidate.suffix in {".yaml", ".yml"}:
                with candidate.open("r", encoding="utf-8") as fp:
                    data = yaml.safe_load(fp) or {}
            else:
                data = json.loads(candidate.read_text(encoding="utf-8"))
        except Exception as exc:  # pylint: disable=broad-except
            logger.warning("Failed to load site config from %s: %s", candidate, exc)
            return {}

        if not isinstance(data, dict):
            logger.warning("site config file %s is not in expected format", candidate)
            return {}
        return data
    return {}


def load_config(path: Optional[Path] = None, **overrides) -> SiteConfig:
    """Build a SiteConfig from the config file, then apply keyword overrides."""
    data = _read_config_file(path)
    known = {f.name for f in fields(SiteConfig)}
    values: dict = {}

    smartypants = data.pop("smartypants", None)
    if isinstance(smartypants, dict):
        values["smartypants"] = True
        values["smartypants_dashes"] = bool(smartypants.get("dashes", True))
    elif isinstance(smartypants, bool):
        values["smartypants"] = smartypants
        values["smartypants_dashes"] = smartypants

    for key, value in data.items():
        if key not in known:
            logger.warning("Ignoring unknown site config key '%s'", key)
            continue
        values[key] = value

    if "content_dir" in values:
        values["content_dir"] = Path(str(values["content_dir"])).expanduser()
    if "aliases" in values:
        aliases = values["aliases"] or {}
        values["aliases"] = {str(name): (BASE_DIR / str(target)).resolve() for name, target in aliases.items()}
    if "extensions" in values and isinstance(values["extensions"], str):
        values["extensions"] = [values["extensions"]]

    values.update(overrides)
    return SiteConfig(**values)


def get_config() -> SiteConfig:
    global _config
    if _config is None:
        _config = load_config()
    return _config


def refresh() -> SiteConfig:
    """Drop the cached config and read it again."""
    global _config
    _config = None
    return get_config()
