from __future__ import annotations

import argparse
import asyncio
import json
import logging
import shutil
import sys
from pathlib import Path
from typing import Dict, Optional

from jinja2 import Environment

BASE_DIR = Path(__file__).resolve().parent.parent

sys.path.insert(0, str(BASE_DIR))

from blog import config as site_config
from blog.config import SiteConfig
from blog.services import post_loader
from blog.templating import build_environment

DEFAULT_OUTPUT = BASE_DIR / "build"
FEED_ROUTES = ("index.json", "posts.json")

logger = logging.getLogger("build_static")


def ensure_output_dir(output: Path) -> None:
    if output.exists():
        shutil.rmtree(output)
    output.mkdir(parents=True, exist_ok=True)
    if site_config.STATIC_DIR.is_dir():
        shutil.copytree(site_config.STATIC_DIR, output / "static", dirs_exist_ok=True)
    (output / ".nojekyll").write_text("", encoding="utf-8")


def render_template(env: Environment, template_name: str, destination: Path, context: Dict) -> None:
    template = env.get_template(template_name)
    html = template.render(context)
    destination.parent.mkdir(parents=True, exist_ok=True)
    destination.write_text(html, encoding="utf-8")


def build_site(output_dir: Path, base_url: str, config: Optional[SiteConfig] = None) -> None:
    config = config or site_config.refresh()
    env = build_environment(config, base_url)

    ensure_output_dir(output_dir)

    records = asyncio.run(post_loader.load_feed(config))
    posts = [record.to_dict() for record in records]

    feed = json.dumps({"posts": posts}, ensure_ascii=False, indent=2)
    for route in FEED_ROUTES:
        (output_dir / route).write_text(feed, encoding="utf-8")

    render_template(env, "index.html", output_dir / "index.html", {"posts": posts})

    about_path = post_loader.find_page("about", "index", config)
    if about_path is not None:
        page = post_loader.load_page(about_path, config)
        render_template(env, page.layout, output_dir / "about" / "index.html", {"page": page})
    else:
        logger.info("No about page found, skipping")

    for record in records:
        path = post_loader.find_page(config.posts_dir, record.slug, config)
        if path is None:
            continue
        page = post_loader.load_page(path, config)
        render_template(env, page.layout, output_dir / "posts" / record.slug / "index.html", {"page": page})

    logger.info("Wrote %d posts to %s", len(records), output_dir)


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Build a static HTML snapshot of the blog.")
    parser.add_argument("--output", type=Path, default=DEFAULT_OUTPUT, help="Output directory (default: ./build)")
    parser.add_argument("--base-url", type=str, default="", help="Sub-path the site is served under, e.g. the repo name.")
    return parser.parse_args()


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    args = parse_args()
    build_site(args.output.resolve(), args.base_url)


if __name__ == "__main__":
    main()
