from __future__ import annotations

from typing import Callable, Dict, Optional, Tuple

from markdown_it import MarkdownIt
from markdown_it.rules_core import StateCore
from markdown_it.token import Token
from mdit_py_plugins.anchors import anchors_plugin

from blog.config import SiteConfig, get_config


LINK_CLASS = "md-link"
EXTERNAL_CLASS = "external"
EXTERNAL_TARGET = "_blank"
EXTERNAL_REL = "noreferrer noopener"
LIST_CLASS = "md-list"

EM_DASH = "\u2014"
ELLIPSIS = "\u2026"

_renderers: Dict[Tuple[bool, bool], MarkdownIt] = {}


def is_external(href: str) -> bool:
    return not href.startswith("/") and not href.startswith("#")


def process_url(href: str, token: Token) -> None:
    """Class an anchor token and harden it when it leaves the site."""
    if token.tag != "a":
        return

    css_class = LINK_CLASS
    if is_external(href):
        css_class += f" {EXTERNAL_CLASS}"
        token.attrSet("target", EXTERNAL_TARGET)
        token.attrSet("rel", EXTERNAL_REL)
    token.attrSet("class", css_class)


def _render_link_open(self, tokens, idx, options, env):
    token = tokens[idx]
    # heading autolinks are generated after link classing and stay plain
    if not token.meta.get("heading_anchor"):
        process_url(str(token.attrGet("href") or ""), token)
    return self.renderToken(tokens, idx, options, env)


def _render_bullet_list_open(self, tokens, idx, options, env):
    tokens[idx].attrJoin("class", LIST_CLASS)
    return self.renderToken(tokens, idx, options, env)


def _wrap_heading_links(state: StateCore) -> None:
    tokens = state.tokens
    for idx, token in enumerate(tokens):
        if token.type != "heading_open":
            continue
        slug = token.attrGet("id")
        inline = tokens[idx + 1] if idx + 1 < len(tokens) else None
        if not slug or inline is None or inline.type != "inline" or inline.children is None:
            continue

        link_open = Token("link_open", "a", 1)
        link_open.attrSet("href", f"#{slug}")
        link_open.meta["heading_anchor"] = True
        link_close = Token("link_close", "a", -1)
        inline.children = [link_open, *inline.children, link_close]


def _smartypants_rule(dashes: bool) -> Callable[[StateCore], None]:
    def _educate(state: StateCore) -> None:
        for token in state.tokens:
            if token.type != "inline" or not token.children:
                continue
            for child in token.children:
                if child.type != "text":
                    continue
                content = child.content.replace("...", ELLIPSIS)
                if dashes:
                    content = content.replace("--", EM_DASH)
                child.content = content

    return _educate


def create_markdown(*, smartypants: bool = True, dashes: bool = True) -> MarkdownIt:
    """Build the renderer; smartypants curls quotes, collapses `...` and turns `--` into an em dash."""
    md = MarkdownIt("commonmark", {"html": True, "typographer": smartypants})
    md.enable("table").enable("strikethrough")
    if smartypants:
        md.enable("smartquotes")
        # escaped characters are still text_special here and stay untouched
        md.core.ruler.before("text_join", "smartypants", _smartypants_rule(dashes))
    md.use(anchors_plugin, min_level=1, max_level=6)
    md.core.ruler.push("heading_autolink", _wrap_heading_links)
    md.add_render_rule("link_open", _render_link_open)
    md.add_render_rule("bullet_list_open", _render_bullet_list_open)
    return md


def get_markdown(config: Optional[SiteConfig] = None) -> MarkdownIt:
    config = config or get_config()
    key = (config.smartypants, config.smartypants_dashes)
    md = _renderers.get(key)
    if md is None:
        md = create_markdown(smartypants=config.smartypants, dashes=config.smartypants_dashes)
        _renderers[key] = md
    return md


def render_markdown(text: str, config: Optional[SiteConfig] = None) -> str:
    return get_markdown(config).render(text)
