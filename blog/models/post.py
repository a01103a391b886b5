from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional


@dataclass(slots=True)
class PostRecord:
    """Frontmatter of a post plus the slug taken from its filename."""

    slug: str
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def date(self) -> Optional[str]:
        value = self.metadata.get("date")
        return None if value is None else str(value)

    def to_dict(self) -> Dict[str, Any]:
        return {**self.metadata, "slug": self.slug}


@dataclass(slots=True)
class Page:
    slug: str
    path: Path
    metadata: Dict[str, Any]
    content_html: str
    layout: str

    @property
    def title(self) -> str:
        return str(self.metadata.get("title") or self.slug.replace("-", " ").title())
