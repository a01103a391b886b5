from __future__ import annotations

from typing import Any, Dict, List

from fastapi import APIRouter, Depends

from blog.config import SiteConfig, get_config
from blog.services import post_loader


router = APIRouter()


async def _feed(config: SiteConfig) -> Dict[str, List[Dict[str, Any]]]:
    records = await post_loader.load_feed(config)
    return {"posts": [record.to_dict() for record in records]}


@router.get("/index.json", name="index_feed")
async def index_feed(config: SiteConfig = Depends(get_config)) -> Dict[str, List[Dict[str, Any]]]:
    return await _feed(config)


@router.get("/posts.json", name="posts_feed")
async def posts_feed(config: SiteConfig = Depends(get_config)) -> Dict[str, List[Dict[str, Any]]]:
    return await _feed(config)
