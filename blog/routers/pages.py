from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from blog.config import SiteConfig, get_config
from blog.models.post import Page
from blog.services import post_loader
from blog.templating import build_environment


router = APIRouter()


def get_templates(config: SiteConfig = Depends(get_config)) -> Jinja2Templates:
    return Jinja2Templates(env=build_environment(config))


def _render_page(request: Request, templates: Jinja2Templates, page: Page) -> HTMLResponse:
    return templates.TemplateResponse(request, page.layout, {"page": page})


@router.get("/", response_class=HTMLResponse, name="homepage")
async def homepage(
    request: Request,
    config: SiteConfig = Depends(get_config),
    templates: Jinja2Templates = Depends(get_templates),
) -> HTMLResponse:
    records = await post_loader.load_feed(config)
    posts = [record.to_dict() for record in records]
    return templates.TemplateResponse(request, "index.html", {"posts": posts})


@router.get("/posts/{slug}", response_class=HTMLResponse, name="post_detail")
def post_detail(
    request: Request,
    slug: str,
    config: SiteConfig = Depends(get_config),
    templates: Jinja2Templates = Depends(get_templates),
) -> HTMLResponse:
    path = post_loader.find_page(config.posts_dir, slug, config)
    if path is None:
        raise HTTPException(status_code=404, detail="Post not found")
    return _render_page(request, templates, post_loader.load_page(path, config))


@router.get("/about", response_class=HTMLResponse, name="about")
def about(
    request: Request,
    config: SiteConfig = Depends(get_config),
    templates: Jinja2Templates = Depends(get_templates),
) -> HTMLResponse:
    path = post_loader.find_page("about", "index", config)
    if path is None:
        raise HTTPException(status_code=404, detail="Page not found")
    return _render_page(request, templates, post_loader.load_page(path, config))
