import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from blog import config
from blog.routers import feeds, pages
from blog.services.post_loader import PostLoadError


logger = logging.getLogger(__name__)

app = FastAPI(title="Blog")

app.include_router(feeds.router)
app.include_router(pages.router)

if config.STATIC_DIR.is_dir():
    app.mount("/static", StaticFiles(directory=str(config.STATIC_DIR)), name="static")


@app.on_event("startup")
def startup() -> None:
    config.refresh()


@app.exception_handler(PostLoadError)
async def post_load_error_handler(request: Request, exc: PostLoadError) -> JSONResponse:
    logger.error("Request %s failed while loading %s", request.url.path, exc.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": str(exc)})


@app.get("/health")
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}
