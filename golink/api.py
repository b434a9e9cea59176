import logging
from typing import Optional

from fastapi import FastAPI, Query
from fastapi.responses import HTMLResponse

from golink.config import Settings, load_settings
from golink.extractor import AsinExtractor
from golink.renderer import PageRenderer
from golink.resolver import ProductResolver

ROUTE_PREFIX = "/go"

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, resolver: Optional[ProductResolver] = None) -> FastAPI:
    """Build the FastAPI app; collaborators can be injected for tests."""
    settings = settings or load_settings()
    logging.basicConfig(level=getattr(logging, settings.log_level, logging.INFO))

    extractor = AsinExtractor(settings.short_links)
    resolver = resolver or ProductResolver(settings)
    renderer = PageRenderer(settings)

    # Initialize the FastAPI app
    app = FastAPI(title="golink", docs_url=None, redoc_url=None)

    @app.get("/healthz")
    async def healthz():
        return {"status": "ok"}

    async def handle(path: str, url: Optional[str]) -> HTMLResponse:
        asin = extractor.extract(path, url)
        if not asin:
            logger.info(f"No ASIN in request path={path!r} url={url!r}")
            return HTMLResponse(renderer.render_invalid(), status_code=404)

        record = await resolver.resolve(asin)
        logger.info(f"Serving ASIN {asin} from {record.source.value}")
        return HTMLResponse(renderer.render(record), status_code=200)

    @app.get(ROUTE_PREFIX, response_class=HTMLResponse)
    @app.get("/", response_class=HTMLResponse)
    async def root(url: Optional[str] = Query(None)):
        return await handle("", url)

    @app.get(ROUTE_PREFIX + "/{path:path}", response_class=HTMLResponse)
    async def go(path: str, url: Optional[str] = Query(None)):
        """Direct form /go/<ASIN>, or /go/?url=<amazon url>."""
        return await handle(path, url)

    @app.get("/{path:path}", response_class=HTMLResponse)
    async def direct(path: str, url: Optional[str] = Query(None)):
        return await handle(path, url)

    return app


app = create_app()
