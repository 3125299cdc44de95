import logging
from contextlib import asynccontextmanager
from pathlib import Path

import httpx
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import FileResponse, JSONResponse

from .routes import router
from ..core.config import settings
from ..core.errors import ApiError
from ..storage.sql import SqlLeadStore

logger = logging.getLogger(__name__)

WEB_INDEX = Path(__file__).resolve().parents[1] / "web" / "index.html"


def create_app(store=None) -> FastAPI:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.http_client = httpx.AsyncClient(timeout=settings.outscraper_timeout_s)
        app.state.store = store if store is not None else SqlLeadStore(settings.database_url)
        try:
            yield
        finally:
            await app.state.http_client.aclose()
            if store is None:
                app.state.store.close()

    app = FastAPI(title="LeadScout API", version="0.1.0", lifespan=lifespan)
    app.include_router(router)

    @app.exception_handler(ApiError)
    async def api_error_handler(request: Request, exc: ApiError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_body())

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        logger.warning("Rejected malformed request to %s: %s", request.url.path, exc.errors())
        return JSONResponse(status_code=400, content={"success": False, "message": "Invalid request body"})

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    @app.get("/", include_in_schema=False)
    async def index():
        return FileResponse(WEB_INDEX)

    return app


app = create_app()
