# genelinker/server/app.py: FastAPI app factory

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from genelinker.errors import DownloadError, ExportError, UserInputError
from genelinker.logging_utils import configure_logging
from genelinker.server.services import Services, default_services

# Routers
from genelinker.server.research_routes import router as research_router
from genelinker.server.mindmap_routes import router as mindmap_router

log = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    await app.state.services.llm.aclose()


def create_app(services: Optional[Services] = None) -> FastAPI:
    configure_logging()
    app = FastAPI(title="GeneLinker", lifespan=lifespan)
    app.state.services = services or default_services()

    # ===== Routers =====
    app.include_router(research_router)    # /ask, /gene/link, /papers/*, /export/report, /prefs/*
    app.include_router(mindmap_router)     # /mindmap/*

    # ===== Errors =====
    @app.exception_handler(UserInputError)
    async def _user_input(_: Request, exc: UserInputError):
        return JSONResponse({"ok": False, "error": str(exc)}, status_code=400)

    @app.exception_handler(DownloadError)
    async def _download(_: Request, exc: DownloadError):
        status = 404 if exc.missing_url else 502
        return JSONResponse({"ok": False, "error": str(exc)}, status_code=status)

    @app.exception_handler(ExportError)
    async def _export(_: Request, exc: ExportError):
        log.error("export failed: %s", exc)
        return JSONResponse({"ok": False, "error": f"Export failed: {exc}"}, status_code=500)

    @app.get("/")
    def root():
        s = app.state.services
        return {
            "ok": True,
            "msg": "GeneLinker running",
            "llm_configured": s.llm.config.is_configured,
            "search_configured": s.search_config.is_configured,
            "tour_completed": s.prefs.tour_completed,
        }

    return app
