from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from dotenv import load_dotenv

logger = logging.getLogger(__name__)


def create_app(store=None, identity_provider=None) -> FastAPI:
    """
    Build the app. Pass a store (e.g. InMemoryDocumentStore) and an identity
    provider to override what the environment configures.
    """
    load_dotenv("local.env")

    from endpoints.checklist_endpoints import router as checklist_router
    from endpoints.identity import HeaderIdentityProvider
    from persistence.repositories import ChecklistRepository
    from settings import build_document_store, get_settings

    settings = get_settings()

    app = FastAPI(title="Shift Checklists")
    app.state.settings = settings
    app.state.repository = ChecklistRepository(
        store if store is not None else build_document_store(settings),
        notification_email=settings.manager_email,
    )
    app.state.identity_provider = identity_provider or HeaderIdentityProvider()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if settings.debug_log_requests:

        @app.middleware("http")
        async def log_requests(request, call_next):
            response = await call_next(request)
            logger.info("%s %s -> %s", request.method, request.url.path, response.status_code)
            return response

    @app.get("/healthz")
    async def healthz():
        repo: ChecklistRepository = app.state.repository
        return JSONResponse({"ok": True, "loaded": repo.authoritative_document is not None})

    app.include_router(checklist_router)

    return app


app = create_app()
