from __future__ import annotations

import logging
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse, RedirectResponse, Response

from personalcrm.routes import contacts, dashboard, health, reminders
from personalcrm.store import CrmStore

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, PATCH, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
    "Access-Control-Max-Age": "86400",
}


def create_app(db_path: Path | None = None) -> FastAPI:
    app = FastAPI(title="Personal CRM")
    app.state.store = CrmStore(db_path)

    @app.middleware("http")
    async def preflight_and_errors(request: Request, call_next):
        try:
            if request.method == "OPTIONS":
                return Response(headers=CORS_HEADERS)
            return await call_next(request)
        except Exception:
            logger.exception("Unhandled error on %s %s", request.method, request.url.path)
            return PlainTextResponse("Internal Error", status_code=500)

    app.include_router(health.router)
    app.include_router(contacts.router)
    app.include_router(reminders.router)
    app.include_router(dashboard.router)

    @app.get("/")
    async def index(request: Request):
        return RedirectResponse(url="/dashboard", status_code=302)

    return app
