"""
tutorial_hub/main.py
──────────────────────────────────────────────────────────────────────────────
FastAPI app: public reading API plus the admin import/delete endpoints.
"""

from __future__ import annotations

import logging
import sqlite3
import time

from fastapi import Depends, FastAPI, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from . import config
from .db import TutorialStore
from .errors import InvalidUrl, NotFound, TutorialError
from .importer import import_tutorial
from .models import ChapteredTutorial
from .scraper.markdown import render_html

log = logging.getLogger(__name__)

app = FastAPI(title="Tutorial Hub")

STORE: TutorialStore | None = None


def get_store() -> TutorialStore:
    global STORE
    if STORE is None:
        STORE = TutorialStore(config.DB_PATH, timeout=config.DB_TIMEOUT)
        STORE.init_schema()
    return STORE


@app.on_event("startup")
def _startup():
    logging.basicConfig(
        level=logging.DEBUG if config.DEBUG else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    store = get_store()
    log.info("Tutorial database ready at %s", store.path)


@app.exception_handler(TutorialError)
async def _tutorial_error(request, exc: TutorialError):
    if exc.status_code >= 500:
        log.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse({"error": exc.message}, status_code=exc.status_code)


# ─── Schemas ───────────────────────────────────────────────────────────
class AddTutorial(BaseModel):
    github_url: str | None = None


class Login(BaseModel):
    email: str
    password: str


# ─── Public routes ─────────────────────────────────────────────────────
@app.get("/health")
@app.get("/api/health")
def health(store: TutorialStore = Depends(get_store)):
    started = time.perf_counter()
    try:
        with store.connect() as conn:
            conn.execute("SELECT 1")
    except sqlite3.Error as e:
        log.error("Health check failed: %s", e)
        return JSONResponse(
            {"status": "error", "message": "Database connection failed", "error": str(e)},
            status_code=500,
        )
    elapsed = round((time.perf_counter() - started) * 1000)
    return {
        "status": "ok",
        "message": "All systems operational",
        "timing": {"connection_time": f"{elapsed}ms"},
    }


@app.get("/api/tutorials")
def list_tutorials(store: TutorialStore = Depends(get_store)):
    try:
        tutorials = store.list_summaries()
    except sqlite3.OperationalError as e:
        if "locked" not in str(e):
            raise
        log.warning("Database busy, serving an empty tutorial list: %s", e)
        tutorials = []
    return {"tutorials": tutorials}


@app.get("/api/tutorials/{tutorial_id}")
def get_tutorial(tutorial_id: str, store: TutorialStore = Depends(get_store)):
    return {"tutorial": store.get(tutorial_id)}


@app.get("/api/tutorials/{tutorial_id}/chapters/{number}")
def get_chapter(tutorial_id: str, number: int, store: TutorialStore = Depends(get_store)):
    tutorial = store.get(tutorial_id)
    if not isinstance(tutorial, ChapteredTutorial):
        raise NotFound("This tutorial does not have chapters")
    chapter = tutorial.chapter(number)
    if chapter is None:
        raise NotFound("Chapter not found")

    def ref(order: int):
        ch = tutorial.chapter(order)
        return {"order": ch.order, "title": ch.title} if ch else None

    return {
        "tutorial": {
            "id": tutorial.id,
            "title": tutorial.title,
            "total_chapters": tutorial.total_chapters,
        },
        "chapter": {**chapter.model_dump(), "html": render_html(chapter.content)},
        "previous": ref(number - 1),
        "next": ref(number + 1),
    }


# ─── Admin routes ──────────────────────────────────────────────────────
@app.post("/api/admin/login")
def login(body: Login):
    if body.email != config.ADMIN_EMAIL or body.password != config.ADMIN_PASSWORD:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    return {"authenticated": True}


@app.post("/api/admin/add")
def add_tutorial(body: AddTutorial, store: TutorialStore = Depends(get_store)):
    if not body.github_url:
        raise InvalidUrl("GitHub URL is required")
    try:
        return import_tutorial(store, body.github_url.strip())
    except TutorialError as e:
        log.warning("Import of %s failed: %s", body.github_url, e.message)
        raise


@app.delete("/api/admin/{tutorial_id}")
def delete_tutorial(tutorial_id: str, store: TutorialStore = Depends(get_store)):
    deleted = store.delete(tutorial_id)
    return {"message": "Tutorial deleted successfully", "deleted_tutorial": deleted}
