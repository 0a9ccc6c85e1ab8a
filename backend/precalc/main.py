"""FastAPI application entry point."""
from __future__ import annotations
import logging
import os

import uvicorn
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles

from precalc.api import auth, lessons, practice
from precalc.core import config
from precalc.core.logging import configure_logging
from precalc.persistence.db import init_db

configure_logging(config.LOG_LEVEL)
logger = logging.getLogger(__name__)

# ------------------------------------------------------------------
# App creation
# ------------------------------------------------------------------
app = FastAPI(
    title="Precalculus Lessons API",
    description="Lesson content, progress and practice API for the precalculus course",
    version="1.0.0",
)

# CORS: an empty allow-list means every origin is accepted
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ALLOWED_ORIGINS or ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ------------------------------------------------------------------
# Startup: initialise DB schema
# ------------------------------------------------------------------
@app.on_event("startup")
def on_startup():
    init_db()


# ------------------------------------------------------------------
# Routers
# ------------------------------------------------------------------
app.include_router(auth.router)
app.include_router(lessons.router)
app.include_router(practice.router)

# ------------------------------------------------------------------
# Static content: lesson JSON files and the built client
# ------------------------------------------------------------------
if os.path.isdir(config.LESSONS_DIR):
    app.mount("/lessons", StaticFiles(directory=config.LESSONS_DIR), name="lessons")
else:
    logger.warning("Lesson directory %s not found; /lessons is not served", config.LESSONS_DIR)


# Registered LAST so it doesn't shadow the API routes or /lessons.
@app.get("/{full_path:path}", include_in_schema=False)
def serve_client(full_path: str):
    """Built client assets; any other path gets index.html so client-side routes deep-link."""
    dist_dir = os.path.abspath(config.CLIENT_DIST_DIR)
    asset = os.path.abspath(os.path.join(dist_dir, full_path))
    if os.path.commonpath([asset, dist_dir]) == dist_dir and os.path.isfile(asset):
        return FileResponse(asset)

    index_file = os.path.join(dist_dir, "index.html")
    if not os.path.isfile(index_file):
        raise HTTPException(status_code=404, detail="Not Found")
    return FileResponse(index_file)


def run() -> None:
    uvicorn.run("precalc.main:app", host="0.0.0.0", port=config.PORT)


if __name__ == "__main__":  # pragma: no cover
    run()
