# themesmith/web/__init__.py
"""
Aggregates the individual router objects from the `routes_*` modules into a
single `APIRouter`, so the application in `serve.py` can include every
endpoint with one line.
"""

from fastapi import APIRouter

from themesmith.web.routes_render import router as render_router
from themesmith.web.routes_themes import router as themes_router

router = APIRouter()

router.include_router(render_router)
router.include_router(themes_router)
