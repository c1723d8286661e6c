# themesmith/web/routes_themes.py
"""
API routes for fetching theme configurations the editor can start from.
"""
from typing import List

from fastapi import APIRouter, HTTPException

from themesmith.schemas.settings import get_settings
from themesmith.schemas.theme import ThemeConfig
from themesmith.utils.logger import setup_logger
from themesmith.utils.theme_loader import get_theme_config, list_theme_files

router = APIRouter(tags=["Themes"])
logger = setup_logger(__name__)


@router.get("/themes", response_model=List[str])
def get_theme_list():
    """Returns a list of available theme names."""
    return list_theme_files()


@router.get("/themes/{theme_name}", response_model=ThemeConfig)
def get_theme_details(theme_name: str):
    """Returns the configuration for a specific theme."""
    try:
        return get_theme_config(theme_name)
    except Exception as e:
        logger.exception(f"Error fetching details for theme '{theme_name}'.")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/health", tags=["Service"])
def health() -> dict:
    """Liveness probe; reports the pinned Tailwind release."""
    return {"status": "ok", "tailwind_version": get_settings().tailwind_version}
