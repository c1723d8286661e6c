# themesmith/utils/theme_loader.py
"""
Utility for loading and caching theme configurations.
"""
import copy
import functools
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import ValidationError

from themesmith.exceptions import ConfigurationError
from themesmith.schemas.settings import get_settings
from themesmith.schemas.theme import ThemeConfig
from themesmith.utils.logger import setup_logger

logger = setup_logger(__name__)

DEFAULT_THEME_NAME = "default"

# The static default the editor starts from when no theme file is given.
DEFAULT_THEME = ThemeConfig(
    colors={
        "primary": {"25": "#cdd3d6", "50": "#243d48", "75": "#1b2d36"},
        "secondary": {"25": "#bfe1ec", "50": "#0086b2", "75": "#006485"},
        "success": {"25": "#ecfdf5", "50": "#10b981", "75": "#065f46"},
        "warning": {"25": "#fffbeb", "50": "#f59e0b", "75": "#92400e"},
        "error": {"25": "#fef2f2", "50": "#ef4444", "75": "#991b1b"},
        "title": {"1": "#000", "2": "#a3a3a3", "3": "#000", "4": "#0e7490"},
    },
    fontSize={
        "button": "1rem",
        "size-title1": "2rem",
        "size-title2": "1.5rem",
        "size-title3": "1.25rem",
        "size-title4": "1.125rem",
    },
    fontWeight={
        "weight-button": "400",
        "weight-title1": "700",
        "weight-title2": "700",
        "weight-title3": "400",
        "weight-title4": "400",
    },
)


def _themes_dir() -> Path:
    return get_settings().themes_dir


def default_theme() -> Dict[str, Any]:
    """Returns a fresh, mutable copy of the built-in default theme."""
    return copy.deepcopy(DEFAULT_THEME.as_fragment())


@functools.cache
def get_theme_config(theme_name: str) -> ThemeConfig:
    """
    Loads, validates, and caches a single theme config from a YAML file.
    Falls back to the default theme if the requested theme is invalid or not found.
    """
    logger.info(f"Loading theme config for: {theme_name}")
    if theme_name == DEFAULT_THEME_NAME:
        return DEFAULT_THEME

    theme_file = _themes_dir() / f"{theme_name}.yaml"
    if not theme_file.is_file():
        logger.warning(f"Theme file not found: '{theme_file}'. Using default.")
        return DEFAULT_THEME

    try:
        with theme_file.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        return ThemeConfig(**data)
    except (yaml.YAMLError, ValidationError, TypeError) as e:
        logger.error(f"Failed to load or validate theme '{theme_name}': {e}. Using default.")
        return DEFAULT_THEME


def load_theme_file(path: Path) -> ThemeConfig:
    """
    Loads a theme from an explicit file path. Unlike `get_theme_config`, a
    broken file is an error: the user asked for exactly this file.
    """
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        return ThemeConfig(**data)
    except OSError as e:
        raise ConfigurationError(f"Cannot read theme file '{path}': {e}") from e
    except (yaml.YAMLError, ValidationError, TypeError) as e:
        raise ConfigurationError(f"Invalid theme file '{path}': {e}") from e


def resolve_theme(name_or_path: Optional[str]) -> Dict[str, Any]:
    """Resolves a CLI-style theme argument (name, file path or None) to a mutable mapping."""
    if not name_or_path:
        return default_theme()
    candidate = Path(name_or_path)
    if candidate.suffix in (".yaml", ".yml") or candidate.is_file():
        return copy.deepcopy(load_theme_file(candidate).as_fragment())
    return copy.deepcopy(get_theme_config(name_or_path).as_fragment())


def list_theme_files() -> List[str]:
    """Returns the available theme names: the built-in default plus YAML file stems."""
    names = {DEFAULT_THEME_NAME}
    themes_dir = _themes_dir()
    if themes_dir.is_dir():
        names.update(p.stem for p in themes_dir.glob("*.yaml"))
    return sorted(names)


def clear_theme_cache() -> None:
    """Clears all cached themes."""
    get_theme_config.cache_clear()
    logger.info("Cleared all theme caches.")
