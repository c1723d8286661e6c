# themesmith/pipeline/__init__.py
"""The CSS generation pipeline (Tailwind CLI)."""
from themesmith.pipeline.tailwind import TailwindPipeline, validate_theme_fragment

__all__ = ["TailwindPipeline", "validate_theme_fragment"]
