# themesmith/pipeline/tailwind.py
"""
Runs the Tailwind CSS CLI for a single markup snapshot and theme fragment.

The generator itself is the Tailwind standalone CLI, located (and downloaded
on first use) by `pytailwindcss`. This module only prepares its inputs: a
config file that scopes content scanning to the supplied markup and merges
the fragment into `theme.extend`, and the baseline stylesheet whose three
imports force base, component and utility output.
"""
import json
import subprocess
import tempfile
import time
from numbers import Number
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import pytailwindcss
from pytailwindcss.exceptions import PyTailwindCssException

from themesmith.exceptions import PipelineError, ThemeValidationError
from themesmith.schemas.settings import Settings, get_settings
from themesmith.utils.logger import setup_logger

logger = setup_logger(__name__)

BASELINE_CSS = """
@import 'tailwindcss/base';
@import 'tailwindcss/components';
@import 'tailwindcss/utilities';
"""

CONFIG_FILENAME = "tailwind.config.js"
INPUT_FILENAME = "input.css"


def _check_leaf(path: str, value: Any) -> None:
    if isinstance(value, Mapping):
        for key, child in value.items():
            if not isinstance(key, str):
                raise ThemeValidationError(f"Theme key at '{path}' must be a string, got {key!r}.")
            _check_leaf(f"{path}.{key}" if path else key, child)
        return
    if isinstance(value, list):
        for idx, item in enumerate(value):
            _check_leaf(f"{path}[{idx}]", item)
        return
    # bool is a Number subclass; Tailwind has no use for either True or None.
    if isinstance(value, bool) or value is None:
        raise ThemeValidationError(f"Theme value at '{path}' must not be {value!r}.")
    if not isinstance(value, (str, Number)):
        raise ThemeValidationError(
            f"Theme value at '{path}' has unsupported type {type(value).__name__}."
        )


def validate_theme_fragment(fragment: Any) -> Dict[str, Any]:
    """Checks that a theme fragment only holds mappings, lists, strings and numbers.

    :param fragment: The `extend` layer received from the client.
    :return: The same fragment, typed as a dict.
    :raises ThemeValidationError: If the fragment has an unusable shape.
    """
    if not isinstance(fragment, Mapping):
        raise ThemeValidationError("Theme fragment must be a mapping of categories.")
    for category, entries in fragment.items():
        if not isinstance(entries, Mapping):
            raise ThemeValidationError(
                f"Theme category '{category}' must be a mapping, got {type(entries).__name__}."
            )
    _check_leaf("", fragment)
    return dict(fragment)


def build_tailwind_config(markup: str, theme_fragment: Mapping[str, Any]) -> Dict[str, Any]:
    """Builds the generator configuration for one render."""
    return {
        "content": [{"raw": markup, "extension": "html"}],
        "theme": {"extend": dict(theme_fragment)},
    }


def config_module_source(config: Mapping[str, Any]) -> str:
    """Serializes a config mapping as a CommonJS module.

    JSON with ASCII escaping is a valid JavaScript object literal, so any
    markup embedded in `content.raw` is safely quoted.
    """
    return f"module.exports = {json.dumps(config, indent=2, ensure_ascii=True)};\n"


class TailwindPipeline:
    """Stateless wrapper that turns markup plus a theme fragment into CSS."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()

    def _cli_args(self, workdir: Path) -> List[str]:
        args = [
            "--input",
            str(workdir / INPUT_FILENAME),
            "--config",
            str(workdir / CONFIG_FILENAME),
        ]
        if self.settings.minify:
            args.append("--minify")
        return args

    def render_stylesheet(self, markup: str, theme_fragment: Mapping[str, Any]) -> str:
        """Generates the stylesheet for `markup` with `theme_fragment` merged as `extend`.

        :param markup: Raw HTML; the only content source the generator scans.
        :param theme_fragment: ThemeConfiguration fragment for the extend layer.
        :return: The CSS the generator printed, with surrounding whitespace stripped.
        :raises ThemeValidationError: If the fragment has an unusable shape.
        :raises PipelineError: If the generator cannot run or exits non-zero.
        """
        fragment = validate_theme_fragment(theme_fragment)
        config = build_tailwind_config(markup, fragment)

        with tempfile.TemporaryDirectory(prefix="themesmith-") as tmp:
            workdir = Path(tmp)
            (workdir / CONFIG_FILENAME).write_text(config_module_source(config), encoding="utf-8")
            (workdir / INPUT_FILENAME).write_text(BASELINE_CSS, encoding="utf-8")

            started = time.monotonic()
            logger.debug(
                "Running Tailwind CLI.",
                extra={"markup_bytes": len(markup), "categories": sorted(fragment)},
            )
            try:
                css = pytailwindcss.run(
                    self._cli_args(workdir),
                    bin_path=self.settings.tailwind_bin_path,
                    version=self.settings.tailwind_version,
                    auto_install=True,
                )
            except subprocess.CalledProcessError as e:
                stderr = e.stderr.decode("utf-8", "replace") if isinstance(e.stderr, bytes) else e.stderr
                logger.error(f"Tailwind CLI exited with status {e.returncode}.")
                raise PipelineError(
                    f"Tailwind CLI exited with status {e.returncode}.",
                    returncode=e.returncode,
                    stderr=stderr,
                ) from e
            except PyTailwindCssException as e:
                logger.error(f"Tailwind CLI is unavailable: {e}")
                raise PipelineError(f"Tailwind CLI is unavailable: {e}") from e
            except OSError as e:
                logger.error(f"Tailwind CLI could not be started: {e}")
                raise PipelineError(f"Tailwind CLI could not be started: {e}") from e

        if isinstance(css, bytes):
            try:
                css = css.decode("utf-8")
            except UnicodeDecodeError as e:
                raise PipelineError(f"Tailwind CLI produced undecodable output: {e}") from e
        if not isinstance(css, str):
            raise PipelineError("Tailwind CLI produced no output.")

        elapsed_ms = int((time.monotonic() - started) * 1000)
        logger.info(f"Generated {len(css)} bytes of CSS in {elapsed_ms} ms.")
        return css
