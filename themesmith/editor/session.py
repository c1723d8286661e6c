# themesmith/editor/session.py
"""
The live theme editor.

A `ThemeEditor` ties together the observable theme, its fields, the preview
page and the render client. Every mutation of the theme schedules a render
of the whole configuration. Renders are numbered; only the response of the
most recently scheduled render may write the page's stylesheet, and with
`cancel_superseded` enabled an older in-flight render is cancelled as soon as
a newer one starts. A failed render leaves the last applied stylesheet in
place and is recorded in `last_error`.
"""
from __future__ import annotations

import asyncio
import enum
from typing import Any, Callable, List, Mapping, Optional

from themesmith.editor.client import RenderClient
from themesmith.editor.fields import FieldSet, ThemeField, build_fields
from themesmith.editor.observable import ObservableTheme, ThemeChange
from themesmith.editor.page import PreviewPage
from themesmith.exceptions import EditorStateError, RenderRequestError
from themesmith.schemas.settings import Settings, get_settings
from themesmith.utils.logger import setup_logger
from themesmith.utils.theme_loader import default_theme

logger = setup_logger(__name__)

RenderListener = Callable[[int, str], None]


def _running_loop() -> asyncio.AbstractEventLoop:
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        raise EditorStateError(
            "The theme editor renders asynchronously; edit it from inside a running event loop."
        ) from None


class EditorState(str, enum.Enum):
    UNINITIALIZED = "uninitialized"
    RENDERING = "rendering"
    RENDERED = "rendered"


class ThemeEditor:
    def __init__(
        self,
        page: PreviewPage,
        client: RenderClient,
        theme: Optional[Mapping[str, Any]] = None,
        *,
        settings: Optional[Settings] = None,
    ):
        settings = settings or get_settings()
        self.page = page
        self.client = client
        self.theme = ObservableTheme(theme if theme is not None else default_theme())
        self.fields: FieldSet = build_fields(
            self.theme,
            font_size_unit=settings.font_size_unit,
            weight_policy=settings.weight_policy,
        )
        self.cancel_superseded = settings.cancel_superseded

        self.state = EditorState.UNINITIALIZED
        self.last_error: Optional[Exception] = None
        self._generation = 0
        self._applied_generation = 0
        self._pending: Optional[asyncio.Task] = None
        self._tasks: set = set()
        self._unsubscribe: Optional[Callable[[], None]] = None
        self._render_listeners: List[RenderListener] = []

    # ------------------------- Lifecycle --------------------

    async def start(self) -> bool:
        """Subscribes to theme mutations and performs the initial render."""
        if self._unsubscribe is None:
            self._unsubscribe = self.theme.subscribe(self._on_change)
        logger.info(f"Theme editor started with {len(self.fields)} fields.")
        return await self.refresh()

    async def close(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        for task in list(self._tasks):
            task.cancel()
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)
        await self.client.aclose()

    # ------------------------- Rendering --------------------

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def applied_generation(self) -> int:
        return self._applied_generation

    @property
    def pending_render(self) -> Optional[asyncio.Task]:
        """The task of the most recently scheduled render, if any."""
        return self._pending

    def on_render(self, listener: RenderListener) -> None:
        """Registers a callback invoked with `(generation, css)` after each applied render."""
        self._render_listeners.append(listener)

    def _on_change(self, change: ThemeChange) -> None:
        logger.debug(f"Theme changed at '{change.dotted}': {change.old!r} -> {change.new!r}")
        self.schedule_render()

    def schedule_render(self) -> asyncio.Task:
        """Starts a render of the current theme and page; returns its task.

        :raises EditorStateError: If no event loop is running.
        """
        loop = _running_loop()
        self._generation += 1
        generation = self._generation
        previous = self._pending
        if self.cancel_superseded and previous is not None and not previous.done():
            logger.debug(f"Cancelling superseded render #{generation - 1}.")
            previous.cancel()

        markup = self.page.body_markup()
        snapshot = self.theme.snapshot()
        task = loop.create_task(self._render(generation, markup, snapshot))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        self._pending = task
        self.state = EditorState.RENDERING
        return task

    async def refresh(self) -> bool:
        """Renders the current theme and waits for that render to finish."""
        task = self.schedule_render()
        (outcome,) = await asyncio.gather(task, return_exceptions=True)
        if isinstance(outcome, asyncio.CancelledError):
            # Superseded by a newer render while waiting.
            return False
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    async def wait_idle(self) -> None:
        """Waits until the most recently scheduled render has finished."""
        while self._pending is not None and not self._pending.done():
            await asyncio.gather(self._pending, return_exceptions=True)

    async def _render(self, generation: int, markup: str, snapshot: Mapping[str, Any]) -> bool:
        try:
            css = await self.client.render(markup, snapshot)
        except RenderRequestError as e:
            logger.warning(f"Render #{generation} failed; keeping the current stylesheet: {e}")
            if generation == self._generation:
                self.last_error = e
                self._settle()
            return False
        except Exception as e:
            logger.exception(f"Render #{generation} failed unexpectedly; keeping the current stylesheet.")
            if generation == self._generation:
                self.last_error = e
                self._settle()
            return False

        if generation != self._generation:
            logger.info(
                f"Discarding stale render #{generation}; render #{self._generation} is newer."
            )
            return False

        self.page.apply_stylesheet(css)
        self._applied_generation = generation
        self.last_error = None
        self.state = EditorState.RENDERED
        logger.info(f"Applied render #{generation} ({len(css)} bytes of CSS).")
        for listener in list(self._render_listeners):
            try:
                listener(generation, css)
            except Exception:
                logger.exception("Render listener failed.")
        return True

    def _settle(self) -> None:
        self.state = (
            EditorState.RENDERED if self._applied_generation else EditorState.UNINITIALIZED
        )

    # ------------------------- Input ------------------------

    def field(self, key: str) -> ThemeField:
        return self.fields[key]

    def input(self, key: str, raw: str) -> bool:
        """Feeds an intermediate input to a field (renders only for commit-on-input fields)."""
        _running_loop()
        return self.fields[key].input(raw)

    def commit(self, key: str, raw: Optional[str] = None) -> bool:
        """Commits a value to a field; a changed value triggers a render."""
        _running_loop()
        return self.fields[key].commit(raw)
