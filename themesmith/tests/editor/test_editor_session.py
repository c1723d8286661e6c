# themesmith/tests/editor/test_editor_session.py
"""
Tests for the live editor session: render scheduling, stale-response
discarding, cancellation and last-known-good behavior.
"""
import asyncio
import copy

import pytest

from themesmith.editor.page import PreviewPage
from themesmith.editor.session import EditorState, ThemeEditor
from themesmith.exceptions import EditorStateError, RenderRequestError
from themesmith.schemas.settings import Settings

PAGE = '<html><head></head><body><button class="bg-primary-50">X</button></body></html>'


class FakeRenderClient:
    """Answers `/* css N */` for the N-th call; calls can be held or failed."""

    def __init__(self):
        self.calls = []
        self.gates = {}
        self.failures = set()
        self.crashes = set()
        self.closed = False

    def hold(self, call_number: int) -> asyncio.Event:
        gate = asyncio.Event()
        self.gates[call_number] = gate
        return gate

    async def render(self, markup, theme):
        self.calls.append((markup, copy.deepcopy(theme)))
        number = len(self.calls)
        gate = self.gates.get(number)
        if gate is not None:
            await gate.wait()
        if number in self.crashes:
            raise RuntimeError("client blew up")
        if number in self.failures:
            raise RenderRequestError("render service answered with status 500.", status_code=500)
        return f"/* css {number} */"

    async def aclose(self):
        self.closed = True


def _editor(client, **settings):
    return ThemeEditor(PreviewPage(PAGE), client, settings=Settings(**settings))


@pytest.mark.asyncio
async def test_start_performs_initial_render():
    client = FakeRenderClient()
    editor = _editor(client)
    assert editor.state is EditorState.UNINITIALIZED

    assert await editor.start() is True
    assert editor.state is EditorState.RENDERED
    assert editor.page.stylesheet() == "/* css 1 */"
    markup, theme = client.calls[0]
    assert markup == '<button class="bg-primary-50">X</button>'
    assert theme["colors"]["primary"]["50"] == "#243d48"
    await editor.close()
    assert client.closed


@pytest.mark.asyncio
async def test_mutation_renders_whole_configuration():
    client = FakeRenderClient()
    editor = _editor(client)
    await editor.start()

    assert editor.commit("colors.primary.50", "#000000") is True
    assert editor.state is EditorState.RENDERING
    await editor.wait_idle()

    assert editor.state is EditorState.RENDERED
    assert len(client.calls) == 2
    _, theme = client.calls[1]
    assert theme == editor.theme.snapshot()
    assert theme["colors"]["primary"]["50"] == "#000000"
    assert theme["fontSize"]["button"] == "1rem"
    assert editor.page.stylesheet() == "/* css 2 */"
    await editor.close()


@pytest.mark.asyncio
async def test_staged_input_does_not_render_but_weight_input_does():
    client = FakeRenderClient()
    editor = _editor(client)
    await editor.start()

    editor.input("colors.secondary.50", "#123456")
    editor.input("fontSize.button", "2")
    assert editor.pending_render.done()
    assert len(client.calls) == 1

    editor.input("fontWeight.weight-button", "500")
    await editor.wait_idle()
    assert len(client.calls) == 2
    assert client.calls[1][1]["fontWeight"]["weight-button"] == "500"
    await editor.close()


@pytest.mark.asyncio
async def test_unchanged_commit_does_not_render():
    client = FakeRenderClient()
    editor = _editor(client)
    await editor.start()
    assert editor.commit("fontSize.size-title3", "1.25") is False
    assert len(client.calls) == 1
    await editor.close()


@pytest.mark.asyncio
async def test_single_stylesheet_after_many_renders():
    client = FakeRenderClient()
    editor = _editor(client)
    await editor.start()
    for weight in ("100", "200", "300", "400", "500"):
        editor.commit("fontWeight.weight-title2", weight)
        await editor.wait_idle()

    assert editor.page.stylesheet_count() == 1
    assert editor.page.stylesheet() == f"/* css {len(client.calls)} */"
    assert editor.applied_generation == 6
    await editor.close()


@pytest.mark.asyncio
async def test_stale_response_is_discarded():
    """Without cancellation, an older response arriving last must not win."""
    client = FakeRenderClient()
    editor = _editor(client, cancel_superseded=False)
    await editor.start()

    gate = client.hold(2)
    editor.commit("colors.primary.50", "#111111")
    slow = editor.pending_render
    editor.commit("colors.primary.50", "#222222")
    await editor.wait_idle()
    assert editor.page.stylesheet() == "/* css 3 */"

    gate.set()
    assert await slow is False
    assert editor.page.stylesheet() == "/* css 3 */"
    assert editor.applied_generation == 3
    await editor.close()


@pytest.mark.asyncio
async def test_superseded_render_is_cancelled():
    client = FakeRenderClient()
    editor = _editor(client)
    await editor.start()

    client.hold(2)
    editor.commit("colors.primary.50", "#111111")
    slow = editor.pending_render
    # Let the first render reach the service before superseding it.
    await asyncio.sleep(0)
    assert len(client.calls) == 2
    editor.commit("colors.primary.50", "#222222")
    await editor.wait_idle()
    await asyncio.gather(slow, return_exceptions=True)

    assert slow.cancelled()
    assert editor.page.stylesheet() == "/* css 3 */"
    await editor.close()


@pytest.mark.asyncio
async def test_failed_render_keeps_last_known_good():
    client = FakeRenderClient()
    client.failures.add(2)
    editor = _editor(client)
    await editor.start()

    editor.commit("colors.error.50", "#ff0000")
    await editor.wait_idle()

    assert editor.page.stylesheet() == "/* css 1 */"
    assert isinstance(editor.last_error, RenderRequestError)
    assert editor.state is EditorState.RENDERED

    editor.commit("colors.error.50", "#ee0000")
    await editor.wait_idle()
    assert editor.page.stylesheet() == "/* css 3 */"
    assert editor.last_error is None
    await editor.close()


@pytest.mark.asyncio
async def test_failed_initial_render_leaves_page_unstyled():
    client = FakeRenderClient()
    client.failures.add(1)
    editor = _editor(client)

    assert await editor.start() is False
    assert editor.state is EditorState.UNINITIALIZED
    assert editor.page.stylesheet() is None
    assert editor.last_error is not None
    await editor.close()


@pytest.mark.asyncio
async def test_render_listeners_receive_applied_css():
    client = FakeRenderClient()
    editor = _editor(client)
    applied = []
    editor.on_render(lambda generation, css: applied.append((generation, css)))
    await editor.start()
    editor.commit("fontSize.button", "1.5")
    await editor.wait_idle()
    assert applied == [(1, "/* css 1 */"), (2, "/* css 2 */")]
    await editor.close()


@pytest.mark.asyncio
async def test_close_stops_observing():
    client = FakeRenderClient()
    editor = _editor(client)
    await editor.start()
    await editor.close()
    editor.theme.set("colors.primary.25", "#ffffff")
    assert len(client.calls) == 1


@pytest.mark.asyncio
async def test_unexpected_client_error_settles_state():
    client = FakeRenderClient()
    client.crashes.add(2)
    editor = _editor(client)
    await editor.start()

    editor.commit("colors.primary.75", "#101010")
    await editor.wait_idle()

    assert editor.state is EditorState.RENDERED
    assert isinstance(editor.last_error, RuntimeError)
    assert editor.page.stylesheet() == "/* css 1 */"
    assert editor.pending_render.result() is False
    await editor.close()


def test_edits_without_running_loop_are_refused():
    client = FakeRenderClient()
    editor = _editor(client)

    with pytest.raises(EditorStateError):
        editor.commit("colors.primary.50", "#000000")
    with pytest.raises(EditorStateError):
        editor.input("fontWeight.weight-button", "500")

    assert editor.theme.get("colors.primary.50") == "#243d48"
    assert editor.theme.get("fontWeight.weight-button") == "400"
    assert editor.generation == 0
    assert editor.pending_render is None
    assert client.calls == []
