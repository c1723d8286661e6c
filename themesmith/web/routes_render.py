# themesmith/web/routes_render.py
"""
The rendering route: markup plus a theme fragment in, generated CSS out.
"""
import functools

from fastapi import APIRouter, Depends
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import PlainTextResponse

from themesmith.exceptions import PipelineError, ThemesmithError
from themesmith.pipeline.tailwind import TailwindPipeline
from themesmith.schemas.render import RenderRequest
from themesmith.utils.logger import setup_logger

router = APIRouter(tags=["Rendering"])
logger = setup_logger(__name__)


@functools.lru_cache(maxsize=1)
def get_pipeline() -> TailwindPipeline:
    """FastAPI dependency returning the shared, stateless pipeline."""
    return TailwindPipeline()


@router.post("/", response_class=PlainTextResponse)
async def render_stylesheet(
    payload: RenderRequest,
    pipeline: TailwindPipeline = Depends(get_pipeline),
) -> PlainTextResponse:
    """Generates CSS for the posted markup and theme fragment.

    The pipeline runs in the thread pool so one slow render does not stall
    the event loop. Pipeline and validation errors propagate to the
    application's exception handlers, which turn them into 5xx/4xx
    responses.

    :param payload: The markup snapshot and `theme.extend` fragment.
    :type payload: RenderRequest
    :return: The generated stylesheet as `text/css`.
    :rtype: PlainTextResponse
    """
    extend = payload.theme.extend
    logger.info(
        f"Render requested: {len(payload.html)} bytes of markup, "
        f"{len(extend)} theme categories."
    )
    try:
        css = await run_in_threadpool(pipeline.render_stylesheet, payload.html, extend)
    except ThemesmithError:
        raise
    except Exception as e:
        logger.exception("Unexpected failure inside the CSS pipeline.")
        raise PipelineError(f"Unexpected pipeline failure: {e}") from e
    return PlainTextResponse(css, media_type="text/css")
