# themesmith/serve.py
"""
Launches the FastAPI rendering service.

This module builds the FastAPI application, wires CORS, the render id
middleware and the exception handlers that map themesmith errors to HTTP
statuses, and registers the routes from `themesmith.web`. It is the entry
point for running the service, directly or through `themesmith serve`.
"""
import logging
import uuid

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from themesmith.exceptions import ThemesmithError, ThemeValidationError
from themesmith.schemas.settings import get_settings
from themesmith.utils.log_sinks import render_id_context
from themesmith.utils.logger import setup_logger
from themesmith.web import router as api_router

load_dotenv()
logger = setup_logger(__name__)

RENDER_ID_HEADER = "X-Render-Id"


def create_app() -> FastAPI:
    """Builds the rendering service application from the current settings."""
    settings = get_settings()
    application = FastAPI(
        title="themesmith",
        description="Renders Tailwind CSS for a markup snapshot and a theme fragment.",
        version="1.0.0",
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[RENDER_ID_HEADER],
    )

    @application.middleware("http")
    async def bind_render_id(request: Request, call_next):
        """Tags every log record of this request with a fresh render id."""
        render_id = str(uuid.uuid4())
        token = render_id_context.set(render_id)
        try:
            response = await call_next(request)
        finally:
            render_id_context.reset(token)
        response.headers[RENDER_ID_HEADER] = render_id
        return response

    @application.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        """Non-JSON bodies are malformed (400); well-formed JSON of the wrong shape is 422."""
        errors = exc.errors()
        if any(err.get("type") == "json_invalid" for err in errors):
            logger.warning("Rejected a render request with a malformed JSON body.")
            return JSONResponse(
                status_code=400,
                content={"error_type": "MalformedRequest", "message": "Request body is not valid JSON."},
            )
        logger.warning(f"Rejected a request that failed validation: {len(errors)} error(s).")
        return JSONResponse(
            status_code=422,
            content={
                "error_type": "RequestValidationError",
                "message": "Request body does not match the expected schema.",
                "detail": jsonable_errors(errors),
            },
        )

    @application.exception_handler(ThemeValidationError)
    async def theme_validation_handler(request: Request, exc: ThemeValidationError):
        logger.warning(f"Rejected theme fragment: {exc}")
        return JSONResponse(
            status_code=422,
            content={"error_type": exc.__class__.__name__, "message": str(exc)},
        )

    @application.exception_handler(ThemesmithError)
    async def themesmith_exception_handler(request: Request, exc: ThemesmithError):
        """Handles all other application errors and returns a structured JSON response."""
        logger.error(f"Caught a ThemesmithError: {exc.__class__.__name__}: {exc}")
        content = {"error_type": exc.__class__.__name__, "message": str(exc)}
        stderr = getattr(exc, "stderr", None)
        if stderr:
            content["stderr"] = stderr
        return JSONResponse(status_code=500, content=content)

    @application.on_event("startup")
    def on_startup():
        logger.info("--- themesmith rendering service startup ---")
        logger.info(f"Tailwind CLI release: {settings.tailwind_version}")
        logger.info(f"CORS origins: {settings.cors_origins}")

    application.include_router(api_router)
    return application


def jsonable_errors(errors) -> list:
    """Drops non-serializable context (e.g. exception objects) from validation errors."""
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
        for err in errors
    ]


app = create_app()


def run_server() -> None:
    """Runs the service with uvicorn using the current settings."""
    settings = get_settings()
    log_level_str = settings.log_level.lower()
    numeric_log_level = getattr(logging, log_level_str.upper(), logging.INFO)
    logging.getLogger().setLevel(numeric_log_level)

    logger.info(f"Tailwind as a service listening on http://{settings.host}:{settings.port}")
    uvicorn.run(
        "themesmith.serve:app",
        host=settings.host,
        port=settings.port,
        log_level=log_level_str,
        reload=settings.reload,
    )


if __name__ == "__main__":
    run_server()
