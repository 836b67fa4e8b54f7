from importlib import metadata

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import UJSONResponse

from blacklist_check.log import configure_logging
from blacklist_check.web.api.router import api_router
from blacklist_check.web.lifespan import lifespan_setup


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError,
) -> UJSONResponse:
    """Answer malformed check requests with 400 and a readable message."""
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        messages.append(f"{location}: {error.get('msg')}" if location else error.get("msg"))
    return UJSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "; ".join(messages)},
    )


def get_app() -> FastAPI:
    """
    Get FastAPI application.

    This is the main constructor of an application.

    :return: application.
    """
    configure_logging()
    try:
        version = metadata.version("blacklist_check")
    except Exception:
        version = "0.1.0"  # Fallback version for development

    app = FastAPI(
        title="blacklist_check",
        version=version,
        lifespan=lifespan_setup,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
        default_response_class=UJSONResponse,
    )

    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    # Main router for the API.
    app.include_router(router=api_router, prefix="/api")

    return app
