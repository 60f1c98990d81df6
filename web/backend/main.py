from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from music_tagger import __version__
from music_tagger.core.config import TaggerConfig
from music_tagger.core.errors import TaggerError


async def tagger_error_handler(request: Request, exc: TaggerError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
    else:
        logger.warning(f"{request.method} {request.url.path} -> {exc.status_code}: {exc}")
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc)})


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    details = "; ".join(
        f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg')}"
        for err in exc.errors()
    )
    logger.warning(f"{request.method} {request.url.path} rejected: {details}")
    return JSONResponse(
        status_code=400, content={"error": f"Missing or invalid fields: {details}"}
    )


def create_app(config: TaggerConfig) -> FastAPI:
    """Build the API around a configuration loaded once at startup."""
    app = FastAPI(title="Music Tagger API", version=__version__)
    app.state.config = config

    if config.allowed_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=list(config.allowed_origins),
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.add_exception_handler(TaggerError, tagger_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)

    # Include routers
    from web.backend.routers import files, play, tags

    app.include_router(files.router, prefix="/api", tags=["files"])
    app.include_router(tags.router, prefix="/api", tags=["tags"])
    app.include_router(play.router, prefix="/api", tags=["play"])

    @app.get("/health")
    async def health_check():
        return {"status": "healthy"}

    return app
