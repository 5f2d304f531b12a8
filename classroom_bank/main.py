import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Callable, Optional

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from classroom_bank import __version__
from classroom_bank.core.config import Settings, get_settings
from classroom_bank.core.container import ApplicationContainer
from classroom_bank.core.log import configure_logging
from classroom_bank.interfaces.http import create_api_router
from classroom_bank.interfaces.ws import routes as websocket_routes

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    clock: Optional[Callable[[], datetime]] = None,
) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings)
    container = ApplicationContainer.build(settings, clock)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await container.startup()
        logger.info("%s %s started", settings.project_name, __version__)
        try:
            yield
        finally:
            await container.shutdown()

    app = FastAPI(
        title=settings.project_name,
        description="Classroom banking simulation backend",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.container = container

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": jsonable_encoder(exc.errors())},
        )

    app.include_router(create_api_router())
    app.include_router(websocket_routes.router)
    return app


def run() -> None:
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "classroom_bank.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=settings.server.reload,
    )


if __name__ == "__main__":
    run()
