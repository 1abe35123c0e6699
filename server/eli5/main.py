import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .core.config import get_settings
from .core.errors import ExplainError, SessionStateError
from .routes import casts, explain, sessions

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
    )
    app = FastAPI(title=settings.app_name)

    # The mini-app front end is served from the host's origin.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(ExplainError)
    async def explain_error_handler(request: Request, exc: ExplainError) -> JSONResponse:
        logger.info('%s %s -> %s', request.method, request.url.path, type(exc).__name__)
        return JSONResponse(
            status_code=exc.status_code,
            content={'detail': exc.message, 'kind': type(exc).__name__}
        )

    @app.exception_handler(SessionStateError)
    async def session_state_handler(request: Request, exc: SessionStateError) -> JSONResponse:
        return JSONResponse(status_code=409, content={'detail': str(exc)})

    @app.get('/health')
    async def health():
        return {'status': 'ok'}

    app.include_router(casts.router)
    app.include_router(explain.router)
    app.include_router(sessions.router)
    return app


app = create_app()
