import asyncio
import logging
from contextlib import suppress
from datetime import timedelta

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse, RedirectResponse
from sqlalchemy.exc import SQLAlchemyError

from ella_rises import repositories
from ella_rises.auth.dependencies import LoginRequired, ManagerRequired, require_manager
from ella_rises.auth.middleware import DatabaseSessionMiddleware, SecurityHeadersMiddleware
from ella_rises.auth.session_store import SessionStore, purge_expired_periodically
from ella_rises.core.config import Settings, load_settings, validate_runtime_config
from ella_rises.database import build_engine, build_session_factory, ensure_schema
from ella_rises.routes import auth_routes, page_routes, participant_routes
from ella_rises.routes.resource_routes import build_resource_router

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or load_settings()
    validate_runtime_config(settings)

    engine = build_engine(settings.database_url)
    session_factory = build_session_factory(engine)
    session_store = SessionStore(session_factory, ttl=timedelta(hours=settings.session_max_age_hours))

    app = FastAPI(title="Ella Rises")
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = session_factory
    app.state.session_store = session_store

    app.add_middleware(DatabaseSessionMiddleware, store=session_store, settings=settings)
    app.add_middleware(SecurityHeadersMiddleware)

    @app.on_event('startup')
    def initialize_database() -> None:
        try:
            ensure_schema(engine)
            session_store.clear_expired()
        except SQLAlchemyError:
            logger.exception('Database initialization failed. Check DB_* settings and Postgres credentials.')

    @app.on_event('startup')
    async def start_session_purge() -> None:
        app.state.session_purge_task = asyncio.create_task(
            purge_expired_periodically(session_store, settings.session_purge_interval_seconds)
        )

    @app.on_event('shutdown')
    async def stop_session_purge() -> None:
        task = app.state.session_purge_task
        task.cancel()
        with suppress(asyncio.CancelledError):
            await task

    @app.exception_handler(LoginRequired)
    async def redirect_to_login(request: Request, exc: LoginRequired):
        return RedirectResponse('/login', status_code=302)

    @app.exception_handler(ManagerRequired)
    async def forbidden(request: Request, exc: ManagerRequired):
        return PlainTextResponse('Forbidden', status_code=403)

    app.include_router(page_routes.router)
    app.include_router(auth_routes.router)
    app.include_router(participant_routes.router, prefix='/participants')
    app.include_router(build_resource_router(repositories.events, 'Events'), prefix='/events')
    app.include_router(build_resource_router(repositories.surveys, 'Surveys'), prefix='/surveys')
    app.include_router(build_resource_router(repositories.milestones, 'Milestones'), prefix='/milestones')
    app.include_router(build_resource_router(repositories.donations, 'Donations'), prefix='/donations')
    app.include_router(
        build_resource_router(repositories.users, 'Users', list_guard=require_manager),
        prefix='/users',
    )

    return app


def run() -> None:
    settings = load_settings()
    logging.basicConfig(
        level=settings.log_level,
        format='%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
    )
    uvicorn.run(create_app(settings), host='0.0.0.0', port=settings.port)


if __name__ == '__main__':
    run()
