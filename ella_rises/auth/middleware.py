from starlette.concurrency import run_in_threadpool
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from ella_rises.auth import session_token
from ella_rises.auth.session_store import ServerSession, SessionStore, new_session_id
from ella_rises.core.config import Settings

SECURITY_HEADERS = {
    "X-Frame-Options": "DENY",
    "X-Content-Type-Options": "nosniff",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Content-Security-Policy": "default-src 'self'; base-uri 'self'; form-action 'self'",
}


class DatabaseSessionMiddleware(BaseHTTPMiddleware):
    """Restores ``request.session`` from the signed cookie and persists it afterwards."""

    def __init__(self, app, store: SessionStore, settings: Settings):
        super().__init__(app)
        self.store = store
        self.settings = settings

    async def dispatch(self, request: Request, call_next):
        session = await self._restore(request)
        request.scope["session"] = session

        response = await call_next(request)

        if session.destroyed:
            if session.sid:
                await run_in_threadpool(self.store.destroy, session.sid)
            response.delete_cookie(self.settings.session_cookie_name, path="/")
        elif session.modified and session:
            if session.previous_sid:
                await run_in_threadpool(self.store.destroy, session.previous_sid)
            if session.sid is None:
                session.sid = new_session_id()
            await run_in_threadpool(self.store.save, session.sid, dict(session))
            response.set_cookie(
                self.settings.session_cookie_name,
                session_token.create_session_token(
                    session.sid,
                    self.settings.session_secret,
                    self.settings.session_max_age_hours,
                ),
                max_age=self.settings.session_max_age_seconds,
                path="/",
                httponly=True,
                secure=self.settings.cookie_secure,
                samesite="lax",
            )
        return response

    async def _restore(self, request: Request) -> ServerSession:
        token = request.cookies.get(self.settings.session_cookie_name)
        if not token:
            return ServerSession()
        sid = session_token.decode_session_token(token, self.settings.session_secret)
        if sid is None:
            return ServerSession()
        data = await run_in_threadpool(self.store.load, sid)
        if data is None:
            return ServerSession()
        return ServerSession(data, sid=sid)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        return response
