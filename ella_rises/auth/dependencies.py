from fastapi import Depends, Request
from pydantic import BaseModel

MANAGER_ROLE = "manager"


class SessionUser(BaseModel):
    """The user object kept in the session after login."""
    id: int
    email: str
    role: str

    @property
    def is_manager(self) -> bool:
        return self.role == MANAGER_ROLE


class LoginRequired(Exception):
    """Raised when a route needs a logged-in user and the session has none."""


class ManagerRequired(Exception):
    """Raised when a route needs the manager role."""


def get_session_user(request: Request) -> SessionUser | None:
    data = request.session.get("user")
    if not data:
        return None
    return SessionUser.model_validate(data)


def require_login(user: SessionUser | None = Depends(get_session_user)) -> SessionUser:
    if user is None:
        raise LoginRequired()
    return user


def require_manager(user: SessionUser | None = Depends(get_session_user)) -> SessionUser:
    if user is None or not user.is_manager:
        raise ManagerRequired()
    return user
