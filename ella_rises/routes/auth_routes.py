import logging

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import RedirectResponse

from ella_rises.auth.dependencies import MANAGER_ROLE, SessionUser
from ella_rises.core.config import Settings, get_settings
from ella_rises.rendering import render

router = APIRouter(tags=["auth"])

logger = logging.getLogger(__name__)


@router.get("/login")
def login_page(request: Request):
    return render(request, "login.html", title="Login", error=False)


@router.post("/login")
def login(
    request: Request,
    email: str = Form(""),
    password: str = Form(""),
    settings: Settings = Depends(get_settings),
):
    # Single configured credential pair; stored users are not consulted yet.
    if email == settings.admin_email and password == settings.admin_password:
        user = SessionUser(id=1, email=email, role=MANAGER_ROLE)
        request.session.regenerate()
        request.session["user"] = user.model_dump()
        logger.info("Login succeeded for %s", email)
        return RedirectResponse("/dashboard", status_code=302)

    logger.info("Login failed for %s", email or "<blank>")
    return render(request, "login.html", title="Login", error=True)


@router.get("/logout")
def logout(request: Request):
    user = request.session.get("user")
    request.session.destroy()
    if user:
        logger.info("Logged out %s", user.get("email"))
    return RedirectResponse("/", status_code=302)
