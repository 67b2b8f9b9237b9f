from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse

from ella_rises.auth.dependencies import SessionUser, require_login
from ella_rises.rendering import render

router = APIRouter(tags=["pages"])

DASHBOARD_LINKS = [
    ("/participants", "Participants"),
    ("/events", "Events"),
    ("/surveys", "Surveys"),
    ("/milestones", "Milestones"),
    ("/donations", "Donations"),
]


@router.get("/")
def landing(request: Request):
    return render(request, "index.html", title="Ella Rises")


@router.get("/dashboard")
def dashboard(request: Request, user: SessionUser = Depends(require_login)):
    links = list(DASHBOARD_LINKS)
    if user.is_manager:
        links.append(("/users", "Users"))
    return render(request, "dashboard.html", title="Dashboard", user=user, links=links)


@router.get("/teapot")
def teapot():
    return PlainTextResponse("I'm a teapot ☕", status_code=418)


@router.get("/healthz")
def healthz():
    return {"status": "ok"}
