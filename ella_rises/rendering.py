from pathlib import Path

from fastapi import Request
from fastapi.responses import JSONResponse
from fastapi.encoders import jsonable_encoder
from fastapi.templating import Jinja2Templates

from ella_rises.auth.dependencies import get_session_user

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def wants_json(request: Request) -> bool:
    return "application/json" in request.headers.get("accept", "")


def render(request: Request, name: str, status_code: int = 200, **context):
    context.setdefault("user", get_session_user(request))
    return templates.TemplateResponse(request, name, context, status_code=status_code)


def render_rows(request: Request, rows: list[dict], **context):
    """Raw rows for JSON clients, an HTML table for everyone else."""
    if wants_json(request):
        return JSONResponse(jsonable_encoder(rows))
    return render(request, "list.html", rows=rows, **context)
