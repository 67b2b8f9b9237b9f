from typing import Callable

from fastapi import APIRouter, Depends, Request
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from ella_rises.auth.dependencies import require_login, require_manager
from ella_rises.database import get_db
from ella_rises.rendering import render, render_rows
from ella_rises.repositories import TableRepository


async def submitted_form(request: Request) -> dict[str, str]:
    form = await request.form()
    return {key: value for key, value in form.items() if isinstance(value, str)}


def build_resource_router(
    repository: TableRepository,
    title: str,
    list_guard: Callable = require_login,
) -> APIRouter:
    """List/add/edit routes for one table, mounted under ``/<table name>``.

    Listing needs ``list_guard`` (login by default); every mutation and form
    page needs the manager role.
    """
    base_path = f"/{repository.name}"
    router = APIRouter(tags=[repository.name])

    def form_page(request: Request, action: str, heading: str, values: dict):
        return render(
            request,
            "form.html",
            title=heading,
            action=action,
            fields=repository.form_fields,
            values=values,
            back=base_path,
        )

    @router.get("", dependencies=[Depends(list_guard)])
    def list_rows(request: Request, db: Session = Depends(get_db)):
        rows = repository.list_all(db)
        return render_rows(
            request,
            rows,
            title=title,
            columns=repository.columns,
            base_path=base_path,
        )

    @router.get("/add", dependencies=[Depends(require_manager)])
    def add_form(request: Request):
        return form_page(request, f"{base_path}/add", f"Add {title}", {})

    @router.post("/add", dependencies=[Depends(require_manager)])
    def add_row(values: dict = Depends(submitted_form), db: Session = Depends(get_db)):
        repository.insert(db, values)
        return RedirectResponse(base_path, status_code=302)

    @router.get("/edit/{row_id}", dependencies=[Depends(require_manager)])
    def edit_form(row_id: int, request: Request, db: Session = Depends(get_db)):
        # A missing row renders an empty form rather than a 404.
        row = repository.get(db, row_id) or {}
        return form_page(request, f"{base_path}/edit/{row_id}", f"Edit {title}", row)

    @router.post("/edit/{row_id}", dependencies=[Depends(require_manager)])
    def edit_row(row_id: int, values: dict = Depends(submitted_form), db: Session = Depends(get_db)):
        repository.update(db, row_id, values)
        return RedirectResponse(base_path, status_code=302)

    return router
