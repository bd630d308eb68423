"""
Brands, colors and sizes.

The three lookups behave the same way, so their routes are registered from one
table: admin CRUD plus bulk status under /admin/<resource>, and a public list
of active rows under /<resource>.
"""
from typing import Type

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlmodel import Session, SQLModel, select

from app.database import get_session
from app.dependencies.admin import require_admin
from app.models.catalog import Brand, Color, Size
from app.models.user import User
from app.schemas.catalog_schemas import (
    BrandCreate,
    BrandUpdate,
    ColorCreate,
    ColorUpdate,
    SizeCreate,
    SizeUpdate,
)
from app.schemas.category_schemas import StatusBulkUpdate
from app.utils.db_errors import commit_or_400

admin_router = APIRouter()
public_router = APIRouter()


def _register(
    resource: str,
    label: str,
    model: Type[SQLModel],
    unique_field: str,
    create_schema: Type[BaseModel],
    update_schema: Type[BaseModel],
):
    column = getattr(model, unique_field)

    def get_or_404(session: Session, row_id: int):
        row = session.get(model, row_id)
        if not row:
            raise HTTPException(404, f"{label} not found")
        return row

    def ensure_unique(session: Session, value: str, exclude_id: int = None):
        query = select(model).where(column == value)
        if exclude_id is not None:
            query = query.where(model.id != exclude_id)
        if session.exec(query).first():
            raise HTTPException(400, f"{label} already exists")

    @admin_router.post(f"/{resource}", tags=[f"Admin {label}"])
    def create(
        data: create_schema,
        session: Session = Depends(get_session),
        admin: User = Depends(require_admin)
    ):
        ensure_unique(session, getattr(data, unique_field))
        row = model(**data.model_dump())
        session.add(row)
        commit_or_400(session)
        session.refresh(row)
        return row

    @admin_router.get(f"/{resource}", tags=[f"Admin {label}"])
    def list_all(
        session: Session = Depends(get_session),
        admin: User = Depends(require_admin)
    ):
        return session.exec(select(model).order_by(model.id)).all()

    @admin_router.patch(f"/{resource}/status", tags=[f"Admin {label}"])
    def bulk_status(
        data: StatusBulkUpdate,
        session: Session = Depends(get_session),
        admin: User = Depends(require_admin)
    ):
        if not data.ids:
            raise HTTPException(400, "ids must not be empty")

        rows = session.exec(select(model).where(model.id.in_(data.ids))).all()
        for row in rows:
            row.status = data.status
            session.add(row)
        session.commit()

        return {"message": f"{label} status updated", "updated": len(rows)}

    @admin_router.get(f"/{resource}/{{row_id}}", tags=[f"Admin {label}"])
    def get_one(
        row_id: int,
        session: Session = Depends(get_session),
        admin: User = Depends(require_admin)
    ):
        return get_or_404(session, row_id)

    @admin_router.put(f"/{resource}/{{row_id}}", tags=[f"Admin {label}"])
    def update(
        row_id: int,
        data: update_schema,
        session: Session = Depends(get_session),
        admin: User = Depends(require_admin)
    ):
        row = get_or_404(session, row_id)
        updates = data.model_dump(exclude_unset=True)
        if updates.get(unique_field):
            ensure_unique(session, updates[unique_field], exclude_id=row.id)

        for key, value in updates.items():
            setattr(row, key, value)

        session.add(row)
        commit_or_400(session)
        session.refresh(row)
        return row

    @admin_router.delete(f"/{resource}/{{row_id}}", tags=[f"Admin {label}"])
    def delete(
        row_id: int,
        session: Session = Depends(get_session),
        admin: User = Depends(require_admin)
    ):
        row = get_or_404(session, row_id)
        session.delete(row)
        commit_or_400(session)
        return {"message": f"{label} deleted"}

    @public_router.get(f"/{resource}", tags=[label])
    def list_active(session: Session = Depends(get_session)):
        return session.exec(
            select(model).where(model.status == True).order_by(column)  # noqa: E712
        ).all()


_register("brands", "Brand", Brand, "name", BrandCreate, BrandUpdate)
_register("colors", "Color", Color, "label", ColorCreate, ColorUpdate)
_register("sizes", "Size", Size, "title", SizeCreate, SizeUpdate)
