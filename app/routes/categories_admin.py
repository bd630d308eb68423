from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select
from datetime import datetime
from typing import Optional
from app.database import get_session
from app.dependencies.admin import require_admin
from app.models.category import Category
from app.models.user import User
from app.schemas.category_schemas import CategoryCreate, CategoryUpdate, StatusBulkUpdate
from app.utils.cache_helpers import clear_category_cache
from app.utils.category_slug import build_category_slug_for, is_descendant
from app.utils.db_errors import commit_or_400

router = APIRouter()


def _duplicate_exists(session: Session, title: str, parent_id: Optional[int], exclude_id: int = None) -> bool:
    query = select(Category).where(Category.title == title, Category.parent_id == parent_id)
    if exclude_id is not None:
        query = query.where(Category.id != exclude_id)
    return session.exec(query).first() is not None


def _with_children(session: Session, category: Category) -> dict:
    children = session.exec(
        select(Category).where(Category.parent_id == category.id).order_by(Category.id)
    ).all()
    return {
        **category.model_dump(),
        "slug": build_category_slug_for(session, category),
        "children": children,
    }


@router.post("/")
def create_category(
    data: CategoryCreate,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin)
):
    if data.parent_id is not None and not session.get(Category, data.parent_id):
        raise HTTPException(404, "Parent category not found")

    if _duplicate_exists(session, data.title, data.parent_id):
        raise HTTPException(400, "Category already exists")

    category = Category(**data.model_dump())
    session.add(category)
    commit_or_400(session)
    session.refresh(category)
    clear_category_cache()

    return category


@router.get("/")
def list_categories(
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin)
):
    categories = session.exec(select(Category).order_by(Category.id)).all()
    return [_with_children(session, c) for c in categories]


@router.patch("/status")
def bulk_update_status(
    data: StatusBulkUpdate,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin)
):
    if not data.ids:
        raise HTTPException(400, "ids must not be empty")

    categories = session.exec(select(Category).where(Category.id.in_(data.ids))).all()
    for category in categories:
        category.status = data.status
        category.updated_at = datetime.utcnow()
        session.add(category)
    session.commit()
    clear_category_cache()

    return {"message": "Category status updated", "updated": len(categories)}


@router.get("/{category_id}")
def get_category(
    category_id: int,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin)
):
    category = session.get(Category, category_id)
    if not category:
        raise HTTPException(404, "Category not found")
    return _with_children(session, category)


@router.put("/{category_id}")
def update_category(
    category_id: int,
    data: CategoryUpdate,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin)
):
    category = session.get(Category, category_id)
    if not category:
        raise HTTPException(404, "Category not found")

    updates = data.model_dump(exclude_unset=True)

    # parent_id may be explicitly set to null to promote to root
    parent_id = updates.get("parent_id", category.parent_id)
    if parent_id is not None:
        if not session.get(Category, parent_id):
            raise HTTPException(404, "Parent category not found")
        if is_descendant(session, parent_id, category.id):
            raise HTTPException(400, "A category cannot be moved under itself or its descendants")

    title = updates.get("title") or category.title
    if _duplicate_exists(session, title, parent_id, exclude_id=category.id):
        raise HTTPException(400, "Category already exists")

    for key, value in updates.items():
        if key == "title" and not value:
            continue
        setattr(category, key, value)
    category.updated_at = datetime.utcnow()

    session.add(category)
    commit_or_400(session)
    session.refresh(category)
    clear_category_cache()

    return category


@router.delete("/{category_id}")
def delete_category(
    category_id: int,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin)
):
    category = session.get(Category, category_id)
    if not category:
        raise HTTPException(404, "Category not found")

    session.delete(category)
    commit_or_400(session)
    clear_category_cache()

    return {"message": "Category deleted"}
