from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select
from app.database import get_session
from app.models.category import Category
from app.utils.cache_helpers import _ttl_bucket, cached_category_tree
from app.utils.category_slug import build_category_slug_for

router = APIRouter()


# ---------- ACTIVE CATEGORY TREE ----------
@router.get("/tree", summary="Active category tree with slug paths")
def category_tree():
    return cached_category_tree(_ttl_bucket())


# ---------- GET CATEGORY BY ID ----------
@router.get("/{category_id}", summary="Get category by ID")
def get_category_by_id(category_id: int, session: Session = Depends(get_session)):
    category = session.get(Category, category_id)
    if not category or not category.status:
        raise HTTPException(404, "Category not found")

    children = session.exec(
        select(Category)
        .where(Category.parent_id == category.id, Category.status == True)  # noqa: E712
        .order_by(Category.id)
    ).all()

    return {
        "id": category.id,
        "title": category.title,
        "parent_id": category.parent_id,
        "main_image": category.main_image,
        "slug": build_category_slug_for(session, category),
        "children": [
            {"id": c.id, "title": c.title, "slug": build_category_slug_for(session, c)}
            for c in children
        ],
    }
