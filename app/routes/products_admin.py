from datetime import datetime
from fastapi import APIRouter, Depends, HTTPException, Query
from typing import List, Optional
from sqlmodel import Session, select
from app.database import get_session
from app.dependencies.admin import require_admin
from app.models.category import Category
from app.models.product import Product, ProductDetails, ProductImage, Variant
from app.models.user import User
from app.schemas.product_schemas import (
    ImageIn,
    ProductCreate,
    ProductDetailsUpsert,
    ProductUpdate,
    VariantCreate,
    VariantUpdate,
)
from app.utils.db_errors import commit_or_400
from app.utils.pagination import paginate

router = APIRouter()


def _get_product(session: Session, product_id: int) -> Product:
    product = session.get(Product, product_id)
    if not product:
        raise HTTPException(404, "Product not found")
    return product


def _get_variant(session: Session, product_id: int, variant_id: int) -> Variant:
    variant = session.get(Variant, variant_id)
    if not variant:
        raise HTTPException(404, "Variant not found")
    if variant.product_id != product_id:
        raise HTTPException(400, "Variant does not belong to this product")
    return variant


def _add_images(session: Session, images: List[ImageIn], *, product_id: int = None, variant_id: int = None):
    for image in images:
        session.add(ProductImage(product_id=product_id, variant_id=variant_id, **image.model_dump()))


# ---------- PRODUCTS ----------
@router.post("/")
def create_product(
    data: ProductCreate,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin)
):
    if data.category_id is not None and not session.get(Category, data.category_id):
        raise HTTPException(400, "Invalid category_id")

    product = Product(**data.model_dump(exclude={"images"}))
    session.add(product)
    # id needed for the image rows
    session.flush()
    _add_images(session, data.images, product_id=product.id)

    commit_or_400(session)
    session.refresh(product)
    return product


@router.get("/")
def list_products(
    page: int = 1,
    page_size: int = 10,
    search: Optional[str] = None,
    category_id: Optional[int] = None,
    status: Optional[bool] = None,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin)
):
    query = select(Product)

    if search:
        like = f"%{search}%"
        query = query.where(Product.title.ilike(like) | Product.sku.ilike(like))
    if category_id is not None:
        query = query.where(Product.category_id == category_id)
    if status is not None:
        query = query.where(Product.status == status)

    return paginate(
        session=session,
        query=query.order_by(Product.created_at.desc(), Product.id.desc()),
        page=page,
        page_size=page_size,
    )


@router.get("/{product_id}")
def get_product(
    product_id: int,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin)
):
    product = _get_product(session, product_id)
    variants = session.exec(select(Variant).where(Variant.product_id == product.id).order_by(Variant.id)).all()
    images = session.exec(select(ProductImage).where(ProductImage.product_id == product.id)).all()
    details = session.exec(select(ProductDetails).where(ProductDetails.product_id == product.id)).first()

    return {
        "product": product,
        "variants": variants,
        "images": images,
        "details": details,
    }


@router.put("/{product_id}")
def update_product(
    product_id: int,
    data: ProductUpdate,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin)
):
    product = _get_product(session, product_id)

    for key, value in data.model_dump(exclude_unset=True).items():
        setattr(product, key, value)
    product.updated_at = datetime.utcnow()

    session.add(product)
    commit_or_400(session)
    session.refresh(product)
    return product


@router.delete("/{product_id}")
def delete_product(
    product_id: int,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin)
):
    product = _get_product(session, product_id)

    variant_ids = session.exec(select(Variant.id).where(Variant.product_id == product.id)).all()
    images = session.exec(
        select(ProductImage).where(
            (ProductImage.product_id == product.id) | (ProductImage.variant_id.in_(variant_ids or [0]))
        )
    ).all()
    for image in images:
        session.delete(image)

    details = session.exec(select(ProductDetails).where(ProductDetails.product_id == product.id)).first()
    if details:
        session.delete(details)

    for variant in session.exec(select(Variant).where(Variant.product_id == product.id)).all():
        session.delete(variant)

    session.delete(product)
    # still referenced by orders or carts -> 400
    commit_or_400(session)

    return {"message": "Product deleted"}


# ---------- VARIANTS ----------
@router.post("/{product_id}/variants")
def create_variant(
    product_id: int,
    data: VariantCreate,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin)
):
    product = _get_product(session, product_id)

    variant = Variant(product_id=product.id, **data.model_dump(exclude={"images"}))
    session.add(variant)
    session.flush()
    _add_images(session, data.images, variant_id=variant.id)

    commit_or_400(session)
    session.refresh(variant)
    return variant


@router.get("/{product_id}/variants")
def list_variants(
    product_id: int,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin)
):
    _get_product(session, product_id)
    return session.exec(select(Variant).where(Variant.product_id == product_id).order_by(Variant.id)).all()


@router.put("/{product_id}/variants/{variant_id}")
def update_variant(
    product_id: int,
    variant_id: int,
    data: VariantUpdate,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin)
):
    variant = _get_variant(session, product_id, variant_id)

    for key, value in data.model_dump(exclude_unset=True).items():
        setattr(variant, key, value)

    session.add(variant)
    commit_or_400(session)
    session.refresh(variant)
    return variant


@router.delete("/{product_id}/variants/{variant_id}")
def delete_variant(
    product_id: int,
    variant_id: int,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin)
):
    variant = _get_variant(session, product_id, variant_id)

    for image in session.exec(select(ProductImage).where(ProductImage.variant_id == variant.id)).all():
        session.delete(image)
    session.delete(variant)
    commit_or_400(session)

    return {"message": "Variant deleted"}


# ---------- PRODUCT DETAILS ----------
@router.put("/{product_id}/details")
def upsert_details(
    product_id: int,
    data: ProductDetailsUpsert,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin)
):
    product = _get_product(session, product_id)

    details = session.exec(select(ProductDetails).where(ProductDetails.product_id == product.id)).first()
    if not details:
        details = ProductDetails(product_id=product.id)

    for key, value in data.model_dump(exclude_unset=True).items():
        setattr(details, key, value)

    session.add(details)
    commit_or_400(session)
    session.refresh(details)
    return details


# ---------- IMAGES ----------
@router.post("/{product_id}/images")
def add_images(
    product_id: int,
    images: List[ImageIn],
    variant_id: Optional[int] = Query(None),
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin)
):
    product = _get_product(session, product_id)
    if variant_id is not None:
        _get_variant(session, product.id, variant_id)
        _add_images(session, images, variant_id=variant_id)
    else:
        _add_images(session, images, product_id=product.id)

    commit_or_400(session)
    return {"message": f"{len(images)} image(s) added"}
