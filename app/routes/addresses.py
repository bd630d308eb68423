from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session, select
from sqlalchemy import func
from app.database import get_session
from app.models.address import Address
from app.models.user import User
from app.schemas.address_schemas import AddressCreate, AddressUpdate
from app.utils.token import get_current_user

router = APIRouter()


def _owned_address(session: Session, address_id: int, user: User) -> Address:
    address = session.get(Address, address_id)
    if not address:
        raise HTTPException(404, "Address not found")
    if address.user_id != user.id:
        raise HTTPException(status.HTTP_403_FORBIDDEN, "Access denied")
    return address


def _unset_other_defaults(session: Session, user_id: int, keep_id: int = None):
    others = session.exec(
        select(Address).where(Address.user_id == user_id, Address.default == True)  # noqa: E712
    ).all()
    for other in others:
        if other.id != keep_id:
            other.default = False
            session.add(other)


@router.get("/")
def list_addresses(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    return session.exec(
        select(Address).where(Address.user_id == current_user.id).order_by(Address.created_at.desc())
    ).all()


@router.post("/")
def add_address(
    data: AddressCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    has_any = session.exec(
        select(func.count()).select_from(Address).where(Address.user_id == current_user.id)
    ).one()

    address = Address(user_id=current_user.id, **data.model_dump())
    # first address is always the default
    if not has_any:
        address.default = True
    if address.default:
        _unset_other_defaults(session, current_user.id)

    session.add(address)
    session.commit()
    session.refresh(address)

    return {"message": "Address saved", "address": address}


@router.get("/default")
def get_default_address(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    address = session.exec(
        select(Address)
        .where(Address.user_id == current_user.id, Address.default == True)  # noqa: E712
        .order_by(Address.created_at.desc())
    ).first()

    if address:
        return address

    # Fallback: latest address
    return session.exec(
        select(Address).where(Address.user_id == current_user.id).order_by(Address.created_at.desc(), Address.id.desc())
    ).first()


@router.put("/{address_id}")
def update_address(
    address_id: int,
    data: AddressUpdate,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    address = _owned_address(session, address_id, current_user)

    updates = data.model_dump(exclude_unset=True)
    if updates.get("default") is False and address.default:
        raise HTTPException(400, "You cannot unset default. Please choose another default address")
    if updates.get("default") is True:
        _unset_other_defaults(session, current_user.id, keep_id=address.id)

    for key, value in updates.items():
        setattr(address, key, value)

    session.add(address)
    session.commit()
    session.refresh(address)

    return {"message": "Address updated successfully", "address": address}


@router.patch("/{address_id}/default")
def set_default_address(
    address_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    address = _owned_address(session, address_id, current_user)

    _unset_other_defaults(session, current_user.id, keep_id=address.id)
    address.default = True
    session.add(address)
    session.commit()
    session.refresh(address)

    return address


@router.delete("/{address_id}")
def delete_address(
    address_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    address = _owned_address(session, address_id, current_user)

    count = session.exec(
        select(func.count()).select_from(Address).where(Address.user_id == current_user.id)
    ).one()
    if count <= 1:
        raise HTTPException(400, "You cannot delete your only address. Please add another address first")

    if address.default:
        raise HTTPException(400, "You cannot delete default. Please change the default address")

    session.delete(address)
    session.commit()

    return {"message": "Address deleted successfully."}
