from fastapi import Depends, HTTPException, status
from app.models.user import User
from app.utils.token import get_current_user


def is_admin(user: User) -> bool:
    return user.role == "admin"


def require_admin(current_user: User = Depends(get_current_user)):
    if not is_admin(current_user):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
    return current_user
