# souq/api/deps.py
from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session

from souq.data.database import get_db
from souq.data.models.user import UserModel
from souq.domain.localization import resolve_language
from souq.repos.user_repo import UserRepo


def get_language(accept_language: str | None = Header(None)) -> str:
    return resolve_language(accept_language)


def get_current_user(
    x_user_id: int | None = Header(None),
    db: Session = Depends(get_db),
) -> UserModel:
    """
    Identity comes from the auth proxy in front of the API as ``X-User-Id``.
    """
    if x_user_id is None:
        raise HTTPException(status_code=401, detail="You are not authenticated")

    user = UserRepo(db).get_user(x_user_id)
    if not user:
        raise HTTPException(status_code=401, detail="You are not authenticated")
    return user


def require_admin(user: UserModel = Depends(get_current_user)) -> UserModel:
    if user.role != "admin":
        raise HTTPException(status_code=403, detail="Not authorized to access this resource")
    return user
