"""Admin-only user CRUD."""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Response, status
from sqlalchemy.orm import Session

from app.api.deps import authenticate, require_role
from app.core.database import get_db
from app.schemas.user import Role, UserCreate, UserPublic, UserResponse, UsersPage, UserUpdate
from app.services import users as user_service

router = APIRouter(dependencies=[Depends(authenticate), Depends(require_role(Role.ADMIN))])

# Bounded to the users.id INTEGER column; anything else is a 400, not a DB error.
UserId = Annotated[int, Path(ge=1, le=2**31 - 1)]


@router.get("", response_model=UsersPage)
def list_users(
    db: Annotated[Session, Depends(get_db)],
    page: int | None = None,
    limit: int | None = None,
    search: str | None = None,
) -> UsersPage:
    """
    List users ordered by id; ?page=1&limit=20&search=...

    Out-of-range page/limit fall back to the defaults; a blank search means no filter.
    """
    result = user_service.list_users(db, page=page, limit=limit, search=search)
    return UsersPage(
        users=[UserPublic.model_validate(u) for u in result.users],
        total=result.total,
        page=result.page,
        limit=result.limit,
    )


@router.get("/{user_id}", response_model=UserResponse)
def get_user(user_id: UserId, db: Annotated[Session, Depends(get_db)]) -> UserResponse:
    user = user_service.get_user(db, user_id)
    return UserResponse(user=UserPublic.model_validate(user))


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(body: UserCreate, db: Annotated[Session, Depends(get_db)]) -> UserResponse:
    user = user_service.create_user(
        db,
        email=body.email,
        password=body.password,
        first_name=body.first_name,
        last_name=body.last_name,
        role=body.role,
    )
    return UserResponse(user=UserPublic.model_validate(user))


@router.patch("/{user_id}", response_model=UserResponse)
def update_user(
    user_id: UserId,
    body: UserUpdate,
    db: Annotated[Session, Depends(get_db)],
) -> UserResponse:
    """Partial update; a new password is re-hashed, a new email must be unused."""
    user = user_service.update_user(db, user_id, body.model_dump(exclude_none=True))
    return UserResponse(user=UserPublic.model_validate(user))


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(user_id: UserId, db: Annotated[Session, Depends(get_db)]) -> Response:
    user_service.delete_user(db, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
