"""
User account endpoints.

Admins manage every account; regular users may read, change and delete
their own, and apply to jobs as themselves.
"""

import logging
from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from jobly.core.database import get_db
from jobly.core.deps import ensure_admin, ensure_owner_or_admin, prevent_gain_admin
from jobly.core.security import create_token_for_user
from jobly.crud import application as application_crud
from jobly.crud import user as user_crud
from jobly.schemas.user import (
    UserCreateRequest,
    UserDetailResponse,
    UserResponse,
    UserTokenResponse,
    UserUpdateRequest,
)

router = APIRouter(prefix="/users", tags=["Users"])
logger = logging.getLogger(__name__)


@router.post(
    "/",
    status_code=status.HTTP_201_CREATED,
    response_model=UserTokenResponse,
    dependencies=[Depends(ensure_admin)],
)
def create_user(
    request: UserCreateRequest,
    db: Session = Depends(get_db)
):
    """
    Add a user, who may be an admin. This is not the registration endpoint.

    Returns the new user and a token for them.

    Authorization required: admin
    """
    new_user = user_crud.register(db, request)
    return UserTokenResponse(
        user=UserResponse.model_validate(new_user),
        token=create_token_for_user(new_user.username, new_user.is_admin),
    )


@router.get("/", response_model=List[UserResponse], dependencies=[Depends(ensure_admin)])
def list_users(db: Session = Depends(get_db)):
    """
    List all users.

    Authorization required: admin
    """
    return user_crud.find_all(db)


@router.get("/{username}", response_model=UserDetailResponse, dependencies=[Depends(ensure_owner_or_admin)])
def get_user(username: str, db: Session = Depends(get_db)):
    """
    Retrieve a user and the ids of jobs they applied to.

    Authorization required: the user themself or admin
    """
    return user_crud.get(db, username)


@router.patch(
    "/{username}",
    response_model=UserResponse,
    dependencies=[Depends(ensure_owner_or_admin), Depends(prevent_gain_admin)],
)
def update_user(
    username: str,
    request: UserUpdateRequest,
    db: Session = Depends(get_db)
):
    """
    Partially update a user: firstName, lastName, password, email, isAdmin.

    Only admins may change isAdmin.

    Authorization required: the user themself or admin
    """
    return user_crud.update(db, username, request)


@router.delete("/{username}", dependencies=[Depends(ensure_owner_or_admin)])
def delete_user(username: str, db: Session = Depends(get_db)):
    """
    Delete a user.

    Authorization required: the user themself or admin
    """
    user_crud.remove(db, username)
    return {"deleted": username}


@router.post("/{username}/jobs/{job_id}", dependencies=[Depends(ensure_owner_or_admin)])
def apply_to_job(username: str, job_id: int, db: Session = Depends(get_db)):
    """
    Apply to a job.

    Authorization required: the user themself or admin
    """
    applied = application_crud.create(db, username, job_id)
    return {"applied": applied}


@router.delete("/{username}/jobs/{job_id}", dependencies=[Depends(ensure_owner_or_admin)])
def withdraw_application(username: str, job_id: int, db: Session = Depends(get_db)):
    """
    Withdraw an application to a job.

    Authorization required: the user themself or admin
    """
    application_crud.remove(db, username, job_id)
    return {"unapplied": job_id}
