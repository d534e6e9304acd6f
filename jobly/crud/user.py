"""
CRUD operations for User model, including password authentication.
"""

import logging
from typing import List

from sqlalchemy.orm import Session

from jobly.core.exceptions import BadRequestError, NotFoundError, UnauthorizedError
from jobly.core.security import get_password_hash, verify_password
from jobly.helpers.sql import bind_positional, sql_for_partial_update
from jobly.models.user import User
from jobly.schemas.user import UserRegisterRequest, UserUpdateRequest

logger = logging.getLogger(__name__)

UPDATE_COLUMNS = {
    "firstName": "first_name",
    "lastName": "last_name",
    "isAdmin": "is_admin",
    "password": "hashed_password",
}


def get_by_username(db: Session, username: str):
    return db.query(User).filter(User.username == username).first()


def authenticate(db: Session, username: str, password: str) -> User:
    """
    Check a username/password pair.

    Raises:
        UnauthorizedError: If the user does not exist or the password is wrong
    """
    user = get_by_username(db, username)
    if not user or not verify_password(password, user.hashed_password):
        logger.warning(f"Failed login for {username}")
        raise UnauthorizedError("Invalid username/password")
    return user


def register(db: Session, user_data: UserRegisterRequest) -> User:
    """
    Create a user with a hashed password.

    user_data may carry is_admin when an admin creates the account.

    Raises:
        BadRequestError: If the username is taken
    """
    if get_by_username(db, user_data.username):
        raise BadRequestError(f"Duplicate username: {user_data.username}")

    new_user = User(
        username=user_data.username,
        hashed_password=get_password_hash(user_data.password),
        first_name=user_data.first_name,
        last_name=user_data.last_name,
        email=user_data.email,
        is_admin=getattr(user_data, "is_admin", False),
    )
    db.add(new_user)
    db.commit()
    db.refresh(new_user)

    logger.info(f"New user registered: {new_user.username} (admin: {new_user.is_admin})")
    return new_user


def find_all(db: Session) -> List[User]:
    """All users, ordered by username."""
    return db.query(User).order_by(User.username).all()


def get(db: Session, username: str) -> User:
    """
    User by username, with applied job ids available as user.jobs.

    Raises:
        NotFoundError: If no such user
    """
    user = get_by_username(db, username)
    if not user:
        raise NotFoundError(f"No user: {username}")
    return user


def update(db: Session, username: str, user_data: UserUpdateRequest) -> User:
    """
    Partial update: only the fields present in user_data change.
    A new password is hashed before it is stored.

    Raises:
        EmptyPayloadError: If user_data has no fields
        NotFoundError: If no such user
    """
    data = user_data.model_dump(exclude_unset=True, by_alias=True, mode="json")
    if "password" in data:
        data["password"] = get_password_hash(data["password"])

    set_cols, values = sql_for_partial_update(data, UPDATE_COLUMNS)
    username_idx = len(values) + 1

    sql = f"UPDATE users SET {set_cols} WHERE username = ${username_idx}"
    stmt, params = bind_positional(sql, [*values, username], db.get_bind().dialect.name)
    result = db.execute(stmt, params)
    if result.rowcount == 0:
        db.rollback()
        raise NotFoundError(f"No user: {username}")

    db.commit()
    logger.info(f"Updated user {username}: {', '.join(data)}")
    return get(db, username)


def remove(db: Session, username: str) -> None:
    """
    Delete a user and their applications.

    Raises:
        NotFoundError: If no such user
    """
    user = get(db, username)
    db.delete(user)
    db.commit()
    logger.info(f"Deleted user {username}")
