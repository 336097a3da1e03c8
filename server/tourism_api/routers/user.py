"""User router for guides and tourists."""

import logging

from fastapi import APIRouter, Query
from sqlalchemy.exc import IntegrityError

from ..core.dependencies import PathId, UserRepositoryDependency
from ..core.exceptions import (
    ConflictError,
    InternalServerError,
    NotFoundError,
    ProblemDetailsException,
    ValidationError,
)
from ..models import User
from ..repositories import UserRepository
from ..schemas.common import PROBLEM_RESPONSES, Problem

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/users",
    tags=["users"],
    responses={
        **PROBLEM_RESPONSES,
        409: {"model": Problem, "description": "Username already taken"},
    },
)


def _username_conflict(existing: User) -> ConflictError:
    return ConflictError(
        detail=f"User with username '{existing.username}' already exists.",
        conflicting_resource={"id": existing.id, "username": existing.username},
    )


@router.get("", response_model=list[User])
async def get_users(
    role: str = Query(""),
    users: UserRepository = UserRepositoryDependency,
) -> list[User]:
    """List users, optionally only guides or only tourists."""
    try:
        return await users.get_all(role)

    except Exception as e:
        logger.error(
            "Unexpected error while fetching users",
            extra={"role": role, "error": str(e)},
            exc_info=True
        )
        raise InternalServerError("An error occurred while fetching users.") from e


@router.get("/{user_id}", response_model=User)
async def get_user(
    user_id: PathId,
    users: UserRepository = UserRepositoryDependency,
) -> User:
    try:
        user = await users.get_by_id(user_id)
        if user is None:
            raise NotFoundError("user", user_id)
        return user

    except ProblemDetailsException:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error while fetching user",
            extra={"user_id": user_id, "error": str(e)},
            exc_info=True
        )
        raise InternalServerError("An error occurred while fetching the user.") from e


@router.post("", response_model=User)
async def create_user(
    new_user: User,
    users: UserRepository = UserRepositoryDependency,
) -> User:
    """
    Register a guide or tourist.

    Usernames are unique; registering a taken username returns 409.
    """
    if not new_user.is_valid():
        raise ValidationError("Invalid user data.")

    try:
        existing = await users.get_by_username(new_user.username)
        if existing:
            logger.warning(
                "User creation failed - username already exists",
                extra={"username": new_user.username, "existing_user_id": existing.id}
            )
            raise _username_conflict(existing)

        try:
            created = await users.create(new_user)
        except IntegrityError:
            # Lost a race against another registration with the same name
            existing = await users.get_by_username(new_user.username)
            if existing:
                raise _username_conflict(existing)
            raise

        logger.info(
            "User created successfully",
            extra={"user_id": created.id, "username": created.username, "role": created.role}
        )
        return created

    except ProblemDetailsException:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error in user creation",
            extra={"username": new_user.username, "error": str(e)},
            exc_info=True
        )
        raise InternalServerError("An error occurred while creating the user.") from e
