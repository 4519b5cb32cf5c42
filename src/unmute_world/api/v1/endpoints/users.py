"""User profile endpoints."""

from fastapi import APIRouter, Query

from unmute_world.api.v1.dependencies import CurrentUserDep, SessionDep
from unmute_world.schemas import (
    PasswordChangeRequest,
    PostResponse,
    ProfileUpdateRequest,
    SuccessResponse,
    UserResponse,
)
from unmute_world.services import post_service, user_service

router = APIRouter(prefix="/users", tags=["users"])


# /me routes are declared before /{user_id} so they are matched first.
@router.get("/me/saved", response_model=list[PostResponse])
def my_saved_posts(current_user: CurrentUserDep, db: SessionDep) -> list[PostResponse]:
    """Return the caller's saved posts, newest first."""
    return [
        post_service.to_response(post, current_user.id)
        for post in post_service.saved_posts(db, current_user.id)
    ]


@router.put("/me", response_model=UserResponse)
def update_me(
    payload: ProfileUpdateRequest,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> UserResponse:
    """Update name, bio or avatar."""
    user = user_service.update_profile(db, current_user, payload)
    return user_service.user_response(db, user)


@router.put("/me/password", response_model=SuccessResponse)
def change_my_password(
    payload: PasswordChangeRequest,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> SuccessResponse:
    user_service.change_password(db, current_user, payload.current_password, payload.new_password)
    return SuccessResponse(message="Password updated successfully.")


@router.get("/{user_id}", response_model=UserResponse)
def get_public_profile(user_id: str, db: SessionDep) -> UserResponse:
    """Public profile with post count and average rating."""
    return user_service.user_response(db, user_service.get_user(db, user_id))


@router.get("/{user_id}/posts", response_model=list[PostResponse])
def get_user_posts(
    user_id: str,
    db: SessionDep,
    public: bool = Query(False, description="Hide anonymous posts"),
) -> list[PostResponse]:
    """Posts written by a user, newest first."""
    return [
        post_service.to_response(post)
        for post in post_service.posts_by_author(db, user_id, public_only=public)
    ]
