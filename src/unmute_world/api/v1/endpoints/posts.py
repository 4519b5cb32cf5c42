"""Post-related endpoints for the Unmute World API."""

from typing import Literal

from fastapi import APIRouter, Query, status

from unmute_world.api.v1.dependencies import CurrentUserDep, OptionalUserDep, SessionDep
from unmute_world.schemas import (
    IsSavedResponse,
    MyRatingResponse,
    PostCreate,
    PostResponse,
    RatingRequest,
    SuccessResponse,
)
from unmute_world.services import post_service

router = APIRouter(prefix="/posts", tags=["posts"])


@router.get("/", response_model=list[PostResponse])
def list_posts(
    db: SessionDep,
    limit: int | None = Query(None, ge=1, description="Maximum number of posts to return"),
    sort: Literal["newest", "oldest"] = Query("newest", description="Creation order"),
    category: str | None = Query(None, description="Filter by category name"),
    tag: str | None = Query(None, description="Filter by tag"),
    q: str | None = Query(None, description="Search terms; results ranked by relevance"),
) -> list[PostResponse]:
    """List posts with optional filters, or search them when ``q`` is given."""
    posts = post_service.list_posts(db, limit=limit, sort=sort, category=category, tag=tag, q=q)
    return [post_service.to_response(post) for post in posts]


@router.post("/", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
def create_post(payload: PostCreate, current_user: CurrentUserDep, db: SessionDep) -> PostResponse:
    """Publish a post; the author's current stats are frozen onto it."""
    post = post_service.create_post(db, current_user, payload)
    return post_service.to_response(post)


@router.get("/{post_id}", response_model=PostResponse)
def get_post(post_id: str, db: SessionDep, viewer: OptionalUserDep) -> PostResponse:
    """Return a post; includes ``userRating`` when the caller has rated it."""
    post = post_service.get_post(db, post_id)
    return post_service.to_response(post, viewer.id if viewer else None)


@router.post(
    "/{post_id}/rate",
    response_model=SuccessResponse,
    status_code=status.HTTP_201_CREATED,
)
def rate_post(
    post_id: str,
    payload: RatingRequest,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> SuccessResponse:
    """Rate a post from 1 to 5; rating again replaces the earlier value."""
    post_service.rate_post(db, post_id, current_user.id, payload.rating)
    return SuccessResponse(message="Rating submitted")


@router.get("/{post_id}/my-rating", response_model=MyRatingResponse)
def get_my_rating(post_id: str, current_user: CurrentUserDep, db: SessionDep) -> MyRatingResponse:
    return MyRatingResponse(rating=post_service.my_rating(db, post_id, current_user.id))


@router.post("/{post_id}/save", response_model=SuccessResponse)
def save_post(post_id: str, current_user: CurrentUserDep, db: SessionDep) -> SuccessResponse:
    post_service.save_post(db, current_user.id, post_id)
    return SuccessResponse(message="Post saved")


@router.delete("/{post_id}/save", response_model=SuccessResponse)
def unsave_post(post_id: str, current_user: CurrentUserDep, db: SessionDep) -> SuccessResponse:
    post_service.unsave_post(db, current_user.id, post_id)
    return SuccessResponse(message="Post unsaved")


@router.get("/{post_id}/issaved", response_model=IsSavedResponse)
def is_post_saved(post_id: str, current_user: CurrentUserDep, db: SessionDep) -> IsSavedResponse:
    return IsSavedResponse(is_saved=post_service.is_saved(db, current_user.id, post_id))
