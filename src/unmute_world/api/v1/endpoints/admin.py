"""Administrative endpoints: dashboard stats and moderation of users, posts and categories."""

from fastapi import APIRouter, Depends

from unmute_world.api.v1.dependencies import SessionDep, require_admin
from unmute_world.schemas import (
    BlockToggleResponse,
    CategoryPopularity,
    PlatformStatsResponse,
    PostResponse,
    PostUpdate,
    SuccessResponse,
    UserResponse,
)
from unmute_world.services import cascades, post_service, user_service
from unmute_world.services.stats import StatsEngine

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])


@router.get("/stats", response_model=PlatformStatsResponse)
def get_stats(db: SessionDep) -> PlatformStatsResponse:
    """Platform-wide rollups."""
    stats = StatsEngine.from_session(db).compute_platform_stats()
    return PlatformStatsResponse(
        total_users=stats.total_users,
        total_posts=stats.total_posts,
        anonymous_posts=stats.anonymous_posts,
        avg_platform_rating=stats.avg_platform_rating,
        category_popularity=[
            CategoryPopularity(name=entry.name, count=entry.count)
            for entry in stats.category_popularity
        ],
    )


@router.get("/users", response_model=list[UserResponse])
def list_users(db: SessionDep) -> list[UserResponse]:
    return user_service.list_users(db)


@router.post("/users/{user_id}/toggle-block", response_model=BlockToggleResponse)
def toggle_block(user_id: str, db: SessionDep) -> BlockToggleResponse:
    """Block or unblock a user."""
    user = user_service.toggle_block(db, user_id)
    return BlockToggleResponse(is_blocked=user.is_blocked)


@router.delete("/users/{user_id}", response_model=SuccessResponse)
def delete_user(user_id: str, db: SessionDep) -> SuccessResponse:
    """Delete a non-admin user with their posts and the ratings they gave."""
    cascades.on_delete_user(db, user_id)
    return SuccessResponse(message="User and all associated data deleted.")


@router.get("/posts", response_model=list[PostResponse])
def list_posts(db: SessionDep) -> list[PostResponse]:
    return [post_service.to_response(post) for post in post_service.list_posts(db)]


@router.put("/posts/{post_id}", response_model=PostResponse)
def update_post(post_id: str, payload: PostUpdate, db: SessionDep) -> PostResponse:
    return post_service.to_response(post_service.update_post(db, post_id, payload))


@router.delete("/posts/{post_id}", response_model=SuccessResponse)
def delete_post(post_id: str, db: SessionDep) -> SuccessResponse:
    cascades.on_delete_post(db, post_id)
    return SuccessResponse(message="Post deleted successfully.")


@router.delete("/categories/{category_id}", response_model=SuccessResponse)
def delete_category(category_id: str, db: SessionDep) -> SuccessResponse:
    cascades.on_delete_category(db, category_id)
    return SuccessResponse(message="Category deleted.")
