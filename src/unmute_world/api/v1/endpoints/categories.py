"""Category endpoints."""

from fastapi import APIRouter, status

from unmute_world.api.v1.dependencies import AdminUserDep, SessionDep
from unmute_world.schemas import CategoryCreate, CategoryResponse
from unmute_world.services import category_service

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("/", response_model=list[CategoryResponse])
def list_categories(db: SessionDep) -> list[CategoryResponse]:
    return [CategoryResponse.model_validate(c) for c in category_service.list_categories(db)]


@router.post("/", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
def create_category(payload: CategoryCreate, _admin: AdminUserDep, db: SessionDep) -> CategoryResponse:
    """Create a category (admin only)."""
    return CategoryResponse.model_validate(category_service.create_category(db, payload))
