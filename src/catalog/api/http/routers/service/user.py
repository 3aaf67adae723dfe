"""User API router."""

from fastapi import APIRouter, Depends, Query

from src.catalog.api.http.deps import PageParams, get_page_params, get_user_service
from src.catalog.api.http.errors import http_error
from src.catalog.api.http.schemas import ApiResponse
from src.catalog.core.exceptions import CatalogError, NotFoundError
from src.catalog.core.services import UserService
from src.catalog.entities.core.user import User, UserCreate, UserUpdate

router = APIRouter()


@router.post("/", response_model=ApiResponse[User], status_code=201)
def create_user(
    user: UserCreate,
    service: UserService = Depends(get_user_service),
) -> ApiResponse[User]:
    try:
        created = service.create_user(user)
    except CatalogError as e:
        raise http_error(e) from e
    return ApiResponse(message="User created successfully", data=created)


@router.get("/", response_model=ApiResponse[list[User]])
def list_users(
    paging: PageParams = Depends(get_page_params),
    service: UserService = Depends(get_user_service),
) -> ApiResponse[list[User]]:
    try:
        result = service.get_all_users(paging.page, paging.limit)
    except CatalogError as e:
        raise http_error(e) from e
    return ApiResponse(data=result.users, pagination=result.pagination)


@router.get("/search/email", response_model=ApiResponse[User])
def get_user_by_email(
    email: str = Query(min_length=1),
    service: UserService = Depends(get_user_service),
) -> ApiResponse[User]:
    try:
        user = service.get_user_by_email(email)
        if user is None:
            raise NotFoundError("User", email)
    except CatalogError as e:
        raise http_error(e) from e
    return ApiResponse(data=user)


@router.get("/search/username", response_model=ApiResponse[User])
def get_user_by_username(
    username: str = Query(min_length=1),
    service: UserService = Depends(get_user_service),
) -> ApiResponse[User]:
    try:
        user = service.get_user_by_username(username)
        if user is None:
            raise NotFoundError("User", username)
    except CatalogError as e:
        raise http_error(e) from e
    return ApiResponse(data=user)


@router.get("/{user_id}", response_model=ApiResponse[User])
def get_user(
    user_id: int,
    service: UserService = Depends(get_user_service),
) -> ApiResponse[User]:
    try:
        user = service.get_user_by_id(user_id)
    except CatalogError as e:
        raise http_error(e) from e
    return ApiResponse(data=user)


@router.put("/{user_id}", response_model=ApiResponse[User])
def update_user(
    user_id: int,
    user_update: UserUpdate,
    service: UserService = Depends(get_user_service),
) -> ApiResponse[User]:
    try:
        updated = service.update_user(user_id, user_update)
    except CatalogError as e:
        raise http_error(e) from e
    return ApiResponse(message="User updated successfully", data=updated)


@router.delete("/{user_id}", response_model=ApiResponse[None])
def deactivate_user(
    user_id: int,
    service: UserService = Depends(get_user_service),
) -> ApiResponse[None]:
    """Soft delete: the account is deactivated, not removed."""
    try:
        service.delete_user(user_id)
    except CatalogError as e:
        raise http_error(e) from e
    return ApiResponse(message="User deleted successfully")


@router.delete("/{user_id}/hard", response_model=ApiResponse[None])
def hard_delete_user(
    user_id: int,
    service: UserService = Depends(get_user_service),
) -> ApiResponse[None]:
    try:
        service.hard_delete_user(user_id)
    except CatalogError as e:
        raise http_error(e) from e
    return ApiResponse(message="User permanently deleted")
