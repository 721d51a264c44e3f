"""User management routes.

Creating, listing, updating and deleting users is admin-only. Any signed-in
user may read a profile by id.
"""
from fastapi import APIRouter, status

from xtrack.deps import (AdminIdentity, CurrentIdentity, UserServiceDep,
                         require_path_id)
from xtrack.schemas import (CreateUserRequest, Envelope, UpdateUserRequest,
                            UserView)

router = APIRouter(prefix="/users", tags=["users"])


@router.post("", response_model=Envelope[UserView], status_code=status.HTTP_201_CREATED)
def create_user(
    body: CreateUserRequest,
    _: AdminIdentity,
    users: UserServiceDep,
) -> Envelope[UserView]:
    user = users.create_user(body.username, body.password, body.role)
    return Envelope(message="User created successfully", data=UserView.model_validate(user))


@router.get("", response_model=Envelope[list[UserView]])
def list_users(_: AdminIdentity, users: UserServiceDep) -> Envelope[list[UserView]]:
    return Envelope(
        message="Users retrieved successfully",
        data=[UserView.model_validate(user) for user in users.list_all()],
    )


@router.get("/{user_id}", response_model=Envelope[UserView])
def get_user(user_id: str, _: CurrentIdentity, users: UserServiceDep) -> Envelope[UserView]:
    """Fetch any user's profile; not restricted to the caller's own."""
    user = users.get_by_id(require_path_id(user_id, "user"))
    return Envelope(message="User retrieved successfully", data=UserView.model_validate(user))


@router.put("/{user_id}", response_model=Envelope[UserView])
def update_user(
    user_id: str,
    body: UpdateUserRequest,
    _: AdminIdentity,
    users: UserServiceDep,
) -> Envelope[UserView]:
    user = users.update_user(
        require_path_id(user_id, "user"),
        username=body.username,
        password=body.password,
        role=body.role,
    )
    return Envelope(message="User updated successfully", data=UserView.model_validate(user))


@router.delete("/{user_id}", response_model=Envelope[None])
def delete_user(user_id: str, _: AdminIdentity, users: UserServiceDep) -> Envelope[None]:
    users.delete_user(require_path_id(user_id, "user"))
    return Envelope(message="User deleted successfully")
