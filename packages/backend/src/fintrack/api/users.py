"""Current-user API — profile, email, password.

All routes here sit behind get_current_principal (see api/__init__.py).
"""

from fastapi import APIRouter, Depends

from fintrack.api.auth import get_user_service
from fintrack.api.responses import envelope
from fintrack.auth.dependencies import Principal, get_current_principal
from fintrack.schemas.user import EmailUpdate, PasswordUpdate, UserRead, UserUpdate
from fintrack.services.user_service import UserService

router = APIRouter(prefix="/user")


@router.get("/me")
async def get_me(
    principal: Principal = Depends(get_current_principal),
    svc: UserService = Depends(get_user_service),
):
    user = await svc.get_user(principal.user_id)
    return envelope(UserRead.model_validate(user))


@router.patch("/me")
async def update_me(
    body: UserUpdate,
    principal: Principal = Depends(get_current_principal),
    svc: UserService = Depends(get_user_service),
):
    """Change first/last name. Omitted fields are left as they are."""
    user = await svc.update_profile(
        principal.user_id, first_name=body.first_name, last_name=body.last_name
    )
    return envelope(UserRead.model_validate(user))


@router.patch("/me/email")
async def update_email(
    body: EmailUpdate,
    principal: Principal = Depends(get_current_principal),
    svc: UserService = Depends(get_user_service),
):
    """Change email. Requires the current password."""
    user = await svc.change_email(principal.user_id, body.email, body.password)
    return envelope(UserRead.model_validate(user))


@router.patch("/me/password")
async def update_password(
    body: PasswordUpdate,
    principal: Principal = Depends(get_current_principal),
    svc: UserService = Depends(get_user_service),
):
    await svc.change_password(
        principal.user_id,
        new_password=body.new_password,
        current_password=body.current_password,
    )
    return envelope()
