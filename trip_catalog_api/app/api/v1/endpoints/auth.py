"""
Registration and login endpoints.

Both return a bearer token for the trip write endpoints.
"""

from fastapi import APIRouter, Depends, HTTPException, Request, status

from trip_catalog_api.app.api.deps import get_user_service
from trip_catalog_api.app.core.security import create_access_token
from trip_catalog_api.app.schemas.user import TokenResponse, UserCreate, UserLogin
from trip_catalog_api.app.services.user_service import UserService


router = APIRouter()


def _issue_token(request: Request, email: str) -> TokenResponse:
    app_settings = request.app.state.settings
    token = create_access_token(
        {"sub": email},
        secret=app_settings.secret_key,
        expires_in=app_settings.access_token_expire_minutes * 60,
    )
    return TokenResponse(access_token=token)


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def register(
    user: UserCreate,
    request: Request,
    service: UserService = Depends(get_user_service),
) -> TokenResponse:
    created = await service.register(user)
    return _issue_token(request, created["email"])


@router.post("/login", response_model=TokenResponse)
async def login(
    credentials: UserLogin,
    request: Request,
    service: UserService = Depends(get_user_service),
) -> TokenResponse:
    user = await service.authenticate(credentials.email, credentials.password)
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")
    return _issue_token(request, user["email"])
