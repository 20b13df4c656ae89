# =============================================================================
# app/auth/routes.py - Authentication Routes
# =============================================================================
# Signup and login happen client-side with Supabase Auth. These routes
# report who the bearer of a token is.
# =============================================================================

import logging

from fastapi import APIRouter, Depends

from app.auth.dependencies import get_current_user
from app.auth.models import AuthUser, UserResponse
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(user: AuthUser = Depends(get_current_user)) -> UserResponse:
    """
    Get the current user's profile.

    Users who haven't finished setup have no profile yet and get
    name and role as null.
    """
    profile = SupabaseClient.fetch_profile(user.id) or {}
    return UserResponse(
        id=user.id,
        email=user.email,
        name=profile.get("name"),
        role=profile.get("role"),
        is_admin=SupabaseClient.is_admin(user.id),
    )
