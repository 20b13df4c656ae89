# =============================================================================
# app/routers/setup.py - Account Setup Endpoints
# =============================================================================

from fastapi import APIRouter, Depends

from app.auth import AuthUser, get_current_user
from core.models.setup import SetupState
from core.services.profile_service import ProfileService

router = APIRouter()


@router.post("/complete")
async def complete_setup(
    state: SetupState,
    user: AuthUser = Depends(get_current_user),
):
    """
    Save the finished setup wizard.

    The posted state must be COMPLETE and is replayed server-side before
    anything is saved.
    """
    profile = ProfileService.complete_setup(user.id, state)
    return {"success": True, "profile": profile}
