# =============================================================================
# app/routers/verification.py - Contact and Platform Verification Endpoints
# =============================================================================

from fastapi import APIRouter, Depends

from app.auth import AuthUser, get_current_user
from core.models.verification import (
    ChannelCheckRequest,
    ContactCodeConfirmRequest,
    ContactCodeRequest,
    ContactCodeResponse,
    VerificationCodeRequest,
    VerificationCodeResponse,
    VerificationResult,
)
from core.services.verification_service import VerificationService

router = APIRouter()


@router.post("/generate", response_model=VerificationCodeResponse)
async def generate_code(
    request: VerificationCodeRequest,
    user: AuthUser = Depends(get_current_user),
):
    """Get the code to place on a channel to prove ownership."""
    code = VerificationService.generate_code(user.id, request.platform, request.profile_id)
    return VerificationCodeResponse(code=code)


@router.post("/check", response_model=VerificationResult)
async def check_channel(
    request: ChannelCheckRequest,
    user: AuthUser = Depends(get_current_user),
):
    """Verify a YouTube profile whose description now carries its code."""
    VerificationService.check_channel(user.id, request.profile_id)
    return VerificationResult(message="Channel verified successfully")


@router.post("/send", response_model=ContactCodeResponse)
async def send_contact_code(
    request: ContactCodeRequest,
    user: AuthUser = Depends(get_current_user),
):
    """Text a verification code to one of the user's mobile numbers."""
    return VerificationService.send_contact_code(user.id, request.contact_id)


@router.post("/confirm", response_model=VerificationResult)
async def confirm_contact_code(
    request: ContactCodeConfirmRequest,
    user: AuthUser = Depends(get_current_user),
):
    """Mark a mobile number verified with the code texted to it."""
    VerificationService.confirm_contact_code(user.id, request.contact_id, request.code)
    return VerificationResult(message="Contact verified successfully")
