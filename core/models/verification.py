# =============================================================================
# core/models/verification.py - Platform Ownership Verification Schemas
# =============================================================================

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from lib.pricing import Platform


class VerificationCodeRequest(BaseModel):
    """Body of POST /api/verification/generate."""
    model_config = ConfigDict(populate_by_name=True)

    platform: Platform
    profile_id: int = Field(..., alias="profileId", gt=0)


class VerificationCodeResponse(BaseModel):
    """Code the influencer places on their channel to prove ownership."""
    code: str


class ContactCodeRequest(BaseModel):
    """Body of POST /api/verification/send."""
    model_config = ConfigDict(populate_by_name=True)

    contact_id: int = Field(..., alias="contactId", gt=0)


class ContactCodeConfirmRequest(BaseModel):
    """Body of POST /api/verification/confirm."""
    model_config = ConfigDict(populate_by_name=True)

    contact_id: int = Field(..., alias="contactId", gt=0)
    code: str = Field(..., pattern=r"^[0-9]{6}$")


class ContactCodeResponse(BaseModel):
    """A verification SMS was sent; the code expires at expires_at."""
    model_config = ConfigDict(populate_by_name=True)

    message: str
    expires_at: datetime = Field(..., serialization_alias="expiresAt")


class ChannelCheckRequest(BaseModel):
    """Body of POST /api/verification/check."""
    model_config = ConfigDict(populate_by_name=True)

    profile_id: int = Field(..., alias="profileId", gt=0)


class VerificationResult(BaseModel):
    success: bool = True
    message: str
