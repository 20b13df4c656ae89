# =============================================================================
# app/auth/models.py - Authentication Models
# =============================================================================

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class AuthUser(BaseModel):
    """
    Authenticated user extracted from a Supabase JWT.

    This is the minimal user info available from the token itself,
    without querying the database.
    """
    model_config = ConfigDict(frozen=True)

    id: UUID
    email: Optional[str] = None


class UserResponse(BaseModel):
    """Current user with their BrandSync profile, if set up."""
    id: UUID
    email: Optional[str] = None
    name: Optional[str] = None
    role: Optional[str] = None
    is_admin: bool = False
