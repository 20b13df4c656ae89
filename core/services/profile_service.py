# =============================================================================
# core/services/profile_service.py - Account Setup Persistence
# =============================================================================

import logging
from typing import Any
from uuid import UUID

from app.exceptions import BrandSyncException, SetupTransitionError
from core.models.setup import SetupState, SetupStep
from lib.supabase_client import SupabaseClient
from lib.utils import normalize_uuid

logger = logging.getLogger(__name__)


class ProfileService:
    """Service for user profiles."""

    @staticmethod
    def replay(state: SetupState) -> SetupState:
        """
        Re-run the wizard transitions for a state posted by the client.

        A client can post any state it likes, so the persisted data is
        always the result of real transitions from a fresh state.
        """
        if state.user_type is None:
            raise SetupTransitionError(state.step.value, "complete setup", "user type is required")

        replayed = SetupState().with_personal_info(state.user_type, state.name or "", state.mobile or "")
        for platform in sorted(state.connected_platforms, key=lambda p: p.value):
            replayed = replayed.connect_platform(platform)
        return replayed.complete()

    @staticmethod
    def complete_setup(user_id: UUID | str, state: SetupState) -> dict[str, Any]:
        """
        Save the profile and mobile number from a finished setup wizard.

        Safe to repeat: the profile is upserted and the mobile number
        updates the user's existing MOBILE contact.

        Raises:
            SetupTransitionError: State isn't COMPLETE or doesn't replay
        """
        if state.step != SetupStep.COMPLETE:
            raise SetupTransitionError(state.step.value, "save setup", "setup is not complete")

        final = ProfileService.replay(state)
        client = SupabaseClient.get_client()
        user_id_str = normalize_uuid(user_id)

        response = (
            client.table("profile")
            .upsert({"id": user_id_str, "name": final.name, "role": final.user_type.role})
            .execute()
        )
        try:
            ProfileService.save_mobile(user_id_str, final.mobile)
        except Exception as e:
            logger.error(f"Failed to save mobile number for user {user_id_str}: {e}")
            raise BrandSyncException(
                message="Failed to save mobile number",
                code="SETUP_SAVE_FAILED",
                status_code=500,
                suggestion="Submit the setup again; saved details are kept",
            )

        logger.info(f"Completed setup for user {user_id_str} as {final.user_type.role}")
        return response.data[0] if response.data else {"id": user_id_str, "name": final.name}

    @staticmethod
    def save_mobile(user_id: str, mobile: str) -> int:
        """
        Store the user's mobile number, keeping a single MOBILE contact.

        A changed number loses its verified status.

        Returns:
            The contact_details id
        """
        client = SupabaseClient.get_client()

        existing = (
            client.table("contact_details")
            .select("id, detail")
            .eq("user_id", user_id)
            .eq("type", "MOBILE")
            .order("id")
            .limit(1)
            .execute()
        )
        if existing.data:
            contact = existing.data[0]
            if contact.get("detail") != mobile:
                client.table("contact_details").update({"detail": mobile}).eq("id", contact["id"]).execute()
                client.table("contact_status").delete().eq("contact_id", contact["id"]).execute()
                logger.info(f"Updated mobile contact {contact['id']} for user {user_id}")
            return contact["id"]

        response = (
            client.table("contact_details")
            .insert({"user_id": user_id, "type": "MOBILE", "detail": mobile})
            .execute()
        )
        return response.data[0]["id"]
