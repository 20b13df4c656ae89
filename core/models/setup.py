# =============================================================================
# core/models/setup.py - Account Setup Wizard State
# =============================================================================
# New users go through a short wizard:
#
#   COLLECT_INFO  -> with_personal_info() ->  CONNECT_PLATFORMS
#   CONNECT_PLATFORMS -> connect_platform() (repeatable) -> CONNECT_PLATFORMS
#   CONNECT_PLATFORMS -> complete() -> COMPLETE
#
# SetupState is immutable. Each transition returns a new state, so the
# client can hold the current state and post it back when done.
# =============================================================================

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from app.exceptions import SetupTransitionError
from lib.pricing import Platform


class UserType(str, Enum):
    """Which side of the marketplace the user is on."""
    BRAND = "brand"
    INFLUENCER = "influencer"

    @property
    def role(self) -> str:
        """Database role for this user type."""
        return "BUYER" if self is UserType.BRAND else "INFLUENCER"


class SetupStep(str, Enum):
    COLLECT_INFO = "collect_info"
    CONNECT_PLATFORMS = "connect_platforms"
    COMPLETE = "complete"


class SetupState(BaseModel):
    """Where a user is in the setup wizard and what they have entered."""
    model_config = ConfigDict(frozen=True)

    step: SetupStep = SetupStep.COLLECT_INFO
    user_type: UserType | None = None
    name: str | None = None
    mobile: str | None = None
    connected_platforms: frozenset[Platform] = Field(default_factory=frozenset)

    def with_personal_info(self, user_type: UserType, name: str, mobile: str) -> "SetupState":
        """Record who the user is and move on to connecting platforms."""
        if self.step != SetupStep.COLLECT_INFO:
            raise SetupTransitionError(self.step.value, "enter personal info")
        if not name.strip() or not mobile.strip():
            raise SetupTransitionError(self.step.value, "enter personal info", "name and mobile are required")

        return self.model_copy(update={
            "step": SetupStep.CONNECT_PLATFORMS,
            "user_type": user_type,
            "name": name.strip(),
            "mobile": mobile.strip(),
        })

    def connect_platform(self, platform: Platform) -> "SetupState":
        """Mark a social platform as connected. Connecting twice is a no-op."""
        if self.step != SetupStep.CONNECT_PLATFORMS:
            raise SetupTransitionError(self.step.value, "connect a platform")
        return self.model_copy(update={
            "connected_platforms": self.connected_platforms | {Platform(platform)},
        })

    def complete(self) -> "SetupState":
        """Finish the wizard. Influencers need at least one platform."""
        if self.step != SetupStep.CONNECT_PLATFORMS:
            raise SetupTransitionError(self.step.value, "complete setup")
        if self.user_type == UserType.INFLUENCER and not self.connected_platforms:
            raise SetupTransitionError(self.step.value, "complete setup", "connect at least one platform")
        return self.model_copy(update={"step": SetupStep.COMPLETE})

    @property
    def is_complete(self) -> bool:
        return self.step == SetupStep.COMPLETE
