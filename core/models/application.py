# =============================================================================
# core/models/application.py - Application, Promise and Proof Schemas
# =============================================================================
# An influencer applies to a task by promising a view count per platform.
# Each promise carries the influencer's estimated profit (base cost, no
# service fee). Proofs are submitted later as URLs or uploaded images.
# =============================================================================

from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator

from lib.pricing import Platform
from lib.utils import is_http_url


class ProofType(str, Enum):
    """What kind of evidence a proof is."""
    IMAGE = "IMAGE"
    URL = "URL"


class ProofStatus(str, Enum):
    """Admin review state of a proof."""
    UNDER_REVIEW = "UNDER_REVIEW"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"


class ApplicationSubmitRequest(BaseModel):
    """
    Body of POST /api/task-applications/submit.

    Example:
        {"taskId": 42, "selectedViews": {"YOUTUBE": "10K", "TIKTOK": "0"}}
    """
    model_config = ConfigDict(populate_by_name=True)

    task_id: int = Field(..., alias="taskId", gt=0, strict=True)
    selected_views: dict[Platform, str] = Field(..., alias="selectedViews", min_length=1)


class ApplicationPromise(BaseModel):
    """An application_promises row as inserted."""
    application_id: int
    platform: Platform
    promised_reach: str
    est_profit: Decimal


class ApplicationSubmitResponse(BaseModel):
    """Result of a successful application."""
    success: bool = True
    application_id: int = Field(..., serialization_alias="applicationId")
    promises: list[ApplicationPromise] = Field(default_factory=list)


class ProofSubmission(BaseModel):
    """
    One proof for one platform.

    URL proofs must be absolute http(s) links; IMAGE proofs hold the
    storage path of an uploaded screenshot.
    """
    model_config = ConfigDict(populate_by_name=True)

    platform: Platform
    proof_type: ProofType = Field(..., alias="proofType")
    content: str = Field(..., min_length=1)

    @model_validator(mode="after")
    def _url_proofs_are_links(self) -> "ProofSubmission":
        if self.proof_type == ProofType.URL and not is_http_url(self.content):
            raise ValueError("URL proofs must be an http(s) link")
        return self


class ProofsSubmitRequest(BaseModel):
    """Body of POST /api/task-applications/{id}/proofs."""
    proofs: list[ProofSubmission] = Field(..., min_length=1)
