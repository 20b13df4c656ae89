# =============================================================================
# app/routers/applications.py - Task Application Endpoints
# =============================================================================

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, File, Path, UploadFile

from app.auth import AuthUser, get_current_user
from core.models.application import (
    ApplicationSubmitRequest,
    ApplicationSubmitResponse,
    ProofsSubmitRequest,
)
from core.services.application_service import ApplicationService
from core.services.storage_service import StorageService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/submit", response_model=ApplicationSubmitResponse, response_model_by_alias=True)
async def submit_application(
    request: ApplicationSubmitRequest,
    user: AuthUser = Depends(get_current_user),
):
    """
    Apply to an active task.

    selectedViews maps platforms to promised views ("10K", "1.5M", "500").
    Platforms promising zero views are ignored.
    """
    return ApplicationService.submit_application(user.id, request.task_id, request.selected_views)


@router.post("/{application_id}/proofs", status_code=201)
async def submit_proofs(
    application_id: Annotated[int, Path(gt=0, description="Application ID")],
    request: ProofsSubmitRequest,
    user: AuthUser = Depends(get_current_user),
):
    """Submit proofs (links or uploaded screenshots) for an application."""
    proofs = ApplicationService.submit_proofs(user.id, application_id, request.proofs)
    return {"success": True, "proofs": proofs}


@router.get("/{application_id}/proofs")
async def list_proofs(
    application_id: Annotated[int, Path(gt=0, description="Application ID")],
    user: AuthUser = Depends(get_current_user),
):
    """List an application's proofs with their review status."""
    return {"proofs": ApplicationService.list_proofs(user.id, application_id)}


@router.post("/{application_id}/proof-images", status_code=201)
async def upload_proof_image(
    application_id: Annotated[int, Path(gt=0, description="Application ID")],
    file: Annotated[UploadFile, File(description="Screenshot proving delivery")],
    user: AuthUser = Depends(get_current_user),
):
    """
    Upload a proof screenshot.

    Returns the storage path to submit as the content of an IMAGE proof.
    """
    ApplicationService.require_application_owner(application_id, user.id)
    content = await file.read()
    path = StorageService.upload_proof_image(application_id, content, file.filename, file.content_type)
    return {"path": path}
