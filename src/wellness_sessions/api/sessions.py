"""Session endpoints."""

from fastapi import APIRouter, Depends

from wellness_sessions.api.dependencies import get_session_service, require_user
from wellness_sessions.api.models import (
    ApiResponse,
    PublishRequest,
    SaveDraftRequest,
    SessionOut,
)
from wellness_sessions.services.sessions import SessionService

router = APIRouter(prefix="/api/sessions", tags=["sessions"])


@router.get("", response_model_exclude_none=True)
async def list_published_sessions(
    service: SessionService = Depends(get_session_service),
) -> ApiResponse:
    """Return published sessions for everyone."""
    sessions = [SessionOut.from_record(s) for s in service.list_published()]
    return ApiResponse(success=True, count=len(sessions), data=sessions)


@router.get("/my-sessions", response_model_exclude_none=True)
async def list_my_sessions(
    user_id: str = Depends(require_user),
    service: SessionService = Depends(get_session_service),
) -> ApiResponse:
    """Return the caller's drafts and published sessions."""
    sessions = [SessionOut.from_record(s) for s in service.list_own(user_id)]
    return ApiResponse(success=True, count=len(sessions), data=sessions)


@router.get("/my-sessions/{session_id}", response_model_exclude_none=True)
async def get_my_session(
    session_id: str,
    user_id: str = Depends(require_user),
    service: SessionService = Depends(get_session_service),
) -> ApiResponse:
    """Return a single session owned by the caller."""
    session = service.get_own(user_id, session_id)
    return ApiResponse(success=True, data=SessionOut.from_record(session))


@router.post("/my-sessions/save-draft", response_model_exclude_none=True)
async def save_draft(
    body: SaveDraftRequest,
    user_id: str = Depends(require_user),
    service: SessionService = Depends(get_session_service),
) -> ApiResponse:
    """Create a draft or update an owned session."""
    result = service.save_draft(user_id, body.to_draft())
    message = (
        "Draft saved successfully" if result.created else "Draft updated successfully"
    )
    return ApiResponse(
        success=True, message=message, data=SessionOut.from_record(result.session)
    )


@router.post("/my-sessions/publish", response_model_exclude_none=True)
async def publish_session(
    body: PublishRequest,
    user_id: str = Depends(require_user),
    service: SessionService = Depends(get_session_service),
) -> ApiResponse:
    """Publish an owned session."""
    session = service.publish(user_id, body.session_id)
    return ApiResponse(
        success=True,
        message="Session published successfully",
        data=SessionOut.from_record(session),
    )


@router.delete("/my-sessions/{session_id}", response_model_exclude_none=True)
async def delete_session(
    session_id: str,
    user_id: str = Depends(require_user),
    service: SessionService = Depends(get_session_service),
) -> ApiResponse:
    """Delete an owned session."""
    service.delete_own(user_id, session_id)
    return ApiResponse(success=True, message="Session deleted successfully")
