"""Conversation routes: send messages, list and delete projects."""

from fastapi import APIRouter, Depends, HTTPException, Request

from backend.middleware.access import get_identity, get_studio, require_user
from backend.models import ProjectSummary, SendMessageRequest, SendMessageResponse
from scribe.identity import IdentityManager
from scribe.models import ProjectRecord, UserRecord
from scribe.studio import Studio

router = APIRouter()


def _owned_project(studio: Studio, user: UserRecord, project_id: str) -> ProjectRecord:
    project = studio.projects.get(project_id)
    if not project or project.user_id != user.id:
        raise HTTPException(status_code=404, detail="Project not found")
    return project


@router.post("/conversations", response_model=SendMessageResponse, response_model_exclude_none=True)
async def send_message(
    body: SendMessageRequest,
    request: Request,
    user: UserRecord = Depends(require_user),
    identity: IdentityManager = Depends(get_identity),
    studio: Studio = Depends(get_studio),
):
    """Send a message; the project is created on the first completed exchange."""
    project = _owned_project(studio, user, body.project_id) if body.project_id else None
    flow = studio.chat(user, body.mode, project, identity=identity)

    provider = request.app.state.provider
    reply = await flow.send(body.content, provider.stream_reply)

    if flow.limit_reached:
        raise HTTPException(
            status_code=429,
            detail="Daily free limit reached. Upgrade to Premium for unlimited writing.",
        )
    if reply is None:
        raise HTTPException(status_code=400, detail="Message is empty")

    current = identity.get_current_user()
    return SendMessageResponse(
        project_id=flow.project_id,
        message=reply,
        daily_usage=current.daily_usage if current else None,
    )


@router.get("/projects", response_model=list[ProjectSummary])
async def list_projects(user: UserRecord = Depends(require_user), studio: Studio = Depends(get_studio)):
    """List the current user's projects, most recently updated first."""
    return [
        ProjectSummary(
            id=p.id,
            name=p.name,
            mode=p.mode,
            message_count=len(p.messages),
            updated_at=p.updated_at,
        )
        for p in studio.projects.list_for_user(user.id)
    ]


@router.get("/projects/{project_id}", response_model=ProjectRecord)
async def get_project(
    project_id: str,
    user: UserRecord = Depends(require_user),
    studio: Studio = Depends(get_studio),
):
    return _owned_project(studio, user, project_id)


@router.delete("/projects/{project_id}")
async def delete_project(
    project_id: str,
    user: UserRecord = Depends(require_user),
    studio: Studio = Depends(get_studio),
):
    """Delete a project. Irreversible."""
    _owned_project(studio, user, project_id)
    studio.projects.delete(project_id)
    return {"status": "deleted"}
