"""Admin routes: configuration, audit log, users, backup/restore/reset."""

from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException, Request, Response

from backend.middleware.access import get_studio, require_admin
from backend.models import DashboardResponse
from scribe.dashboard import dashboard_summary
from scribe.models import AppConfig, PromptFeedback, SystemLogEntry, UserRecord
from scribe.studio import Studio

router = APIRouter(dependencies=[Depends(require_admin)])


@router.get("/admin/config", response_model=AppConfig)
async def get_config(studio: Studio = Depends(get_studio)):
    return studio.config.get()


@router.put("/admin/config", response_model=AppConfig)
async def save_config(body: AppConfig, studio: Studio = Depends(get_studio)):
    """Replace the whole configuration document. Values are stored as given."""
    studio.config.save(body)
    return studio.config.get()


@router.get("/admin/logs", response_model=list[SystemLogEntry], response_model_exclude_none=True)
async def list_logs(studio: Studio = Depends(get_studio)):
    """Audit log, newest first."""
    return studio.events.entries()


@router.get("/admin/users", response_model=list[UserRecord], response_model_exclude_none=True)
async def list_users(studio: Studio = Depends(get_studio)):
    return [u.model_copy(update={"credential_hash": None}) for u in studio.identity.list_users()]


@router.get("/admin/feedback", response_model=list[PromptFeedback], response_model_exclude_none=True)
async def list_feedback(studio: Studio = Depends(get_studio)):
    return studio.feedback.list_all()


@router.get("/admin/summary", response_model=DashboardResponse)
async def summary(studio: Studio = Depends(get_studio)):
    return DashboardResponse(**asdict(dashboard_summary(studio)))


@router.get("/admin/backup")
async def download_backup(studio: Studio = Depends(get_studio)):
    """Export every table as one JSON document."""
    filename = f"scribe_backup_{studio.clock().date().isoformat()}.json"
    return Response(
        content=studio.backups.create_backup(),
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/admin/restore")
async def restore_backup(request: Request, studio: Studio = Depends(get_studio)):
    """Overwrite the tables present in the uploaded backup."""
    body = await request.body()
    try:
        text = body.decode("utf-8")
    except UnicodeDecodeError:
        raise HTTPException(status_code=400, detail="Backup file is invalid.")
    if not studio.backups.restore_backup(text):
        raise HTTPException(status_code=400, detail="Backup file is invalid.")
    return {"status": "restored"}


@router.post("/admin/reset")
async def factory_reset(studio: Studio = Depends(get_studio)):
    """Delete every user, project, setting, log and rating. Signs everyone out."""
    studio.backups.factory_reset()
    return {"status": "reset"}
