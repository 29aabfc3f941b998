"""Prompt builder routes and public settings."""

from fastapi import APIRouter, Depends, HTTPException, Request

from backend.middleware.access import get_studio, require_user
from backend.models import FeedbackRequest, OptimizePromptRequest, OptimizePromptResponse
from scribe.errors import MissingProviderCredential
from scribe.models import LogType, PromptFeedback, UserRecord
from scribe.studio import Studio

router = APIRouter()


@router.get("/config")
async def public_config(studio: Studio = Depends(get_studio)):
    """Settings the UI needs before sign-in: ads, packages, limits, maintenance flag."""
    return studio.config.public_view()


@router.post("/prompts/optimize", response_model=OptimizePromptResponse)
async def optimize_prompt(
    body: OptimizePromptRequest,
    request: Request,
    user: UserRecord = Depends(require_user),
    studio: Studio = Depends(get_studio),
):
    """Rewrite a rough idea into a detailed model prompt."""
    provider = request.app.state.provider
    try:
        prompt = await provider.optimize_prompt(body.input, body.kind)
    except MissingProviderCredential as e:
        studio.events.append(LogType.ERROR, str(e), user.id)
        raise HTTPException(status_code=503, detail="The writing model is not configured.")
    return OptimizePromptResponse(prompt=prompt)


@router.post("/feedback", response_model=PromptFeedback, response_model_exclude_none=True)
async def submit_feedback(
    body: FeedbackRequest,
    user: UserRecord = Depends(require_user),
    studio: Studio = Depends(get_studio),
):
    """Rate a generated prompt."""
    return studio.feedback.submit(
        user.id,
        body.original_input,
        body.generated_prompt,
        body.rating,
        body.comment,
    )
